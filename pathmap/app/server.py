"""Manual HTTP/1.1 server implemented directly over sockets."""

from __future__ import annotations

import logging
import socket
import threading
from contextlib import suppress
from http import HTTPStatus
from typing import BinaryIO, Iterator, Optional, Protocol, Tuple

from .http import HttpRequest, HttpResponse, MalformedRequest, parse_header_block

MAX_HEADER_BYTES = 16 * 1024

logger = logging.getLogger("pathmap.server")


class RequestHandler(Protocol):
    def handle(self, request: HttpRequest) -> Optional[HttpResponse]:
        """Process ``request``; ``None`` drops the connection without a reply."""


def run_server(handler: RequestHandler, port: int, host: str = "127.0.0.1") -> None:
    """Start a blocking TCP server that delegates to ``handler``.

    Every accepted connection gets its own worker thread; workers share
    nothing but ``handler``, which must not keep per-request state.
    """

    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((host, port))
        sock.listen(128)
        logger.info("listening on %s:%s", host, port)
        try:
            while True:
                conn, addr = sock.accept()
                thread = threading.Thread(target=serve_connection, args=(conn, addr, handler), daemon=True)
                thread.start()
        except KeyboardInterrupt:
            logger.info("shutting down")


def serve_connection(conn: socket.socket, addr: Tuple[str, int], handler: RequestHandler) -> None:
    with conn:
        rfile = conn.makefile("rb")
        wfile = conn.makefile("wb")
        try:
            serve_stream(rfile, wfile, handler, addr)
        except OSError as exc:
            logger.debug("connection from %s ended: %s", addr[0], exc)
        except Exception:  # noqa: BLE001
            logger.exception("unexpected error on connection from %s", addr[0])
        finally:
            rfile.close()
            with suppress(OSError):
                wfile.close()


def serve_stream(
    rfile: BinaryIO,
    wfile: BinaryIO,
    handler: RequestHandler,
    client: Optional[Tuple[str, int]] = None,
) -> None:
    """Answer header blocks from ``rfile`` until the stream ends or must be dropped."""

    try:
        for block in read_header_blocks(rfile):
            request = parse_header_block(block, client)
            response = handler.handle(request)
            if response is None:
                return
            if not write_response(wfile, response):
                logger.debug("aborted transfer of %s", request.target)
                return
    except MalformedRequest as exc:
        logger.debug("dropping connection: %s", exc)


def read_header_blocks(rfile: BinaryIO) -> Iterator[str]:
    """Yield each header block, blank line included, as ISO-8859-1 text.

    A line made only of CR/LF characters closes a block. Bytes after the
    last blank line are discarded when the stream ends.
    """

    lines: list[bytes] = []
    size = 0
    while True:
        line = rfile.readline(MAX_HEADER_BYTES + 1)
        if not line:
            return
        size += len(line)
        if size > MAX_HEADER_BYTES:
            raise MalformedRequest("header section too large")
        lines.append(line)
        if not line.strip(b"\r\n"):
            yield b"".join(lines).decode("iso-8859-1")
            lines = []
            size = 0


def write_response(wfile: BinaryIO, response: HttpResponse) -> bool:
    """Send ``response``; ``False`` means the body could not be delivered in full.

    The status line and headers are encoded as one block before anything is
    written, so an unencodable header leaves the connection untouched.
    """

    try:
        reason = HTTPStatus(response.status).phrase
    except ValueError:
        reason = "OK"
    status_line = f"HTTP/1.1 {int(response.status)} {reason}\r\n"
    header_lines = "".join(f"{name}: {value}\r\n" for name, value in response.headers.items())
    head = (status_line + header_lines + "\r\n").encode("iso-8859-1")
    wfile.write(head)

    delivered = True
    if response.send_body:
        if response.stream is not None:
            delivered = response.stream.write_to(wfile)
        elif response.body:
            wfile.write(response.body)
    wfile.flush()
    return delivered


__all__ = [
    "MAX_HEADER_BYTES",
    "RequestHandler",
    "read_header_blocks",
    "run_server",
    "serve_connection",
    "serve_stream",
    "write_response",
]
