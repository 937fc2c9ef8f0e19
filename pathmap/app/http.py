"""HTTP/1.1 primitives used by the manual HTTP server.

Requests arrive as complete header blocks (request line, header lines and
the terminating blank line). Responses carry either a small in-memory body
or a :class:`FileBody` that is streamed from disk after the headers.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import BinaryIO, Dict, Optional, Tuple

CHUNK_SIZE = 4096

_REQUEST_LINE = re.compile(r"([^ \t]+)[ \t](.*)")
_HEADER = re.compile(r"([^\s:]+)[ \t]*:(.*)")
_SEPARATOR = re.compile(r"[ \t]+")


class MalformedRequest(ValueError):
    """Raised when a header block cannot be parsed as an HTTP request."""


@dataclass(slots=True)
class HttpRequest:
    """Represents a request parsed from one header block."""

    method: str
    target: str
    version: str
    headers: Dict[str, str]
    client: Optional[Tuple[str, int]] = None


@dataclass(slots=True)
class FileBody:
    """Response body read from ``path`` in fixed-size chunks.

    ``length`` is the size announced in ``Content-Length``; exactly that many
    bytes must come out of the file or the transfer is abandoned.
    """

    path: str
    length: int

    def write_to(self, out: BinaryIO) -> bool:
        """Copy the file to ``out``; ``False`` means the connection must be dropped."""

        try:
            fh = open(self.path, "rb")
        except OSError:
            return False
        with fh:
            remaining = self.length
            while remaining > 0:
                size = min(remaining, CHUNK_SIZE)
                try:
                    chunk = fh.read(size)
                except OSError:
                    return False
                if len(chunk) != size:
                    # file shrank after Content-Length went out
                    return False
                out.write(chunk)
                remaining -= size
        return True


@dataclass(slots=True)
class HttpResponse:
    """Represents an HTTP/1.1 response produced by the handlers."""

    status: int
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    stream: Optional[FileBody] = None
    send_body: bool = True

    def ensure_content_length(self) -> None:
        """Guarantee the ``Content-Length`` header is present."""

        if "Content-Length" not in self.headers:
            length = self.stream.length if self.stream is not None else len(self.body)
            self.headers["Content-Length"] = str(length)


def parse_header_block(block: str, client: Optional[Tuple[str, int]] = None) -> HttpRequest:
    """Parse a header block leniently.

    Only a request line that does not start with a method token followed by
    a space or tab is fatal. Missing targets, unknown protocol tokens and
    anything after them are carried through as-is; the first line that is
    not a header ends the header section.
    """

    lines = [line.rstrip("\r") for line in block.split("\n")]
    while lines and not lines[-1]:
        lines.pop()
    if not lines:
        raise MalformedRequest("empty header block")

    match = _REQUEST_LINE.match(lines[0])
    if match is None:
        raise MalformedRequest("invalid request line")
    method, rest = match.groups()
    parts = _SEPARATOR.split(rest.strip(" \t"), 2)
    target = parts[0]
    version = parts[1] if len(parts) > 1 else ""

    headers: Dict[str, str] = {}
    last: Optional[str] = None
    for raw in lines[1:]:
        if raw[:1] in (" ", "\t") and last is not None:
            # obsolete line folding continues the previous header
            headers[last] = f"{headers[last]} {raw.strip()}"
            continue
        header = _HEADER.match(raw)
        if header is None:
            break
        last = header.group(1).lower()
        headers[last] = header.group(2).strip()

    return HttpRequest(
        method=method.upper(),
        target=target,
        version=version,
        headers=headers,
        client=client,
    )


__all__ = [
    "CHUNK_SIZE",
    "FileBody",
    "HttpRequest",
    "HttpResponse",
    "MalformedRequest",
    "parse_header_block",
]
