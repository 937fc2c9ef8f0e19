from __future__ import annotations

import json
import logging
import os
import time
from dataclasses import dataclass
from http import HTTPStatus
from typing import Optional

from ..domain.models import ResolvedResource
from ..domain.services import ResourceResolver
from ..ports.descriptors import DescriptorSource
from .http import FileBody, HttpRequest, HttpResponse

SUPPORTED_METHODS = frozenset({"GET", "HEAD"})

access_log = logging.getLogger("pathmap.access")
logger = logging.getLogger("pathmap.handlers")


def make_text_response(status: HTTPStatus) -> HttpResponse:
    body = f"HTTP {int(status)}: {status.phrase}\r\n".encode("ascii")
    headers = {
        "Content-Type": "text/plain",
        "Content-Length": str(len(body)),
    }
    return HttpResponse(int(status), headers, body)


def not_found() -> HttpResponse:
    return make_text_response(HTTPStatus.NOT_FOUND)


def server_error() -> HttpResponse:
    return make_text_response(HTTPStatus.INTERNAL_SERVER_ERROR)


@dataclass(slots=True)
class RequestContext:
    """Mutable context passed across the handler chain."""

    request: HttpRequest
    response: Optional[HttpResponse] = None
    resource: Optional[ResolvedResource] = None


class Handler:
    """Chain-of-responsibility handler interface."""

    def set_next(self, handler: "Handler") -> "Handler":
        raise NotImplementedError

    def handle(self, ctx: RequestContext) -> HttpResponse:
        raise NotImplementedError


class AbstractHandler(Handler):
    def __init__(self) -> None:
        self._next: Optional[Handler] = None

    def set_next(self, handler: Handler) -> Handler:
        self._next = handler
        return handler

    def _handle_next(self, ctx: RequestContext) -> HttpResponse:
        if self._next is None:
            if ctx.response is None:
                ctx.response = not_found()
            return ctx.response
        return self._next.handle(ctx)


class LoggingHandler(AbstractHandler):
    def handle(self, ctx: RequestContext) -> HttpResponse:  # noqa: D401
        start = time.time()
        response = self._handle_next(ctx)
        duration_ms = round((time.time() - start) * 1000, 1)
        entry = {
            "ts": int(time.time() * 1000),
            "method": ctx.request.method,
            "path": ctx.request.target,
            "status": int(response.status),
            "ms": duration_ms,
            "remote": ctx.request.client[0] if ctx.request.client else None,
        }
        access_log.info(json.dumps(entry, separators=(",", ":")))
        return response


class ErrorHandler(AbstractHandler):
    """Anything that goes wrong while resolving is reported as not found."""

    def handle(self, ctx: RequestContext) -> HttpResponse:  # noqa: D401
        try:
            return self._handle_next(ctx)
        except Exception:  # noqa: BLE001
            logger.warning("failed to resolve %s", ctx.request.target, exc_info=True)
            ctx.response = not_found()
            return ctx.response


class HeadHandler(AbstractHandler):
    """HEAD gets the full GET response with its body withheld."""

    def handle(self, ctx: RequestContext) -> HttpResponse:  # noqa: D401
        response = self._handle_next(ctx)
        if ctx.request.method == "HEAD":
            response.send_body = False
        return response


class ResolveHandler(AbstractHandler):
    def __init__(self, resolver: ResourceResolver) -> None:
        super().__init__()
        self._resolver = resolver

    def handle(self, ctx: RequestContext) -> HttpResponse:  # noqa: D401
        resource = self._resolver.resolve(ctx.request.target)
        ctx.resource = resource
        if not resource.found:
            ctx.response = not_found()
            return ctx.response

        if not _header_safe(resource.content_type):
            logger.warning("route %s has an unusable content type %r", ctx.request.target, resource.content_type)
            ctx.response = server_error()
            return ctx.response

        length = _regular_file_size(resource.file_path)
        if length is None:
            logger.warning("route %s points at unusable file %s", ctx.request.target, resource.file_path)
            ctx.response = server_error()
            return ctx.response

        headers = {
            "Content-Type": resource.content_type,
            "Content-Length": str(length),
        }
        ctx.response = HttpResponse(int(HTTPStatus.OK), headers, stream=FileBody(resource.file_path, length))
        return ctx.response


def _header_safe(value: str) -> bool:
    if "\r" in value or "\n" in value:
        return False
    try:
        value.encode("iso-8859-1")
    except UnicodeEncodeError:
        return False
    return True


def _regular_file_size(path: str) -> Optional[int]:
    if not os.path.isfile(path):
        return None
    try:
        return os.stat(path).st_size
    except OSError:
        return None


class RequestProcessor:
    """Facade executed by the manual HTTP server.

    Returns ``None`` for requests this server refuses to answer; the caller
    must then close the connection without writing anything.
    """

    def __init__(self, entry: Handler) -> None:
        self._entry = entry

    def handle(self, request: HttpRequest) -> Optional[HttpResponse]:
        if request.method not in SUPPORTED_METHODS:
            logger.debug("dropping connection on unsupported method %s", request.method)
            return None
        ctx = RequestContext(request=request)
        response = self._entry.handle(ctx)
        response.ensure_content_length()
        response.headers["Cache-Control"] = "no-store"
        return response


def build_handler(source: DescriptorSource) -> RequestProcessor:
    logging_handler = LoggingHandler()
    head_handler = HeadHandler()
    error_handler = ErrorHandler()
    resolve_handler = ResolveHandler(ResourceResolver(source))

    logging_handler.set_next(head_handler)
    head_handler.set_next(error_handler)
    error_handler.set_next(resolve_handler)

    return RequestProcessor(logging_handler)


__all__ = [
    "AbstractHandler",
    "ErrorHandler",
    "HeadHandler",
    "LoggingHandler",
    "RequestContext",
    "RequestProcessor",
    "ResolveHandler",
    "build_handler",
    "not_found",
    "server_error",
]
