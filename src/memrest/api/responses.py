from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Any

from ..core.errors import PromiseTimeout, UnsupportedOperation, status_for
from ..core.result import Promise
from .codec import encode

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 30.0

CONTENT_TYPES: dict[str, str] = {
    ".ico": "image/x-icon",
    ".icon": "image/x-icon",
    ".html": "text/html; charset=utf-8",
    ".htm": "text/html; charset=utf-8",
    ".js": "application/javascript",
    ".css": "text/css; charset=utf-8",
    ".json": "application/json; charset=utf-8",
    ".yaml": "text/yaml; charset=utf-8",
    ".yml": "text/yaml; charset=utf-8",
    ".txt": "text/plain; charset=utf-8",
    ".svg": "image/svg+xml",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
}

JSON_CONTENT_TYPE = CONTENT_TYPES[".json"]


def content_type_for(path: str) -> str | None:
    return CONTENT_TYPES.get(PurePosixPath(path).suffix.lower())


@dataclass(frozen=True)
class HttpResponse:
    status: int
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""


def bytes_response(status: int, content_type: str | None, body: bytes) -> HttpResponse:
    headers = {"Cache-Control": "no-cache"}
    if content_type:
        headers["Content-Type"] = content_type
    return HttpResponse(status=status, headers=headers, body=body)


def json_response(status: int, value: Any) -> HttpResponse:
    return bytes_response(status, JSON_CONTENT_TYPE, encode(value))


def error_response(status: int, message: str) -> HttpResponse:
    return json_response(status, {"error": message})


def not_found_message(context: str | None) -> str:
    return "Not found" if not context else f"Not found: {context}"


def render(
    promise: Promise[Any],
    *,
    context: str | None = None,
    method: str = "",
    path: str = "",
    timeout: float = DEFAULT_TIMEOUT_S,
) -> HttpResponse:
    """Wait (bounded) for a service result and turn it into a response.

    value -> 200, absence -> 404, client error -> 400, declined op -> 405,
    anything else -> 500.
    """

    result = promise.get_result(timeout)
    if result.is_value:
        return json_response(200, result.value)
    if result.is_absent:
        return error_response(404, not_found_message(context))

    cause = result.cause
    if cause is None:
        raise RuntimeError("Failed result carries no cause")
    status = status_for(cause)

    if isinstance(cause, UnsupportedOperation):
        logger.debug("%s %s declined: %s", method, path, cause.operation)
        return error_response(405, f"Method Not Allowed: {method}:{path}")

    if status >= 500:
        if isinstance(cause, PromiseTimeout):
            logger.error("%s %s: %s", method, path, cause)
        else:
            logger.error("%s %s failed", method, path, exc_info=cause)
    else:
        logger.debug("%s %s -> %d: %s", method, path, status, cause)
    return error_response(status, str(cause) or type(cause).__name__)
