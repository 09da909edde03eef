from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..core.errors import ClientError
from ..core.result import Promise
from ..core.service import RestService, ServiceRegistry
from .codec import decode_body


@dataclass(frozen=True)
class Route:
    """A request matched to one service call."""

    resource: str
    operation: str
    promise: Promise[Any]
    context: str | None
    method: str
    path: str


def split_path(path: str) -> list[str]:
    return [p for p in path.split("/") if p.strip()]


class Dispatcher:
    """Map (method, path segments) onto a service operation.

    | method | segments after resource | operation   |
    |--------|-------------------------|-------------|
    | GET    | 0                       | list()      |
    | GET    | 1                       | get(id)     |
    | POST   | 0                       | post(body)  |
    | PUT    | 1                       | put(id, body) |
    | DELETE | 1                       | delete(id)  |

    Every other combination, an empty path or an unknown resource name is
    "not handled" and `dispatch` returns None.
    """

    def __init__(self, registry: ServiceRegistry) -> None:
        self.registry = registry

    def dispatch(self, method: str, segments: list[str], body: bytes | None = None) -> Route | None:
        if not segments:
            return None

        name, rest = segments[0], segments[1:]
        service = self.registry.get(name)
        if service is None:
            return None

        method = method.upper()
        path = "/".join(segments)

        def route(operation: str, promise: Promise[Any], context: str | None) -> Route:
            return Route(name, operation, promise, context, method, path)

        if method == "GET" and not rest:
            return route("list", _call(service.list), None)
        if method == "GET" and len(rest) == 1:
            return route("get", _call(service.get, rest[0]), rest[0])
        if method == "POST" and not rest:
            return route("post", _call_with_body(service, "post", body), None)
        if method == "PUT" and len(rest) == 1:
            return route("put", _call_with_body(service, "put", body, rest[0]), rest[0])
        if method == "DELETE" and len(rest) == 1:
            return route("delete", _call(service.delete, rest[0]), rest[0])
        return None


def _call(fn: Any, *args: Any) -> Promise[Any]:
    # A service that raises instead of returning a failed promise still
    # ends up in front of the response adapter.
    try:
        return fn(*args)
    except Exception as e:
        return Promise.of_failure(e)


def _call_with_body(service: RestService[Any], operation: str, body: bytes | None, *args: Any) -> Promise[Any]:
    fn = getattr(service, operation)
    if not service.supports(operation):
        # Declined before decoding so the caller sees 405 rather than 400.
        return _call(fn, *args, None)
    try:
        record = decode_body(body, service.data_class())
    except ClientError as e:
        return Promise.of_failure(e)
    return _call(fn, *args, record)
