from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Mapping

from ..core.service import ServiceRegistry
from .dispatch import Dispatcher, split_path
from .responses import DEFAULT_TIMEOUT_S, HttpResponse, error_response, render

logger = logging.getLogger(__name__)

StaticResolver = Callable[[str], HttpResponse]


class RestApp:
    """Request-handling core shared by every HTTP front.

    `handle` is called once per request, possibly from many threads at once.
    Paths under `api_prefix` go to the dispatcher; everything else goes to the
    static resolver.
    """

    def __init__(
        self,
        registry: ServiceRegistry,
        static: StaticResolver | None = None,
        *,
        api_prefix: str = "/api",
        timeout: float = DEFAULT_TIMEOUT_S,
    ) -> None:
        self.registry = registry
        self.dispatcher = Dispatcher(registry)
        self.static = static
        self.api_prefix = "/" + api_prefix.strip("/")
        self.timeout = float(timeout)

        self._cond = threading.Condition()
        self._in_flight = 0
        self._stopping = False

    @property
    def in_flight(self) -> int:
        with self._cond:
            return self._in_flight

    @property
    def is_stopping(self) -> bool:
        with self._cond:
            return self._stopping

    def is_api_path(self, path: str) -> bool:
        return path == self.api_prefix or path.startswith(self.api_prefix + "/")

    def handle(
        self,
        method: str,
        path: str,
        headers: Mapping[str, str] | None = None,
        body: bytes | None = None,
    ) -> HttpResponse:
        api = self.is_api_path(path)
        with self._cond:
            if self._stopping and api:
                return error_response(503, "Server is shutting down")
            self._in_flight += 1
        try:
            if api:
                return self._handle_api(method, path, body)
            return self._handle_static(path)
        except Exception as e:
            logger.exception("Unhandled error for %s %s", method, path)
            return error_response(500, str(e) or type(e).__name__)
        finally:
            with self._cond:
                self._in_flight -= 1
                self._cond.notify_all()

    def _handle_api(self, method: str, path: str, body: bytes | None) -> HttpResponse:
        segments = split_path(path[len(self.api_prefix):])
        route = self.dispatcher.dispatch(method, segments, body)
        if route is None:
            return error_response(404, f"Not found: {path}")
        return render(
            route.promise,
            context=route.context,
            method=route.method,
            path=route.path,
            timeout=self.timeout,
        )

    def _handle_static(self, path: str) -> HttpResponse:
        if self.static is None:
            return error_response(404, f"File not found: {path}")
        return self.static(path)

    def stop(self) -> None:
        """Refuse new API requests; in-flight ones are left to finish."""
        with self._cond:
            self._stopping = True
            self._cond.notify_all()
        logger.info("Stopping: %d request(s) in flight", self.in_flight)

    def wait_idle(self, timeout: float | None = None) -> bool:
        deadline = None if timeout is None else time.monotonic() + timeout
        with self._cond:
            while self._in_flight > 0:
                remaining = None if deadline is None else deadline - time.monotonic()
                if remaining is not None and remaining <= 0:
                    return False
                self._cond.wait(remaining)
            return True
