from __future__ import annotations

import logging
import threading

from ..core.service import ServiceRegistry, WithDemoMode

logger = logging.getLogger(__name__)


class DemoReset:
    """Periodically roll every demo-capable service back to its startup snapshot."""

    def __init__(self, registry: ServiceRegistry, interval_s: float = 300.0) -> None:
        if interval_s <= 0:
            raise ValueError("interval_s must be > 0")
        self.interval_s = float(interval_s)
        self._services: list[WithDemoMode] = registry.demo_services()
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None
        self._stopped = False

    def start(self) -> None:
        for service in self._services:
            service.take_snapshot()
        logger.info("Demo mode: resetting %d service(s) every %gs", len(self._services), self.interval_s)
        self._schedule()

    def reset_now(self) -> None:
        for service in self._services:
            service.reset_to_snapshot()

    def _schedule(self) -> None:
        with self._lock:
            if self._stopped:
                return
            self._timer = threading.Timer(self.interval_s, self._tick)
            self._timer.daemon = True
            self._timer.start()

    def _tick(self) -> None:
        try:
            self.reset_now()
        except Exception:
            logger.exception("Demo reset failed")
        self._schedule()

    def cancel(self) -> None:
        with self._lock:
            self._stopped = True
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
