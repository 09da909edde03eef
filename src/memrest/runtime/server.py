from __future__ import annotations

import contextlib
import logging
import os
import socket
import threading
import time
import webbrowser
from typing import Mapping

import uvicorn

from ..api.app import RestApp
from ..sdk.client import RestClient
from .app import build_registry, create_app, create_rest_app
from .config import Settings, setup_logging
from .demo import DemoReset

logger = logging.getLogger(__name__)


class RestServer:
    """Handle to a server running on a background thread."""

    def __init__(
        self,
        *,
        host: str,
        port: int,
        rest_app: RestApp,
        server: uvicorn.Server,
        thread: threading.Thread,
        demo: DemoReset | None = None,
    ) -> None:
        self.host = host
        self.port = port
        self.url = f"http://{host}:{port}/"
        self.rest_app = rest_app
        self._server = server
        self._thread = thread
        self._demo = demo

    @property
    def is_running(self) -> bool:
        return self._thread.is_alive()

    def client(self) -> RestClient:
        return RestClient(self.url)

    def stop(self, timeout: float = 5.0) -> bool:
        """Drain in-flight requests, then shut uvicorn down and release the socket.

        Returns False if the server thread did not exit within `timeout`.
        """

        if self._demo is not None:
            self._demo.cancel()
        self.rest_app.stop()
        if not self.rest_app.wait_idle(timeout):
            logger.warning("Requests still in flight after %gs; shutting down anyway", timeout)
        self._server.should_exit = True
        self._thread.join(timeout)
        stopped = not self._thread.is_alive()
        if stopped:
            logger.info("Server at %s stopped", self.url)
        return stopped


def _find_free_port(host: str) -> int:
    with contextlib.closing(socket.socket(socket.AF_INET, socket.SOCK_STREAM)) as s:
        s.bind((host, 0))
        return int(s.getsockname()[1])


def _normalize_base_url(url: str) -> str:
    url = url.strip()
    if not url:
        return ""
    # Allow passing just host:port.
    if "://" not in url:
        url = "http://" + url
    return url.rstrip("/")


def launch_browser(url: str) -> bool:
    try:
        opened = webbrowser.open(f"{url}?pid={os.getpid()}")
    except webbrowser.Error as e:
        logger.warning("Failed to open the browser (%s); visit %s yourself", e, url)
        return False
    if not opened:
        logger.warning("No browser available; visit %s yourself", url)
    return bool(opened)


def start_server(
    rest_app: RestApp,
    *,
    host: str = "127.0.0.1",
    port: int = 0,
    log_level: str = "info",
    access_log: bool = False,
    demo: DemoReset | None = None,
    cors_origins: list[str] | None = None,
    startup_timeout_s: float = 10.0,
) -> RestServer:
    if port == 0:
        port = _find_free_port(host)

    config = uvicorn.Config(
        create_app(rest_app, cors_origins=cors_origins),
        host=host,
        port=port,
        log_level=log_level,
        access_log=access_log,
    )
    server = uvicorn.Server(config)

    thread = threading.Thread(target=server.run, name="memrest-server", daemon=True)
    thread.start()

    # Wait for the socket to be bound so callers can connect right away.
    deadline = time.monotonic() + startup_timeout_s
    while not server.started:
        if not thread.is_alive():
            raise RuntimeError(f"Server failed to start on {host}:{port}")
        if time.monotonic() > deadline:
            server.should_exit = True
            raise RuntimeError(f"Server did not start on {host}:{port} within {startup_timeout_s:g}s")
        time.sleep(0.01)

    if demo is not None:
        demo.start()

    srv = RestServer(host=host, port=port, rest_app=rest_app, server=server, thread=thread, demo=demo)
    logger.info("Serving %s on %s", ", ".join(rest_app.registry.names()), srv.url)
    return srv


def run(
    *,
    host: str | None = None,
    port: int | None = None,
    open_browser: bool = False,
    data: Mapping[str, str | None] | None = None,
    static_root: str | None = None,
    demo: bool = False,
    timeout: float | None = None,
    log_level: str | None = None,
    access_log: bool = False,
    new_server: bool = False,
    connect_timeout_s: float = 0.2,
    settings: Settings | None = None,
) -> RestServer | RestClient:
    """Start a server (or attach to a running one) with a single call.

    - If MEMREST_URL is set and reachable, return a `RestClient` for it unless
      `new_server=True`.
    - Otherwise, if an explicit port already has a server answering
      `/healthz`, attach to that.
    - Otherwise start a new server on a background thread. `port=0` picks a
      free port.
    """

    settings = settings or Settings.from_env()
    host = host if host is not None else settings.host
    port = port if port is not None else settings.port
    log_level = log_level or settings.log_level
    timeout = timeout if timeout is not None else settings.timeout_s

    setup_logging(log_level)

    if not new_server:
        candidates = []
        env_url = _normalize_base_url(settings.attach_url)
        if env_url:
            candidates.append(env_url)
        if port != 0:
            candidates.append(_normalize_base_url(f"http://{host}:{port}"))
        for url in candidates:
            client = RestClient(url, timeout_s=connect_timeout_s)
            if client.is_alive():
                logger.info("Attaching to running server at %s", url)
                if open_browser:
                    launch_browser(url + "/")
                return RestClient(url)

    registry = build_registry(data)
    rest_app = create_rest_app(registry, static_root=static_root, timeout=timeout)
    resetter = DemoReset(registry, settings.demo_interval_s) if demo else None

    srv = start_server(
        rest_app,
        host=host,
        port=port,
        log_level=log_level,
        access_log=access_log,
        demo=resetter,
        cors_origins=list(settings.cors_origins),
    )
    if open_browser:
        launch_browser(srv.url)
    return srv
