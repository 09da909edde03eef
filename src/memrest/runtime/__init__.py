from __future__ import annotations

from .app import build_registry, create_app, create_rest_app
from .config import Settings, setup_logging
from .server import RestServer, run, start_server

__all__ = [
    "build_registry",
    "create_app",
    "create_rest_app",
    "Settings",
    "setup_logging",
    "RestServer",
    "run",
    "start_server",
]
