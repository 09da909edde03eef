from __future__ import annotations

from .api import RestApp
from .core import (
    ClientError,
    IdMismatchError,
    Promise,
    ResourceStore,
    RestService,
    Result,
    ServiceRegistry,
    StoreBackedService,
    UnsupportedOperation,
)
from .runtime import RestServer, create_app, run
from .sdk import RestClient, RestClientError

__all__ = [
    "run",
    "create_app",
    "RestServer",
    "RestApp",
    "RestClient",
    "RestClientError",
    "Promise",
    "Result",
    "ResourceStore",
    "RestService",
    "StoreBackedService",
    "ServiceRegistry",
    "ClientError",
    "IdMismatchError",
    "UnsupportedOperation",
]
