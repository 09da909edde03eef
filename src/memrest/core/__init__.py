from __future__ import annotations

from .errors import (
    ClientError,
    DecodeError,
    IdMismatchError,
    InternalFailure,
    PromiseTimeout,
    RestError,
    UnsupportedOperation,
    status_for,
)
from .result import Outcome, Promise, Result
from .service import (
    OPERATIONS,
    RestService,
    ServiceRegistry,
    StoreBackedService,
    WithDemoMode,
    uuid_id,
)
from .store import ResourceStore

__all__ = [
    "RestError",
    "ClientError",
    "DecodeError",
    "IdMismatchError",
    "UnsupportedOperation",
    "InternalFailure",
    "PromiseTimeout",
    "status_for",
    "Outcome",
    "Result",
    "Promise",
    "ResourceStore",
    "OPERATIONS",
    "RestService",
    "StoreBackedService",
    "WithDemoMode",
    "ServiceRegistry",
    "uuid_id",
]
