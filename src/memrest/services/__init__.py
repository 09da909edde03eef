from __future__ import annotations

from .loader import DEFAULT_DATA, SERVICE_FACTORIES, create_service, load_records, load_service
from .persons import Person, PersonService

__all__ = [
    "Person",
    "PersonService",
    "SERVICE_FACTORIES",
    "DEFAULT_DATA",
    "create_service",
    "load_records",
    "load_service",
]
