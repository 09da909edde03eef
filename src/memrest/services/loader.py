from __future__ import annotations

import json
import logging
from importlib import resources as importlib_resources
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from ..core.service import StoreBackedService
from .persons import PersonService

R = TypeVar("R", bound=BaseModel)

logger = logging.getLogger(__name__)

PACKAGE_PREFIX = "package:"

# Resource name -> service class used when building a registry from the CLI.
SERVICE_FACTORIES: dict[str, type[StoreBackedService[Any]]] = {
    "persons": PersonService,
}

DEFAULT_DATA: dict[str, str] = {
    "persons": PACKAGE_PREFIX + "data/persons.json",
}


def _read_text(path: str | Path) -> str:
    """Read a data file.

    `package:data/x.json` is resolved inside the installed `memrest` package,
    anything else is a filesystem path.
    """

    p = str(path)
    if p.startswith(PACKAGE_PREFIX):
        ref = importlib_resources.files("memrest").joinpath(p[len(PACKAGE_PREFIX):])
        return ref.read_text(encoding="utf-8")
    return Path(p).read_text(encoding="utf-8")


def load_records(path: str | Path, model: type[R]) -> list[R]:
    data = json.loads(_read_text(path))
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a JSON array, got {type(data).__name__}")
    return [model.model_validate(item) for item in data]


def load_service(service: StoreBackedService[R], path: str | Path) -> StoreBackedService[R]:
    """Seed `service` from a JSON array file.

    A missing or malformed file only logs a warning: the server still starts
    with an empty collection.
    """

    try:
        records = load_records(path, service.data_class())
    except (OSError, ValueError, ValidationError) as e:
        logger.warning("Could not load initial data from %s: %s", path, e)
        return service

    for record in records:
        result = service.post(record).get_result()
        if result.is_failure:
            logger.warning("Skipping record from %s: %s", path, result.cause)
    logger.info("Loaded %d %s record(s) from %s", len(records), service.data_class().__name__, path)
    return service


def create_service(name: str, path: str | Path | None = None) -> StoreBackedService[Any]:
    try:
        factory = SERVICE_FACTORIES[name]
    except KeyError:
        raise ValueError(f"Unknown resource: {name!r} (known: {', '.join(sorted(SERVICE_FACTORIES))})") from None

    service = factory()
    if path is not None:
        load_service(service, path)
    return service
