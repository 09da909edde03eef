from __future__ import annotations

import logging
import uuid
from typing import Any, Callable, Generic, Iterator, Mapping, TypeVar

from pydantic import BaseModel

from .errors import ClientError, IdMismatchError, UnsupportedOperation
from .result import Promise
from .store import ResourceStore

R = TypeVar("R", bound=BaseModel)

OPERATIONS = ("get", "list", "post", "put", "delete")

logger = logging.getLogger(__name__)


class RestService(Generic[R]):
    """CRUD contract for one resource type.

    Subclasses override the operations they support. Anything left alone
    settles to an `UnsupportedOperation` failure, which the HTTP layer turns
    into a 405 instead of a 404/500.
    """

    def data_class(self) -> type[R]:
        raise NotImplementedError

    def get(self, record_id: str) -> Promise[R]:
        return Promise.of_failure(UnsupportedOperation("get"))

    def list(self) -> Promise[list[R]]:
        return Promise.of_failure(UnsupportedOperation("list"))

    def post(self, record: R | None) -> Promise[R]:
        return Promise.of_failure(UnsupportedOperation("post"))

    def put(self, record_id: str, record: R | None) -> Promise[R]:
        return Promise.of_failure(UnsupportedOperation("put"))

    def delete(self, record_id: str) -> Promise[R]:
        return Promise.of_failure(UnsupportedOperation("delete"))

    def supports(self, operation: str) -> bool:
        if operation not in OPERATIONS:
            return False
        return getattr(type(self), operation) is not getattr(RestService, operation)


class WithDemoMode:
    """Services that can save their contents and later roll back to them."""

    def take_snapshot(self) -> None:
        raise NotImplementedError

    def reset_to_snapshot(self) -> None:
        raise NotImplementedError


def uuid_id() -> str:
    return uuid.uuid4().hex


class StoreBackedService(RestService[R], WithDemoMode):
    """All five operations over a `ResourceStore`, for records with an `id` field."""

    model: type[R]

    def __init__(
        self,
        store: ResourceStore[R] | None = None,
        *,
        model: type[R] | None = None,
        id_factory: Callable[[], str] = uuid_id,
    ) -> None:
        if model is not None:
            self.model = model
        if getattr(self, "model", None) is None:
            raise TypeError(f"{type(self).__name__} needs a record model")
        self.store: ResourceStore[R] = store if store is not None else ResourceStore()
        self._id_factory = id_factory
        self._snapshot: dict[str, R] | None = None

    def data_class(self) -> type[R]:
        return self.model

    def get(self, record_id: str) -> Promise[R]:
        return Promise.of_value(self.store.get(record_id))

    def list(self) -> Promise[list[R]]:
        return Promise.of_value(self.store.values())

    def post(self, record: R | None) -> Promise[R]:
        if record is None:
            return Promise.absent()

        record_id = _record_id(record)
        if record_id:
            self.store.put(record_id, record)
            return Promise.of_value(record)

        # Retry on the (vanishingly rare) collision so ids stay unique.
        while True:
            candidate = record.model_copy(update={"id": self._id_factory()})
            if self.store.put_if_absent(_record_id(candidate), candidate) is None:
                logger.debug("Created %s %s", self.model.__name__, candidate.id)  # type: ignore[attr-defined]
                return Promise.of_value(candidate)

    def put(self, record_id: str, record: R | None) -> Promise[R]:
        if record is None:
            return Promise.of_failure(ClientError("Missing request body"))

        item_id = _record_id(record)
        if item_id and item_id != record_id:
            return Promise.of_failure(IdMismatchError(record_id, item_id))
        if not item_id:
            record = record.model_copy(update={"id": record_id})

        self.store.put(record_id, record)
        return Promise.of_value(record)

    def delete(self, record_id: str) -> Promise[R]:
        return Promise.of_value(self.store.remove(record_id))

    def take_snapshot(self) -> None:
        self._snapshot = self.store.snapshot()

    def reset_to_snapshot(self) -> None:
        if self._snapshot is None:
            return
        self.store.restore(self._snapshot)
        logger.info("Reset %s to snapshot (%d records)", type(self).__name__, len(self._snapshot))


def _record_id(record: Any) -> str | None:
    value = getattr(record, "id", None)
    if value is None:
        return None
    return str(value) or None


class ServiceRegistry:
    """Immutable name -> service mapping resolved from the first path segment."""

    def __init__(self, services: Mapping[str, RestService[Any]]) -> None:
        for name in services:
            if not name or "/" in name:
                raise ValueError(f"Invalid resource name: {name!r}")
        self._services: dict[str, RestService[Any]] = dict(services)

    def get(self, name: str) -> RestService[Any] | None:
        return self._services.get(name)

    def names(self) -> list[str]:
        return sorted(self._services)

    def demo_services(self) -> list[WithDemoMode]:
        return [s for s in self._services.values() if isinstance(s, WithDemoMode)]

    def __contains__(self, name: object) -> bool:
        return name in self._services

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __len__(self) -> int:
        return len(self._services)
