from __future__ import annotations

import threading
from typing import Generic, Iterator, TypeVar

R = TypeVar("R")


class ResourceStore(Generic[R]):
    """Keyed in-memory collection of records for one resource type.

    Each store owns its lock, so requests against different resources never
    contend. Individual operations are atomic; there are no cross-key
    transactions and the last completed write wins.
    """

    def __init__(self, initial: dict[str, R] | None = None) -> None:
        self._lock = threading.RLock()
        self._records: dict[str, R] = dict(initial or {})

    def get(self, record_id: str) -> R | None:
        with self._lock:
            return self._records.get(record_id)

    def put(self, record_id: str, record: R) -> R | None:
        """Store `record` under `record_id` and return whatever was there before."""
        with self._lock:
            previous = self._records.get(record_id)
            self._records[record_id] = record
            return previous

    def put_if_absent(self, record_id: str, record: R) -> R | None:
        with self._lock:
            existing = self._records.get(record_id)
            if existing is None:
                self._records[record_id] = record
            return existing

    def remove(self, record_id: str) -> R | None:
        with self._lock:
            return self._records.pop(record_id, None)

    def values(self) -> list[R]:
        with self._lock:
            return list(self._records.values())

    def ids(self) -> list[str]:
        with self._lock:
            return list(self._records.keys())

    def clear(self) -> None:
        with self._lock:
            self._records.clear()

    def snapshot(self) -> dict[str, R]:
        with self._lock:
            return dict(self._records)

    def restore(self, snapshot: dict[str, R]) -> None:
        with self._lock:
            self._records = dict(snapshot)

    def __contains__(self, record_id: object) -> bool:
        with self._lock:
            return record_id in self._records

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __iter__(self) -> Iterator[str]:
        return iter(self.ids())
