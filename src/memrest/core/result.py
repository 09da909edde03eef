from __future__ import annotations

import concurrent.futures
from concurrent.futures import Executor, Future
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generic, TypeVar

from .errors import PromiseTimeout

T = TypeVar("T")


class Outcome(str, Enum):
    VALUE = "value"
    ABSENT = "absent"
    FAILURE = "failure"


@dataclass(frozen=True)
class Result(Generic[T]):
    """A settled outcome: a value, an explicit absence, or a failure cause.

    Absence is its own kind rather than a `None` value so "not found" never
    travels through the error channel.
    """

    kind: Outcome
    value: T | None = None
    cause: BaseException | None = None

    @classmethod
    def of_value(cls, value: T) -> "Result[T]":
        return cls(kind=Outcome.VALUE, value=value)

    @classmethod
    def absent(cls) -> "Result[T]":
        return cls(kind=Outcome.ABSENT)

    @classmethod
    def failure(cls, cause: BaseException) -> "Result[T]":
        return cls(kind=Outcome.FAILURE, cause=cause)

    @property
    def is_value(self) -> bool:
        return self.kind is Outcome.VALUE

    @property
    def is_absent(self) -> bool:
        return self.kind is Outcome.ABSENT

    @property
    def is_failure(self) -> bool:
        return self.kind is Outcome.FAILURE

    def get(self) -> T:
        if self.kind is Outcome.VALUE:
            return self.value  # type: ignore[return-value]
        if self.kind is Outcome.ABSENT:
            raise LookupError("Result has no value")
        if self.cause is None:
            raise RuntimeError("Failed result carries no cause")
        raise self.cause


class Promise(Generic[T]):
    """Handle to a `Result` that settles exactly once.

    Services hand these back so a front that suspends can wait on them; the
    only blocking point is `get_result`, which always has a bound.
    """

    def __init__(self, future: Future[Result[T]]) -> None:
        self._future = future

    @classmethod
    def settled(cls, result: Result[T]) -> "Promise[T]":
        fut: Future[Result[T]] = Future()
        fut.set_result(result)
        return cls(fut)

    @classmethod
    def of_value(cls, value: T | None) -> "Promise[T]":
        if value is None:
            return cls.absent()
        return cls.settled(Result.of_value(value))

    @classmethod
    def absent(cls) -> "Promise[T]":
        return cls.settled(Result.absent())

    @classmethod
    def of_failure(cls, cause: BaseException) -> "Promise[T]":
        return cls.settled(Result.failure(cause))

    @classmethod
    def from_call(cls, fn: Callable[..., T | None], *args: Any) -> "Promise[T]":
        """Run `fn` now; a `None` return is absence and an exception is a failure."""

        try:
            value = fn(*args)
        except Exception as e:
            return cls.of_failure(e)
        return cls.of_value(value)

    @classmethod
    def submit(cls, executor: Executor, fn: Callable[..., T | None], *args: Any) -> "Promise[T]":
        outer: Future[Result[T]] = Future()

        def _settle(inner: Future[T | None]) -> None:
            exc = inner.exception()
            if exc is not None:
                outer.set_result(Result.failure(exc))
                return
            value = inner.result()
            outer.set_result(Result.absent() if value is None else Result.of_value(value))

        executor.submit(fn, *args).add_done_callback(_settle)
        return cls(outer)

    def is_done(self) -> bool:
        return self._future.done()

    def get_result(self, timeout: float = 30.0) -> Result[T]:
        try:
            return self._future.result(timeout=timeout)
        except concurrent.futures.TimeoutError:
            return Result.failure(PromiseTimeout(timeout))
        except concurrent.futures.CancelledError as e:
            return Result.failure(e)
