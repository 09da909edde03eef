from __future__ import annotations


class RestError(Exception):
    """Base class for conditions the response adapter maps to a status code."""

    status_code: int = 500


class ClientError(RestError):
    """The caller sent something we cannot act on (HTTP 400)."""

    status_code = 400


class DecodeError(ClientError):
    """The request body could not be decoded into the service's record type."""


class IdMismatchError(ClientError):
    def __init__(self, path_id: str, item_id: str | None) -> None:
        super().__init__(f"ID mismatch: id=[{path_id}] vs item.id=[{item_id}]")
        self.path_id = path_id
        self.item_id = item_id


class UnsupportedOperation(RestError):
    """A service declined the operation (HTTP 405)."""

    status_code = 405

    def __init__(self, operation: str) -> None:
        super().__init__(f"Unsupported operation: {operation}")
        self.operation = operation


class InternalFailure(RestError):
    status_code = 500


class PromiseTimeout(InternalFailure):
    def __init__(self, timeout: float) -> None:
        super().__init__(f"Timed out after {timeout:g}s waiting for a result")
        self.timeout = timeout


def status_for(cause: BaseException) -> int:
    """Map a failure cause onto an HTTP status; anything unclassified is a 500."""

    if isinstance(cause, RestError):
        return int(cause.status_code)
    return 500
