from __future__ import annotations

import json
from typing import Any, TypeVar

from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel, ValidationError

from ..core.errors import DecodeError

R = TypeVar("R", bound=BaseModel)


def decode_body(body: bytes | str | None, model: type[R]) -> R | None:
    """Decode a JSON request body into `model`.

    An empty body (or a literal `null`) decodes to None, which services treat
    as "nothing to store". Bytes go to pydantic untouched, so invalid UTF-8 is
    a decode failure rather than a silently patched record.
    """

    if body is None:
        return None
    stripped = body.strip()
    if not stripped or stripped in (b"null", "null"):
        return None
    try:
        return model.model_validate_json(body)
    except ValidationError as e:
        raise DecodeError(_describe(e)) from e


def _describe(error: ValidationError) -> str:
    parts: list[str] = []
    for err in error.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        msg = err.get("msg", "invalid")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "Invalid body: " + "; ".join(parts)


def to_jsonable(value: Any) -> Any:
    return jsonable_encoder(value, by_alias=True, exclude_none=True)


def encode(value: Any) -> bytes:
    return json.dumps(to_jsonable(value), separators=(",", ":"), ensure_ascii=False).encode("utf-8")
