from __future__ import annotations

from .app import RestApp
from .codec import decode_body, encode
from .dispatch import Dispatcher, Route, split_path
from .responses import CONTENT_TYPES, HttpResponse, content_type_for, error_response, render

__all__ = [
    "RestApp",
    "Dispatcher",
    "Route",
    "split_path",
    "HttpResponse",
    "CONTENT_TYPES",
    "content_type_for",
    "error_response",
    "render",
    "decode_body",
    "encode",
]
