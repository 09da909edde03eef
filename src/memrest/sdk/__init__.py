from __future__ import annotations

from .client import RestClient, RestClientError

__all__ = ["RestClient", "RestClientError"]
