from __future__ import annotations

from typing import Any

import httpx


class RestClientError(RuntimeError):
    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


class RestClient:
    """HTTP client for the `/api/{resource}` surface of a running server.

    Records travel as plain dicts. `get` and `delete` return None on 404;
    every other error status raises `RestClientError`.
    """

    def __init__(self, base_url: str = "http://127.0.0.1:8081", *, api_prefix: str = "/api", timeout_s: float = 10.0) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_prefix = "/" + api_prefix.strip("/")
        self.timeout_s = timeout_s

    def _client(self) -> httpx.Client:
        return httpx.Client(base_url=self.base_url, timeout=self.timeout_s)

    def _url(self, resource: str, record_id: str | None = None) -> str:
        url = f"{self.api_prefix}/{resource}"
        if record_id is not None:
            url += f"/{record_id}"
        return url

    @staticmethod
    def _check(res: httpx.Response, *, allow_missing: bool = False) -> Any:
        if allow_missing and res.status_code == 404:
            return None
        if res.status_code >= 400:
            try:
                message = str(res.json().get("error", res.text))
            except ValueError:
                message = res.text
            raise RestClientError(res.status_code, message)
        return res.json()

    def is_alive(self) -> bool:
        """Best-effort probe of `/healthz`."""
        try:
            with self._client() as client:
                r = client.get("/healthz")
                if r.status_code != 200:
                    return False
                return bool(r.json().get("ok"))
        except (httpx.HTTPError, ValueError):
            return False

    def list(self, resource: str) -> list[dict[str, Any]]:
        with self._client() as client:
            return self._check(client.get(self._url(resource)))

    def get(self, resource: str, record_id: str) -> dict[str, Any] | None:
        with self._client() as client:
            return self._check(client.get(self._url(resource, record_id)), allow_missing=True)

    def post(self, resource: str, record: dict[str, Any]) -> dict[str, Any]:
        with self._client() as client:
            return self._check(client.post(self._url(resource), json=record))

    def put(self, resource: str, record_id: str, record: dict[str, Any]) -> dict[str, Any]:
        with self._client() as client:
            return self._check(client.put(self._url(resource, record_id), json=record))

    def delete(self, resource: str, record_id: str) -> dict[str, Any] | None:
        with self._client() as client:
            return self._check(client.delete(self._url(resource, record_id)), allow_missing=True)
