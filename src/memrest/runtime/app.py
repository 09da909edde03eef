from __future__ import annotations

import logging
from typing import Mapping

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response

from ..api.app import RestApp
from ..api.responses import HttpResponse, error_response
from ..core.service import ServiceRegistry
from ..services.loader import DEFAULT_DATA, create_service
from .web import StaticResolver, packaged_static_root

logger = logging.getLogger(__name__)

METHODS = ["GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS"]


def build_registry(data: Mapping[str, str | None] | None = None) -> ServiceRegistry:
    """Build the service registry from a resource name -> initial-data-path mapping."""

    if data is None:
        data = DEFAULT_DATA
    return ServiceRegistry({name: create_service(name, path) for name, path in data.items()})


def create_rest_app(
    registry: ServiceRegistry | None = None,
    *,
    static_root: str | None = None,
    timeout: float = 30.0,
) -> RestApp:
    if registry is None:
        registry = build_registry()

    root = static_root
    if root is None:
        try:
            root = str(packaged_static_root())
        except FileNotFoundError as e:
            # API-only still works.
            logger.warning("%s", e)

    static = StaticResolver(root) if root is not None else None
    return RestApp(registry, static, timeout=timeout)


def create_app(rest_app: RestApp | None = None, *, cors_origins: list[str] | None = None) -> FastAPI:
    """Create the HTTP front: a health probe plus one catch-all route into `RestApp`."""

    if rest_app is None:
        rest_app = create_rest_app()

    # Every path outside /healthz belongs to RestApp, so no generated docs.
    app = FastAPI(title="memrest", version="0.1.0", docs_url=None, redoc_url=None, openapi_url=None)
    app.state.rest_app = rest_app

    if cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.get("/healthz", include_in_schema=False)
    def healthz() -> dict[str, bool]:
        return {"ok": True}

    @app.api_route("/{path:path}", methods=METHODS, include_in_schema=False)
    async def _handle(request: Request, path: str) -> Response:  # noqa: ARG001
        body = await request.body()
        # Services block; keep them off the event loop.
        res = await run_in_threadpool(
            rest_app.handle,
            request.method,
            request.url.path,
            dict(request.headers),
            body,
        )
        return _to_response(res)

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException) -> Response:
        # Only methods the catch-all does not list get here; they are not handled.
        if exc.status_code in (404, 405):
            return _to_response(error_response(404, f"Not found: {request.url.path}"))
        return _to_response(error_response(exc.status_code, str(exc.detail)))

    return app


def _to_response(res: HttpResponse) -> Response:
    return Response(content=res.body, status_code=res.status, headers=res.headers)
