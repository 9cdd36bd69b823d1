"""Site edge - serves the worker script and fronts page requests through the worker."""

from contextlib import asynccontextmanager
from typing import Any

import httpx
from fastapi import Body, FastAPI
from fastapi import Request as HttpRequest
from fastapi import Response as HttpResponse
from fastapi.responses import JSONResponse
from loguru import logger

from app.container import container
from app.models.http import Request
from app.services.worker.script import build_worker_script, worker_script_headers
from settings import WORKER_SCRIPT_PATH
from settings.logging import setup_logging
from site_client import strip_headers
from web.api import worker
from web.api.worker import paths
from web.api.errors import register_error_handlers
from web.api.worker.schemas import (
    CacheDetailResponse,
    CachesResponse,
    ConsentRequest,
    ConsentResponse,
    MessageResponse,
    RegisterRequest,
    StatusResponse,
)

PROXY_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def _lifespan(configure_logging: bool):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup/shutdown lifecycle."""
        if configure_logging:
            setup_logging(level="INFO", to_file=True)
        container.init()
        logger.info("Site edge started (origin={})", container.network.origin)
        yield
        await container.close()
        logger.info("Site edge shut down")

    return lifespan


def create_app(configure_logging: bool = True) -> FastAPI:
    app = FastAPI(title="Kilalo Site Edge", lifespan=_lifespan(configure_logging))
    register_error_handlers(app)

    # ========== Worker script ==========

    @app.get(WORKER_SCRIPT_PATH)
    async def worker_script():
        return HttpResponse(content=build_worker_script().to_bytes(), headers=worker_script_headers())

    # ========== Worker control ==========

    @app.get(paths.STATUS, response_model=StatusResponse)
    async def worker_status():
        return worker.get_status()

    @app.post(paths.REGISTER, response_model=StatusResponse)
    async def register(body: RegisterRequest | None = None):
        return await worker.register((body or RegisterRequest()).scope)

    @app.post(paths.UNREGISTER, response_model=StatusResponse)
    async def unregister(body: RegisterRequest | None = None):
        return await worker.unregister((body or RegisterRequest()).scope)

    @app.post(paths.CONSENT, response_model=ConsentResponse)
    async def consent(body: ConsentRequest):
        return await worker.consent(body.accepted)

    @app.post(paths.MESSAGE, response_model=MessageResponse)
    async def message(data: Any = Body(default=None)):
        return await worker.post_message(data)

    @app.get(paths.CACHES, response_model=CachesResponse)
    async def caches():
        return worker.get_caches()

    @app.get(paths.CACHES + "/{name:path}", response_model=CacheDetailResponse)
    async def cache_detail(name: str):
        return worker.get_cache(name)

    # ========== Pages (registered last: catch-all) ==========

    @app.api_route("/{path:path}", methods=PROXY_METHODS)
    async def proxy(path: str, request: HttpRequest):
        url = f"{container.network.origin}/{path}"
        if request.url.query:
            url += f"?{request.url.query}"

        headers = strip_headers(request.headers)
        headers.pop("host", None)
        outgoing = Request(url=url, method=request.method, headers=headers, body=await request.body())

        try:
            response = await container.registry.fetch(outgoing)
        except httpx.HTTPError as e:
            logger.warning("Upstream failed for {}: {!r}", url, e)
            return JSONResponse(status_code=502, content={"error": {"code": "BAD_GATEWAY", "message": str(e)}})

        if response is None or response.type == "error":
            return JSONResponse(status_code=502, content={"error": {"code": "BAD_GATEWAY", "message": "Network error"}})

        return HttpResponse(
            content=response.read(),
            status_code=response.status,
            headers=strip_headers(response.headers),
        )

    return app


app = create_app()
