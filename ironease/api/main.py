"""IronEase portal API: entry point.

Start with:
    uvicorn ironease.api.main:app --reload --host 0.0.0.0 --port 8000

The portal holds no data of its own. Every request forwards the caller's
bearer token to the marketplace backend at IRONEASE_API_URL and renders the
order boards, dashboard and catalog from what the backend returns.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from ironease.api.dependencies import limiter
from ironease.api.routers import auth, customer, shop
from ironease.config import PortalConfig, load_portal_config
from ironease.core.exceptions import ProjectError
from ironease.core.logger import configure

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # ── Startup ──────────────────────────────────────────────────
    configure()
    logger.info("API: portal ready, backend at %s", app.state.config.api_url)

    yield

    # ── Shutdown ─────────────────────────────────────────────────
    logger.info("API: portal stopped")


async def project_error_handler(request: Request, exc: ProjectError) -> JSONResponse:
    if exc.http_status >= 500:
        logger.warning(
            "API: %s %s failed: %s", request.method, request.url.path, exc.code,
            extra={"path": request.url.path, "error": exc.to_dict()},
        )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


def create_app(config: Optional[PortalConfig] = None) -> FastAPI:
    config = config or load_portal_config()
    app = FastAPI(
        title="IronEase Portal API",
        version="1.0.0",
        description="Customer and shop order boards over the IronEase marketplace backend.",
        lifespan=lifespan,
    )
    app.state.config = config
    # in-flight (order id, action) pairs, shared by every request's dispatcher
    app.state.request_states = {}

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(ProjectError, project_error_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Routers ───────────────────────────────────────────────────
    app.include_router(auth.router)
    app.include_router(customer.router)
    app.include_router(shop.router)

    @app.get("/health", tags=["health"])
    async def health():
        return {"status": "ok"}

    return app


app = create_app()
