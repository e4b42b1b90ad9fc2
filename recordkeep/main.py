"""
Recordkeep application entry point.

Run with ``uvicorn recordkeep.main:app`` or ``python -m recordkeep.main``.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from recordkeep.api.errors import register_exception_handlers
from recordkeep.api.middleware.request_id import RequestIdMiddleware
from recordkeep.api.v1 import router as api_v1_router
from recordkeep.config import get_settings
from recordkeep.database import close_db, init_db
from recordkeep.logging_config import configure_logging, get_logger
from recordkeep.schemas.common import HealthResponse

settings = get_settings()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    configure_logging(
        log_level=settings.log_level,
        environment=settings.environment,
        debug=settings.debug,
    )
    await init_db()
    logger.info(
        "%s %s started",
        settings.project_name,
        settings.version,
        extra={"environment": settings.environment},
    )
    try:
        yield
    finally:
        await close_db()
        logger.info("%s stopped", settings.project_name)


app = FastAPI(
    title=settings.project_name,
    description="User-owned records behind bearer-token sessions.",
    version=settings.version,
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

# Middleware added last runs first: CORS wraps request correlation
app.add_middleware(RequestIdMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
)

register_exception_handlers(app)
app.include_router(api_v1_router, prefix=settings.api_v1_prefix)


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    return HealthResponse(status="ok", version=settings.version)


@app.get("/", tags=["Root"])
async def root():
    """Service name, version and API location."""
    return {
        "name": settings.project_name,
        "version": settings.version,
        "api": settings.api_v1_prefix,
        "docs": "/docs" if settings.debug else None,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("recordkeep.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
