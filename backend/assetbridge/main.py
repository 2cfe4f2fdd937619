from contextlib import asynccontextmanager
import logging

import sentry_sdk
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from assetbridge.core.config import settings
from assetbridge.core.exceptions import (
    ExportSerializationError,
    MalformedSourceError,
    NoMatchingRecordsError,
)
from assetbridge.core.limiter import limiter
from assetbridge.core.logging import setup_logging

setup_logging()

logger = logging.getLogger(__name__)

# Initialize Sentry error monitoring
if settings.SENTRY_DSN:
    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        traces_sample_rate=settings.SENTRY_TRACES_SAMPLE_RATE,
        environment=getattr(settings, 'APP_ENV', 'development'),
        send_default_pii=False,
    )
    logger.info("Sentry initialized")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("AssetBridge starting (env=%s)", settings.APP_ENV)
    yield
    from assetbridge.core.deps import close_view_cache
    from assetbridge.db.session import engine
    await close_view_cache()
    await engine.dispose()


app = FastAPI(
    title="AssetBridge",
    version="0.1.0",
    docs_url="/api/docs" if settings.APP_ENV != "production" else None,
    redoc_url="/api/redoc" if settings.APP_ENV != "production" else None,
    lifespan=lifespan,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],
)


@app.exception_handler(MalformedSourceError)
async def malformed_source_handler(request: Request, exc: MalformedSourceError):
    logger.info("Rejected unreadable upload: %s", exc.message)
    return JSONResponse(status_code=422, content={"detail": f"Could not read CSV file: {exc.message}"})


@app.exception_handler(NoMatchingRecordsError)
async def no_matching_records_handler(request: Request, exc: NoMatchingRecordsError):
    return JSONResponse(status_code=404, content={"detail": exc.message})


@app.exception_handler(ExportSerializationError)
async def export_serialization_handler(request: Request, exc: ExportSerializationError):
    return JSONResponse(status_code=500, content={"detail": exc.message})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error("Unhandled exception: %s %s: %s", request.method, request.url.path, exc, exc_info=True)
    return JSONResponse(status_code=500, content={"detail": "Internal server error."})


# ─── Routers ───
from assetbridge.api.v1.router import api_router  # noqa: E402

app.include_router(api_router, prefix="/api/v1")


@app.get("/health")
async def health():
    return {"status": "ok", "env": settings.APP_ENV}
