"""ClassVote FastAPI application: wiring, health check and frontend serving."""
from fastapi import FastAPI, HTTPException, Request, Depends
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from fastapi.responses import FileResponse, JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy.orm import Session
from sqlalchemy.pool import QueuePool
from sqlalchemy import text
import os

from classvote.api.v1.router import api_router
from classvote.api.deps import get_db
from classvote.core.config import settings
from classvote.core.errors import OperationFailedError, SummarizationError
from classvote.core.rate_limit import limiter
from classvote.core.logging_config import setup_logging, get_logger
from classvote.core.cache import global_cache
from classvote.db.session import engine
from classvote.middleware import LoggingMiddleware
from classvote.schemas import ErrorDetail, ErrorResponse
from classvote.services.summary import build_client

# Logging first so config warnings below are structured
setup_logging(level=settings.LOG_LEVEL)
logger = get_logger(__name__)

if settings.ENVIRONMENT == "production":
    for warning in settings.validate_production_config():
        logger.warning("production_config_warning", warning=warning)

logger.info(
    "application_starting",
    app_title=settings.APP_TITLE,
    app_version=settings.APP_VERSION,
    environment=settings.ENVIRONMENT,
    timezone=settings.TIMEZONE,
)

app = FastAPI(
    title=settings.APP_TITLE,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION
)

app.state.limiter = limiter
app.state.openai_client = build_client()
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(OperationFailedError)
async def operation_failed_handler(request: Request, exc: OperationFailedError):
    """Storage failures surface as a generic 500; details stay in the logs."""
    body = ErrorResponse(error=ErrorDetail(
        code="operation_failed",
        message="The operation could not be completed. Please try again.",
        operation=exc.operation,
    ))
    return JSONResponse(status_code=500, content=body.model_dump(exclude_none=True))


@app.exception_handler(SummarizationError)
async def summarization_failed_handler(request: Request, exc: SummarizationError):
    body = ErrorResponse(error=ErrorDetail(code="summarization_failed", message=str(exc)))
    return JSONResponse(status_code=502, content=body.model_dump(exclude_none=True))


# Binds request_id to every log line of a request
app.add_middleware(LoggingMiddleware)


@app.middleware("http")
async def add_api_version_header(request: Request, call_next):
    """Stamp every response with the running API version."""
    response = await call_next(request)
    response.headers["X-API-Version"] = settings.APP_VERSION
    return response

# The admin cookie needs credentialed CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["*"],
)

app.include_router(api_router)


# Registered ahead of the SPA catch-all
@app.get("/health")
async def health_check(db: Session = Depends(get_db)):
    """
    Liveness plus database reachability.

    The body carries snapshot cache statistics and, for pooled engines, the
    connection pool counters. An unreachable database answers 503 with the
    same body under ``detail``.
    """
    health_status = {
        "status": "healthy",
        "environment": settings.ENVIRONMENT,
        "cache": global_cache.get_stats(),
        "database": {"status": "connected"},
    }

    pool = engine.pool
    if isinstance(pool, QueuePool):
        health_status["database"]["pool"] = {
            "size": pool.size(),
            "checked_in": pool.checkedin(),
            "checked_out": pool.checkedout(),
            "overflow": pool.overflow(),
        }

    try:
        db.execute(text("SELECT 1"))
    except Exception as e:
        health_status["status"] = "unhealthy"
        health_status["database"]["status"] = f"error: {str(e)}"
        logger.error("health_check_failed", error=str(e))
        raise HTTPException(status_code=503, detail=health_status)

    return health_status

# Serve the single-page frontend in production
if os.path.exists(settings.FRONTEND_BUILD_PATH):
    assets_path = f"{settings.FRONTEND_BUILD_PATH}/assets"
    if os.path.exists(assets_path):
        app.mount("/assets", StaticFiles(directory=assets_path), name="assets")

    @app.get("/", response_class=FileResponse)
    async def serve_root():
        return FileResponse(f"{settings.FRONTEND_BUILD_PATH}/index.html")

    @app.get("/{full_path:path}")
    async def serve_frontend(full_path: str):
        """Serve the frontend for all non-API routes (/votes/..., /admin/...)."""
        if full_path.startswith(("api", "docs", "redoc", "openapi.json")):
            raise HTTPException(status_code=404, detail="Not found")

        file_path = os.path.realpath(os.path.join(settings.FRONTEND_BUILD_PATH, full_path))
        build_root = os.path.realpath(settings.FRONTEND_BUILD_PATH)
        if file_path.startswith(build_root + os.sep) and os.path.isfile(file_path):
            return FileResponse(file_path)

        # Client-side routing
        return FileResponse(f"{settings.FRONTEND_BUILD_PATH}/index.html")
