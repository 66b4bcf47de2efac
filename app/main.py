"""
Main FastAPI application for the Basketball Stats API.
"""
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator
from pydantic import ValidationError as PydanticValidationError
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy import text
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.responses import error
from app.api.routes import dashboard, matches, players, rankings, reports, stats, sync, teams
from app.core import metrics
from app.core.config import settings
from app.core.database import SessionLocal, init_db
from app.core.exceptions import AppError
from app.core.logging import configure_logging, get_logger
from app.core.middleware import CorrelationIdMiddleware
from app.core.rate_limit import limiter
from app.services.core.circuit_breaker import get_breaker_state, nba_api_breaker

env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

configure_logging(level=settings.LOG_LEVEL, json_output=settings.LOG_JSON)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Create missing tables before serving."""
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION} ({settings.ENVIRONMENT})")
    init_db()
    logger.info("Application started")

    yield

    logger.info("Shutting down application")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Box scores, rankings and reports for local leagues, with an NBA data import",
    lifespan=lifespan,
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Registered before CORS so the header is set on every response
app.add_middleware(CorrelationIdMiddleware)

Instrumentator().instrument(app).expose(app, endpoint="/metrics", include_in_schema=False)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

for module in (teams, players, matches, stats, rankings, reports, dashboard, sync):
    app.include_router(module.router, prefix="/api/v1")


@app.get("/")
@limiter.limit("60/minute")
async def root(request: Request):
    return {
        "message": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs": "/docs",
        "metrics": "/metrics",
        "endpoints": {
            "teams": "/api/v1/teams",
            "players": "/api/v1/players",
            "matches": "/api/v1/matches",
            "stats": "/api/v1/stats",
            "rankings": "/api/v1/rankings",
            "reports": "/api/v1/reports",
            "dashboard": "/api/v1/dashboard",
            "nba_sync": "/api/v1/nba/sync",
        },
    }


@app.get("/health")
@limiter.limit("120/minute")
async def health_check(request: Request):
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
    }


@app.get("/api/health")
@limiter.limit("60/minute")
def api_health(request: Request):
    """Database connectivity and NBA breaker state; 503 when the database is unreachable."""
    health_status = {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "components": {},
    }

    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
        health_status["components"]["database"] = {"status": "connected"}
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        health_status["status"] = "unhealthy"
        health_status["components"]["database"] = {"status": "error", "error": str(e)}
    finally:
        db.close()
    metrics.update_db_pool_metrics()

    breaker_state = get_breaker_state(nba_api_breaker)
    health_status["components"]["nba_api"] = {
        "circuit_breaker": breaker_state,
        "configured": bool(settings.NBA_API_KEY),
    }
    if breaker_state != "closed" and health_status["status"] == "healthy":
        health_status["status"] = "degraded"

    status_code = 503 if health_status["status"] == "unhealthy" else 200
    return JSONResponse(status_code=status_code, content=health_status)


# ============================================================================
# EXCEPTION HANDLERS
# ============================================================================

@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.warning(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=error(exc.message))


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content=error(str(exc.detail)))


# Request sections and the set/increment tags of the box-score union
_UNREPORTED_LOC_PARTS = ("body", "query", "path", "set", "increment")


def _first_error_message(errors) -> str:
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part not in _UNREPORTED_LOC_PARTS)
    message = first.get("msg", "Invalid value")
    return f"{location}: {message}" if location else message


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content=error(_first_error_message(exc.errors())))


@app.exception_handler(PydanticValidationError)
async def body_validation_handler(request: Request, exc: PydanticValidationError):
    return JSONResponse(status_code=400, content=error(_first_error_message(exc.errors())))


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content=error("internal server error"))


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
