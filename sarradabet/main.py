"""
FastAPI application for SarradaBet
Includes the REST API, error envelope handlers and the match event consumer
"""

from fastapi import FastAPI, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy import text
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
from datetime import datetime
import logging
import traceback

from sarradabet import __version__
from sarradabet.config import settings
from sarradabet.errors import AppError
from sarradabet.models import get_db, SessionLocal
from sarradabet.responses import error_response, success_response
from sarradabet.routers import ALL_ROUTERS
from sarradabet.services.match_sync import MatchEventConsumer

# Logging setup
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"

# Postgres SQLSTATE codes
_PG_UNIQUE_VIOLATION = "23505"
_PG_FOREIGN_KEY_VIOLATION = "23503"


def _database_ok() -> bool:
    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
        return True
    except Exception as exc:
        logger.error("Database check failed: %s", exc)
        return False
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events"""
    # Startup
    logger.info("Starting SarradaBet API (%s)", settings.ENVIRONMENT)

    if _database_ok():
        logger.info("Database connected")
    else:
        logger.warning("Database unreachable at startup; /ready will report 503")

    consumer = MatchEventConsumer.from_settings()
    try:
        consumer.start()
    except Exception as exc:
        logger.error("Match event consumer failed to start: %s", exc, exc_info=True)
    app.state.match_consumer = consumer

    yield

    # Shutdown
    logger.info("Shutting down SarradaBet API")
    if consumer.running:
        consumer.stop()


app = FastAPI(
    title="SarradaBet API",
    description="Betting markets: categories, bets with odds, votes and settlement",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

for router in ALL_ROUTERS:
    app.include_router(router, prefix=API_PREFIX)


# ============================================================================
# SERVICE ENDPOINTS
# ============================================================================

@app.get("/")
async def root():
    """Service info"""
    return success_response({
        "app": "SarradaBet API",
        "version": __version__,
        "environment": settings.ENVIRONMENT,
        "api": API_PREFIX,
        "timestamp": datetime.utcnow().isoformat(),
    })


@app.get("/health")
def health_check(db: Session = Depends(get_db)):
    """Liveness plus a database probe; always 200"""
    health = {"status": "healthy", "database": "connected"}

    try:
        db.execute(text("SELECT 1"))
    except Exception as e:
        logger.error("Health check database error: %s", e)
        health["status"] = "degraded"
        health["database"] = f"error: {str(e)}"

    consumer = getattr(app.state, "match_consumer", None)
    health["matchConsumer"] = "running" if consumer is not None and consumer.running else "disabled"
    return success_response(health)


@app.get("/ready")
def readiness_check(db: Session = Depends(get_db)):
    """Readiness: 503 until the database answers"""
    try:
        db.execute(text("SELECT 1"))
    except Exception as e:
        logger.error("Readiness check database error: %s", e)
        return error_response(None, "Database unavailable", 503)
    return success_response({"status": "ready"})


# ============================================================================
# ERROR HANDLERS
# ============================================================================

@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    logger.warning("%s %s -> %d %s", request.method, request.url.path, exc.status_code, exc.message)
    errors = (exc.context or {}).get("errors")
    return error_response(request, exc.message, exc.status_code, errors=errors)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        errors.append({
            "field": ".".join(loc),
            "message": err.get("msg", "Invalid value"),
            "code": err.get("type", "invalid"),
        })
    logger.warning("%s %s -> 400 validation failed: %s", request.method, request.url.path, errors)
    return error_response(request, "Validation failed", 400, errors=errors)


@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError):
    pgcode = getattr(exc.orig, "pgcode", None)
    text_ = str(exc.orig).lower()
    if pgcode == _PG_UNIQUE_VIOLATION or "unique" in text_:
        logger.warning("Unique constraint violation on %s", request.url.path)
        return error_response(request, "Resource already exists", 409)
    if pgcode == _PG_FOREIGN_KEY_VIOLATION or "foreign key" in text_:
        logger.warning("Foreign key violation on %s", request.url.path)
        return error_response(request, "Referenced resource does not exist", 400)
    logger.error("Integrity error on %s: %s", request.url.path, exc, exc_info=True)
    return error_response(request, "Database constraint violated", 400)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        message = f"Route {request.method} {request.url.path} not found"
    else:
        message = str(exc.detail)
    return error_response(request, message, exc.status_code)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Catch-all exception handler"""
    logger.error("Unhandled exception: %s", exc, exc_info=True)
    if settings.is_development:
        stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        return error_response(request, str(exc) or type(exc).__name__, 500, stack=stack)
    return error_response(request, "Something went wrong", 500)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)
