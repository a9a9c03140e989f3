"""
EstateIQ - Real-estate investment backend

Main FastAPI application entry point. Configures routes, error handlers,
and application lifecycle events.

Version: 1.0.0
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from estateiq import __version__
from estateiq.config import settings
from estateiq.db import init_db, dispose_engine
from estateiq.errors import EstateIQError, ValidationError
# Import logging configuration (initializes logging)
from estateiq.logging_config import get_logger

# Import route modules
from estateiq.routes import auth
from estateiq.routes import roe

# Get logger for this module
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifecycle manager.

    Creates missing tables on startup and releases the connection pool on
    shutdown.
    """
    # Startup
    logger.info("=" * 60)
    logger.info("EstateIQ Application Starting")
    logger.info(f"Version: {app.version} | Environment: {settings.ENV}")
    logger.info("=" * 60)
    init_db()

    yield  # Application runs here

    # Shutdown
    dispose_engine()
    logger.info("EstateIQ Application Shutting Down")
    logger.info("=" * 60)


app = FastAPI(
    title="EstateIQ",
    description="Real-estate investment backend: accounts, sessions, Google sign-in and ROE analysis.",
    version=__version__,
    lifespan=lifespan
)


@app.exception_handler(EstateIQError)
async def estateiq_error_handler(request: Request, exc: EstateIQError):
    if isinstance(exc, ValidationError):
        logger.info(f"{request.method} {request.url.path} rejected: {exc.message}")
    else:
        logger.warning(f"{request.method} {request.url.path} failed ({type(exc).__name__}): {exc.message}")
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    logger.info(f"{request.method} {request.url.path} rejected: malformed request body")
    return JSONResponse({"error": "Invalid request body"}, status_code=400)


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    message = "Internal Server Error" if settings.is_production else f"Internal Server Error: {exc}"
    return JSONResponse({"error": message}, status_code=500)


@app.get("/health")
def health():
    return {"status": "ok"}


# Include route modules
app.include_router(auth.router, tags=["Authentication"])
app.include_router(roe.router, tags=["ROE Analysis"])

logger.info("All routes registered successfully")
