"""
Badminton Session Manager - FastAPI Application

Provides a REST API for groups, player registration, courts and matchmaking.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from .api.dependencies import get_session_service
from .api.routes import router
from .clients.auth import AuthError
from .services.session_service import SessionService
from .services.exceptions import (
    Conflict,
    InsufficientPlayers,
    InvalidTeams,
    NotFound,
    NotGroupAdmin,
    SessionError,
    StoreFailure,
)
from .types import HealthDict
from . import config

logging.basicConfig(
    level=config.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


# Most specific first; the first isinstance match wins
ERROR_STATUS = [
    (NotFound, 404),
    (InsufficientPlayers, 422),
    (InvalidTeams, 400),
    (Conflict, 409),
    (NotGroupAdmin, 403),
    (StoreFailure, 503),
]


def status_for(error: SessionError) -> int:
    """HTTP status code for a session error."""
    for error_type, status in ERROR_STATUS:
        if isinstance(error, error_type):
            return status
    return 500


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    logger.info("Checking store...")
    service = app.dependency_overrides.get(get_session_service, get_session_service)()
    if service.health_check():
        logger.info("Store is reachable")
    else:
        logger.warning("Store health check failed; requests will report store failures")

    logger.info("App is ready.")

    yield

    logger.info("Shutting down...")
    service.db.close()


# Initialize FastAPI app with lifespan
app = FastAPI(
    title="Badminton Session Manager",
    description="Player registration, court allocation and doubles matchmaking",
    version="1.0.0",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in config.CORS_ORIGINS.split(',')],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)


@app.exception_handler(SessionError)
async def session_error_handler(request: Request, exc: SessionError) -> JSONResponse:
    """Map session errors to status codes."""
    status = status_for(exc)
    if status >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc}")
    return JSONResponse(
        status_code=status,
        content={"error": str(exc), "kind": type(exc).__name__},
    )


@app.exception_handler(AuthError)
async def auth_error_handler(request: Request, exc: AuthError) -> JSONResponse:
    """Identity provider failures are not the caller's fault."""
    logger.error(f"Auth failure on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=503,
        content={"error": str(exc), "kind": type(exc).__name__},
    )


@app.get("/health")
def health(service: SessionService = Depends(get_session_service)) -> HealthDict:
    """Health check endpoint."""
    healthy = service.health_check()
    return {
        "status": "ok" if healthy else "degraded",
        "database": type(service.db).__name__,
        "healthy": healthy,
    }


# Run with: uvicorn courtside.main:app --reload
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=config.HOST, port=config.PORT)
