import logging
from datetime import timedelta
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .auth import PasswordHasher
from .config import Settings, get_settings
from .exceptions import AuthServiceError
from .gate import AuthGate
from .routes import access, health
from .store import build_user_store
from .tokens import TokenIssuer, TokenVerifier
from .utils.event_logger import configure_logging

logger = logging.getLogger(__name__)


def build_gate(settings: Settings) -> AuthGate:
    if not settings.JWT_SECRET:
        logger.warning("JWT_SECRET is not set; every login will fail until it is configured")

    lifetime = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    return AuthGate(
        store=build_user_store(settings),
        hasher=PasswordHasher(rounds=settings.PASSWORD_HASH_ROUNDS),
        issuer=TokenIssuer(settings.JWT_SECRET, lifetime=lifetime, algorithm=settings.JWT_ALGORITHM),
        verifier=TokenVerifier(settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM),
    )


def create_app(settings: Optional[Settings] = None, gate: Optional[AuthGate] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Configuration; read from the environment when omitted
        gate: Pre-built gate, mainly for tests; built from settings when omitted
    """
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL, settings.LOG_DIR)

    app = FastAPI(title="Stateless Auth Service", version="1.0.0")
    app.state.gate = gate or build_gate(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(AuthServiceError)
    async def auth_error_handler(request: Request, exc: AuthServiceError):
        if exc.status_code >= 500:
            logger.error("Internal error on %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"detail": "Invalid request body"})

    app.include_router(access.router)
    app.include_router(health.router)
    return app


app = create_app()
