"""FastAPI application factory."""

import base64
import logging
import secrets
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from config.settings import settings
from src.api.routes import router
from src.calculators.registry import list_rule_sets

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup: configure logging and check the bundled rule sets load."""
    logging.basicConfig(level=settings.log_level)
    logger.info("Starting up...")

    rule_sets = list_rule_sets()
    logger.info("Found %d rule sets in %s", len(rule_sets), settings.resolved_rules_dir)

    yield

    logger.info("Shutting down...")


UNAUTHORIZED = Response(
    content="Unauthorized",
    status_code=401,
    headers={"WWW-Authenticate": "Basic"},
)


class BasicAuthMiddleware(BaseHTTPMiddleware):
    """Enforce HTTP Basic Auth on all requests."""

    async def dispatch(self, request: Request, call_next):  # type: ignore[override]
        auth = request.headers.get("Authorization")
        if auth and auth.startswith("Basic "):
            try:
                decoded = base64.b64decode(auth[6:]).decode()
                username, password = decoded.split(":", 1)
            except ValueError:
                return UNAUTHORIZED
            if secrets.compare_digest(
                username.encode(), settings.auth_username.encode()
            ) and secrets.compare_digest(password.encode(), settings.auth_password.encode()):
                return await call_next(request)
        return UNAUTHORIZED


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(title="Tax & Mortgage Calculators", lifespan=lifespan)
    app.add_middleware(BasicAuthMiddleware)
    app.include_router(router)
    return app
