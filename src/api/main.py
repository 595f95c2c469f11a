"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures middleware, routes, and lifespan events.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from psycopg_pool import ConnectionPool

from src.adapters.repository.memory import InMemoryAccountRepository
from src.adapters.repository.postgres import PostgresAccountRepository, run_migrations
from src.adapters.smtp.console import ConsoleEmailSender
from src.adapters.smtp.retrying import RetryingEmailSender, RetryPolicy
from src.adapters.smtp.smtp import SmtpEmailSender
from src.adapters.tokens.jwt_issuer import JwtTokenIssuer
from src.api.v1 import router as v1_router
from src.config.logging import configure_logging
from src.config.settings import Settings, get_settings
from src.domain.passwords import BcryptPasswordHasher
from src.domain.ports import EmailSender

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {"name": "auth", "description": "Register, verify email and log in"},
    {"name": "users", "description": "Endpoints for the authenticated account"},
]


def build_email_sender(settings: Settings) -> EmailSender:
    """Select the email backend; SMTP delivery is wrapped with retries."""
    if settings.email_backend == "console":
        return ConsoleEmailSender()

    smtp_sender = SmtpEmailSender(
        host=settings.smtp_host,
        port=settings.smtp_port,
        username=settings.smtp_username,
        password=settings.smtp_password,
        from_email=settings.smtp_from_email,
        use_tls=settings.smtp_use_tls,
        timeout=settings.smtp_timeout_seconds,
    )
    policy = RetryPolicy(
        max_attempts=settings.notifier_max_attempts,
        initial_delay=settings.notifier_backoff_seconds,
        max_delay=settings.notifier_max_backoff_seconds,
    )
    return RetryingEmailSender(smtp_sender, policy)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Creates database connection pool and runs migrations (postgres backend)
    - Builds the password hasher, token issuer and email sender once
    - Closes connection pool on shutdown
    """
    settings = get_settings()

    logger.info("Starting application...")

    pool = None
    if settings.storage_backend == "postgres":
        logger.info("Connecting to database...")
        pool = ConnectionPool(
            conninfo=settings.database_url,
            min_size=settings.pool_min_size,
            max_size=settings.pool_max_size,
            open=True,
        )

        logger.info("Running database migrations...")
        run_migrations(pool)
        app.state.repository = PostgresAccountRepository(pool)
    else:
        logger.warning("Using in-memory account storage; data is lost on restart")
        app.state.repository = InMemoryAccountRepository()

    app.state.pool = pool
    app.state.password_hasher = BcryptPasswordHasher(rounds=settings.bcrypt_cost)
    app.state.token_issuer = JwtTokenIssuer(
        secret_key=settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
        expire_minutes=settings.access_token_expire_minutes,
    )
    app.state.email_sender = build_email_sender(settings)

    logger.info("Application startup complete")

    yield

    # Shutdown
    logger.info("Shutting down application...")
    if pool is not None:
        pool.close()
        logger.info("Database connection pool closed")


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)

    application = FastAPI(
        title="Account Credential Service",
        description="Registration, email verification and bearer-token login",
        version="0.1.0",
        openapi_tags=tags_metadata,
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type", "Authorization"],
    )

    application.include_router(v1_router, prefix=f"{settings.api_prefix}/v1")
    application.add_api_route("/health", health_check, methods=["GET"])
    return application


async def health_check(request: Request) -> dict[str, str]:
    """
    Health check endpoint with database validation.

    Returns 200 OK if application and database are healthy.
    Raises exception if database connection fails.
    """
    pool = getattr(request.app.state, "pool", None)
    if pool is not None:
        with pool.connection() as conn:
            conn.execute("SELECT 1")

    return {"status": "healthy"}


app = create_app()
