"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting domain services
and infrastructure adapters into routes. Long-lived collaborators are
created once in the application lifespan and stored on app.state.
"""

from datetime import timedelta

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.config.settings import Settings, get_settings
from src.domain.accounts import AccountService
from src.domain.ports import AccountRepository, EmailSender, PasswordHasher, TokenIssuer


def get_repository(request: Request) -> AccountRepository:
    """Get the account repository from app state."""
    return request.app.state.repository


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer


def get_email_sender(request: Request) -> EmailSender:
    return request.app.state.email_sender


def get_account_service(
    repository: AccountRepository = Depends(get_repository),
    password_hasher: PasswordHasher = Depends(get_password_hasher),
    token_issuer: TokenIssuer = Depends(get_token_issuer),
    email_sender: EmailSender = Depends(get_email_sender),
    settings: Settings = Depends(get_settings),
) -> AccountService:
    """
    Create account service with injected dependencies.

    Wires together the repository, hasher, token issuer and email sender
    for the domain service.
    """
    return AccountService(
        repository=repository,
        password_hasher=password_hasher,
        token_issuer=token_issuer,
        email_sender=email_sender,
        code_ttl=timedelta(minutes=settings.code_ttl_minutes),
        require_verified_email=settings.require_verified_email,
    )


# Bearer security scheme for OpenAPI documentation
http_bearer = HTTPBearer(auto_error=False)


def get_current_account_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(http_bearer),
    token_issuer: TokenIssuer = Depends(get_token_issuer),
) -> str:
    """
    Authenticate the request from its Authorization: Bearer header.

    Returns:
        Account identifier asserted by the token

    Raises:
        HTTPException: 401 for a missing, malformed, expired or forged token
    """
    account_id = token_issuer.verify(credentials.credentials) if credentials else None
    if account_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return account_id
