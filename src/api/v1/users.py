"""
API v1 user routes.

Endpoints here require a bearer token issued by POST /auth/login.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from starlette.concurrency import run_in_threadpool

from src.api.dependencies import get_account_service, get_current_account_id
from src.api.models import AccountResponse, ErrorResponse
from src.domain.accounts import AccountService

router = APIRouter(prefix="/users", tags=["users"])


@router.get(
    "/me",
    response_model=AccountResponse,
    responses={401: {"model": ErrorResponse, "description": "Not authenticated"}},
    summary="Get the authenticated account",
)
async def read_current_account(
    account_id: str = Depends(get_current_account_id),
    service: AccountService = Depends(get_account_service),
) -> AccountResponse:
    account = await run_in_threadpool(service.get_account, account_id)
    if account is None:
        # Token outlived its account
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return AccountResponse(
        id=account.id,
        full_name=account.full_name,
        email=account.email,
        is_email_verified=account.is_email_verified,
    )
