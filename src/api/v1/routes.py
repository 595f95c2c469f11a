"""
API v1 auth routes.

Defines REST endpoints for registration, email verification, code reissue
and login. Service calls run in the threadpool so bcrypt and SMTP never
block the event loop.
"""

from enum import Enum

from fastapi import APIRouter, Depends, HTTPException, status
from starlette.concurrency import run_in_threadpool

from src.api.dependencies import get_account_service
from src.api.models import (
    ErrorResponse,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RegisterRequest,
    ResendCodeRequest,
    VerifyEmailRequest,
)
from src.domain.accounts import AccountService
from src.domain.ports import LoginStatus, RegisterResult, ResendResult, VerifyResult

router = APIRouter(prefix="/auth", tags=["auth"])

INTERNAL_ERROR_DETAIL = "Something went wrong. Please try again later."
DELIVERY_FAILED_DETAIL = (
    "The verification code could not be sent. Please request a new code."
)

_REGISTER_ERRORS: dict[Enum, tuple[int, str]] = {
    RegisterResult.ALREADY_EXISTS: (status.HTTP_409_CONFLICT, "Email is already registered"),
    RegisterResult.DELIVERY_FAILED: (status.HTTP_503_SERVICE_UNAVAILABLE, DELIVERY_FAILED_DETAIL),
    RegisterResult.INTERNAL_ERROR: (status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_DETAIL),
}

_VERIFY_ERRORS: dict[Enum, tuple[int, str]] = {
    VerifyResult.NOT_FOUND: (status.HTTP_404_NOT_FOUND, "User not found"),
    VerifyResult.INVALID_CODE: (status.HTTP_400_BAD_REQUEST, "Verification code is invalid"),
    VerifyResult.EXPIRED: (status.HTTP_400_BAD_REQUEST, "Verification code has expired"),
    VerifyResult.ALREADY_VERIFIED: (status.HTTP_409_CONFLICT, "Email is already verified"),
    VerifyResult.INTERNAL_ERROR: (status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_DETAIL),
}

_RESEND_ERRORS: dict[Enum, tuple[int, str]] = {
    ResendResult.NOT_FOUND: (status.HTTP_404_NOT_FOUND, "User not found"),
    ResendResult.ALREADY_VERIFIED: (status.HTTP_409_CONFLICT, "Email is already verified"),
    ResendResult.DELIVERY_FAILED: (status.HTTP_503_SERVICE_UNAVAILABLE, DELIVERY_FAILED_DETAIL),
    ResendResult.INTERNAL_ERROR: (status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_DETAIL),
}


def _raise_for(errors: dict[Enum, tuple[int, str]], result: Enum) -> None:
    status_code, detail = errors[result]
    raise HTTPException(status_code=status_code, detail=detail)


@router.post(
    "/register",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        409: {"model": ErrorResponse, "description": "Email already registered"},
        422: {"description": "Validation error"},
        503: {"model": ErrorResponse, "description": "Verification email could not be sent"},
    },
    summary="Register a new user",
    description="Submit full name, email and password to create an account. "
    "A 6-digit verification code valid for 10 minutes is sent to the email.",
)
async def register(
    request_data: RegisterRequest,
    service: AccountService = Depends(get_account_service),
) -> MessageResponse:
    """
    Register a new user and send verification code.

    - **fullName**: Display name
    - **email**: Valid email address to register
    - **password**: Password (minimum 6 characters, at most 72 bytes)
    """
    result = await run_in_threadpool(
        service.register, request_data.full_name, request_data.email, request_data.password
    )
    if result != RegisterResult.SUCCESS:
        _raise_for(_REGISTER_ERRORS, result)
    return MessageResponse(message="Registration successful! Check your email for the code.")


@router.post(
    "/verify-email",
    response_model=MessageResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid or expired code"},
        404: {"model": ErrorResponse, "description": "User not found"},
        409: {"model": ErrorResponse, "description": "Email already verified"},
        422: {"description": "Validation error"},
    },
    summary="Verify email with the emailed code",
)
async def verify_email(
    request_data: VerifyEmailRequest,
    service: AccountService = Depends(get_account_service),
) -> MessageResponse:
    """
    Verify email ownership.

    - **email**: Registered email address
    - **verificationCode**: 6-digit code from the verification email
    """
    result = await run_in_threadpool(
        service.verify_email, request_data.email, request_data.verification_code
    )
    if result != VerifyResult.SUCCESS:
        _raise_for(_VERIFY_ERRORS, result)
    return MessageResponse(message="Email verified successfully")


@router.post(
    "/resend-code",
    response_model=MessageResponse,
    responses={
        404: {"model": ErrorResponse, "description": "User not found"},
        409: {"model": ErrorResponse, "description": "Email already verified"},
        503: {"model": ErrorResponse, "description": "Verification email could not be sent"},
    },
    summary="Send a new verification code",
)
async def resend_code(
    request_data: ResendCodeRequest,
    service: AccountService = Depends(get_account_service),
) -> MessageResponse:
    """Issue a fresh verification code for an unverified account."""
    result = await run_in_threadpool(service.resend_verification_code, request_data.email)
    if result != ResendResult.SUCCESS:
        _raise_for(_RESEND_ERRORS, result)
    return MessageResponse(message="A new verification code has been sent.")


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
        403: {"model": ErrorResponse, "description": "Email not verified"},
        422: {"description": "Validation error"},
    },
    summary="Log in and receive a bearer token",
)
async def login(
    request_data: LoginRequest,
    service: AccountService = Depends(get_account_service),
) -> LoginResponse:
    """
    Authenticate with email and password.

    Unknown email and wrong password return the identical 401 response.
    """
    result = await run_in_threadpool(service.login, request_data.email, request_data.password)

    if result.status == LoginStatus.SUCCESS:
        return LoginResponse(access_token=result.access_token)
    if result.status == LoginStatus.EMAIL_NOT_VERIFIED:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Email address has not been verified",
        )
    if result.status == LoginStatus.INTERNAL_ERROR:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=INTERNAL_ERROR_DETAIL,
        )
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid credentials",
    )
