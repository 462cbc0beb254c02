"""
Authentication router.

This module provides the FastAPI router for:
- Registration
- Login
- Logout (protected by the authentication gate)
"""
from typing import Optional
from fastapi import APIRouter, Depends, status

from arkiart.base_service import BaseService, error_details
from arkiart.auth.accounts import Credentials, AccountDirectory, get_account_directory
from arkiart.auth.middleware import authenticate_user
from arkiart.auth.models import PASSWORD_MIN_LENGTH, hash_password

# Create router
router = APIRouter(tags=["auth"])

# Create service instance
base_service = BaseService("auth")


def internal_error(e: Exception):
    return base_service.failure(
        "Internal server error",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        response="Internal server error",
        error=error_details(e),
    )


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    credentials: Optional[Credentials] = None,
    directory: AccountDirectory = Depends(get_account_directory)
):
    """
    Register a new account and log it in.

    Args:
        credentials: Username and password
        directory: Account directory

    Returns:
        Envelope with username, id and access token
    """
    credentials = credentials or Credentials()
    password = credentials.password

    # Password checks run before anything is written
    if not password:
        return base_service.failure(
            "Password is required",
            status_code=status.HTTP_400_BAD_REQUEST,
            response="Password is required",
        )
    if len(password) < PASSWORD_MIN_LENGTH:
        message = f"Password needs to be at least {PASSWORD_MIN_LENGTH} characters long"
        return base_service.failure(
            message,
            status_code=status.HTTP_400_BAD_REQUEST,
            response=message,
        )

    try:
        account = await directory.create(credentials.username, hash_password(password))
    except Exception as e:
        # Duplicate usernames, invalid usernames and write failures look the same to clients
        base_service.log_error(e, context="Account registration")
        return base_service.failure(
            "Could not create user",
            status_code=status.HTTP_400_BAD_REQUEST,
            response="Could not create user",
            error=error_details(e),
        )

    base_service.log_event("user.registered", {"username": account.username, "id": account.id})
    return base_service.envelope(
        response=account.to_public(),
        message="User created successfully",
        status_code=status.HTTP_201_CREATED,
    )


@router.post("/login")
async def login(
    credentials: Optional[Credentials] = None,
    directory: AccountDirectory = Depends(get_account_directory)
):
    """
    Check credentials and return the account's access token.

    Unknown usernames and wrong passwords get the same response.
    """
    credentials = credentials or Credentials()
    try:
        account = await directory.find_by_username(credentials.username)

        if account is None or not account.verify_password(credentials.password):
            base_service.log_event("user.login.failed", {"username": credentials.username})
            return base_service.failure(
                "Credentials do not match",
                status_code=status.HTTP_400_BAD_REQUEST,
                response="Credentials do not match",
            )

        # A logged-out account gets a new token; a live token is never replaced
        if not account.is_logged_in:
            await directory.issue_token(account)
    except Exception as e:
        base_service.log_error(e, context="Account login")
        return internal_error(e)

    base_service.log_event("user.login", {"username": account.username, "id": account.id})
    return base_service.envelope(
        response=account.to_public(),
        message="User logged in successfully",
    )


@router.post("/logout")
async def logout(
    token: str = Depends(authenticate_user),
    directory: AccountDirectory = Depends(get_account_directory)
):
    """
    Clear the access token of the authenticated account.

    The account is looked up again by token; a concurrent logout may have
    cleared it since the gate ran.
    """
    try:
        account = await directory.find_by_token(token)
        if account is None:
            return base_service.failure(
                "Could not find user",
                status_code=status.HTTP_400_BAD_REQUEST,
                response="Could not find user",
            )

        await directory.clear_token(account)
    except Exception as e:
        base_service.log_error(e, context="Account logout")
        return internal_error(e)

    base_service.log_event("user.logout", {"username": account.username, "id": account.id})
    return base_service.envelope(message="User logged out successfully")
