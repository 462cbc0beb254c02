"""
Authentication gate.

Protected routes depend on ``authenticate_user``, which resolves the access
token from the Authorization header and rejects requests that do not map
to a logged-in account.
"""
from typing import Optional
from fastapi import Depends, Request, status
from arkiart.base_service import BaseService, ServiceError, error_details
from arkiart.auth.accounts import AccountDirectory, get_account_directory

base_service = BaseService("auth.gate")

BEARER_PREFIX = "bearer "


def extract_token(request: Request) -> Optional[str]:
    """
    Read the access token from the Authorization header.

    Accepts both a raw token and the ``Bearer <token>`` form.
    """
    header = request.headers.get("Authorization")
    if not header:
        return None
    header = header.strip()
    if header.lower().startswith(BEARER_PREFIX):
        header = header[len(BEARER_PREFIX):].strip()
    return header or None


async def authenticate_user(
    request: Request,
    directory: AccountDirectory = Depends(get_account_directory)
) -> str:
    """
    Dependency that lets a request through only with a live access token.

    Returns:
        The presented access token

    Raises:
        ServiceError: 403 if no account holds the token, 500 if the lookup fails
    """
    token = extract_token(request)
    try:
        account = await directory.find_by_token(token)
    except Exception as e:
        base_service.log_error(e, context="Authenticate user")
        raise ServiceError(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message="Internal server error",
            error=error_details(e),
        )

    if account is None:
        base_service.logger.warning("Unauthorized access attempt.")
        raise ServiceError(
            status_code=status.HTTP_403_FORBIDDEN,
            message="Please log in",
        )

    return token
