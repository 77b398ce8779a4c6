"""
Dependency injection for the authenticated caller
Project: Invoicer (Estimates & Invoices backend)
"""

from typing import Annotated, Optional
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from invoicer.core.security import decode_token

# Extracts the token from the Authorization header
oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl="/api/v1/auth/login",
    auto_error=False,
)


async def get_current_user_id(
    token: Optional[str] = Depends(oauth2_scheme),
) -> UUID:
    """
    Dependency returning the id of the authenticated user.

    Args:
        token: JWT taken from the Authorization header

    Returns:
        The caller's user id

    Raises:
        HTTPException 401: Missing token, invalid token or malformed user id
    """
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access token required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token_data = decode_token(token)

    try:
        return UUID(token_data.sub)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid user id in token",
            headers={"WWW-Authenticate": "Bearer"},
        )


CurrentUserId = Annotated[UUID, Depends(get_current_user_id)]


__all__ = [
    "get_current_user_id",
    "oauth2_scheme",
    "CurrentUserId",
]
