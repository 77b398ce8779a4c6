"""
Bearer token handling
Project: Invoicer (Estimates & Invoices backend)

Authentication itself lives outside this service: tokens are issued by
the account service and only verified here to obtain the caller's id.
"""

from datetime import datetime, timedelta, timezone

from fastapi import HTTPException, status
from jose import JWTError, jwt

from invoicer.core.config import settings
from invoicer.schemas.token import TokenPayload

# Claims that may carry the user id, in order of preference
USER_ID_CLAIMS = ("sub", "id", "userId")


def create_access_token(user_id: str) -> str:
    """
    Creates a signed access token for a user.

    Used by tooling and tests; production tokens come from the
    account service and share the same secret.

    Args:
        user_id: The user's id

    Returns:
        Encoded JWT
    """
    expire = datetime.now(timezone.utc) + timedelta(
        minutes=settings.access_token_expire_minutes
    )
    payload = {"sub": str(user_id), "exp": expire}
    return jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> TokenPayload:
    """
    Decodes and validates a JWT.

    Args:
        token: Encoded JWT

    Returns:
        TokenPayload with the user id in `sub`

    Raises:
        HTTPException 401: Invalid or expired token, or no user id claim
    """
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid or expired token: {e}",
            headers={"WWW-Authenticate": "Bearer"},
        )

    subject = next(
        (payload[claim] for claim in USER_ID_CLAIMS if payload.get(claim) is not None),
        None,
    )
    if subject is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token: user id not found",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return TokenPayload(sub=str(subject), exp=payload.get("exp"))


__all__ = [
    "create_access_token",
    "decode_token",
]
