"""
Pydantic schemas for bearer tokens
Project: Invoicer (Estimates & Invoices backend)
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class TokenPayload(BaseModel):
    """
    Claims read from a bearer token.

    Attributes:
        sub: Subject - the user id as a string
        exp: Expiration time (absent for tokens without expiry)
    """

    sub: str = Field(..., description="User id")
    exp: Optional[datetime] = Field(None, description="Expiration time")


__all__ = [
    "TokenPayload",
]
