"""
Pydantic models for login and session data.
"""

from typing import Literal, Optional

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    username: str = Field(..., examples=["acme"])
    password: str = Field(..., examples=["strongpassword"])
    type: Literal["admin", "company"] = Field(..., examples=["company"])


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class SessionUser(BaseModel):
    """Claims of the current session as returned by ``GET /auth/session``."""

    id: str
    name: Optional[str] = None
    image: Optional[str] = None
    type: str
