"""
Authentication models.
"""

from typing import Optional
from pydantic import Field

from .api import ApiModel


class LoginRequest(ApiModel):
    """Credentials posted to /Account/Login."""

    user_name: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class LoginResponse(ApiModel):
    """Token issued by /Account/Login."""

    user_id: str
    user_name: str
    token: str
    expires_in: int = 0
    role: str = ""


class RegisterRequest(ApiModel):
    """Account registration payload posted to /Account/Register."""

    user_name: str = Field(..., min_length=4, max_length=100)
    password: str = Field(..., min_length=8)
    first_name: str = Field(..., min_length=2)
    last_name: str = Field(..., min_length=2)
    license_number: Optional[str] = Field(default=None)


class CurrentUser(ApiModel):
    """Identity kept by the auth store."""

    id: str
    user_name: str
    role: Optional[str] = None
