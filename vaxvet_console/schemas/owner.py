"""
Owner data models.
"""

from typing import Optional
from pydantic import Field

from .api import ApiModel


class Owner(ApiModel):
    """A pet owner as returned by the API."""

    id: int = Field(..., description="Owner ID")
    first_name: str = Field(...)
    last_name: str = Field(...)
    national_id: str = Field(..., alias="tcKimlikNo", description="11-digit national ID")
    address: str = Field(default="")
    phone_number: str = Field(default="")
    emergency_person: Optional[str] = Field(default=None)
    emergency_phone: Optional[str] = Field(default=None)
    created_at: Optional[str] = Field(default=None)
    version: int = Field(default=0)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class OwnerCreate(ApiModel):
    """Payload for creating an owner."""

    first_name: str = Field(..., min_length=2)
    last_name: str = Field(..., min_length=2)
    national_id: str = Field(..., alias="tcKimlikNo", pattern=r"^[0-9]{11}$")
    address: str = Field(..., min_length=10)
    phone_number: str = Field(..., pattern=r"^[0-9]{10,11}$")
    emergency_person: Optional[str] = Field(default=None)
    emergency_phone: Optional[str] = Field(default=None, pattern=r"^[0-9]{10,11}$")


class OwnerUpdate(OwnerCreate):
    """Payload for updating an owner."""

    version: Optional[int] = Field(default=None)


class OwnerSearch(ApiModel):
    """Owner search criteria."""

    id: Optional[int] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    national_id: Optional[str] = Field(default=None, alias="tcKimlikNo")
    phone_number: Optional[str] = None
