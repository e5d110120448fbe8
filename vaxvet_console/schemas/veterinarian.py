"""
Veterinarian account models.
"""

from typing import Optional
from pydantic import Field

from .api import ApiModel


class Veterinarian(ApiModel):
    """A veterinarian user account."""

    id: str = Field(..., description="User ID")
    user_name: str = Field(...)
    first_name: str = Field(default="")
    last_name: str = Field(default="")
    license_number: Optional[str] = Field(default=None)
    created_at: Optional[str] = Field(default=None)
    version: int = Field(default=0)
    is_active: Optional[bool] = Field(default=None)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class VeterinarianUpdate(ApiModel):
    """Payload for updating a veterinarian."""

    first_name: str = Field(..., min_length=2)
    last_name: str = Field(..., min_length=2)
    license_number: Optional[str] = Field(default=None)
    version: int = Field(default=0)


class VeterinarianSearch(ApiModel):
    """Veterinarian search criteria."""

    user_name: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    license_number: Optional[str] = None
