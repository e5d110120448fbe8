"""
Pet data models.
"""

from enum import IntEnum
from typing import Optional
from pydantic import Field

from .api import ApiModel
from .code import Code


class Gender(IntEnum):
    """Pet gender as encoded by the API."""
    FEMALE = 1
    MALE = 2

    @property
    def label(self) -> str:
        return self.name.capitalize()


class OwnerSummary(ApiModel):
    """Owner fields embedded in pet and record responses."""

    id: Optional[int] = None
    first_name: str = ""
    last_name: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class Pet(ApiModel):
    """A pet as returned by the API."""

    id: int = Field(..., description="Pet ID")
    name: str = Field(...)
    microchip_number: str = Field(default="")
    pet_passport_number: Optional[str] = Field(default=None)
    gender: int = Field(default=Gender.FEMALE)
    color: Optional[str] = Field(default=None)
    species_id: int = Field(default=0)
    breed_id: int = Field(default=0)
    owner_id: int = Field(default=0)
    created_at: Optional[str] = Field(default=None)
    version: int = Field(default=0)

    # Navigation properties
    species: Optional[Code] = Field(default=None)
    breed: Optional[Code] = Field(default=None)
    owner: Optional[OwnerSummary] = Field(default=None)


class PetCreate(ApiModel):
    """Payload for creating a pet."""

    name: str = Field(..., min_length=2)
    microchip_number: str = Field(..., pattern=r"^[0-9]{15}$")
    pet_passport_number: Optional[str] = Field(default=None)
    gender: int = Field(..., ge=1, le=2, description="1 = Female, 2 = Male")
    color: Optional[str] = Field(default=None)
    species_id: int = Field(..., ge=1)
    breed_id: int = Field(..., ge=1)
    owner_id: int = Field(..., ge=1)


class PetUpdate(PetCreate):
    """Payload for updating a pet."""

    version: Optional[int] = Field(default=None)


class PetSearch(ApiModel):
    """Pet search criteria."""

    id: Optional[int] = None
    name: Optional[str] = None
    owner_id: Optional[int] = None
    species_id: Optional[int] = None
    breed_id: Optional[int] = None
    microchip_number: Optional[str] = None
