"""
Vaccine, vaccine stock and vaccine record models.
"""

from datetime import date
from enum import Enum
from typing import Optional, Union
from pydantic import Field

from .api import ApiModel
from .pet import OwnerSummary


class VaccinationStatus(str, Enum):
    """Follow-up status of a vaccine record."""
    OVERDUE = "Overdue"
    DUE_SOON = "Due Soon"
    UP_TO_DATE = "Up to Date"
    NO_FOLLOW_UP = "No Follow-up"


class StockStatus(str, Enum):
    """Expiration status of a vaccine stock lot."""
    EXPIRED = "Expired"
    EXPIRING_SOON = "Expiring Soon"
    ACTIVE = "Active"


class Vaccine(ApiModel):
    """A vaccine product."""

    id: int = Field(..., description="Vaccine ID")
    name: str = Field(...)
    manufacturer: str = Field(default="")
    created_at: Optional[str] = Field(default=None)
    version: int = Field(default=0)


class VaccineCreate(ApiModel):
    """Payload for creating a vaccine."""

    name: str = Field(..., min_length=2, max_length=255)
    manufacturer: str = Field(..., min_length=2, max_length=255)


class VaccineUpdate(VaccineCreate):
    """Payload for updating a vaccine."""

    version: Optional[int] = Field(default=None)


class VaccineSearch(ApiModel):
    """Vaccine search criteria."""

    id: Optional[int] = None
    name: Optional[str] = None
    manufacturer: Optional[str] = None


class VaccineStock(ApiModel):
    """A purchased lot of a vaccine."""

    id: int = Field(..., description="Stock ID")
    vaccine_id: int = Field(...)
    stock_date: str = Field(..., description="ISO date the lot was stocked")
    serial_id: str = Field(...)
    quantity: int = Field(default=0)
    unit_price: float = Field(default=0.0)
    expiration_date: str = Field(..., description="ISO expiration date")
    created_at: Optional[str] = Field(default=None)
    version: int = Field(default=0)

    # Navigation
    vaccine: Optional[Vaccine] = Field(default=None)


class VaccineStockCreate(ApiModel):
    """Payload for creating a vaccine stock."""

    vaccine_id: int = Field(..., ge=1)
    stock_date: date
    serial_id: str = Field(..., min_length=3, max_length=255)
    quantity: int = Field(..., ge=1)
    unit_price: float = Field(..., ge=0.01)
    expiration_date: date


class VaccineStockUpdate(VaccineStockCreate):
    """Payload for updating a vaccine stock."""

    version: Optional[int] = Field(default=None)


class VaccineStockSearch(ApiModel):
    """Vaccine stock search criteria."""

    id: Optional[int] = None
    vaccine_id: Optional[int] = None
    serial_id: Optional[str] = None
    stock_date: Optional[date] = None
    expiration_date: Optional[date] = None


class PetSummary(ApiModel):
    """Pet fields embedded in a vaccine record."""

    id: int
    name: str
    owner: Optional[OwnerSummary] = None


class VeterinarianSummary(ApiModel):
    """Veterinarian fields embedded in a vaccine record."""

    id: Union[str, int]
    first_name: str = ""
    last_name: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class VaccineRecord(ApiModel):
    """A vaccination event."""

    id: int = Field(..., description="Record ID")
    pet_id: int = Field(...)
    vaccine_id: int = Field(...)
    veterinarian_id: str = Field(...)
    vaccine_stock_id: int = Field(...)
    vaccination_date: str = Field(...)
    next_due_date: Optional[str] = Field(default=None)
    created_at: Optional[str] = Field(default=None)
    version: int = Field(default=0)

    # Navigation
    pet: Optional[PetSummary] = Field(default=None)
    vaccine: Optional[Vaccine] = Field(default=None)
    veterinarian: Optional[VeterinarianSummary] = Field(default=None)
    vaccine_stock: Optional[VaccineStock] = Field(default=None)


class VaccineRecordCreate(ApiModel):
    """Payload for creating a vaccine record."""

    pet_id: int = Field(..., ge=1)
    vaccine_id: int = Field(..., ge=1)
    veterinarian_id: str = Field(..., min_length=1)
    vaccine_stock_id: int = Field(..., ge=1)
    vaccination_date: date
    next_due_date: Optional[date] = None


class VaccineRecordUpdate(VaccineRecordCreate):
    """Payload for updating a vaccine record."""

    version: Optional[int] = Field(default=None)


class VaccineRecordSearch(ApiModel):
    """Vaccine record search criteria."""

    id: Optional[int] = None
    pet_id: Optional[int] = None
    vaccine_id: Optional[int] = None
    veterinarian_id: Optional[str] = None
    vaccine_stock_id: Optional[int] = None
