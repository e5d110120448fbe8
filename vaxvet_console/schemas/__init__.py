"""Data schemas for the VAXVET console."""

from .api import ApiModel, ApiResponse
from .auth import CurrentUser, LoginRequest, LoginResponse, RegisterRequest
from .code import Code, CodeCreate, CodeSearch, CodeType, CodeUpdate, SelectOption
from .owner import Owner, OwnerCreate, OwnerSearch, OwnerUpdate
from .pet import Gender, Pet, PetCreate, PetSearch, PetUpdate
from .vaccine import (
    StockStatus,
    VaccinationStatus,
    Vaccine,
    VaccineCreate,
    VaccineRecord,
    VaccineRecordCreate,
    VaccineRecordSearch,
    VaccineRecordUpdate,
    VaccineSearch,
    VaccineStock,
    VaccineStockCreate,
    VaccineStockSearch,
    VaccineStockUpdate,
    VaccineUpdate,
)
from .veterinarian import Veterinarian, VeterinarianSearch, VeterinarianUpdate

__all__ = [
    "ApiModel",
    "ApiResponse",
    "CurrentUser",
    "LoginRequest",
    "LoginResponse",
    "RegisterRequest",
    "Code",
    "CodeCreate",
    "CodeSearch",
    "CodeType",
    "CodeUpdate",
    "SelectOption",
    "Owner",
    "OwnerCreate",
    "OwnerSearch",
    "OwnerUpdate",
    "Gender",
    "Pet",
    "PetCreate",
    "PetSearch",
    "PetUpdate",
    "StockStatus",
    "VaccinationStatus",
    "Vaccine",
    "VaccineCreate",
    "VaccineRecord",
    "VaccineRecordCreate",
    "VaccineRecordSearch",
    "VaccineRecordUpdate",
    "VaccineSearch",
    "VaccineStock",
    "VaccineStockCreate",
    "VaccineStockSearch",
    "VaccineStockUpdate",
    "VaccineUpdate",
    "Veterinarian",
    "VeterinarianSearch",
    "VeterinarianUpdate",
]
