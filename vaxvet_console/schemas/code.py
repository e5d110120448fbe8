"""
Code lookup models (species, breed and gender taxonomies).
"""

from enum import Enum
from typing import Optional
from pydantic import Field, model_validator

from .api import ApiModel


class CodeType(str, Enum):
    """Kinds of lookup codes."""
    SPECIES = "Species"
    BREED = "Breed"
    GENDER = "Gender"


class Code(ApiModel):
    """A typed lookup row."""

    id: int = Field(..., description="Code ID")
    code_type: str = Field(..., description="Species, Breed or Gender")
    code_name: str = Field(..., description="Display name")
    parent_id: Optional[int] = Field(default=None, description="Species ID a breed belongs to")
    version: Optional[int] = Field(default=None)
    created_at: Optional[str] = Field(default=None)


class CodeCreate(ApiModel):
    """Payload for creating a code."""

    code_type: CodeType
    code_name: str = Field(..., min_length=2)
    parent_id: Optional[int] = Field(default=None, ge=1)

    @model_validator(mode="after")
    def check_parent(self):
        """Breeds need a parent species; other codes never carry one."""
        if self.code_type == CodeType.BREED:
            if self.parent_id is None:
                raise ValueError("Parent species is required for breeds")
        else:
            self.parent_id = None
        return self


class CodeUpdate(CodeCreate):
    """Payload for updating a code."""

    version: Optional[int] = Field(default=None)


class CodeSearch(ApiModel):
    """Code search criteria."""

    id: Optional[int] = None
    code_type: Optional[str] = None
    code_name: Optional[str] = None
    parent_id: Optional[int] = None


class SelectOption(ApiModel):
    """A value/label pair served by the cached options endpoints."""

    value: int
    label: str
