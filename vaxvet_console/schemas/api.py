"""
Shared wire-format models for the clinic REST API.
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base model mapping snake_case attributes to the API's camelCase JSON."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_payload(self) -> Dict[str, Any]:
        """Serialize to a request body, dropping unset optional fields."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class FieldError(ApiModel):
    """A single field-level validation error reported by the server."""

    field: str
    message: str


class ApiResponse(ApiModel):
    """The `{success, data, message}` envelope some endpoints wrap results in."""

    success: bool = Field(default=True)
    message: Optional[str] = Field(default=None)
    data: Optional[Any] = Field(default=None)
    errors: List[FieldError] = Field(default_factory=list)
    timestamp: Optional[str] = Field(default=None)
