"""
Form definitions for every create/edit screen.

Field names are the API's camelCase names, so a validated form maps straight
onto its request model.
"""

from datetime import date, datetime
from typing import Any, Dict, Mapping, Optional, Tuple, Type, TypeVar

from pydantic import ValidationError
from loguru import logger

from .schemas.api import ApiModel
from .schemas.code import CodeType
from .utils.validators import (
    MICROCHIP_PATTERN,
    NATIONAL_ID_PATTERN,
    PASSWORD_PATTERN,
    PHONE_PATTERN,
    FieldRule,
    sanitize_string,
    validate_form,
)

ModelT = TypeVar("ModelT", bound=ApiModel)

# Hidden field asking a form to re-render (dependent dropdowns) without submitting
REFRESH_FIELD = "_refresh"


def _min2(message: str) -> FieldRule:
    return FieldRule(required=message, min_length=(2, "Minimum 2 characters"))


OWNER_RULES: Dict[str, FieldRule] = {
    "firstName": _min2("First name is required"),
    "lastName": _min2("Last name is required"),
    "tcKimlikNo": FieldRule(
        required="TC Kimlik No is required",
        pattern=(NATIONAL_ID_PATTERN, "TC Kimlik No must be 11 digits"),
    ),
    "phoneNumber": FieldRule(
        required="Phone number is required",
        pattern=(PHONE_PATTERN, "Phone must be 10-11 digits"),
    ),
    "address": FieldRule(
        required="Address is required",
        min_length=(10, "Minimum 10 characters"),
    ),
    "emergencyPhone": FieldRule(pattern=(PHONE_PATTERN, "Phone must be 10-11 digits")),
}

PET_RULES: Dict[str, FieldRule] = {
    "name": _min2("Pet name is required"),
    "microchipNumber": FieldRule(
        required="Microchip number is required",
        pattern=(MICROCHIP_PATTERN, "Microchip must be 15 digits"),
    ),
    "gender": FieldRule(required="Gender is required"),
    "ownerId": FieldRule(required="Owner is required", min_value=(1, "Please select an owner")),
    "speciesId": FieldRule(required="Species is required", min_value=(1, "Please select a species")),
    "breedId": FieldRule(required="Breed is required", min_value=(1, "Please select a breed")),
}

CODE_RULES: Dict[str, FieldRule] = {
    "codeType": FieldRule(required="Code type is required"),
    "codeName": _min2("Code name is required"),
}

BREED_PARENT_RULE = FieldRule(
    required="Parent species is required for breeds",
    min_value=(1, "Parent species is required for breeds"),
)

VACCINE_RULES: Dict[str, FieldRule] = {
    "name": FieldRule(
        required="Vaccine name is required",
        min_length=(2, "Minimum 2 characters"),
        max_length=(255, "Maximum 255 characters"),
    ),
    "manufacturer": FieldRule(
        required="Manufacturer is required",
        min_length=(2, "Minimum 2 characters"),
        max_length=(255, "Maximum 255 characters"),
    ),
}

VACCINE_STOCK_RULES: Dict[str, FieldRule] = {
    "vaccineId": FieldRule(required="Vaccine is required", min_value=(1, "Please select a vaccine")),
    "serialId": FieldRule(
        required="Serial ID is required",
        min_length=(3, "Minimum 3 characters"),
        max_length=(255, "Maximum 255 characters"),
    ),
    "quantity": FieldRule(required="Quantity is required", min_value=(1, "Minimum quantity is 1")),
    "unitPrice": FieldRule(required="Unit price is required", min_value=(0.01, "Minimum price is 0.01")),
    "stockDate": FieldRule(required="Stock date is required"),
    "expirationDate": FieldRule(required="Expiration date is required"),
}

VACCINE_RECORD_RULES: Dict[str, FieldRule] = {
    "petId": FieldRule(required="Pet is required", min_value=(1, "Please select a pet")),
    "vaccineId": FieldRule(required="Vaccine is required", min_value=(1, "Please select a vaccine")),
    "veterinarianId": FieldRule(required="Veterinarian is required"),
    "vaccineStockId": FieldRule(
        required="Vaccine stock is required",
        min_value=(1, "Please select a vaccine stock"),
    ),
    "vaccinationDate": FieldRule(required="Vaccination date is required"),
}

VETERINARIAN_RULES: Dict[str, FieldRule] = {
    "firstName": _min2("First name is required"),
    "lastName": _min2("Last name is required"),
}

LOGIN_RULES: Dict[str, FieldRule] = {
    "userName": FieldRule(required="Username is required"),
    "password": FieldRule(required="Password is required"),
}

REGISTER_RULES: Dict[str, FieldRule] = {
    "userName": FieldRule(
        required="Username is required",
        min_length=(4, "Username must be at least 4 characters"),
        max_length=(100, "Username must not exceed 100 characters"),
    ),
    "firstName": FieldRule(
        required="First name is required",
        min_length=(2, "First name must be at least 2 characters"),
    ),
    "lastName": FieldRule(
        required="Last name is required",
        min_length=(2, "Last name must be at least 2 characters"),
    ),
    "password": FieldRule(
        required="Password is required",
        min_length=(8, "Password must be at least 8 characters"),
        pattern=(
            PASSWORD_PATTERN,
            "Password must contain uppercase, lowercase, number and special character",
        ),
    ),
    "confirmPassword": FieldRule(
        required="Please confirm your password",
        matches=("password", "Passwords do not match"),
    ),
}


def code_rules(data: Mapping[str, Any]) -> Dict[str, FieldRule]:
    """Code form rules; breeds additionally need a parent species."""
    rules = dict(CODE_RULES)
    if data.get("codeType") == CodeType.BREED.value:
        rules["parentId"] = BREED_PARENT_RULE
    return rules


def form_to_dict(form: Mapping[str, Any]) -> Dict[str, str]:
    """Flatten submitted form data to sanitized strings."""
    return {key: sanitize_string(value) for key, value in form.items()}


def is_refresh(form: Mapping[str, Any]) -> bool:
    return bool(form.get(REFRESH_FIELD))


def build_model(
    model: Type[ModelT],
    data: Mapping[str, Any],
) -> Tuple[Optional[ModelT], Dict[str, str]]:
    """
    Build a request model from validated form data.

    Empty strings become None so optional fields are left out of the payload.

    Returns:
        Tuple of (model or None, errors keyed by field alias)
    """
    values = {
        key: (value if value != "" else None)
        for key, value in data.items()
        if not key.startswith("_")
    }
    try:
        return model.model_validate(values), {}
    except ValidationError as e:
        logger.warning(f"{model.__name__} payload rejected: {e.error_count()} error(s)")
        errors: Dict[str, str] = {}
        for error in e.errors():
            field_name = str(error["loc"][0]) if error["loc"] else "__all__"
            errors.setdefault(field_name, error["msg"].removeprefix("Value error, "))
        return None, errors


def process_form(
    model: Type[ModelT],
    data: Mapping[str, Any],
    rules: Mapping[str, Any],
) -> Tuple[Optional[ModelT], Dict[str, str]]:
    """
    Run field rules, then build the request model.

    Returns:
        Tuple of (model or None, errors keyed by field name)
    """
    is_valid, errors = validate_form(data, rules)
    if not is_valid:
        return None, errors
    return build_model(model, data)


def build_search(model: Type[ModelT], data: Mapping[str, Any]) -> ModelT:
    """
    Build search criteria from a search form, ignoring unparseable fields.
    """
    criteria, errors = build_model(model, data)
    if criteria is not None:
        return criteria

    cleaned = {key: value for key, value in data.items() if key not in errors}
    criteria, _ = build_model(model, cleaned)
    return criteria if criteria is not None else model()


def to_date_input(value: Any) -> str:
    """Format an API date/datetime value for an `<input type="date">`."""
    if value is None or value == "":
        return ""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value)[:10]


def model_to_form(model: Optional[ApiModel], date_fields: Tuple[str, ...] = ()) -> Dict[str, str]:
    """
    Pre-populate form values from an entity.

    Args:
        model: Entity fetched from the API
        date_fields: Aliases of fields to render as YYYY-MM-DD

    Returns:
        Form values keyed by field alias
    """
    if model is None:
        return {}

    values: Dict[str, str] = {}
    for key, value in model.model_dump(by_alias=True, mode="json").items():
        if isinstance(value, (dict, list)):
            continue
        if key in date_fields:
            values[key] = to_date_input(value)
        elif value is None:
            values[key] = ""
        else:
            values[key] = str(value)
    return values
