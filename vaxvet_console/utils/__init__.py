"""Utility modules for the VAXVET console."""

from .helpers import classify_stock, classify_vaccination, format_date, parse_date
from .validators import sanitize_string, validate_form, validate_national_id

__all__ = [
    "classify_stock",
    "classify_vaccination",
    "format_date",
    "parse_date",
    "sanitize_string",
    "validate_form",
    "validate_national_id",
]
