"""
Helper utilities for the VAXVET console.
"""

from datetime import date, datetime
from typing import Optional, Union

from dateutil import parser as date_parser
from loguru import logger

from ..schemas.pet import Gender
from ..schemas.vaccine import StockStatus, VaccinationStatus

DateLike = Union[str, date, datetime, None]


def parse_date(value: DateLike) -> Optional[date]:
    """
    Parse an API date or datetime value to a calendar date.

    Args:
        value: ISO string, date or datetime

    Returns:
        The date, or None if the value is empty or unparseable
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    try:
        return date_parser.isoparse(value).date()
    except (ValueError, OverflowError):
        try:
            return date_parser.parse(value).date()
        except (ValueError, OverflowError):
            logger.warning(f"Could not parse date: {value!r}")
            return None


def days_until(value: DateLike, today: Optional[date] = None) -> Optional[int]:
    """Whole days from today until the given date (negative if past)."""
    target = parse_date(value)
    if target is None:
        return None
    today = today or date.today()
    return (target - today).days


def classify_vaccination(
    next_due_date: DateLike,
    today: Optional[date] = None,
    due_soon_days: int = 30,
) -> VaccinationStatus:
    """
    Classify a vaccine record by its next due date.

    Args:
        next_due_date: Record's nextDueDate, possibly absent
        today: Reference date (defaults to today)
        due_soon_days: Window in which an upcoming date is "Due Soon"

    Returns:
        Overdue if the date is past, Due Soon within the window,
        Up to Date beyond it, No Follow-up when there is no date
    """
    remaining = days_until(next_due_date, today)
    if remaining is None:
        return VaccinationStatus.NO_FOLLOW_UP
    if remaining < 0:
        return VaccinationStatus.OVERDUE
    if remaining <= due_soon_days:
        return VaccinationStatus.DUE_SOON
    return VaccinationStatus.UP_TO_DATE


def classify_stock(
    expiration_date: DateLike,
    today: Optional[date] = None,
    expiring_soon_days: int = 30,
) -> StockStatus:
    """Classify a vaccine stock lot by its expiration date."""
    remaining = days_until(expiration_date, today)
    if remaining is None or remaining > expiring_soon_days:
        return StockStatus.ACTIVE
    if remaining < 0:
        return StockStatus.EXPIRED
    return StockStatus.EXPIRING_SOON


def format_date(value: DateLike) -> str:
    """Format a date for table cells; '-' when absent."""
    parsed = parse_date(value)
    return parsed.strftime("%d.%m.%Y") if parsed else "-"


def format_price(value: Optional[float]) -> str:
    if value is None:
        return "-"
    return f"{value:,.2f}"


def truncate(text: Optional[str], length: int = 30) -> str:
    """Shorten long text for table cells."""
    if not text:
        return ""
    return f"{text[:length]}..." if len(text) > length else text


def gender_label(gender: Optional[int]) -> str:
    try:
        return Gender(gender).label
    except ValueError:
        return "Unknown"
