"""
Input validation utilities
"""
import re
from datetime import date

# ASCII digits only, matched against the whole string
DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
MONTH_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}")

DATE_FORMAT_MESSAGE = "Date must be in YYYY-MM-DD format"
MONTH_FORMAT_MESSAGE = "Month must be in YYYY-MM format"


def parse_date_string(value: str) -> date:
    """Parse a YYYY-MM-DD string into a calendar date"""
    if not isinstance(value, str) or not DATE_PATTERN.fullmatch(value):
        raise ValueError(DATE_FORMAT_MESSAGE)
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ValueError(DATE_FORMAT_MESSAGE)


def parse_month_string(value: str) -> tuple[int, int]:
    """Parse a YYYY-MM string into (year, month)"""
    if not isinstance(value, str) or not MONTH_PATTERN.fullmatch(value):
        raise ValueError(MONTH_FORMAT_MESSAGE)
    year, month = int(value[:4]), int(value[5:])
    if not 1 <= month <= 12:
        raise ValueError(MONTH_FORMAT_MESSAGE)
    return year, month


def clean_optional_text(value):
    """Trim a string; blank or missing text becomes None"""
    if value is None:
        return None
    value = value.strip()
    return value or None
