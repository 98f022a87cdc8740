"""Date parsing for patient demographics and service dates."""

from __future__ import annotations

from datetime import date, datetime

# Reasonable bounds for dates of birth and service dates
MIN_VALID_YEAR = 1900
MAX_VALID_YEAR = 2100

DATE_FORMATS = (
    "%Y-%m-%d",  # ISO 8601
    "%m/%d/%Y",  # US format
    "%Y%m%d",  # Compact
)


def parse_flexible_date(value: str | date | None) -> date | None:
    """Parse a calendar date from the formats clinics commonly send.

    Supports:
    - ISO 8601: YYYY-MM-DD (e.g., 1985-03-15)
    - ISO timestamps, truncated to their date (e.g., 2024-02-01T10:30:00Z)
    - US format: MM/DD/YYYY (e.g., 03/15/1985)
    - Compact: YYYYMMDD (e.g., 19850315)

    Returns None for unparseable input, impossible dates (Feb 30) and
    years outside 1900-2100.

    Examples:
        >>> parse_flexible_date("1985-03-15")
        datetime.date(1985, 3, 15)
        >>> parse_flexible_date("2024-02-01T10:30:00Z")
        datetime.date(2024, 2, 1)
        >>> parse_flexible_date("03/15/1985")
        datetime.date(1985, 3, 15)
        >>> parse_flexible_date("2024-02-30") is None
        True
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        value = value.date()
    if isinstance(value, date):
        return value if MIN_VALID_YEAR <= value.year <= MAX_VALID_YEAR else None

    text = value.strip()
    if "T" in text:
        text = text.split("T", 1)[0]

    for fmt in DATE_FORMATS:
        try:
            parsed = datetime.strptime(text, fmt).date()
        except ValueError:
            # strptime raises ValueError for invalid dates like Feb 30
            continue
        if MIN_VALID_YEAR <= parsed.year <= MAX_VALID_YEAR:
            return parsed

    return None
