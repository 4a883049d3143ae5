"""
Date normalization for receipt date tokens.

Every result is canonical YYYY-MM-DD. A token that does not describe a real
calendar date normalizes to None; the month/day order is never guessed.

Supported token shapes:
- ISO: 2024-01-03
- Numeric, month first: 05/12/2024, 5-12-24
- Month name: Dec 25, 2024 / December 25 2024
"""

from datetime import date, datetime
from typing import Optional
import logging
import re

logger = logging.getLogger(__name__)

# Keyed by 3-letter prefix so abbreviated and full names share one entry
MONTHS = {
    'jan': 1, 'feb': 2, 'mar': 3, 'apr': 4, 'may': 5, 'jun': 6,
    'jul': 7, 'aug': 8, 'sep': 9, 'oct': 10, 'nov': 11, 'dec': 12,
}

ISO_DATE = re.compile(r'^(\d{4})-(\d{2})-(\d{2})$')
NUMERIC_DATE = re.compile(r'^(\d{1,2})([/-])(\d{1,2})\2(\d{2}|\d{4})$')

# Full or abbreviated English month name
MONTH_NAMES = (
    r'jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?|aug(?:ust)?'
    r'|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?'
)
MONTH_NAME_DATE = re.compile(
    r'^(' + MONTH_NAMES + r')\b\.?\s+(\d{1,2}),?\s+(\d{4})$',
    re.IGNORECASE,
)

# Last resort for tokens none of the shapes above accept
FALLBACK_FORMATS = (
    '%m/%d/%Y', '%m-%d-%Y',
    '%Y-%m-%d', '%Y/%m/%d',
    '%B %d, %Y', '%b %d, %Y',
    '%B %d %Y', '%b %d %Y',
)


def expand_two_digit_year(year: int, today: Optional[date] = None) -> int:
    """
    Place a two-digit year in the current century.

    "23" read in 2026 becomes 2023; "99" read in 2026 becomes 2099.
    """
    current_year = (today or date.today()).year
    return (current_year // 100) * 100 + year


def _to_iso(year: int, month: int, day: int) -> Optional[str]:
    try:
        return date(year, month, day).isoformat()
    except ValueError:
        return None


def normalize_date(date_str: str, today: Optional[date] = None) -> Optional[str]:
    """
    Normalize a matched date token to YYYY-MM-DD.

    Args:
        date_str: Date token as matched on the receipt
        today: Reference date for two-digit-year expansion (defaults to the system clock)

    Returns:
        Date in YYYY-MM-DD format or None
    """
    token = date_str.strip()

    match = ISO_DATE.match(token)
    if match:
        year, month, day = (int(part) for part in match.groups())
        return _to_iso(year, month, day)

    match = NUMERIC_DATE.match(token)
    if match:
        month, day, year_str = int(match.group(1)), int(match.group(3)), match.group(4)
        year = int(year_str)
        if len(year_str) == 2:
            year = expand_two_digit_year(year, today)
        return _to_iso(year, month, day)

    match = MONTH_NAME_DATE.match(token)
    if match:
        month = MONTHS.get(match.group(1)[:3].lower())
        if month is not None:
            return _to_iso(int(match.group(3)), month, int(match.group(2)))

    return _parse_date_string(token)


def _parse_date_string(token: str) -> Optional[str]:
    for fmt in FALLBACK_FORMATS:
        try:
            return datetime.strptime(token, fmt).date().isoformat()
        except ValueError:
            continue

    logger.debug("Unparseable date token %r", token)
    return None
