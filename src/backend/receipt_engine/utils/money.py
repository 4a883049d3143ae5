"""
Money parsing utilities for receipt amount tokens.

Receipt amounts are US-style decimals with exactly two fractional digits,
optionally preceded by a dollar sign:
- $48.87
- $ 3.20
- 12.50
"""

from decimal import Decimal, InvalidOperation
from typing import Optional
import re


# Currency-shaped token: optional '$', then digits '.' two digits
AMOUNT_PATTERN = re.compile(r'\$?\s*(\d+\.\d{2})')

# Amounts must fall strictly inside these bounds; anything else is OCR noise
# (phone numbers, timestamps, store numbers misread as prices)
MIN_AMOUNT = Decimal('0')
MAX_AMOUNT = Decimal('10000')

CENTS = Decimal('0.01')

# Currency keyword to code, checked in order against the upper-cased text
CURRENCY_KEYWORDS = (
    ('USD', 'USD'),
    ('EUR', 'EUR'),
    ('GBP', 'GBP'),
    ('EURO', 'EUR'),
    ('DOLLAR', 'USD'),
    ('POUND', 'GBP'),
)

# Currency symbol to code, checked in order as plain substrings; first match wins
CURRENCY_SYMBOLS = (
    ('$', 'USD'),
    ('€', 'EUR'),
    ('£', 'GBP'),
    ('¥', 'JPY'),
    ('R$', 'BRL'),
    ('C$', 'CAD'),
    ('A$', 'AUD'),
)


def parse_money(amount_str: str) -> Optional[Decimal]:
    """
    Parse a receipt amount token into a Decimal with two decimal places.

    Also accepts hand-typed tokens with thousands separators ("1,234.56"),
    which AMOUNT_PATTERN never captures from receipt text.

    Args:
        amount_str: Token such as "$48.87" or "12.50"

    Returns:
        Decimal amount or None if the token is not a number

    Examples:
        >>> parse_money("$48.87")
        Decimal('48.87')
        >>> parse_money("$ 3.2")
        Decimal('3.20')
    """
    if not amount_str or not isinstance(amount_str, str):
        return None

    cleaned = amount_str.replace('$', '').replace(',', '').strip()
    if not cleaned:
        return None

    try:
        return Decimal(cleaned).quantize(CENTS)
    except (InvalidOperation, ValueError):
        return None


def is_plausible_amount(amount: Decimal) -> bool:
    """True if amount lies strictly between MIN_AMOUNT and MAX_AMOUNT."""
    return MIN_AMOUNT < amount < MAX_AMOUNT


def format_money(amount: Optional[Decimal], currency: Optional[str] = 'USD') -> str:
    """
    Format Decimal amount as money string.

    Examples:
        >>> format_money(Decimal('1234.56'))
        '$1,234.56'
        >>> format_money(Decimal('12.50'), 'EUR')
        '€12.50'
    """
    if amount is None:
        return 'N/A'

    symbol_map = {code: symbol for symbol, code in CURRENCY_SYMBOLS}
    code = (currency or 'USD').upper()
    symbol = symbol_map.get(code, f'{code} ')

    return f"{symbol}{amount:,.2f}"
