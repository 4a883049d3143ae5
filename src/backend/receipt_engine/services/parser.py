"""
Receipt parser service for extracting structured data from OCR text.

Each field has its own extractor, a pure function over the receipt lines (or
the full text for currency) returning a FieldResult. ReceiptParser runs them
all and aggregates their confidence into an ExtractionResult. Nothing is
shared between calls, so a parser may be used from any number of requests.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Sequence

from receipt_engine.models.receipt import ConfidenceSet, ExtractionResult
from receipt_engine.utils.candidates import MISSING, AmountCandidate, FieldResult
from receipt_engine.utils.dates import MONTH_NAMES, normalize_date
from receipt_engine.utils.money import (
    AMOUNT_PATTERN,
    CURRENCY_KEYWORDS,
    CURRENCY_SYMBOLS,
    is_plausible_amount,
    parse_money,
)
from receipt_engine.utils.scoring import (
    AMOUNT_CONFIDENCE,
    CURRENCY_DEFAULT_CONFIDENCE,
    CURRENCY_KEYWORD_CONFIDENCE,
    CURRENCY_SYMBOL_CONFIDENCE,
    DATE_CONFIDENCE,
    MERCHANT_FALLBACK_CONFIDENCE,
    MERCHANT_MULTI_LINE_CONFIDENCE,
    MERCHANT_SINGLE_LINE_CONFIDENCE,
    TAX_CONFIDENCE,
    calculate_overall_confidence,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PatternSpec:
    """A named regex pattern with example and notes for documentation."""
    name: str
    pattern: str
    example: str
    notes: Optional[str] = None
    flags: int = re.IGNORECASE
    compiled: re.Pattern = field(default=None, init=False, compare=False, repr=False)

    def __post_init__(self):
        object.__setattr__(self, 'compiled', re.compile(self.pattern, self.flags))


# Merchant header scan limits
MAX_MERCHANT_SCAN_LINES = 5
MAX_MERCHANT_PARTS = 3
MAX_MERCHANT_LINE_LENGTH = 50

# Lines that end the merchant-name section of the header
MERCHANT_STOP_PATTERNS = (
    PatternSpec(
        name='street_address',
        pattern=r'^\d+\s+\w+\s+(?:st|street|ave|avenue|blvd|boulevard|rd|road|dr|drive|ln|lane|way|ct|court|plaza|pkwy|parkway)',
        example='123 MAIN ST',
    ),
    PatternSpec(
        name='date',
        pattern=r'^\d{1,2}[/-]\d{1,2}[/-]\d{2,4}',
        example='05/12/2024',
        flags=0,
    ),
    PatternSpec(
        name='time',
        pattern=r'^\d{2}:\d{2}',
        example='14:32',
        flags=0,
    ),
    PatternSpec(
        name='phone',
        pattern=r'^\(\d{3}\)|\d{3}[-.\s]\d{3}[-.\s]\d{4}',
        example='(555) 123-4567',
        notes='Area code at line start, or a 3-3-4 digit group anywhere',
        flags=0,
    ),
    PatternSpec(
        name='transaction_keyword',
        pattern=r'^(?:subtotal|total|tax|cash|credit|debit|change|amount|balance|qty|item|price)',
        example='TOTAL $48.87',
    ),
    PatternSpec(
        name='leading_amount',
        pattern=r'^\$\d+\.\d{2}',
        example='$4.99',
        flags=0,
    ),
    PatternSpec(
        name='order_number',
        pattern=r'^#\d+',
        example='#10442',
        flags=0,
    ),
    PatternSpec(
        name='store_number',
        pattern=r'^(?:store|loc|location)\s*#?\s*\d+',
        example='Store #123 Elm Plaza',
    ),
    PatternSpec(
        name='item_quantity',
        pattern=r'^\d+\s+x\s+\$?\d+',
        example='2 x $3.50',
        flags=0,
    ),
    PatternSpec(
        name='website',
        pattern=r'^www\.|\.com|\.net|\.org',
        example='www.shell.com',
    ),
    PatternSpec(
        name='email',
        pattern=r'^[a-z0-9._%+-]+@[a-z0-9.-]+\.[a-z]{2,}$',
        example='help@shell.com',
    ),
)

# Header metadata lines: ignored, but the merchant scan continues past them.
# Checked before the stop patterns, so "Store #12" alone is skipped while
# "Store #12 Elm Plaza" ends the scan.
MERCHANT_SKIP_PATTERNS = (
    PatternSpec(name='store_line', pattern=r'^store\s*#?\s*\d+$', example='Store #123'),
    PatternSpec(name='location_line', pattern=r'^loc(?:ation)?\s*#?\s*\d+$', example='Location 7'),
    PatternSpec(name='terminal_line', pattern=r'^terminal\s*#?\s*\d+$', example='Terminal #4'),
    PatternSpec(name='register_line', pattern=r'^register\s*#?\s*\d+$', example='Register 2'),
    PatternSpec(name='cashier_line', pattern=r'^cashier[:.]?\s*\w+$', example='Cashier: Dana'),
    PatternSpec(name='server_line', pattern=r'^server[:.]?\s*\w+$', example='Server: Amy'),
    PatternSpec(name='transaction_line', pattern=r'^trans(?:action)?[:.]?\s*\d+$', example='Trans: 88123'),
)

PURE_NUMBER = re.compile(r'^\d+$')

# Tried in this order on each line; the first pattern to match is the only one considered
DATE_PATTERNS = (
    PatternSpec(
        name='slash_date',
        pattern=r'(?<!\d)(\d{1,2}/\d{1,2}/\d{2,4})(?!\d)',
        example='05/12/2024',
        notes='MM/DD/YYYY or M/D/YY',
        flags=0,
    ),
    PatternSpec(
        name='dash_date',
        pattern=r'(?<!\d)(\d{1,2}-\d{1,2}-\d{2,4})(?!\d)',
        example='05-12-2024',
        flags=0,
    ),
    PatternSpec(
        name='iso_date',
        pattern=r'(?<!\d)(\d{4}-\d{2}-\d{2})(?!\d)',
        example='2024-01-03',
        flags=0,
    ),
    PatternSpec(
        name='month_name_date',
        pattern=r'\b((?:' + MONTH_NAMES + r')\b\.?\s+\d{1,2},?\s+\d{4})(?!\d)',
        example='Dec 25, 2024',
        notes='Abbreviated or full English month name, optional comma',
    ),
)

TAX_KEYWORD = re.compile(r'tax', re.IGNORECASE)


def split_lines(text: str) -> List[str]:
    """
    Split raw OCR text into trimmed lines.

    Empty lines are kept so line positions match the original text; an empty
    input yields no lines at all.
    """
    if not text:
        return []
    return [line.strip() for line in text.split('\n')]


def _first_match(specs: Sequence[PatternSpec], line: str) -> Optional[PatternSpec]:
    for spec in specs:
        if spec.compiled.search(line):
            return spec
    return None


def _clean_merchant_name(name: str) -> str:
    name = re.sub(r'[*#]+', '', name)
    return re.sub(r'\s+', ' ', name).strip()


def extract_merchant(lines: Sequence[str]) -> FieldResult:
    """
    Extract the merchant name from the receipt header.

    Scans the first non-empty lines, skipping known metadata (register,
    cashier, ...) and stopping at the first line that looks like the body of
    the receipt (address, date, phone, totals, ...). Up to three name lines
    are joined.

    Args:
        lines: Receipt lines from split_lines

    Returns:
        FieldResult with the merchant name
    """
    non_empty = [line.strip() for line in lines if line and line.strip()]
    if not non_empty:
        return MISSING

    parts: List[str] = []

    for line in non_empty[:MAX_MERCHANT_SCAN_LINES]:
        # Skip before stop: "Cashier: Dana" would otherwise stop on "cash"
        skip = _first_match(MERCHANT_SKIP_PATTERNS, line)
        if skip:
            logger.debug("Merchant scan skipped %r (%s)", line, skip.name)
            continue

        stop = _first_match(MERCHANT_STOP_PATTERNS, line)
        if stop:
            logger.debug("Merchant scan stopped at %r (%s)", line, stop.name)
            break

        if len(line) > MAX_MERCHANT_LINE_LENGTH or PURE_NUMBER.match(line):
            continue

        parts.append(line)
        if len(parts) >= MAX_MERCHANT_PARTS:
            break

    if not parts:
        first_line = non_empty[0]
        return FieldResult(
            value=first_line,
            confidence=MERCHANT_FALLBACK_CONFIDENCE,
            pattern_name='first_line_fallback',
            raw_text=first_line,
        )

    name = _clean_merchant_name(' '.join(parts))
    if not name:
        return MISSING

    confidence = MERCHANT_SINGLE_LINE_CONFIDENCE if len(parts) == 1 else MERCHANT_MULTI_LINE_CONFIDENCE
    return FieldResult(
        value=name,
        confidence=confidence,
        pattern_name=f'header_{len(parts)}_lines',
        raw_text='\n'.join(parts),
    )


def find_amount_candidates(lines: Sequence[str]) -> List[AmountCandidate]:
    """Collect every plausible currency-shaped amount on the receipt."""
    candidates: List[AmountCandidate] = []

    for position, line in enumerate(lines):
        for match in AMOUNT_PATTERN.finditer(line):
            amount = parse_money(match.group(1))
            if amount is None or not is_plausible_amount(amount):
                continue

            candidates.append(AmountCandidate(
                value=amount,
                line_position=position,
                match_span=match.span(),
                raw_text=match.group(0).strip(),
            ))

    return candidates


def extract_amount(
    lines: Sequence[str],
    candidates: Optional[Sequence[AmountCandidate]] = None
) -> FieldResult:
    """
    Extract the transaction total.

    The grand total is taken to be the largest plausible amount on the
    receipt.

    Args:
        lines: Receipt lines from split_lines
        candidates: Precomputed candidates from find_amount_candidates

    Returns:
        FieldResult with the total as Decimal
    """
    if candidates is None:
        candidates = find_amount_candidates(lines)

    if not candidates:
        return MISSING

    best = max(candidates, key=lambda candidate: candidate.value)
    return FieldResult(
        value=best.value,
        confidence=AMOUNT_CONFIDENCE,
        pattern_name='largest_amount',
        raw_text=best.raw_text,
    )


def extract_date(lines: Sequence[str], today: Optional[date] = None) -> FieldResult:
    """
    Extract the transaction date, normalized to YYYY-MM-DD.

    Lines are scanned in order and the first date that normalizes wins. On
    each line only the first matching pattern is considered: a token that is
    not a real calendar date moves the scan on to the next line.

    Args:
        lines: Receipt lines from split_lines
        today: Reference date for two-digit years (defaults to the system clock)

    Returns:
        FieldResult with the ISO date string
    """
    for line in lines:
        for spec in DATE_PATTERNS:
            match = spec.compiled.search(line)
            if not match:
                continue

            token = match.group(1)
            normalized = normalize_date(token, today=today)
            if normalized:
                return FieldResult(
                    value=normalized,
                    confidence=DATE_CONFIDENCE,
                    pattern_name=spec.name,
                    raw_text=token,
                )

            logger.debug("Date token %r (%s) is not a calendar date", token, spec.name)
            break

    return MISSING


def extract_tax(lines: Sequence[str]) -> FieldResult:
    """
    Extract the tax amount from the first line mentioning tax.

    Only that first line is examined: if it carries no amount, tax is not
    extracted even when a later tax line has one.

    Args:
        lines: Receipt lines from split_lines

    Returns:
        FieldResult with the tax as Decimal
    """
    for line in lines:
        if not TAX_KEYWORD.search(line):
            continue

        match = AMOUNT_PATTERN.search(line)
        if match is None:
            logger.debug("Tax line %r has no amount", line)
            return MISSING

        return FieldResult(
            value=parse_money(match.group(1)),
            confidence=TAX_CONFIDENCE,
            pattern_name='tax_line',
            raw_text=line,
        )

    return MISSING


def extract_currency(text: str, has_amounts: bool) -> FieldResult:
    """
    Identify the receipt currency as an ISO 4217 code.

    Priority: currency keyword anywhere in the text, then currency symbol,
    then USD when amounts were found without any currency marker.

    Args:
        text: Full original receipt text
        has_amounts: Whether any plausible amount was found

    Returns:
        FieldResult with the currency code
    """
    text_upper = text.upper()

    for keyword, code in CURRENCY_KEYWORDS:
        if keyword in text_upper:
            return FieldResult(
                value=code,
                confidence=CURRENCY_KEYWORD_CONFIDENCE,
                pattern_name=f'keyword_{keyword.lower()}',
                raw_text=keyword,
            )

    for symbol, code in CURRENCY_SYMBOLS:
        if symbol in text:
            return FieldResult(
                value=code,
                confidence=CURRENCY_SYMBOL_CONFIDENCE,
                pattern_name='symbol',
                raw_text=symbol,
            )

    if has_amounts:
        return FieldResult(
            value='USD',
            confidence=CURRENCY_DEFAULT_CONFIDENCE,
            pattern_name='default_usd',
        )

    return MISSING


class ReceiptParser:
    """Service for parsing receipt text and extracting structured data."""

    def __init__(self, today: Optional[date] = None):
        """
        Args:
            today: Reference date for two-digit-year expansion. None reads
                the system clock on every parse.
        """
        self.today = today

    def parse(self, text: str) -> ExtractionResult:
        """
        Parse receipt text and extract all available fields.

        Never raises for string input: fields that cannot be found are None
        with a confidence of 0.

        Args:
            text: OCR-extracted text from receipt

        Returns:
            ExtractionResult with fields and confidence scores
        """
        lines = split_lines(text)

        amount_candidates = find_amount_candidates(lines)

        merchant = extract_merchant(lines)
        amount = extract_amount(lines, candidates=amount_candidates)
        receipt_date = extract_date(lines, today=self.today)
        tax = extract_tax(lines)
        currency = extract_currency(text, has_amounts=bool(amount_candidates))

        fields = {
            'merchant': merchant,
            'amount': amount,
            'date': receipt_date,
            'tax': tax,
            'currency': currency,
        }

        for name, result in fields.items():
            if result.found:
                logger.debug("Extracted %s=%r via %s (%.2f)", name, result.value, result.pattern_name, result.confidence)

        confidence = ConfidenceSet(
            overall=calculate_overall_confidence(result.confidence for result in fields.values()),
            **{name: result.confidence for name, result in fields.items()}
        )

        return ExtractionResult(
            merchant=merchant.value,
            amount=amount.value,
            date=receipt_date.value,
            tax=tax.value,
            currency=currency.value,
            raw_text=text,
            confidence=confidence,
        )


def extract(text: str) -> ExtractionResult:
    """Extract structured receipt fields from raw OCR text."""
    return ReceiptParser().parse(text)
