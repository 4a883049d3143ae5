"""
Dataclasses passed between the field extractors and the parser.

Each extractor returns a FieldResult: the extracted value (or None) together
with the confidence of the rule that produced it.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional


@dataclass(frozen=True)
class FieldResult:
    """Outcome of extracting one receipt field."""
    value: Any
    confidence: float = 0.0
    pattern_name: Optional[str] = None  # Rule that produced the value
    raw_text: str = ""  # Text the value was taken from

    @property
    def found(self) -> bool:
        return self.value is not None


MISSING = FieldResult(value=None)


@dataclass(frozen=True)
class AmountCandidate:
    """
    Currency-shaped token found on a receipt line.

    Only tokens inside the plausible amount bounds become candidates.
    """
    value: Decimal
    line_position: int
    match_span: tuple[int, int]  # (start, end) within the line
    raw_text: str = ""
