"""
Confidence scores for extracted receipt fields.

Scores are heuristic, not calibrated probabilities: each one is fixed by the
rule that produced the value. The overall score averages only the fields that
were actually extracted.
"""

from typing import Iterable

__all__ = [
    'MERCHANT_SINGLE_LINE_CONFIDENCE', 'MERCHANT_MULTI_LINE_CONFIDENCE', 'MERCHANT_FALLBACK_CONFIDENCE',
    'AMOUNT_CONFIDENCE', 'DATE_CONFIDENCE', 'TAX_CONFIDENCE',
    'CURRENCY_KEYWORD_CONFIDENCE', 'CURRENCY_SYMBOL_CONFIDENCE', 'CURRENCY_DEFAULT_CONFIDENCE',
    'calculate_overall_confidence',
]

MERCHANT_SINGLE_LINE_CONFIDENCE = 0.85
MERCHANT_MULTI_LINE_CONFIDENCE = 0.80
MERCHANT_FALLBACK_CONFIDENCE = 0.60

AMOUNT_CONFIDENCE = 0.75
DATE_CONFIDENCE = 0.80
TAX_CONFIDENCE = 0.70

CURRENCY_KEYWORD_CONFIDENCE = 0.90  # "USD", "EURO", ...
CURRENCY_SYMBOL_CONFIDENCE = 0.85   # "$", "€", ...
CURRENCY_DEFAULT_CONFIDENCE = 0.50  # USD assumed because amounts were found


def calculate_overall_confidence(scores: Iterable[float]) -> float:
    """
    Average the confidence of the fields that were extracted.

    Fields with a score of 0 were not extracted and are left out of the mean
    rather than counted as zero. With nothing extracted the result is 0.0.

    Args:
        scores: Per-field confidence scores

    Returns:
        Overall confidence between 0.0 and 1.0
    """
    extracted = [score for score in scores if score > 0]
    if not extracted:
        return 0.0

    overall = sum(extracted) / len(extracted)
    return max(0.0, min(1.0, overall))
