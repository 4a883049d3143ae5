"""
Extraction API router: raw OCR text in, structured receipt fields out.
"""

from fastapi import APIRouter
import logging

from receipt_engine.models.receipt import ExtractionResult, ExtractRequest
from receipt_engine.services.parser import ReceiptParser

router = APIRouter(prefix="/extract", tags=["extract"])
logger = logging.getLogger(__name__)


@router.post("", response_model=ExtractionResult)
async def extract_receipt(request: ExtractRequest):
    """
    Extract merchant, amount, date, tax and currency from receipt text.

    Always succeeds for a text body: fields that cannot be found come back
    as null with zero confidence.

    Args:
        request: Raw OCR text of one receipt

    Returns:
        Extracted fields with per-field and overall confidence
    """
    result = ReceiptParser().parse(request.text)

    found = [
        name for name in ("merchant", "amount", "date", "tax", "currency")
        if getattr(result, name) is not None
    ]
    logger.info("Receipt text extracted", extra={
        "line_count": request.text.count("\n") + 1 if request.text else 0,
        "fields_found": found,
        "overall_confidence": round(result.confidence.overall, 2),
    })

    return result
