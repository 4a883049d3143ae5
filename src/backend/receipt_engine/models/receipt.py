"""
Pydantic models for receipt extraction.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_serializer


class OcrStatus(str, Enum):
    """Processing state stored on a receipt record."""
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class ConfidenceSet(BaseModel):
    """Per-field confidence scores plus their aggregate, each in [0, 1]."""
    overall: float = Field(0.0, ge=0.0, le=1.0)
    merchant: float = Field(0.0, ge=0.0, le=1.0)
    amount: float = Field(0.0, ge=0.0, le=1.0)
    date: float = Field(0.0, ge=0.0, le=1.0)
    tax: float = Field(0.0, ge=0.0, le=1.0)
    currency: float = Field(0.0, ge=0.0, le=1.0)

    class Config:
        frozen = True


class ExtractionResult(BaseModel):
    """
    Structured fields extracted from one receipt's OCR text.

    Every field is independently nullable. `raw_text` keeps the original
    input for audit and is serialized as `rawText`.
    """
    merchant: Optional[str] = None
    amount: Optional[Decimal] = None
    date: Optional[str] = None  # YYYY-MM-DD
    tax: Optional[Decimal] = None
    currency: Optional[str] = None  # ISO 4217 code
    raw_text: str = Field("", alias="rawText")
    confidence: ConfidenceSet = Field(default_factory=ConfidenceSet)

    class Config:
        frozen = True
        populate_by_name = True

    @field_serializer("amount", "tax", when_used="json")
    def _money_as_number(self, value: Optional[Decimal]) -> Optional[float]:
        return float(value) if value is not None else None


class ExtractRequest(BaseModel):
    """Request body for text extraction."""
    text: str = ""


class ReceiptOcrUpdate(BaseModel):
    """Columns written onto a receipt record once extraction has completed."""
    ocr_status: OcrStatus = OcrStatus.COMPLETED
    extracted_merchant: Optional[str] = None
    extracted_amount: Optional[Decimal] = None
    extracted_date: Optional[str] = None
    extracted_tax: Optional[Decimal] = None
    extracted_currency: Optional[str] = None
    ocr_confidence: float = 0.0
    ocr_data: Dict[str, Any] = Field(default_factory=dict)
    updated_at: str

    @classmethod
    def from_result(
        cls,
        result: ExtractionResult,
        user_id: str,
        processed_at: Optional[datetime] = None
    ) -> "ReceiptOcrUpdate":
        """
        Build the receipt update for an extraction result.

        Args:
            result: Extraction result to persist
            user_id: Owner of the receipt
            processed_at: Processing time (defaults to now, UTC)

        Returns:
            ReceiptOcrUpdate ready to be written by the caller
        """
        timestamp = (processed_at or datetime.now(timezone.utc)).isoformat()

        return cls(
            extracted_merchant=result.merchant,
            extracted_amount=result.amount,
            extracted_date=result.date,
            extracted_tax=result.tax,
            extracted_currency=result.currency,
            ocr_confidence=result.confidence.overall,
            ocr_data={
                **result.model_dump(mode="json", by_alias=True),
                "processed_at": timestamp,
                "user_id": user_id,
            },
            updated_at=timestamp,
        )
