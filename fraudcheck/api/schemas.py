"""
api/schemas.py
"""

from typing import Optional

from pydantic import BaseModel, Field, model_validator

from fraudcheck.core.models import DocumentType, ParsedReference


# ── Request: Document ─────────────────────────────────────────
class DocumentRequest(BaseModel):
    text: str = Field(..., min_length=1, description="Document text (OCR output or pasted content)")
    hinted_type: Optional[DocumentType] = Field(None, description="Used only when the text cannot be classified")

    model_config = {
        "extra": "forbid",
        "json_schema_extra": {
            "example": {
                "text": "PURCHASE ORDER\nABC Manufacturing (Pty) Ltd\nRegistration: 2019/123456/07\n"
                        "Account: 1234567890\nBranch: 632005\nTotal Amount: R 25,750.00",
                "hinted_type": "PO",
            }
        },
    }


# ── Request: Payment ──────────────────────────────────────────
class PaymentRequest(BaseModel):
    text: Optional[str] = Field(None, description='Free-text reference, e.g. "FNB, Ref 483920"')
    reference: Optional[ParsedReference] = None

    model_config = {"extra": "forbid"}

    @model_validator(mode="after")
    def text_or_reference(self) -> "PaymentRequest":
        if self.text is None and self.reference is None:
            raise ValueError("Either text or reference is required")
        return self


# ── Request: Company ──────────────────────────────────────────
class CompanyRequest(BaseModel):
    name: str = Field(..., min_length=1, description="Company name, or free text containing it")
    domain: Optional[str] = Field(None, description="Website or e-mail domain to check against")

    model_config = {"extra": "forbid"}
