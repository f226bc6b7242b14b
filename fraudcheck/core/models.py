"""
Pydantic models for the verification engine.

Every model is frozen and closed: results are assembled once per request
and handed to the presentation layer unchanged.
"""

import datetime as dt
from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class DocumentType(str, Enum):
    PO = "PO"
    RFQ = "RFQ"
    INVOICE = "Invoice"
    POP = "PoP"
    EFT = "EFT"
    UNKNOWN = "Unknown"


class VerdictStatus(str, Enum):
    VERIFIED = "verified"
    SUSPICIOUS = "suspicious"
    NOT_FOUND = "not_found"
    INVALID = "invalid"
    SUSPENDED = "suspended"
    ERROR = "error"


class PaymentStatus(str, Enum):
    CLEARED = "cleared"
    PENDING = "pending"
    FAILED = "failed"
    NOT_FOUND = "not_found"


class CompanyStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


class Flow(str, Enum):
    DOCUMENT = "document"
    PAYMENT = "payment"
    COMPANY = "company"


# ── Claims ────────────────────────────────────────────────────


class BankDetails(BaseModel):
    account_number: Optional[str] = None
    branch_code: Optional[str] = None
    bank_name: Optional[str] = None

    model_config = {"frozen": True, "extra": "forbid"}


class Money(BaseModel):
    value: float = Field(..., ge=0)
    currency: str = Field(..., min_length=3, max_length=3)

    model_config = {"frozen": True, "extra": "forbid"}


class ClaimSet(BaseModel):
    """Fields extracted from one document. Absent fields stay None."""

    company_name: Optional[str] = None
    registration_number: Optional[str] = None
    vat_number: Optional[str] = None
    bank_details: Optional[BankDetails] = None
    contact_email: Optional[str] = None
    amount: Optional[Money] = None
    reference: Optional[str] = None
    date: Optional[dt.date] = None
    document_type: DocumentType = DocumentType.UNKNOWN
    confidence: float = Field(1.0, ge=0, le=1)

    model_config = {"frozen": True, "extra": "forbid"}


# ── Registry verdicts ─────────────────────────────────────────

DETAIL_FIELDS = (
    "registration_date",
    "directors",
    "matched_name",
    "domain",
    "domain_age",
    "registrar",
    "account_exists",
    "branch_valid",
)


class ValidatorVerdict(BaseModel):
    """One registry's judgement about a claim set."""

    registry: str
    status: VerdictStatus
    match: bool = False

    # Company registrar
    registration_date: Optional[date] = None
    directors: Optional[tuple[str, ...]] = None
    matched_name: Optional[str] = None

    # Domain registry
    domain: Optional[str] = None
    domain_age: Optional[int] = None
    registrar: Optional[str] = None

    # Bank registry
    account_exists: Optional[bool] = None
    branch_valid: Optional[bool] = None

    message: Optional[str] = None

    model_config = {"frozen": True, "extra": "forbid"}

    @model_validator(mode="after")
    def error_carries_no_detail(self) -> "ValidatorVerdict":
        if self.status == VerdictStatus.ERROR:
            if self.match:
                raise ValueError("error verdict cannot report a match")
            populated = [name for name in DETAIL_FIELDS if getattr(self, name) is not None]
            if populated:
                raise ValueError(f"error verdict cannot carry registry detail: {populated}")
        return self

    @classmethod
    def error(cls, registry: str, message: str) -> "ValidatorVerdict":
        return cls(registry=registry, status=VerdictStatus.ERROR, match=False, message=message)


class ValidationChecks(BaseModel):
    ocr_quality: float = Field(..., ge=0, le=1)
    company_registration: ValidatorVerdict
    domain_validation: ValidatorVerdict
    bank_validation: ValidatorVerdict
    fraud_indicators: tuple[str, ...] = ()

    model_config = {"frozen": True, "extra": "forbid"}


class VerificationResult(BaseModel):
    """Document-flow result returned by the engine."""

    is_valid: bool
    confidence: float = Field(..., ge=0, le=1)
    claims: ClaimSet
    checks: ValidationChecks
    risk_score: int = Field(..., ge=0, le=100)
    recommendations: tuple[str, ...]

    model_config = {"frozen": True, "extra": "forbid"}


# ── Payment flow ──────────────────────────────────────────────


class ParsedReference(BaseModel):
    bank: str
    reference: str = Field(..., min_length=1)
    amount: Optional[float] = None
    date: Optional[dt.date] = None

    model_config = {"frozen": True, "extra": "forbid"}


class PaymentDetails(BaseModel):
    account_match: bool
    amount_match: bool
    timeline_valid: bool

    model_config = {"frozen": True, "extra": "forbid"}


class PaymentVerdict(BaseModel):
    is_verified: bool
    status: PaymentStatus
    amount: float = Field(..., ge=0)
    currency: str = "ZAR"
    transaction_date: datetime
    reference: str
    bank: str
    confidence: float = Field(..., ge=0, le=100)
    risk_score: int = Field(..., ge=0, le=100)
    details: PaymentDetails
    fraud_indicators: tuple[str, ...] = ()

    model_config = {"frozen": True, "extra": "forbid"}


# ── Company flow ──────────────────────────────────────────────


class CompanyDetails(BaseModel):
    registered_address: Optional[str] = None
    directors: tuple[str, ...] = ()
    business_type: Optional[str] = None
    fraud_alerts: tuple[str, ...] = ()

    model_config = {"frozen": True, "extra": "forbid"}


class CompanyVerdict(BaseModel):
    is_verified: bool
    company_name: str
    registration_number: Optional[str] = None
    status: CompanyStatus
    domain: str
    domain_match: bool
    risk_score: int = Field(..., ge=0, le=100)
    details: CompanyDetails

    model_config = {"frozen": True, "extra": "forbid"}


# ── Requests ──────────────────────────────────────────────────


class VerificationRequest(BaseModel):
    """Dispatcher input: which flow to run and the raw payload for it."""

    flow: Flow
    text: Optional[str] = Field(None, description="Document text, payment reference text or company name")
    hinted_type: Optional[DocumentType] = None
    reference: Optional[ParsedReference] = None
    domain: Optional[str] = None

    model_config = {"extra": "forbid"}
