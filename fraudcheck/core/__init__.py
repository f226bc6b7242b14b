"""
Verification Core
==================
Cross-checks claims from payment references, company names and business
documents against independent registries and scores the fraud risk.

Components:
    1. Field Extractor          raw text → ClaimSet
    2. Registry Validators      company / domain / bank
    3. Payment Matcher          reference → ledger verdict
    4. Company Verifier         name / domain → company verdict
    5. Risk Scorer              verdicts → 0–100
    6. Recommendation Generator score + verdicts → advice
    7. Verification Engine      orchestrates all of the above

Risk Bands (banner recommendations):
    71–100 → HIGH RISK
    41–70  → MEDIUM RISK
    21–40  → LOW RISK
    0–20   → VERIFIED
"""

from .engine import VerificationEngine, build_engine
from .errors import InvalidRequest, RegistryUnavailable, VerificationError
from .extractor import DocumentText, FieldExtractor, PlainTextReader
from .models import (
    ClaimSet,
    CompanyVerdict,
    PaymentVerdict,
    ValidatorVerdict,
    VerificationRequest,
    VerificationResult,
)

__all__ = [
    "VerificationEngine",
    "build_engine",
    "InvalidRequest",
    "RegistryUnavailable",
    "VerificationError",
    "DocumentText",
    "FieldExtractor",
    "PlainTextReader",
    "ClaimSet",
    "CompanyVerdict",
    "PaymentVerdict",
    "ValidatorVerdict",
    "VerificationRequest",
    "VerificationResult",
]
