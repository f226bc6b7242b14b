"""
Risk Scorer: maps validator verdicts and extraction quality to a 0–100 score.

Every rule is independently additive; the sum is clamped to 100.
Higher score = more likely fraudulent.

    OCR quality  < 0.8              +20
    OCR quality  0.8 – 0.9          +10
    Company      not_found          +40
    Company      suspended          +60
    Company      error              +30
    Domain       suspicious         +25
    Domain       not_found          +35
    Bank         invalid            +45
    Bank         suspicious         +30
    Each fraud indicator            +15
"""

from fraudcheck.core.models import ValidationChecks, VerdictStatus

# Risk added per verdict status, per registry
COMPANY_RISK = {
    VerdictStatus.NOT_FOUND: 40,
    VerdictStatus.SUSPENDED: 60,
    VerdictStatus.ERROR: 30,
}

DOMAIN_RISK = {
    VerdictStatus.SUSPICIOUS: 25,
    VerdictStatus.NOT_FOUND: 35,
}

BANK_RISK = {
    VerdictStatus.INVALID: 45,
    VerdictStatus.SUSPICIOUS: 30,
}

FRAUD_INDICATOR_RISK = 15

# (upper bound, risk): first bound the quality falls below wins
OCR_QUALITY_BANDS = [
    (0.8, 20),
    (0.9, 10),
]

MAX_RISK = 100


def ocr_quality_risk(quality: float) -> int:
    for upper, risk in OCR_QUALITY_BANDS:
        if quality < upper:
            return risk
    return 0


def calculate_risk_score(checks: ValidationChecks) -> int:
    """Clamped sum of every matching rule."""
    score = ocr_quality_risk(checks.ocr_quality)
    score += COMPANY_RISK.get(checks.company_registration.status, 0)
    score += DOMAIN_RISK.get(checks.domain_validation.status, 0)
    score += BANK_RISK.get(checks.bank_validation.status, 0)
    score += FRAUD_INDICATOR_RISK * len(checks.fraud_indicators)
    return clamp_score(score)


def clamp_score(score: float) -> int:
    return int(max(0, min(MAX_RISK, round(score))))


def is_document_valid(risk_score: int, checks: ValidationChecks) -> bool:
    """Valid only when risk is under 30 AND the company is verified."""
    return risk_score < 30 and checks.company_registration.status == VerdictStatus.VERIFIED
