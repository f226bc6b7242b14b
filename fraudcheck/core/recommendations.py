"""
Recommendation Generator: risk score + verdicts → ordered advice.

Exactly one banner band is emitted (checked high to low), followed by
independent follow-ups in fixed order: company, domain, bank.
"""

from fraudcheck.core.models import ValidationChecks, VerdictStatus

CRITICAL_RISK = (
    "🚨 HIGH RISK: Do not proceed with transaction",
    "Contact customer directly using verified contact details",
)
MEDIUM_RISK = (
    "⚠️ MEDIUM RISK: Additional verification required",
    "Request additional documentation",
)
LOW_RISK = (
    "✅ LOW RISK: Proceed with caution",
    "Monitor transaction closely",
)
VERIFIED = (
    "✅ VERIFIED: Safe to proceed",
)

# (exclusive lower bound, banner): scores above the bound get the banner
BANNER_BANDS = [
    (70, CRITICAL_RISK),
    (40, MEDIUM_RISK),
    (20, LOW_RISK),
]

COMPANY_ADVICE = "Verify company registration independently"
DOMAIN_ADVICE = "Domain appears recently registered - verify legitimacy"
BANK_ADVICE = "Bank details invalid - request correct banking information"


def banner_for(risk_score: int) -> tuple[str, ...]:
    for lower, banner in BANNER_BANDS:
        if risk_score > lower:
            return banner
    return VERIFIED


def generate_recommendations(checks: ValidationChecks, risk_score: int) -> tuple[str, ...]:
    recommendations = list(banner_for(risk_score))

    if checks.company_registration.status != VerdictStatus.VERIFIED:
        recommendations.append(COMPANY_ADVICE)
    if checks.domain_validation.status == VerdictStatus.SUSPICIOUS:
        recommendations.append(DOMAIN_ADVICE)
    if checks.bank_validation.status == VerdictStatus.INVALID:
        recommendations.append(BANK_ADVICE)

    return tuple(recommendations)
