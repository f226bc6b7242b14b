"""
Company Verifier: company name / domain → CompanyVerdict.

The directory lookup is a placeholder with the same shape as the
registries. SimulatedCompanyDirectory draws one outcome class by weight:

    legitimate       0.65   active,    verified,  risk  0–25
    domain mismatch  0.20   active,    rejected,  risk 70–90
    inactive         0.10   inactive,  rejected,  risk 85–100
    suspended        0.05   suspended, rejected,  risk 95–100
"""

import asyncio
import logging
import random
import re
from dataclasses import dataclass
from typing import Optional, Protocol

from fraudcheck.core.extractor import find_company_name
from fraudcheck.core.models import CompanyDetails, CompanyStatus, CompanyVerdict
from fraudcheck.core.risk import clamp_score

logger = logging.getLogger(__name__)

UNKNOWN_DOMAIN = "unknown.com"
DIRECTORY_UNAVAILABLE = "Company registry unavailable"

EMAIL_DOMAIN_RE = re.compile(r"@([a-zA-Z0-9.-]{1,253}\.[a-zA-Z]{2,24})")
HOST_RE = re.compile(
    r"(?:https?://)?(?:www\.)?([a-zA-Z0-9-]{1,63}(?:\.[a-zA-Z0-9-]{1,63}){0,8}\.[a-zA-Z]{2,24})"
)


@dataclass(frozen=True)
class CompanyProfile:
    name: str
    weight: float
    status: CompanyStatus
    is_verified: bool
    domain_match: bool
    risk: tuple[float, float]
    details: CompanyDetails


COMPANY_PROFILES = [
    CompanyProfile(
        name="legitimate",
        weight=0.65,
        status=CompanyStatus.ACTIVE,
        is_verified=True,
        domain_match=True,
        risk=(0, 25),
        details=CompanyDetails(
            registered_address="123 Business Park, Johannesburg, 2000",
            directors=("John Smith", "Sarah Johnson"),
            business_type="Manufacturing",
        ),
    ),
    CompanyProfile(
        name="domain_mismatch",
        weight=0.20,
        status=CompanyStatus.ACTIVE,
        is_verified=False,
        domain_match=False,
        risk=(70, 90),
        details=CompanyDetails(
            registered_address="Address not verified",
            business_type="Unknown",
            fraud_alerts=("Domain mismatch with registered company",),
        ),
    ),
    CompanyProfile(
        name="inactive",
        weight=0.10,
        status=CompanyStatus.INACTIVE,
        is_verified=False,
        domain_match=False,
        risk=(85, 100),
        details=CompanyDetails(
            registered_address="Company deregistered",
            business_type="Deregistered",
            fraud_alerts=("Company no longer active",),
        ),
    ),
    CompanyProfile(
        name="suspended",
        weight=0.05,
        status=CompanyStatus.SUSPENDED,
        is_verified=False,
        domain_match=False,
        risk=(95, 100),
        details=CompanyDetails(
            registered_address="Flagged address",
            directors=("Flagged individuals",),
            business_type="High Risk",
            fraud_alerts=("Company flagged for fraudulent activity", "Multiple fraud reports"),
        ),
    ),
]


def extract_domain(text: str) -> Optional[str]:
    """E-mail domain if present, otherwise the first host-like token."""
    if not text:
        return None
    email = EMAIL_DOMAIN_RE.search(text)
    if email:
        return email.group(1).lower()
    host = HOST_RE.search(text)
    if host:
        return host.group(1).lower()
    return None


def extract_company_name(text: str) -> str:
    return find_company_name(text) or text.strip()


class CompanyDirectory(Protocol):
    async def lookup(self, company_name: str, domain: str) -> CompanyProfile: ...


class SimulatedCompanyDirectory:
    name = "directory"

    def __init__(self, rng: Optional[random.Random] = None, latency: float = 0.0):
        self._rng = rng or random.Random()
        self._latency = latency

    async def lookup(self, company_name: str, domain: str) -> CompanyProfile:
        if self._latency > 0:
            await asyncio.sleep(self._latency)
        return self._rng.choices(COMPANY_PROFILES, weights=[p.weight for p in COMPANY_PROFILES])[0]


class CompanyVerifier:
    def __init__(self, directory: CompanyDirectory, rng: Optional[random.Random] = None):
        self._directory = directory
        self._rng = rng or random.Random()

    async def verify_company(self, name_or_text: str, domain: Optional[str] = None) -> CompanyVerdict:
        company_name = extract_company_name(name_or_text)
        resolved_domain = (domain or "").strip().lower() or extract_domain(name_or_text) or UNKNOWN_DOMAIN

        profile = await self._directory.lookup(company_name, resolved_domain)
        logger.debug("Directory returned %s profile for %r", profile.name, company_name)

        registration_number = None
        if profile.is_verified:
            registration_number = str(self._rng.randint(1_000_000_000, 9_999_999_999))

        return CompanyVerdict(
            is_verified=profile.is_verified,
            company_name=company_name,
            registration_number=registration_number,
            status=profile.status,
            domain=resolved_domain,
            domain_match=profile.domain_match,
            risk_score=clamp_score(self._rng.uniform(*profile.risk)),
            details=profile.details,
        )

    def unavailable(self, name_or_text: str, domain: Optional[str] = None) -> CompanyVerdict:
        """Verdict used when the directory timed out or could not be reached."""
        return CompanyVerdict(
            is_verified=False,
            company_name=extract_company_name(name_or_text),
            status=CompanyStatus.INACTIVE,
            domain=(domain or "").strip().lower() or extract_domain(name_or_text) or UNKNOWN_DOMAIN,
            domain_match=False,
            risk_score=100,
            details=CompanyDetails(fraud_alerts=(DIRECTORY_UNAVAILABLE,)),
        )
