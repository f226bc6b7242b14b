"""
Registry Validators: cross-check a ClaimSet against independent registries.

Each validator answers with one ValidatorVerdict:
    - missing input fields      → error (match=False, no detail)
    - registry has no record    → not_found / invalid
    - registry has a record     → verified (or suspicious / suspended)

Lookup failures are NOT caught here; the orchestrator maps them to the
validator's error verdict so a single registry outage never aborts a request.
"""

from datetime import date
from typing import Callable, Optional

from fraudcheck.core.models import ClaimSet, ValidatorVerdict, VerdictStatus
from fraudcheck.core.registries import BankRegistry, CompanyRegistry, DomainRegistry

# Domains younger than this (in days, inclusive) are treated as suspicious
MIN_DOMAIN_AGE_DAYS = 90

# Registrar statuses that make a matched company unusable
INACTIVE_COMPANY_STATUSES = {"suspended", "deregistered"}


class CompanyValidator:
    """Company registrar check: name substring match OR exact registration number."""

    name = "company"

    def __init__(self, registry: CompanyRegistry):
        self._registry = registry

    async def validate(self, claims: ClaimSet) -> ValidatorVerdict:
        if not claims.company_name and not claims.registration_number:
            return ValidatorVerdict.error(self.name, "No company name or registration number to check")

        record = None
        if claims.company_name:
            record = await self._registry.lookup(claims.company_name)
        if record is None and claims.registration_number:
            record = await self._registry.lookup(claims.registration_number)

        if record is None:
            return ValidatorVerdict(registry=self.name, status=VerdictStatus.NOT_FOUND, match=False)

        status = (
            VerdictStatus.SUSPENDED
            if record.status.lower() in INACTIVE_COMPANY_STATUSES
            else VerdictStatus.VERIFIED
        )
        return ValidatorVerdict(
            registry=self.name,
            status=status,
            match=True,
            registration_date=record.registration_date,
            directors=record.directors,
            matched_name=record.company_name,
        )


class DomainValidator:
    """
    Domain ownership check on the contact e-mail's domain.

    A registered domain only verifies once it is older than
    MIN_DOMAIN_AGE_DAYS; freshly registered look-alike domains are a
    common invoice-fraud signal.
    """

    name = "domain"

    def __init__(self, registry: DomainRegistry, today: Callable[[], date] = date.today):
        self._registry = registry
        self._today = today

    async def validate(self, claims: ClaimSet) -> ValidatorVerdict:
        domain = domain_of(claims.contact_email)
        if not domain:
            return ValidatorVerdict.error(self.name, "No contact e-mail to check")

        record = await self._registry.lookup(domain)
        if record is None:
            return ValidatorVerdict(
                registry=self.name, status=VerdictStatus.NOT_FOUND, match=False, domain=domain
            )

        age = (self._today() - record.creation_date).days
        return ValidatorVerdict(
            registry=self.name,
            status=VerdictStatus.VERIFIED if age > MIN_DOMAIN_AGE_DAYS else VerdictStatus.SUSPICIOUS,
            match=True,
            domain=domain,
            domain_age=age,
            registrar=record.registrar,
        )


class BankValidator:
    """Bank registry check on the exact (account number, branch code) pair."""

    name = "bank"

    def __init__(self, registry: BankRegistry):
        self._registry = registry

    async def validate(self, claims: ClaimSet) -> ValidatorVerdict:
        bank = claims.bank_details
        if bank is None or not bank.account_number or not bank.branch_code:
            return ValidatorVerdict.error(self.name, "Account number and branch code are both required")

        record = await self._registry.lookup(bank.account_number, bank.branch_code)
        if record is None:
            return ValidatorVerdict(
                registry=self.name,
                status=VerdictStatus.INVALID,
                match=False,
                account_exists=False,
                branch_valid=False,
            )
        return ValidatorVerdict(
            registry=self.name,
            status=VerdictStatus.VERIFIED,
            match=True,
            account_exists=True,
            branch_valid=True,
        )


def domain_of(email: Optional[str]) -> Optional[str]:
    """Everything after the '@' of an e-mail address, lower-cased."""
    if not email or "@" not in email:
        return None
    domain = email.split("@", 1)[1].strip().lower()
    return domain or None
