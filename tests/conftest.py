"""
Shared fixtures and factories for the verification engine tests.
"""

import asyncio
import random
from datetime import date, timedelta
from typing import Optional

import pytest

from fraudcheck.core.company import CompanyVerifier, SimulatedCompanyDirectory
from fraudcheck.core.engine import VerificationEngine
from fraudcheck.core.extractor import FieldExtractor
from fraudcheck.core.models import ValidatorVerdict, VerdictStatus
from fraudcheck.core.payment import PaymentMatcher, SimulatedLedger
from fraudcheck.core.registries import (
    InMemoryBankRegistry,
    InMemoryCompanyRegistry,
    InMemoryDomainRegistry,
)
from fraudcheck.core.validators import BankValidator, CompanyValidator, DomainValidator

TODAY = date(2024, 6, 1)


PO_TEXT = """
    PURCHASE ORDER
    ABC Manufacturing (Pty) Ltd
    Registration: 2019/123456/07
    VAT: 4123456789

    Email: orders@abcmanufacturing.co.za
    Phone: +27 11 123 4567
    Address: 123 Industrial Ave, Johannesburg, 2001

    PO Number: PO-2024-001234
    Date: 2024-01-15

    Banking Details:
    Account: 1234567890
    Branch: 632005
    Bank: First National Bank

    Total Amount: R 25,750.00

    Supplier: XYZ Supplies
    Delivery Date: 2024-01-30
"""

RFQ_TEXT = """
    REQUEST FOR QUOTATION
    TechCorp Solutions
    Reg No: 2020/987654/07

    Contact: procurement@techcorp.co.za
    Tel: 021 555 0123

    RFQ-2024-0567
    Date: 2024-01-20

    Required: IT Equipment
    Budget: R 150,000
"""

POP_TEXT = """
    PROOF OF PAYMENT

    From: Standard Bank
    Reference: SB240115001234
    Date: 2024-01-15 14:32

    From Account: ****7890
    To Account: 9876543210
    Branch: 051001

    Amount: R 12,500.00
    Description: Payment for Invoice INV-2024-001

    Transaction Successful
"""


class StubValidator:
    """Validator double: optional delay, then a fixed verdict or an exception."""

    def __init__(self, name: str, status=VerdictStatus.VERIFIED, delay: float = 0.0, error: Optional[Exception] = None):
        self.name = name
        self._status = status
        self._delay = delay
        self._error = error
        self.calls = 0

    async def validate(self, claims):
        self.calls += 1
        if self._delay:
            await asyncio.sleep(self._delay)
        if self._error is not None:
            raise self._error
        return ValidatorVerdict(registry=self.name, status=self._status, match=self._status == VerdictStatus.VERIFIED)


def make_engine(
    seed: int = 42,
    lookup_timeout: Optional[float] = 5.0,
    today: date = TODAY,
    company_validator=None,
    domain_validator=None,
    bank_validator=None,
    payment_matcher=None,
    company_verifier=None,
) -> VerificationEngine:
    """Factory for an engine over the seeded in-memory registries. Override any collaborator."""
    rng = random.Random(seed)
    return VerificationEngine(
        extractor=FieldExtractor(),
        company_validator=company_validator or CompanyValidator(InMemoryCompanyRegistry()),
        domain_validator=domain_validator or DomainValidator(InMemoryDomainRegistry(), today=lambda: today),
        bank_validator=bank_validator or BankValidator(InMemoryBankRegistry()),
        payment_matcher=payment_matcher or PaymentMatcher(SimulatedLedger(rng=rng), rng=rng),
        company_verifier=company_verifier or CompanyVerifier(SimulatedCompanyDirectory(rng=rng), rng=rng),
        lookup_timeout=lookup_timeout,
    )


def days_ago(days: int) -> date:
    return TODAY - timedelta(days=days)


@pytest.fixture
def engine() -> VerificationEngine:
    return make_engine()
