"""
Payment Matcher: verifies a proof-of-payment reference against a bank ledger.

Free text is parsed first (bank name + "ref"/"reference" + digits). Text
that cannot be parsed short-circuits to a terminal not_found verdict and
the ledger is never called.

The ledger sits behind the same async lookup contract as the registries.
SimulatedLedger is a placeholder: it draws one of four outcome classes by
weight (cleared 0.60, pending 0.20, not_found 0.15, failed 0.05). Inject a
seeded random.Random to make it reproducible.
"""

import asyncio
import logging
import random
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, Protocol, Union

from fraudcheck.core.models import ParsedReference, PaymentDetails, PaymentStatus, PaymentVerdict
from fraudcheck.core.risk import clamp_score

logger = logging.getLogger(__name__)

UNKNOWN_BANK = "Unknown Bank"
INVALID_REFERENCE = "Invalid reference format"
LEDGER_UNAVAILABLE = "Bank ledger unavailable"

# Bank-specific patterns first, then the bank-agnostic fallback. The gap
# between bank name and "ref" is bounded to keep the scan linear.
REFERENCE_PATTERNS = [
    re.compile(r"(?:FNB).{0,80}?(?:reference|ref)[\s:]*([0-9]+)", re.IGNORECASE),
    re.compile(r"(?:standard\s*bank|stb).{0,80}?(?:reference|ref)[\s:]*([0-9]+)", re.IGNORECASE),
    re.compile(r"(?:ABSA).{0,80}?(?:reference|ref)[\s:]*([0-9]+)", re.IGNORECASE),
    re.compile(r"(?:nedbank|ned).{0,80}?(?:reference|ref)[\s:]*([0-9]+)", re.IGNORECASE),
    re.compile(r"(?:capitec|cap).{0,80}?(?:reference|ref)[\s:]*([0-9]+)", re.IGNORECASE),
    re.compile(r"(?:reference|ref)[\s:]*([0-9]+)", re.IGNORECASE),
]

KNOWN_BANK_RE = re.compile(r"(FNB|Standard Bank|ABSA|Nedbank|Capitec)", re.IGNORECASE)


def parse_reference(text: str) -> Optional[ParsedReference]:
    """
    Parse a payment reference such as "FNB, Ref 483920".

    Returns None when no reference digits can be found.
    """
    if not text:
        return None
    for pattern in REFERENCE_PATTERNS:
        match = pattern.search(text)
        if match:
            bank = KNOWN_BANK_RE.search(text)
            return ParsedReference(
                bank=bank.group(1) if bank else UNKNOWN_BANK,
                reference=match.group(1),
            )
    return None


# ── Outcome classes ───────────────────────────────────────────


@dataclass(frozen=True)
class OutcomeProfile:
    status: PaymentStatus
    weight: float
    confidence: tuple[float, float]
    risk: tuple[float, float]
    amount: tuple[float, float]
    details: PaymentDetails
    fraud_indicators: tuple[str, ...] = ()


OUTCOME_PROFILES = [
    OutcomeProfile(
        status=PaymentStatus.CLEARED,
        weight=0.60,
        confidence=(95, 100),
        risk=(0, 20),
        amount=(1000, 51000),
        details=PaymentDetails(account_match=True, amount_match=True, timeline_valid=True),
    ),
    OutcomeProfile(
        status=PaymentStatus.PENDING,
        weight=0.20,
        confidence=(40, 70),
        risk=(60, 90),
        amount=(500, 30500),
        details=PaymentDetails(account_match=True, amount_match=False, timeline_valid=True),
        fraud_indicators=("Payment still processing",),
    ),
    OutcomeProfile(
        status=PaymentStatus.NOT_FOUND,
        weight=0.15,
        confidence=(10, 30),
        risk=(80, 100),
        amount=(0, 0),
        details=PaymentDetails(account_match=False, amount_match=False, timeline_valid=False),
        fraud_indicators=("Reference not found in bank records",),
    ),
    OutcomeProfile(
        status=PaymentStatus.FAILED,
        weight=0.05,
        confidence=(85, 95),
        risk=(90, 100),
        amount=(100, 20100),
        details=PaymentDetails(account_match=False, amount_match=False, timeline_valid=False),
        fraud_indicators=("Suspicious transaction pattern", "Account mismatch"),
    ),
]

PROFILES_BY_STATUS = {profile.status: profile for profile in OUTCOME_PROFILES}

NO_MATCH = PaymentDetails(account_match=False, amount_match=False, timeline_valid=False)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ── Ledger contract ───────────────────────────────────────────


@dataclass(frozen=True)
class LedgerEntry:
    status: PaymentStatus
    amount: float
    transaction_date: datetime


class PaymentLedger(Protocol):
    async def lookup(self, reference: ParsedReference) -> Optional[LedgerEntry]: ...


class SimulatedLedger:
    """Weighted-random stand-in for a real bank ledger."""

    name = "ledger"

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        latency: float = 0.0,
        now: Callable[[], datetime] = _utcnow,
    ):
        self._rng = rng or random.Random()
        self._latency = latency
        self._now = now

    async def lookup(self, reference: ParsedReference) -> Optional[LedgerEntry]:
        if self._latency > 0:
            await asyncio.sleep(self._latency)

        profile = self._rng.choices(OUTCOME_PROFILES, weights=[p.weight for p in OUTCOME_PROFILES])[0]
        if profile.status == PaymentStatus.NOT_FOUND:
            return None

        low, high = profile.amount
        return LedgerEntry(
            status=profile.status,
            amount=round(self._rng.uniform(low, high), 2),
            transaction_date=self._now() - timedelta(days=self._rng.uniform(0, 7)),
        )


# ── Matcher ───────────────────────────────────────────────────


class PaymentMatcher:
    def __init__(
        self,
        ledger: PaymentLedger,
        rng: Optional[random.Random] = None,
        currency: str = "ZAR",
        now: Callable[[], datetime] = _utcnow,
    ):
        self._ledger = ledger
        self._rng = rng or random.Random()
        self._currency = currency
        self._now = now

    async def verify_payment(self, payment: Union[str, ParsedReference]) -> PaymentVerdict:
        reference = self.resolve(payment)
        if reference is None:
            logger.info("Unparseable payment reference, skipping ledger lookup")
            return self.invalid_reference(str(payment))

        entry = await self._ledger.lookup(reference)
        if entry is None:
            return self._verdict(
                PROFILES_BY_STATUS[PaymentStatus.NOT_FOUND], reference, amount=0.0, when=self._now()
            )
        return self._verdict(
            PROFILES_BY_STATUS[entry.status], reference, amount=entry.amount, when=entry.transaction_date
        )

    @staticmethod
    def resolve(payment: Union[str, ParsedReference]) -> Optional[ParsedReference]:
        if isinstance(payment, ParsedReference):
            return payment
        return parse_reference(payment)

    def invalid_reference(self, raw: str) -> PaymentVerdict:
        """Terminal verdict for text with no recognisable reference."""
        return PaymentVerdict(
            is_verified=False,
            status=PaymentStatus.NOT_FOUND,
            amount=0.0,
            currency=self._currency,
            transaction_date=self._now(),
            reference=raw,
            bank="Unknown",
            confidence=0,
            risk_score=100,
            details=NO_MATCH,
            fraud_indicators=(INVALID_REFERENCE,),
        )

    def unavailable(self, payment: Union[str, ParsedReference]) -> PaymentVerdict:
        """Verdict used when the ledger timed out or could not be reached."""
        reference = self.resolve(payment)
        if reference is None:
            return self.invalid_reference(str(payment))
        return PaymentVerdict(
            is_verified=False,
            status=PaymentStatus.NOT_FOUND,
            amount=0.0,
            currency=self._currency,
            transaction_date=self._now(),
            reference=reference.reference,
            bank=reference.bank,
            confidence=0,
            risk_score=100,
            details=NO_MATCH,
            fraud_indicators=(LEDGER_UNAVAILABLE,),
        )

    def _verdict(
        self, profile: OutcomeProfile, reference: ParsedReference, amount: float, when: datetime
    ) -> PaymentVerdict:
        return PaymentVerdict(
            is_verified=profile.status == PaymentStatus.CLEARED,
            status=profile.status,
            amount=amount,
            currency=self._currency,
            transaction_date=when,
            reference=reference.reference,
            bank=reference.bank,
            confidence=round(self._rng.uniform(*profile.confidence), 1),
            risk_score=clamp_score(self._rng.uniform(*profile.risk)),
            details=profile.details,
            fraud_indicators=profile.fraud_indicators,
        )
