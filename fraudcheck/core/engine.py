"""
Verification Engine: main orchestrator.

Entry points: validate_document(), verify_payment(), verify_company(),
and validate(request) which dispatches on request.flow.

Document pipeline (one pass, no retries):
    Received → Extracting → Validating → Scoring → Recommending → Completed

The three registry validators run concurrently and are joined before
scoring. A validator that raises or exceeds its timeout becomes an error
verdict for that registry only; the request always completes.
"""

import asyncio
import logging
import random
from enum import Enum
from typing import Optional, Union

from fraudcheck.config import Settings, load_settings
from fraudcheck.core.company import CompanyVerifier, SimulatedCompanyDirectory
from fraudcheck.core.errors import InvalidRequest
from fraudcheck.core.extractor import FieldExtractor, PlainTextReader, RawInput
from fraudcheck.core.models import (
    ClaimSet,
    CompanyVerdict,
    DocumentType,
    Flow,
    ParsedReference,
    PaymentVerdict,
    ValidationChecks,
    ValidatorVerdict,
    VerdictStatus,
    VerificationRequest,
    VerificationResult,
)
from fraudcheck.core.payment import PaymentMatcher, SimulatedLedger
from fraudcheck.core.recommendations import generate_recommendations
from fraudcheck.core.registries import (
    InMemoryBankRegistry,
    InMemoryCompanyRegistry,
    InMemoryDomainRegistry,
)
from fraudcheck.core.risk import calculate_risk_score, is_document_valid
from fraudcheck.core.validators import BankValidator, CompanyValidator, DomainValidator

logger = logging.getLogger(__name__)

COMPANY_NOT_FOUND = "Company not found in registry"
DOMAIN_SUSPICIOUS = "Domain registration suspicious"
BANK_INVALID = "Invalid bank account details"


class Stage(str, Enum):
    RECEIVED = "Received"
    EXTRACTING = "Extracting"
    VALIDATING = "Validating"
    SCORING = "Scoring"
    RECOMMENDING = "Recommending"
    COMPLETED = "Completed"


def synthesize_fraud_indicators(
    company: ValidatorVerdict, domain: ValidatorVerdict, bank: ValidatorVerdict
) -> tuple[str, ...]:
    """Fixed order: company, domain, bank."""
    indicators: list[str] = []
    if company.status != VerdictStatus.VERIFIED:
        indicators.append(COMPANY_NOT_FOUND)
    if domain.status == VerdictStatus.SUSPICIOUS:
        indicators.append(DOMAIN_SUSPICIOUS)
    if bank.status == VerdictStatus.INVALID:
        indicators.append(BANK_INVALID)
    return tuple(indicators)


class VerificationEngine:
    """
    Sequences extraction, registry validation, scoring and recommendations.

    All collaborators are injected so tests can substitute doubles; use
    build_engine() for the default wiring.
    """

    def __init__(
        self,
        extractor: FieldExtractor,
        company_validator: CompanyValidator,
        domain_validator: DomainValidator,
        bank_validator: BankValidator,
        payment_matcher: PaymentMatcher,
        company_verifier: CompanyVerifier,
        lookup_timeout: Optional[float] = 5.0,
    ):
        self._extractor = extractor
        self._company_validator = company_validator
        self._domain_validator = domain_validator
        self._bank_validator = bank_validator
        self._payment_matcher = payment_matcher
        self._company_verifier = company_verifier
        self._timeout = lookup_timeout

    # ────────────────────────────────────────
    # Dispatcher
    # ────────────────────────────────────────
    async def validate(
        self, request: VerificationRequest
    ) -> Union[VerificationResult, PaymentVerdict, CompanyVerdict]:
        if request.flow == Flow.DOCUMENT:
            if request.text is None:
                raise InvalidRequest("document flow requires text")
            return await self.validate_document(request.text, request.hinted_type)

        if request.flow == Flow.PAYMENT:
            payment = request.reference or request.text
            if payment is None:
                raise InvalidRequest("payment flow requires text or a parsed reference")
            return await self.verify_payment(payment)

        if request.flow == Flow.COMPANY:
            if not request.text:
                raise InvalidRequest("company flow requires a company name")
            return await self.verify_company(request.text, request.domain)

        raise InvalidRequest(f"unsupported flow: {request.flow!r}")

    # ────────────────────────────────────────
    # Document flow
    # ────────────────────────────────────────
    async def validate_document(
        self, source: RawInput, hinted_type: Optional[Union[DocumentType, str]] = None
    ) -> VerificationResult:
        """
        Pipeline:
            1. extract()                 → ClaimSet
            2. validators (concurrent)   → three ValidatorVerdicts
            3. fraud indicators          → fixed-order list
            4. calculate_risk_score()    → 0–100
            5. generate_recommendations()→ ordered advice
        """
        if source is None:
            raise InvalidRequest("document source is required")
        self._advance(Stage.RECEIVED)

        self._advance(Stage.EXTRACTING)
        claims = self._extractor.extract(source, hinted_type)

        self._advance(Stage.VALIDATING)
        company, domain, bank = await self._run_validators(claims)

        self._advance(Stage.SCORING)
        checks = ValidationChecks(
            ocr_quality=claims.confidence,
            company_registration=company,
            domain_validation=domain,
            bank_validation=bank,
            fraud_indicators=synthesize_fraud_indicators(company, domain, bank),
        )
        risk_score = calculate_risk_score(checks)

        self._advance(Stage.RECOMMENDING)
        recommendations = generate_recommendations(checks, risk_score)

        result = VerificationResult(
            is_valid=is_document_valid(risk_score, checks),
            confidence=claims.confidence,
            claims=claims,
            checks=checks,
            risk_score=risk_score,
            recommendations=recommendations,
        )
        self._advance(Stage.COMPLETED)
        logger.info(
            "Document verified: type=%s risk=%d valid=%s",
            claims.document_type.value, risk_score, result.is_valid,
        )
        return result

    async def _run_validators(self, claims: ClaimSet) -> list[ValidatorVerdict]:
        validators = [self._company_validator, self._domain_validator, self._bank_validator]
        outcomes = await asyncio.gather(
            *(self._with_timeout(v.validate(claims)) for v in validators),
            return_exceptions=True,
        )

        verdicts: list[ValidatorVerdict] = []
        for validator, outcome in zip(validators, outcomes):
            if isinstance(outcome, ValidatorVerdict):
                verdicts.append(outcome)
                continue
            if isinstance(outcome, asyncio.CancelledError):
                raise outcome
            if isinstance(outcome, asyncio.TimeoutError):
                reason = "lookup timed out"
            else:
                reason = str(outcome) or type(outcome).__name__
            logger.warning("%s validator failed: %s", validator.name, reason)
            verdicts.append(ValidatorVerdict.error(validator.name, reason))
        return verdicts

    async def _with_timeout(self, coro):
        if self._timeout is None:
            return await coro
        return await asyncio.wait_for(coro, self._timeout)

    # ────────────────────────────────────────
    # Payment flow
    # ────────────────────────────────────────
    async def verify_payment(self, payment: Union[str, ParsedReference]) -> PaymentVerdict:
        if payment is None:
            raise InvalidRequest("payment reference is required")
        try:
            verdict = await self._with_timeout(self._payment_matcher.verify_payment(payment))
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.warning("Payment ledger lookup failed: %s", str(exc) or type(exc).__name__)
            verdict = self._payment_matcher.unavailable(payment)

        logger.info("Payment verified: status=%s risk=%d", verdict.status.value, verdict.risk_score)
        return verdict

    # ────────────────────────────────────────
    # Company flow
    # ────────────────────────────────────────
    async def verify_company(self, name_or_text: str, domain: Optional[str] = None) -> CompanyVerdict:
        if not name_or_text or not name_or_text.strip():
            raise InvalidRequest("company name is required")
        try:
            verdict = await self._with_timeout(self._company_verifier.verify_company(name_or_text, domain))
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.warning("Company directory lookup failed: %s", str(exc) or type(exc).__name__)
            verdict = self._company_verifier.unavailable(name_or_text, domain)

        logger.info("Company verified: status=%s risk=%d", verdict.status.value, verdict.risk_score)
        return verdict

    @staticmethod
    def _advance(stage: Stage) -> None:
        logger.debug("Verification stage: %s", stage.value)


def build_engine(settings: Optional[Settings] = None) -> VerificationEngine:
    """Default wiring: in-memory registries and simulated ledger/directory."""
    settings = settings or load_settings()
    latency = settings.registry_latency

    rng = random.Random(settings.simulation_seed)

    return VerificationEngine(
        extractor=FieldExtractor(
            reader=PlainTextReader(confidence=settings.text_confidence),
            default_currency=settings.default_currency,
        ),
        company_validator=CompanyValidator(InMemoryCompanyRegistry(latency=latency)),
        domain_validator=DomainValidator(InMemoryDomainRegistry(latency=latency)),
        bank_validator=BankValidator(InMemoryBankRegistry(latency=latency)),
        payment_matcher=PaymentMatcher(
            SimulatedLedger(rng=rng, latency=latency),
            rng=rng,
            currency=settings.default_currency,
        ),
        company_verifier=CompanyVerifier(SimulatedCompanyDirectory(rng=rng, latency=latency), rng=rng),
        lookup_timeout=settings.lookup_timeout,
    )
