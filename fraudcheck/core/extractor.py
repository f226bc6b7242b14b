"""
Field Extractor: turns raw document input into a ClaimSet.

Pure and synchronous. A pattern that does not match simply leaves its
field unset; extract() never raises for any input.

Document classification is a keyword cascade, first match wins:
    PO → RFQ → PoP → EFT → Invoice → Unknown
"""

import logging
import re
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Optional, Protocol, Union
from urllib.parse import unquote, urlparse

from fraudcheck.core.models import BankDetails, ClaimSet, DocumentType, Money

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DocumentText:
    """Text recovered from a document plus how much the reader trusts it."""
    text: str
    confidence: float = 1.0


RawInput = Union[str, bytes, Path, DocumentText]


class DocumentReader(Protocol):
    def read(self, raw: Union[str, bytes, Path]) -> DocumentText: ...


class PlainTextReader:
    """
    Reader for input that is already text.

    Accepts a str, UTF-8 bytes, a Path or a file:// URI. Unreadable files
    yield empty text rather than an exception.
    """

    def __init__(self, confidence: float = 1.0):
        self._confidence = max(0.0, min(1.0, confidence))

    def read(self, raw: Union[str, bytes, Path]) -> DocumentText:
        if isinstance(raw, str) and raw.startswith("file://"):
            raw = Path(unquote(urlparse(raw).path))
        if isinstance(raw, Path):
            try:
                raw = raw.read_bytes()
            except (OSError, ValueError) as exc:
                logger.warning("Could not read document %s: %s", raw, exc)
                return DocumentText(text="", confidence=0.0)
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8", errors="ignore")
        return DocumentText(text=raw, confidence=self._confidence)


# ── Patterns ──────────────────────────────────────────────────
# Character classes use a literal space rather than \s so no field can
# span two lines of the document. Repeats are bounded so every pattern
# scans in linear time, however long a line is.

# Longest name considered in front of a legal suffix
COMPANY_NAME_WINDOW = 120

LEGAL_SUFFIX_RE = re.compile(r"\b(?:Pty|Ltd|CC|Inc)\b")
COMPANY_RE = re.compile(
    r"([A-Z][A-Za-z0-9&().,' -]{0,%d}?\b(?:Pty|Ltd|CC|Inc)\b(?:\)?[ ]{0,3}Ltd\b)?\.?\)?)"
    % COMPANY_NAME_WINDOW
)
REGISTRATION_RE = re.compile(
    r"\b(?:Registration|Reg)(?:[ ]*No\.?)?[ ]*:[ ]*(\d{4}/\d{6}/\d{2})\b", re.IGNORECASE
)
VAT_RE = re.compile(r"\bVAT(?:[ ]*(?:No\.?|Number))?[ ]*:[ ]*(\d{10})\b", re.IGNORECASE)
EMAIL_RE = re.compile(r"([A-Za-z0-9._%+-]{1,64}@[A-Za-z0-9.-]{1,253}\.[A-Za-z]{2,24})")
ACCOUNT_RE = re.compile(r"\bAccount(?:[ ]*(?:No\.?|Number))?[ ]*:[ ]*(\d{8,12})\b", re.IGNORECASE)
BRANCH_RE = re.compile(r"\bBranch(?:[ ]*Code)?[ ]*:[ ]*(\d{6})\b", re.IGNORECASE)
BANK_RE = re.compile(r"\bBank(?:[ ]*Name)?[ ]*:[ ]*([A-Za-z][A-Za-z &]*[A-Za-z])", re.IGNORECASE)
AMOUNT_RE = re.compile(
    r"\b(?:Amount|Total)[ ]*:[ ]*(R|ZAR|USD|EUR|GBP|\$|€|£)?[ ]*(\d[\d,]*(?:\.\d+)?)",
    re.IGNORECASE,
)
REFERENCE_RE = re.compile(
    r"\b(?:Reference|Ref|PO|RFQ)(?:[ ]*(?:Number|No\.?|#))?[ ]*:[ ]*([A-Z0-9][A-Z0-9-]*)",
    re.IGNORECASE,
)
LABELLED_DATE_RE = re.compile(r"\bDate[ ]*:[ ]*(\d{4}-\d{2}-\d{2})\b", re.IGNORECASE)
ISO_DATE_RE = re.compile(r"\b(\d{4}-\d{2}-\d{2})\b")

CURRENCY_SYMBOLS = {
    "R": "ZAR",
    "ZAR": "ZAR",
    "$": "USD",
    "USD": "USD",
    "€": "EUR",
    "EUR": "EUR",
    "£": "GBP",
    "GBP": "GBP",
}

# Checked in order; the first group with a hit decides the type.
CLASSIFICATION_RULES = [
    (DocumentType.PO, [r"purchase order", r"\bpo number\b"]),
    (DocumentType.RFQ, [r"request for quotation", r"\brfq\b"]),
    (DocumentType.POP, [r"proof of payment", r"transaction successful"]),
    (DocumentType.EFT, [r"\beft\b", r"electronic transfer"]),
    (DocumentType.INVOICE, [r"invoice"]),
]


def classify_document(text: str) -> DocumentType:
    lowered = text.lower()
    for doc_type, markers in CLASSIFICATION_RULES:
        if any(re.search(marker, lowered) for marker in markers):
            return doc_type
    return DocumentType.UNKNOWN


def _first(pattern: re.Pattern, text: str, group: int = 1) -> Optional[str]:
    match = pattern.search(text)
    return match.group(group).strip() if match else None


def find_company_name(text: str) -> Optional[str]:
    """
    First "<Name> (Pty) Ltd"-style company name in the text.

    Only the stretch of the line in front of each legal suffix is searched,
    so a long line with no suffix costs a single pass.
    """
    for suffix in LEGAL_SUFFIX_RE.finditer(text):
        line_start = text.rfind("\n", 0, suffix.start()) + 1
        line_end = text.find("\n", suffix.end())
        if line_end == -1:
            line_end = len(text)
        start = max(line_start, suffix.start() - COMPANY_NAME_WINDOW)
        # room for a trailing ") Ltd.)" after the suffix
        end = min(line_end, suffix.end() + 12)
        match = COMPANY_RE.search(text, start, end)
        if match:
            return match.group(1).strip()
    return None


def _parse_iso_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


class FieldExtractor:
    """
    Pulls candidate fields out of document text.

    The reader is the OCR / text collaborator: anything it returns is
    trusted at the confidence it reports.
    """

    def __init__(self, reader: Optional[DocumentReader] = None, default_currency: str = "ZAR"):
        self._reader = reader or PlainTextReader()
        self._default_currency = default_currency

    def extract(self, raw: RawInput, hinted_type: Optional[Union[DocumentType, str]] = None) -> ClaimSet:
        document = raw if isinstance(raw, DocumentText) else self._reader.read(raw)
        text = str(document.text or "")

        doc_type = classify_document(text)
        if doc_type == DocumentType.UNKNOWN:
            doc_type = self._coerce_hint(hinted_type) or doc_type

        claims = ClaimSet(
            company_name=find_company_name(text),
            registration_number=_first(REGISTRATION_RE, text),
            vat_number=_first(VAT_RE, text),
            bank_details=self._bank_details(text),
            contact_email=_first(EMAIL_RE, text),
            amount=self._amount(text),
            reference=_first(REFERENCE_RE, text),
            date=self._date(text),
            document_type=doc_type,
            confidence=max(0.0, min(1.0, document.confidence)),
        )
        logger.debug(
            "Extracted %s claims (type=%s, confidence=%.2f)",
            len(claims.model_dump(exclude_none=True)), claims.document_type.value, claims.confidence,
        )
        return claims

    @staticmethod
    def _coerce_hint(hinted_type) -> Optional[DocumentType]:
        if hinted_type is None:
            return None
        if isinstance(hinted_type, DocumentType):
            return hinted_type
        for doc_type in DocumentType:
            if doc_type.value.lower() == str(hinted_type).strip().lower():
                return doc_type
        logger.debug("Ignoring unrecognised document type hint %r", hinted_type)
        return None

    @staticmethod
    def _bank_details(text: str) -> Optional[BankDetails]:
        account = _first(ACCOUNT_RE, text)
        branch = _first(BRANCH_RE, text)
        bank = _first(BANK_RE, text)
        if not (account or branch or bank):
            return None
        return BankDetails(account_number=account, branch_code=branch, bank_name=bank)

    def _amount(self, text: str) -> Optional[Money]:
        match = AMOUNT_RE.search(text)
        if not match:
            return None
        symbol, digits = match.group(1), match.group(2)
        try:
            value = float(digits.replace(",", ""))
        except ValueError:
            return None
        currency = CURRENCY_SYMBOLS.get(symbol.upper(), self._default_currency) if symbol else self._default_currency
        return Money(value=value, currency=currency)

    @staticmethod
    def _date(text: str) -> Optional[date]:
        labelled = _parse_iso_date(_first(LABELLED_DATE_RE, text))
        if labelled:
            return labelled
        for candidate in ISO_DATE_RE.findall(text):
            parsed = _parse_iso_date(candidate)
            if parsed:
                return parsed
        return None
