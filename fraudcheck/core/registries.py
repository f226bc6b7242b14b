"""
Registry Lookups: read-only directories the validators cross-check against.

Lookup contract (all three registries):
    - async lookup(...) → record, or None when the registry has no match
    - RegistryUnavailable is raised only for infrastructure failure

The in-memory implementations below stand in for the company registrar
(CIPC), domain ownership (WHOIS) and bank-account (SAFPS) services.
"""

import asyncio
from datetime import date
from typing import Optional, Protocol

from pydantic import BaseModel


# ── Records ───────────────────────────────────────────────────


class CompanyRecord(BaseModel):
    company_name: str
    registration_number: str
    status: str = "active"          # active / suspended / deregistered
    registration_date: date
    directors: tuple[str, ...] = ()
    address: Optional[str] = None

    model_config = {"frozen": True}


class DomainRecord(BaseModel):
    domain: str
    registrar: str
    creation_date: date
    expiration_date: Optional[date] = None
    name_servers: tuple[str, ...] = ()
    registrant_org: Optional[str] = None

    model_config = {"frozen": True}


class BankAccountRecord(BaseModel):
    account_number: str
    branch_code: str
    bank_name: str
    account_type: str = "cheque"
    status: str = "active"          # active / closed / frozen

    model_config = {"frozen": True}


# ── Contracts ─────────────────────────────────────────────────


class CompanyRegistry(Protocol):
    async def lookup(self, name_or_reg_no: str) -> Optional[CompanyRecord]: ...


class DomainRegistry(Protocol):
    async def lookup(self, domain: str) -> Optional[DomainRecord]: ...


class BankRegistry(Protocol):
    async def lookup(self, account_number: str, branch_code: str) -> Optional[BankAccountRecord]: ...


# ── Seed data ─────────────────────────────────────────────────

SEED_COMPANIES = [
    CompanyRecord(
        company_name="ABC Manufacturing (Pty) Ltd",
        registration_number="2019/123456/07",
        registration_date=date(2019, 3, 15),
        directors=("John Smith", "Mary Johnson"),
        address="123 Industrial Ave, Johannesburg, 2001",
    ),
    CompanyRecord(
        company_name="TechCorp Solutions",
        registration_number="2020/987654/07",
        registration_date=date(2020, 8, 22),
        directors=("David Wilson", "Sarah Brown"),
    ),
]

SEED_DOMAINS = [
    DomainRecord(
        domain="abcmanufacturing.co.za",
        registrar="ZACR",
        creation_date=date(2019, 4, 1),
        registrant_org="ABC Manufacturing (Pty) Ltd",
    ),
    DomainRecord(
        domain="techcorp.co.za",
        registrar="ZACR",
        creation_date=date(2020, 9, 1),
        registrant_org="TechCorp Solutions",
    ),
]

SEED_ACCOUNTS = [
    BankAccountRecord(account_number="1234567890", branch_code="632005", bank_name="First National Bank"),
    BankAccountRecord(account_number="9876543210", branch_code="051001", bank_name="Standard Bank"),
]


# ── In-memory registries ──────────────────────────────────────


class _InMemoryRegistry:
    name = "registry"

    def __init__(self, latency: float = 0.0):
        self._latency = latency

    async def _simulate_network(self) -> None:
        if self._latency > 0:
            await asyncio.sleep(self._latency)


class InMemoryCompanyRegistry(_InMemoryRegistry):
    """
    Name queries match when the query is a case-insensitive substring of a
    registered name; registration-number queries must match exactly.
    """

    name = "company"

    def __init__(self, records: Optional[list[CompanyRecord]] = None, latency: float = 0.0):
        super().__init__(latency)
        self._records = list(SEED_COMPANIES if records is None else records)

    async def lookup(self, name_or_reg_no: str) -> Optional[CompanyRecord]:
        await self._simulate_network()
        query = name_or_reg_no.strip()
        if not query:
            return None
        needle = query.lower()
        for record in self._records:
            if needle in record.company_name.lower() or record.registration_number == query:
                return record
        return None


class InMemoryDomainRegistry(_InMemoryRegistry):
    name = "domain"

    def __init__(self, records: Optional[list[DomainRecord]] = None, latency: float = 0.0):
        super().__init__(latency)
        self._records = {r.domain.lower(): r for r in (SEED_DOMAINS if records is None else records)}

    async def lookup(self, domain: str) -> Optional[DomainRecord]:
        await self._simulate_network()
        return self._records.get(domain.strip().lower())


class InMemoryBankRegistry(_InMemoryRegistry):
    name = "bank"

    def __init__(self, records: Optional[list[BankAccountRecord]] = None, latency: float = 0.0):
        super().__init__(latency)
        records = SEED_ACCOUNTS if records is None else records
        self._records = {(r.account_number, r.branch_code): r for r in records}

    async def lookup(self, account_number: str, branch_code: str) -> Optional[BankAccountRecord]:
        await self._simulate_network()
        return self._records.get((account_number.strip(), branch_code.strip()))
