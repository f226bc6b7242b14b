"""
Tests for the FastAPI REST API endpoints.
"""

import pytest
from fastapi.testclient import TestClient

from conftest import PO_TEXT, make_engine
from fraudcheck.main import create_app

client = TestClient(create_app(make_engine()))


class BrokenEngine:
    """Engine double whose every flow blows up."""

    async def validate(self, request):
        raise RuntimeError("boom")

    async def validate_document(self, source, hinted_type=None):
        raise RuntimeError("boom")

    async def verify_payment(self, payment):
        raise RuntimeError("boom")

    async def verify_company(self, name_or_text, domain=None):
        raise RuntimeError("boom")


class TestHealthEndpoint:
    def test_health_check(self):
        resp = client.get("/api/v1/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "healthy"
        assert data["version"] == "1.0.0"

    def test_root(self):
        resp = client.get("/")
        assert resp.status_code == 200
        assert resp.json()["health"] == "/api/v1/health"


class TestDocumentEndpoint:
    def test_clean_document_returns_200(self):
        resp = client.post("/api/v1/documents/validate", json={"text": PO_TEXT})
        assert resp.status_code == 200
        data = resp.json()
        assert data["is_valid"] is True
        assert data["risk_score"] == 0
        assert data["claims"]["document_type"] == "PO"
        assert data["claims"]["date"] == "2024-01-15"
        assert data["checks"]["company_registration"]["status"] == "verified"
        assert data["recommendations"] == ["✅ VERIFIED: Safe to proceed"]

    def test_hint_is_accepted(self):
        resp = client.post(
            "/api/v1/documents/validate",
            json={"text": "Account: 1234567890 Branch: 632005", "hinted_type": "EFT"},
        )
        assert resp.status_code == 200
        assert resp.json()["claims"]["document_type"] == "EFT"

    @pytest.mark.parametrize(
        "payload",
        [
            {},
            {"text": ""},
            {"text": PO_TEXT, "hinted_type": "Receipt"},
            {"text": PO_TEXT, "priority": "high"},
        ],
    )
    def test_bad_payload_returns_422(self, payload):
        resp = client.post("/api/v1/documents/validate", json=payload)
        assert resp.status_code == 422

    def test_file_uri_is_literal_text(self, tmp_path):
        doc = tmp_path / "supplier.txt"
        doc.write_text(PO_TEXT, encoding="utf-8")
        resp = client.post("/api/v1/documents/validate", json={"text": doc.as_uri()})
        assert resp.status_code == 200
        claims = resp.json()["claims"]
        assert claims["document_type"] == "Unknown"
        assert claims["company_name"] is None
        assert claims["contact_email"] is None
        assert claims["bank_details"] is None
        assert claims["confidence"] == 1.0

    def test_null_byte_uri_is_literal_text(self):
        resp = client.post("/api/v1/documents/validate", json={"text": "file:///tmp/a%00b"})
        assert resp.status_code == 200
        assert resp.json()["claims"]["confidence"] == 1.0


class TestPaymentEndpoint:
    def test_free_text(self):
        resp = client.post("/api/v1/payments/verify", json={"text": "FNB, Ref 483920"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["bank"] == "FNB"
        assert data["reference"] == "483920"

    def test_parsed_reference(self):
        resp = client.post(
            "/api/v1/payments/verify",
            json={"reference": {"bank": "Capitec", "reference": "7788"}},
        )
        assert resp.status_code == 200
        assert resp.json()["bank"] == "Capitec"

    def test_unparseable_text(self):
        resp = client.post("/api/v1/payments/verify", json={"text": "hello world"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "not_found"
        assert data["risk_score"] == 100
        assert data["fraud_indicators"] == ["Invalid reference format"]

    def test_empty_payload_returns_422(self):
        resp = client.post("/api/v1/payments/verify", json={})
        assert resp.status_code == 422


class TestCompanyEndpoint:
    def test_company(self):
        resp = client.post(
            "/api/v1/companies/verify",
            json={"name": "Acme Holdings (Pty) Ltd", "domain": "acme.co.za"},
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["company_name"] == "Acme Holdings (Pty) Ltd"
        assert data["status"] in {"active", "inactive", "suspended"}

    def test_empty_name_returns_422(self):
        resp = client.post("/api/v1/companies/verify", json={"name": ""})
        assert resp.status_code == 422

    def test_blank_name_returns_400(self):
        resp = client.post("/api/v1/companies/verify", json={"name": "   "})
        assert resp.status_code == 400


class TestDispatchEndpoint:
    def test_document_flow(self):
        resp = client.post("/api/v1/verify", json={"flow": "document", "text": PO_TEXT})
        assert resp.status_code == 200
        assert resp.json()["is_valid"] is True

    def test_document_flow_file_uri_is_literal_text(self, tmp_path):
        doc = tmp_path / "supplier.txt"
        doc.write_text(PO_TEXT, encoding="utf-8")
        resp = client.post("/api/v1/verify", json={"flow": "document", "text": doc.as_uri()})
        assert resp.status_code == 200
        claims = resp.json()["claims"]
        assert claims["registration_number"] is None
        assert claims["contact_email"] is None
        assert claims["bank_details"] is None

    def test_payment_flow(self):
        resp = client.post("/api/v1/verify", json={"flow": "payment", "text": "hello world"})
        assert resp.status_code == 200
        assert resp.json()["fraud_indicators"] == ["Invalid reference format"]

    def test_missing_payload_returns_400(self):
        resp = client.post("/api/v1/verify", json={"flow": "document"})
        assert resp.status_code == 400

    def test_unknown_flow_returns_422(self):
        resp = client.post("/api/v1/verify", json={"flow": "fax", "text": "x"})
        assert resp.status_code == 422


class TestEngineFailure:
    @pytest.fixture
    def broken_client(self):
        return TestClient(create_app(BrokenEngine()))

    @pytest.mark.parametrize(
        "path, payload",
        [
            ("/api/v1/documents/validate", {"text": PO_TEXT}),
            ("/api/v1/payments/verify", {"text": "FNB, Ref 1"}),
            ("/api/v1/companies/verify", {"name": "Acme"}),
            ("/api/v1/verify", {"flow": "company", "text": "Acme"}),
        ],
    )
    def test_unexpected_error_returns_500(self, broken_client, path, payload):
        resp = broken_client.post(path, json=payload)
        assert resp.status_code == 500
        assert "boom" in resp.json()["detail"]
