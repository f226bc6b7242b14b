"""
FastAPI Router: REST endpoints over the verification engine.
"""

import logging
from typing import Union

from fastapi import APIRouter, Depends, HTTPException, Request

from fraudcheck.api.schemas import CompanyRequest, DocumentRequest, PaymentRequest
from fraudcheck.core.engine import VerificationEngine
from fraudcheck.core.errors import InvalidRequest
from fraudcheck.core.extractor import DocumentText
from fraudcheck.core.models import (
    CompanyVerdict,
    Flow,
    PaymentVerdict,
    VerificationRequest,
    VerificationResult,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["Verification"])


def get_engine(request: Request) -> VerificationEngine:
    return request.app.state.engine


def body_text(request: Request, text: str) -> DocumentText:
    """Request text is always the document itself, never a path or file:// URI."""
    return DocumentText(text=text, confidence=request.app.state.settings.text_confidence)


@router.post(
    "/documents/validate",
    response_model=VerificationResult,
    summary="Validate a document",
    description=(
        "Extracts claims from document text, cross-checks them against the company, "
        "domain and bank registries, and returns a risk score with recommendations."
    ),
)
async def validate_document(
    payload: DocumentRequest, request: Request, engine: VerificationEngine = Depends(get_engine)
) -> VerificationResult:
    try:
        return await engine.validate_document(body_text(request, payload.text), payload.hinted_type)
    except InvalidRequest as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Document validation failed")
        raise HTTPException(status_code=500, detail=f"Verification engine error: {str(e)}")


@router.post(
    "/payments/verify",
    response_model=PaymentVerdict,
    summary="Verify a payment reference",
)
async def verify_payment(
    payload: PaymentRequest, engine: VerificationEngine = Depends(get_engine)
) -> PaymentVerdict:
    try:
        return await engine.verify_payment(payload.reference or payload.text)
    except InvalidRequest as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Payment verification failed")
        raise HTTPException(status_code=500, detail=f"Verification engine error: {str(e)}")


@router.post(
    "/companies/verify",
    response_model=CompanyVerdict,
    summary="Verify a company",
)
async def verify_company(
    payload: CompanyRequest, engine: VerificationEngine = Depends(get_engine)
) -> CompanyVerdict:
    try:
        return await engine.verify_company(payload.name, payload.domain)
    except InvalidRequest as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Company verification failed")
        raise HTTPException(status_code=500, detail=f"Verification engine error: {str(e)}")


@router.post(
    "/verify",
    response_model=Union[VerificationResult, PaymentVerdict, CompanyVerdict],
    summary="Run any verification flow",
    description="Dispatches on `flow`: document, payment or company.",
)
async def verify(
    payload: VerificationRequest, request: Request, engine: VerificationEngine = Depends(get_engine)
) -> Union[VerificationResult, PaymentVerdict, CompanyVerdict]:
    try:
        if payload.flow == Flow.DOCUMENT and payload.text is not None:
            return await engine.validate_document(body_text(request, payload.text), payload.hinted_type)
        return await engine.validate(payload)
    except InvalidRequest as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Verification failed")
        raise HTTPException(status_code=500, detail=f"Verification engine error: {str(e)}")


@router.get(
    "/health",
    summary="Health Check",
    description="Returns service health status.",
)
async def health_check() -> dict:
    return {"status": "healthy", "service": "Fraud-Risk Verification Engine", "version": "1.0.0"}
