"""
Fraud-Risk Verification Engine: FastAPI application entry point.
"""

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fraudcheck.api.routes import router
from fraudcheck.config import load_settings
from fraudcheck.core.engine import VerificationEngine, build_engine

logger = logging.getLogger(__name__)


def create_app(engine: Optional[VerificationEngine] = None) -> FastAPI:
    """Build the app around an engine; the default engine is wired from settings."""
    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
        datefmt="%H:%M:%S",
    )

    app = FastAPI(
        title="Fraud-Risk Verification Engine",
        description=(
            "Cross-checks payment references, companies and business documents against "
            "company, domain and bank registries, and returns a 0–100 fraud risk score "
            "with recommendations."
        ),
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = settings
    app.state.engine = engine or build_engine(settings)
    logger.info("Verification engine ready (lookup timeout %.1fs)", settings.lookup_timeout)

    # CORS for frontend integration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)

    @app.get("/", tags=["Root"])
    async def root():
        return {
            "service": "Fraud-Risk Verification Engine",
            "version": "1.0.0",
            "docs": "/docs",
            "health": "/api/v1/health",
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("fraudcheck.main:app", host="0.0.0.0", port=8000, reload=True)
