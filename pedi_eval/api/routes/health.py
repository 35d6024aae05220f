"""Health check endpoints."""

from fastapi import APIRouter, Request

from pedi_eval import __version__
from pedi_eval.config import get_settings
from pedi_eval.reference.tables import REFERENCE_TABLES_VERSION

router = APIRouter()


@router.get("/health")
async def health_check(request: Request) -> dict:
    """Basic health check."""
    return {
        "status": "healthy",
        "service": "pedi-eval",
        "reference_version": REFERENCE_TABLES_VERSION,
    }


@router.get("/health/live")
async def liveness_check() -> dict:
    """Liveness check - basic process health."""
    return {"status": "alive"}


@router.get("/api-info")
async def api_info(request: Request) -> dict:
    """API information for frontend integration."""
    base_url = str(request.base_url).rstrip("/")

    return {
        "name": "PediEval API",
        "version": __version__,
        "description": "Pediatric physiotherapy assessment scoring and classification",
        "base_url": base_url,
        "openapi_url": f"{base_url}/openapi.json",
        "docs_url": f"{base_url}/docs",
        "endpoints": {
            "compute": {
                "url": "/api/v1/assessment/compute",
                "method": "POST",
                "description": "Score an evaluation snapshot",
            },
            "diagnosis": {
                "url": "/api/v1/assessment/diagnosis",
                "method": "POST",
                "description": "Score a snapshot and compose the diagnosis narrative",
            },
            "aims_prefill": {
                "url": "/api/v1/assessment/aims/prefill",
                "method": "POST",
                "description": "Mark AIMS items typical below an age",
            },
            "reference_tables": "/api/v1/reference/tables",
        },
        "authentication": {
            "type": "api_key",
            "header": "X-API-Key",
            "required": get_settings().requires_api_key,
        },
    }
