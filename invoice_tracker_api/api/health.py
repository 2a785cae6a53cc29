"""
Health check endpoint.
"""
from fastapi import APIRouter, Depends
from datetime import datetime, timezone
from fastapi.responses import JSONResponse

from shared.utils.logging_config import get_logger
from shared.config.settings import settings
from invoice_tracker_api.application.interfaces.di_container import get_invoice_manager
from invoice_tracker_api.application.services.invoice_manager import InvoiceManager

logger = get_logger(__name__)

router = APIRouter()

@router.get("/")
async def health_check_():
    """Basic health check - is service alive?"""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": settings.api_title,
        "version": settings.api_version
    }

# Readiness: Check if dependencies are ready
@router.get("/ready")
async def readiness_check(invoice_manager: InvoiceManager = Depends(get_invoice_manager)):
    """Readiness check - reports the configured backends and whether the manager is busy."""
    services = {
        "repository": settings.repository_type,
        "storage": settings.storage_type,
        "extraction": settings.extraction_type,
    }

    return JSONResponse(
        status_code=200,
        content={
            "status": "ready",
            "service": settings.api_title,
            "version": settings.api_version,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "services": services,
            "busy": invoice_manager.is_loading,
        }
    )
