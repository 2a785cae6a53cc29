"""
Category endpoints.
"""
from fastapi import APIRouter, Depends

from shared.utils.logging_config import get_logger
from invoice_tracker_api.application.interfaces.di_container import get_category_registry
from invoice_tracker_api.application.services.category_registry import CategoryRegistry

logger = get_logger(__name__)

router = APIRouter()


@router.get("/", summary="List expense categories")
async def list_categories(category_registry: CategoryRegistry = Depends(get_category_registry)) -> list[dict]:
    """Built-in expense categories with their display colors."""
    return [category.to_dict() for category in category_registry.list()]
