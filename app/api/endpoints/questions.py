from fastapi import APIRouter, Depends

from app.api.deps import get_catalog
from app.models.questionnaire import Category
from app.services.questionnaire import Catalog

router = APIRouter(prefix="/v1/questions", tags=["questions"])


@router.get("", response_model=list[Category])
async def list_categories(catalog: Catalog = Depends(get_catalog)):
    """All questionnaire categories with their questions, in display order."""
    return list(catalog.list_categories())


@router.get("/{category_id}", response_model=Category)
async def get_category(category_id: str, catalog: Catalog = Depends(get_catalog)):
    return catalog.get_category(category_id)
