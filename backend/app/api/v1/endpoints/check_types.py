"""
Check type endpoints.
"""
from fastapi import APIRouter, Depends, HTTPException

from app.schemas.check_result import CheckTypeResult
from app.services.checks.catalog import CheckTypeCatalog, get_catalog
from app.services.checks.errors import UnknownCheckType

router = APIRouter(tags=["Check Types"])


@router.get("", response_model=list[CheckTypeResult])
async def list_check_types(catalog: CheckTypeCatalog = Depends(get_catalog)):
    """List all configured check types."""
    return [
        CheckTypeResult.from_domain(d, catalog.visible_categories(d.id))
        for d in catalog.all()
    ]


@router.get("/{type_id}", response_model=CheckTypeResult)
async def get_check_type(type_id: str, catalog: CheckTypeCatalog = Depends(get_catalog)):
    """Get one check type definition."""
    try:
        definition = catalog.lookup(type_id)
    except UnknownCheckType as e:
        raise HTTPException(status_code=404, detail=str(e))
    return CheckTypeResult.from_domain(definition, catalog.visible_categories(type_id))
