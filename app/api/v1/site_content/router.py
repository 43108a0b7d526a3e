from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.rbac import require_admin
from app.db.session import get_db

from .schemas import SiteContent, SiteContentUpdate
from . import service

router = APIRouter(prefix="/api/v1/site-content", tags=["site-content"])


@router.get("", response_model=SiteContent, response_model_by_alias=False)
async def get_site_content(db: AsyncSession = Depends(get_db)) -> SiteContent:
    """Public homepage content."""
    return await service.get_site_content(db)


@router.put(
    "",
    response_model=SiteContent,
    response_model_by_alias=False,
    dependencies=[Depends(require_admin)],
)
async def update_site_content(
    payload: SiteContentUpdate,
    db: AsyncSession = Depends(get_db),
) -> SiteContent:
    return await service.update_site_content(db, payload)
