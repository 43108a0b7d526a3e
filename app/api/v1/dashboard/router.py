from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.rbac import require_admin
from app.db.session import get_db

from .schemas import ActivityItem, AdminDashboardResponse
from . import service

router = APIRouter(prefix="/api/v1/dashboard", tags=["dashboard"], dependencies=[Depends(require_admin)])


@router.get("", response_model=AdminDashboardResponse)
async def get_admin_dashboard(db: AsyncSession = Depends(get_db)) -> AdminDashboardResponse:
    return await service.get_admin_dashboard(db)


@router.get("/activity", response_model=List[ActivityItem])
async def list_activity(
    limit: Optional[int] = Query(None, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
) -> List[ActivityItem]:
    return await service.list_activity(db, limit=limit)
