"""Read-only views for the signed-in student."""
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.announcements import service as announcement_service
from app.api.v1.announcements.schemas import AnnouncementResponse
from app.api.v1.fees import service as fee_service
from app.api.v1.fees.schemas import FeeSummary
from app.api.v1.results import service as result_service
from app.api.v1.results.schemas import ResultTermGroup
from app.auth.rbac import require_student
from app.auth.schemas import CurrentUser
from app.db.session import get_db

from .schemas import StudentDashboardResponse
from . import service

router = APIRouter(prefix="/api/v1/me", tags=["student-portal"])


@router.get("", response_model=StudentDashboardResponse)
async def get_dashboard(
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_student),
) -> StudentDashboardResponse:
    return await service.get_student_dashboard(db, current_user)


@router.get("/announcements", response_model=List[AnnouncementResponse])
async def list_my_announcements(
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_student),
) -> List[AnnouncementResponse]:
    if not current_user.class_id:
        return []
    return await announcement_service.list_announcements(db, class_id=current_user.class_id)


@router.get("/fees", response_model=FeeSummary)
async def get_my_fees(
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_student),
) -> FeeSummary:
    return await fee_service.get_fee_summary(db, current_user.id)


@router.get("/results", response_model=List[ResultTermGroup])
async def list_my_results(
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_student),
) -> List[ResultTermGroup]:
    return await result_service.group_student_results(db, current_user.id)
