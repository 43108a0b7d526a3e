from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.announcements import service as announcement_service
from app.api.v1.students import service as student_service
from app.auth.schemas import CurrentUser
from app.core import document_store, paths

from .schemas import StudentDashboardResponse


async def get_student_dashboard(db: AsyncSession, current_user: CurrentUser) -> StudentDashboardResponse:
    profile = await student_service.get_student(db, current_user.id)
    if not current_user.class_id:
        return StudentDashboardResponse(profile=profile)
    school_class = await document_store.get_document(db, paths.class_doc(current_user.class_id)) or {}
    return StudentDashboardResponse(
        profile=profile,
        subjects=school_class.get("subjects") or [],
        announcements=await announcement_service.list_announcements(db, class_id=current_user.class_id),
    )
