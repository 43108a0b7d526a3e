from typing import Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.fees.service import fee_to_response
from app.api.v1.students.service import full_name, student_index
from app.core import document_store, paths
from app.core.enums import FeeStatus

from .schemas import ActivityItem, AdminDashboardResponse, FeeStatusCounts

RECENT_FEES_LIMIT = 3
UNKNOWN_STUDENT = "Unknown Student"
UNKNOWN_CLASS = "Unknown Class"


async def get_admin_dashboard(db: AsyncSession) -> AdminDashboardResponse:
    students = await student_index(db)
    total_classes = await document_store.count_documents(db, paths.CLASSES)
    fees = await document_store.list_documents(db, paths.FEES, order_by="createdAt", descending=True)

    counts = FeeStatusCounts()
    for fee in fees:
        if fee.get("status") == FeeStatus.PAID.value:
            counts.paid += 1
        elif fee.get("status") == FeeStatus.PENDING.value:
            counts.pending += 1
        elif fee.get("status") == FeeStatus.PARTIAL.value:
            counts.partial += 1

    return AdminDashboardResponse(
        total_students=len(students),
        total_classes=total_classes,
        fee_status=counts,
        total_collected=sum(f.get("amountPaid") or 0 for f in fees),
        total_outstanding=sum(f.get("balanceRemaining") or 0 for f in fees),
        recent_fees=[fee_to_response(f, students) for f in fees[:RECENT_FEES_LIMIT]],
    )


def _student_and_class(
    student_id: Optional[str],
    students: Dict[str, dict],
    class_names: Dict[str, str],
) -> tuple:
    profile = students.get(student_id or "")
    if not profile:
        return UNKNOWN_STUDENT, UNKNOWN_CLASS
    return full_name(profile), class_names.get(profile.get("classId") or "", UNKNOWN_CLASS)


async def list_activity(db: AsyncSession, limit: Optional[int] = None) -> List[ActivityItem]:
    """Fee updates, posted results and announcements, newest first. Items without a timestamp are skipped."""
    students = await student_index(db)
    class_names = {c["id"]: c.get("name", "") for c in await document_store.list_documents(db, paths.CLASSES)}

    items: List[ActivityItem] = []
    for fee in await document_store.list_documents(db, paths.FEES):
        student_name, class_name = _student_and_class(fee.get("studentId"), students, class_names)
        items.append(
            ActivityItem(
                id=fee["id"],
                type="fee",
                description="Fee status for a student was updated to",
                status=fee.get("status"),
                student_name=student_name,
                class_name=class_name,
                timestamp=fee.get("updatedAt") or fee.get("createdAt") or "",
            )
        )
    for result in await document_store.list_documents(db, paths.ACADEMIC_RESULTS):
        student_name, class_name = _student_and_class(result.get("studentId"), students, class_names)
        items.append(
            ActivityItem(
                id=result["id"],
                type="result",
                description=f"Result for '{result.get('className', '')}' was posted for a student with grade",
                grade=result.get("grade"),
                student_name=student_name,
                class_name=class_name,
                timestamp=result.get("createdAt") or "",
            )
        )
    for announcement in await document_store.list_documents(db, paths.ANNOUNCEMENTS):
        items.append(
            ActivityItem(
                id=announcement["id"],
                type="announcement",
                description=f'New announcement posted: "{announcement.get("title", "")}"',
                timestamp=announcement.get("createdAt") or "",
            )
        )

    items = [i for i in items if i.timestamp]
    items.sort(key=lambda i: i.timestamp, reverse=True)
    return items[:limit] if limit else items
