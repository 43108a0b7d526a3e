"""
Fee and academic-result records live in two places: under the owning student
(students/{uid}/{collection}/{id}) and in a global flat collection ({collection}/{id})
that cross-student queries read. Both copies carry identical fields.
"""
import logging
from typing import Any, Dict

from fastapi import status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core import document_store, paths
from app.core.enums import RecordKind
from app.core.exceptions import ServiceError
from app.core.timestamps import utc_now_iso

logger = logging.getLogger(__name__)


def compute_balance(amount: float, amount_paid: float) -> float:
    """Outstanding balance, never negative (overpayment clamps to zero)."""
    return max(0, (amount or 0) - (amount_paid or 0))


def write_scoped(
    batch: document_store.WriteBatch,
    kind: RecordKind,
    student_id: str,
    record: Dict[str, Any],
) -> None:
    batch.set(paths.scoped_record(student_id, kind, record["id"]), record)


def write_global(batch: document_store.WriteBatch, kind: RecordKind, record: Dict[str, Any]) -> None:
    batch.set(paths.global_record(kind, record["id"]), record)


async def upsert_record(
    db: AsyncSession,
    kind: RecordKind,
    student_id: str,
    record: Dict[str, Any],
) -> Dict[str, Any]:
    """
    Create or replace a record at both locations.

    `record["id"]` is assigned by the caller and reused on update. Timestamps are
    taken once per call so both copies agree; an existing createdAt is kept.
    Raises RecordStoreError if the write fails (neither copy is written).
    """
    record_id = record.get("id")
    if not record_id:
        raise ServiceError("Record id is required", status.HTTP_400_BAD_REQUEST)
    if not student_id:
        raise ServiceError("Student id is required", status.HTTP_400_BAD_REQUEST)

    now = utc_now_iso()
    existing = await document_store.get_document(db, paths.scoped_record(student_id, kind, record_id))
    data = {
        **record,
        "id": record_id,
        "studentId": student_id,
        "createdAt": (existing or {}).get("createdAt") or now,
        "updatedAt": now,
    }

    batch = document_store.WriteBatch()
    write_scoped(batch, kind, student_id, data)
    write_global(batch, kind, data)
    await batch.commit(db)
    logger.info("Upserted %s record %s for student %s", RecordKind(kind).value, record_id, student_id)
    return data


async def remove_record(db: AsyncSession, kind: RecordKind, student_id: str, record_id: str) -> bool:
    """
    Delete both copies of a record owned by `student_id`. Returns False, deleting
    nothing, when the student has no such record or the global copy belongs to
    another student.
    """
    scoped_path = paths.scoped_record(student_id, kind, record_id)
    global_path = paths.global_record(kind, record_id)
    if not await document_store.document_exists(db, scoped_path):
        return False
    global_copy = await document_store.get_document(db, global_path)
    if global_copy is not None and global_copy.get("studentId") not in (None, student_id):
        logger.warning(
            "Not removing %s record %s for student %s: global copy belongs to %s",
            RecordKind(kind).value,
            record_id,
            student_id,
            global_copy.get("studentId"),
        )
        return False
    batch = document_store.WriteBatch()
    batch.delete(scoped_path)
    batch.delete(global_path)
    await batch.commit(db)
    logger.info("Removed %s record %s for student %s", RecordKind(kind).value, record_id, student_id)
    return True
