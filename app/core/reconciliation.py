"""
Detect and repair divergence between the student-scoped and global copies of
fee and result records.

The scoped copy is authoritative. A global copy whose scoped copy is missing is
restored to the student when the student still has a profile, and dropped as an
orphan otherwise.
"""
import logging
from typing import Dict, List

from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from app.core import document_store, paths
from app.core.enums import RecordKind

logger = logging.getLogger(__name__)


class ReconciliationIssue(BaseModel):
    record_id: str
    student_id: str


class ReconciliationReport(BaseModel):
    kind: RecordKind
    scoped_count: int = 0
    global_count: int = 0
    missing_global: List[ReconciliationIssue] = Field(default_factory=list)
    missing_scoped: List[ReconciliationIssue] = Field(default_factory=list)
    mismatched: List[ReconciliationIssue] = Field(default_factory=list)
    orphaned: List[ReconciliationIssue] = Field(default_factory=list)
    repaired: bool = False

    @property
    def is_consistent(self) -> bool:
        return not (self.missing_global or self.missing_scoped or self.mismatched or self.orphaned)


async def reconcile_records(
    db: AsyncSession,
    kind: RecordKind,
    repair: bool = False,
) -> ReconciliationReport:
    kind = RecordKind(kind)
    report = ReconciliationReport(kind=kind)
    collection = paths.collection_for(kind)

    students = await document_store.list_documents(db, paths.STUDENTS)
    student_ids = {s["id"] for s in students}

    scoped: Dict[str, dict] = {}
    for student_id in sorted(student_ids):
        for record in await document_store.list_documents(db, paths.scoped_collection(student_id, kind)):
            scoped[record["id"]] = {**record, "studentId": record.get("studentId") or student_id}
    global_records = {r["id"]: r for r in await document_store.list_documents(db, collection)}
    report.scoped_count = len(scoped)
    report.global_count = len(global_records)

    batch = document_store.WriteBatch()
    for record_id, record in scoped.items():
        counterpart = global_records.get(record_id)
        issue = ReconciliationIssue(record_id=record_id, student_id=record["studentId"])
        if counterpart is None:
            report.missing_global.append(issue)
            batch.set(paths.global_record(kind, record_id), record)
        elif counterpart != record:
            report.mismatched.append(issue)
            batch.set(paths.global_record(kind, record_id), record)

    for record_id, record in global_records.items():
        if record_id in scoped:
            continue
        student_id = record.get("studentId") or ""
        issue = ReconciliationIssue(record_id=record_id, student_id=student_id)
        if student_id in student_ids:
            report.missing_scoped.append(issue)
            batch.set(paths.scoped_record(student_id, kind, record_id), record)
        else:
            report.orphaned.append(issue)
            batch.delete(paths.global_record(kind, record_id))

    if report.is_consistent:
        logger.info("%s records consistent (%d scoped, %d global)", kind.value, report.scoped_count, report.global_count)
        return report

    logger.warning(
        "%s records diverged: %d missing global, %d missing scoped, %d mismatched, %d orphaned",
        kind.value,
        len(report.missing_global),
        len(report.missing_scoped),
        len(report.mismatched),
        len(report.orphaned),
    )
    if repair:
        await batch.commit(db)
        report.repaired = True
        logger.info("Repaired %d %s record copies", len(batch), kind.value)
    return report
