"""Fees service: per-student fee records kept under the student and in the global fees collection."""

import uuid
from typing import Dict, List, Optional

from fastapi import status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.students.service import full_name, student_index
from app.core import document_store, paths, record_sync
from app.core.enums import FeeStatus, RecordKind
from app.core.exceptions import ServiceError
from app.core.timestamps import today_iso

from .schemas import FeeResponse, FeeSummary, FeeUpsert


def derive_status(amount: float, amount_paid: float) -> FeeStatus:
    if amount_paid >= amount:
        return FeeStatus.PAID
    if amount_paid > 0:
        return FeeStatus.PARTIAL
    return FeeStatus.PENDING


def new_fee_id() -> str:
    return f"fee_{uuid.uuid4().hex}"


def build_fee_record(fee_id: str, student_id: str, payload: FeeUpsert) -> dict:
    fee_status = payload.status or derive_status(payload.amount, payload.amount_paid)
    paid_date = None
    if fee_status == FeeStatus.PAID:
        paid_date = payload.paid_date.isoformat() if payload.paid_date else today_iso()
    return {
        "id": fee_id,
        "studentId": student_id,
        "term": payload.term.value,
        "session": payload.session.strip(),
        "amount": payload.amount,
        "amountPaid": payload.amount_paid,
        "balanceRemaining": record_sync.compute_balance(payload.amount, payload.amount_paid),
        "status": fee_status.value,
        "dueDate": payload.due_date.isoformat(),
        "paidDate": paid_date,
    }


def fee_to_response(doc: dict, students: Optional[Dict[str, dict]] = None) -> FeeResponse:
    amount = doc.get("amount") or 0
    amount_paid = doc.get("amountPaid") or 0
    balance = doc.get("balanceRemaining")
    return FeeResponse(
        id=doc["id"],
        student_id=doc.get("studentId", ""),
        student_name=full_name((students or {}).get(doc.get("studentId"))),
        term=doc.get("term"),
        session=doc.get("session", ""),
        amount=amount,
        amount_paid=amount_paid,
        balance_remaining=balance if balance is not None else record_sync.compute_balance(amount, amount_paid),
        status=doc.get("status") or derive_status(amount, amount_paid),
        due_date=doc.get("dueDate", ""),
        paid_date=doc.get("paidDate"),
        created_at=doc.get("createdAt"),
        updated_at=doc.get("updatedAt"),
    )


async def _require_student(db: AsyncSession, student_id: str) -> None:
    if not await document_store.document_exists(db, paths.student_doc(student_id)):
        raise ServiceError("Student not found", status.HTTP_404_NOT_FOUND)


async def upsert_fee(db: AsyncSession, student_id: str, payload: FeeUpsert) -> FeeResponse:
    await _require_student(db, student_id)
    fee_id = payload.id or new_fee_id()
    if payload.id:
        existing = await document_store.get_document(db, paths.global_record(RecordKind.FEE, fee_id))
        if existing and existing.get("studentId") != student_id:
            raise ServiceError("Fee record belongs to another student", status.HTTP_409_CONFLICT)
    record = await record_sync.upsert_record(
        db, RecordKind.FEE, student_id, build_fee_record(fee_id, student_id, payload)
    )
    return fee_to_response(record)


async def list_fees(db: AsyncSession, fee_status: Optional[FeeStatus] = None) -> List[FeeResponse]:
    """All fee records across students (global collection), newest first."""
    if fee_status:
        docs = await document_store.query_documents(db, paths.FEES, "status", fee_status.value)
        docs.sort(key=lambda d: d.get("createdAt") or "", reverse=True)
    else:
        docs = await document_store.list_documents(db, paths.FEES, order_by="createdAt", descending=True)
    students = await student_index(db)
    return [fee_to_response(d, students) for d in docs]


async def list_student_fees(db: AsyncSession, student_id: str) -> List[FeeResponse]:
    docs = await document_store.list_documents(
        db,
        paths.scoped_collection(student_id, RecordKind.FEE),
        order_by="createdAt",
        descending=True,
    )
    return [fee_to_response(d) for d in docs]


async def get_fee_summary(db: AsyncSession, student_id: str) -> FeeSummary:
    fees = await list_student_fees(db, student_id)
    return FeeSummary(
        total_amount=sum(f.amount for f in fees),
        total_paid=sum(f.amount_paid for f in fees),
        total_balance=sum(f.balance_remaining for f in fees),
        current=fees[0] if fees else None,
        history=fees[1:],
    )


async def delete_fee(db: AsyncSession, student_id: str, fee_id: str) -> bool:
    return await record_sync.remove_record(db, RecordKind.FEE, student_id, fee_id)
