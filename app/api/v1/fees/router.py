from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.rbac import require_admin
from app.core.enums import FeeStatus
from app.core.exceptions import ServiceError
from app.db.session import get_db

from .schemas import FeeResponse, FeeUpsert
from . import service

router = APIRouter(prefix="/api/v1/fees", tags=["fees"], dependencies=[Depends(require_admin)])


@router.get("", response_model=List[FeeResponse])
async def list_fees(
    fee_status: Optional[FeeStatus] = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
) -> List[FeeResponse]:
    """Fee records of all students, newest first."""
    return await service.list_fees(db, fee_status=fee_status)


@router.get("/students/{student_id}", response_model=List[FeeResponse])
async def list_student_fees(
    student_id: str,
    db: AsyncSession = Depends(get_db),
) -> List[FeeResponse]:
    return await service.list_student_fees(db, student_id)


@router.put("/students/{student_id}", response_model=FeeResponse)
async def upsert_student_fee(
    student_id: str,
    payload: FeeUpsert,
    db: AsyncSession = Depends(get_db),
) -> FeeResponse:
    """Create a fee record, or update it when `id` is given. Balance is always recomputed."""
    try:
        return await service.upsert_fee(db, student_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete("/students/{student_id}/{fee_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_student_fee(
    student_id: str,
    fee_id: str,
    db: AsyncSession = Depends(get_db),
) -> None:
    try:
        deleted = await service.delete_fee(db, student_id, fee_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Fee record not found")
