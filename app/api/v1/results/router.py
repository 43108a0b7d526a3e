from typing import List

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.rbac import require_admin
from app.core.exceptions import ServiceError
from app.db.session import get_db

from .schemas import ResultBulkResponse, ResultResponse, ResultUpsert
from . import service

router = APIRouter(prefix="/api/v1/results", tags=["results"], dependencies=[Depends(require_admin)])


@router.get("/students/{student_id}", response_model=List[ResultResponse])
async def list_student_results(
    student_id: str,
    db: AsyncSession = Depends(get_db),
) -> List[ResultResponse]:
    return await service.list_student_results(db, student_id)


@router.put("/students/{student_id}", response_model=ResultResponse)
async def upsert_student_result(
    student_id: str,
    payload: ResultUpsert,
    db: AsyncSession = Depends(get_db),
) -> ResultResponse:
    try:
        return await service.upsert_result(db, student_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete("/students/{student_id}/{result_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_student_result(
    student_id: str,
    result_id: str,
    db: AsyncSession = Depends(get_db),
) -> None:
    try:
        deleted = await service.delete_result(db, student_id, result_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Result not found")


@router.get("/students/{student_id}/bulk-excel/template")
async def download_results_template(
    student_id: str,
    db: AsyncSession = Depends(get_db),
) -> Response:
    """Download an Excel template (Subject, Grade, Term, Year, Comments, Position) for bulk upload."""
    try:
        content = await service.build_results_template(db, student_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return Response(
        content=content,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f"attachment; filename={student_id}_results_template.xlsx"},
    )


@router.post(
    "/students/{student_id}/bulk-excel",
    response_model=ResultBulkResponse,
    status_code=status.HTTP_201_CREATED,
)
async def upload_results_excel(
    student_id: str,
    file: UploadFile = File(...),
    db: AsyncSession = Depends(get_db),
) -> ResultBulkResponse:
    """Bulk add results from an .xlsx file. Valid rows are created; invalid rows are returned in `failed`."""
    try:
        items, parse_failures = await service.parse_results_excel(file)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    try:
        created, write_failures = await service.create_results_bulk(db, student_id, items)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    failed = sorted(parse_failures + write_failures, key=lambda f: f.row)
    return ResultBulkResponse(created=len(created), results=created, failed=failed or None)
