import io
import logging
import uuid
from datetime import date
from typing import List, Optional, Tuple

from fastapi import UploadFile, status
from openpyxl import Workbook, load_workbook
from openpyxl.worksheet.datavalidation import DataValidation
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core import document_store, paths, record_sync
from app.core.enums import Grade, RecordKind, Term
from app.core.exceptions import ServiceError

from .schemas import ResultBulkFailureItem, ResultResponse, ResultTermGroup, ResultUpsert

logger = logging.getLogger(__name__)

EXCEL_MAX_ROWS = 500
TEMPLATE_HEADERS = ("Subject", "Grade", "Term", "Year", "Comments", "Position")
RESULTS_SHEET_NAME = "ResultsTemplate"
SUBJECTS_SHEET_NAME = "Subjects"
TERM_ORDER = {t: i for i, t in enumerate(Term)}


def new_result_id() -> str:
    return f"res_{uuid.uuid4().hex}"


def build_result_record(result_id: str, student_id: str, payload: ResultUpsert) -> dict:
    return {
        "id": result_id,
        "studentId": student_id,
        "className": payload.class_name.strip(),
        "term": payload.term.value,
        "year": payload.year,
        "grade": payload.grade.value,
        "comments": payload.comments or "",
        "position": payload.position or "",
    }


def _result_to_response(doc: dict) -> ResultResponse:
    return ResultResponse(
        id=doc["id"],
        student_id=doc.get("studentId", ""),
        class_name=doc.get("className", ""),
        term=doc.get("term"),
        year=doc.get("year"),
        grade=doc.get("grade"),
        comments=doc.get("comments") or None,
        position=doc.get("position") or None,
        created_at=doc.get("createdAt"),
        updated_at=doc.get("updatedAt"),
    )


async def _get_student(db: AsyncSession, student_id: str) -> dict:
    profile = await document_store.get_document(db, paths.student_doc(student_id))
    if not profile:
        raise ServiceError("Student not found", status.HTTP_404_NOT_FOUND)
    return profile


async def upsert_result(db: AsyncSession, student_id: str, payload: ResultUpsert) -> ResultResponse:
    await _get_student(db, student_id)
    result_id = payload.id or new_result_id()
    if payload.id:
        existing = await document_store.get_document(db, paths.global_record(RecordKind.RESULT, result_id))
        if existing and existing.get("studentId") != student_id:
            raise ServiceError("Result belongs to another student", status.HTTP_409_CONFLICT)
    record = await record_sync.upsert_record(
        db, RecordKind.RESULT, student_id, build_result_record(result_id, student_id, payload)
    )
    return _result_to_response(record)


async def list_student_results(db: AsyncSession, student_id: str) -> List[ResultResponse]:
    docs = await document_store.list_documents(db, paths.scoped_collection(student_id, RecordKind.RESULT))
    results = [_result_to_response(d) for d in docs]
    results.sort(key=lambda r: (-r.year, -TERM_ORDER[r.term], r.class_name.lower()))
    return results


async def group_student_results(db: AsyncSession, student_id: str) -> List[ResultTermGroup]:
    """Results grouped by (year, term), latest term first."""
    groups: List[ResultTermGroup] = []
    for result in await list_student_results(db, student_id):
        if groups and groups[-1].year == result.year and groups[-1].term == result.term:
            groups[-1].results.append(result)
        else:
            groups.append(ResultTermGroup(year=result.year, term=result.term, results=[result]))
    return groups


async def delete_result(db: AsyncSession, student_id: str, result_id: str) -> bool:
    return await record_sync.remove_record(db, RecordKind.RESULT, student_id, result_id)


async def build_results_template(db: AsyncSession, student_id: str) -> bytes:
    """Excel template with a Subject dropdown from the student's class and Grade/Term dropdowns."""
    profile = await _get_student(db, student_id)
    subjects: List[str] = []
    if profile.get("classId"):
        school_class = await document_store.get_document(db, paths.class_doc(profile["classId"]))
        subjects = (school_class or {}).get("subjects") or []

    wb = Workbook()
    ws = wb.active
    ws.title = RESULTS_SHEET_NAME
    ws.append(list(TEMPLATE_HEADERS))
    ws.append([subjects[0] if subjects else "Mathematics", "A", Term.FIRST.value, date.today().year, "Excellent", "1st"])

    last_row = EXCEL_MAX_ROWS + 1
    if subjects:
        ws_subjects = wb.create_sheet(SUBJECTS_SHEET_NAME)
        ws_subjects.append(["subject"])
        for s in subjects:
            ws_subjects.append([s])
        dv_subject = DataValidation(
            type="list",
            formula1=f"'{SUBJECTS_SHEET_NAME}'!$A$2:$A${1 + len(subjects)}",
            allow_blank=False,
        )
        dv_subject.error = "Select a subject from the dropdown"
        ws.add_data_validation(dv_subject)
        dv_subject.add(f"A2:A{last_row}")

    dv_grade = DataValidation(type="list", formula1='"' + ",".join(g.value for g in Grade) + '"')
    dv_grade.error = "Grade must be one of A, B, C, D, F"
    ws.add_data_validation(dv_grade)
    dv_grade.add(f"B2:B{last_row}")

    dv_term = DataValidation(type="list", formula1='"' + ",".join(t.value for t in Term) + '"')
    dv_term.error = "Term must be one of 1st, 2nd, 3rd"
    ws.add_data_validation(dv_term)
    dv_term.add(f"C2:C{last_row}")

    bio = io.BytesIO()
    wb.save(bio)
    return bio.getvalue()


def _cell_str(row: tuple, col: Optional[int]) -> str:
    if col is None or col >= len(row):
        return ""
    val = row[col]
    if val is None:
        return ""
    if isinstance(val, float) and val.is_integer():
        val = int(val)
    return str(val).strip()


async def parse_results_excel(file: UploadFile) -> Tuple[List[Tuple[int, ResultUpsert]], List[ResultBulkFailureItem]]:
    """
    Parse an uploaded results sheet. First row = headers (Subject, Grade, Term, Year, Comments, Position;
    case-insensitive, "className" accepted for Subject). Missing grade/term/year default to C, 1st and the
    current year. Rows that still fail validation are returned as failures.
    Raises ValueError when the file itself is unusable.
    """
    if not file.filename or not file.filename.lower().endswith(".xlsx"):
        raise ValueError("File must be an Excel file (.xlsx)")

    content = await file.read()
    if not content:
        raise ValueError("File is empty")

    try:
        wb = load_workbook(filename=io.BytesIO(content), read_only=True, data_only=True)
    except Exception as e:
        raise ValueError(f"Invalid Excel file: {e}") from e

    ws = wb.active
    if not ws:
        raise ValueError("Excel file has no active sheet")

    rows_iter = ws.iter_rows(values_only=True)
    header_row = next(rows_iter, None)
    if not header_row:
        raise ValueError("Excel file has no header row")

    headers = [(str(c).strip().lower() if c is not None else "") for c in header_row]

    def _col(*names: str) -> Optional[int]:
        for name in names:
            if name in headers:
                return headers.index(name)
        return None

    col_idx = {
        "subject": _col("subject", "classname", "class_name"),
        "grade": _col("grade"),
        "term": _col("term"),
        "year": _col("year"),
        "comments": _col("comments"),
        "position": _col("position"),
    }
    if col_idx["subject"] is None:
        raise ValueError(f"Missing required column: Subject. Found: {headers}")

    items: List[Tuple[int, ResultUpsert]] = []
    failed: List[ResultBulkFailureItem] = []
    for row_num, row in enumerate(rows_iter, start=2):
        if row_num - 1 > EXCEL_MAX_ROWS:
            wb.close()
            raise ValueError(f"Maximum {EXCEL_MAX_ROWS} data rows allowed")
        if not row or all(c is None or (isinstance(c, str) and not c.strip()) for c in row):
            continue
        try:
            subject = _cell_str(row, col_idx["subject"])
            if not subject:
                raise ValueError("Subject is required")
            year_str = _cell_str(row, col_idx["year"])
            items.append(
                (
                    row_num,
                    ResultUpsert(
                        class_name=subject,
                        grade=(_cell_str(row, col_idx["grade"]) or Grade.C.value).upper(),
                        term=_cell_str(row, col_idx["term"]) or Term.FIRST.value,
                        year=int(year_str) if year_str else date.today().year,
                        comments=_cell_str(row, col_idx["comments"]) or None,
                        position=_cell_str(row, col_idx["position"]) or None,
                    ),
                )
            )
        except ValidationError as e:
            reasons = "; ".join(f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors())
            failed.append(ResultBulkFailureItem(row=row_num, reason=reasons))
        except ValueError as e:
            failed.append(ResultBulkFailureItem(row=row_num, reason=str(e)))
    wb.close()
    return items, failed


async def create_results_bulk(
    db: AsyncSession,
    student_id: str,
    items: List[Tuple[int, ResultUpsert]],
) -> Tuple[List[ResultResponse], List[ResultBulkFailureItem]]:
    """Write each parsed row as its own record. Rows that fail to write are reported, the rest are kept."""
    await _get_student(db, student_id)
    created: List[ResultResponse] = []
    failed: List[ResultBulkFailureItem] = []
    for row_num, item in items:
        try:
            record = await record_sync.upsert_record(
                db, RecordKind.RESULT, student_id, build_result_record(new_result_id(), student_id, item)
            )
            created.append(_result_to_response(record))
        except ServiceError as e:
            logger.warning("Bulk result row %d for %s failed: %s", row_num, student_id, e.message)
            failed.append(ResultBulkFailureItem(row=row_num, reason=e.message))
    logger.info("Bulk upload for %s: %d created, %d failed", student_id, len(created), len(failed))
    return created, failed
