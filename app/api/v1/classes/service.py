from collections import Counter
from typing import List, Optional

from fastapi import status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core import document_store, paths
from app.core.exceptions import ServiceError

from .schemas import ClassCreate, ClassDetailResponse, ClassResponse, ClassStudent, ClassUpdate


def _class_to_response(doc: dict, student_count: int = 0) -> ClassResponse:
    return ClassResponse(
        id=doc["id"],
        name=doc.get("name", ""),
        description=doc.get("description") or "",
        subjects=doc.get("subjects") or [],
        student_count=student_count,
    )


async def create_class(db: AsyncSession, payload: ClassCreate) -> ClassResponse:
    doc = await document_store.add_document(
        db,
        paths.CLASSES,
        {
            "name": payload.name.strip(),
            "description": payload.description.strip(),
            "subjects": payload.subjects,
        },
    )
    return _class_to_response(doc)


async def list_classes(db: AsyncSession) -> List[ClassResponse]:
    classes = await document_store.list_documents(db, paths.CLASSES)
    students = await document_store.list_documents(db, paths.STUDENTS)
    counts = Counter(s.get("classId") for s in students)
    rows = [_class_to_response(c, counts.get(c["id"], 0)) for c in classes]
    return sorted(rows, key=lambda c: c.name.lower())


async def get_class_document(db: AsyncSession, class_id: str) -> Optional[dict]:
    return await document_store.get_document(db, paths.class_doc(class_id))


async def get_class(db: AsyncSession, class_id: str) -> Optional[ClassDetailResponse]:
    doc = await get_class_document(db, class_id)
    if not doc:
        return None
    students = await document_store.query_documents(db, paths.STUDENTS, "classId", class_id)
    members = sorted(
        (
            ClassStudent(
                id=s["id"],
                first_name=s.get("firstName", ""),
                last_name=s.get("lastName", ""),
                email=s.get("email", ""),
            )
            for s in students
        ),
        key=lambda s: (s.last_name.lower(), s.first_name.lower()),
    )
    return ClassDetailResponse(
        **_class_to_response(doc, len(members)).model_dump(),
        students=members,
    )


async def update_class(db: AsyncSession, class_id: str, payload: ClassUpdate) -> Optional[ClassResponse]:
    doc = await get_class_document(db, class_id)
    if not doc:
        return None
    changes = {}
    if payload.name is not None:
        changes["name"] = payload.name.strip()
    if payload.description is not None:
        changes["description"] = payload.description.strip()
    if payload.subjects is not None:
        changes["subjects"] = payload.subjects
    if changes:
        doc = await document_store.set_document(db, paths.class_doc(class_id), changes, merge=True)
    count = await document_store.count_documents(db, paths.STUDENTS, "classId", class_id)
    return _class_to_response(doc, count)


async def delete_class(db: AsyncSession, class_id: str, block_if_used: bool = True) -> bool:
    """Students keep a plain classId reference; deleting a class in use is refused unless forced."""
    if not await get_class_document(db, class_id):
        return False
    if block_if_used:
        used = await document_store.count_documents(db, paths.STUDENTS, "classId", class_id)
        if used:
            raise ServiceError(
                "Cannot delete class: it has students assigned. Reassign them first.",
                status.HTTP_400_BAD_REQUEST,
            )
    await document_store.delete_document(db, paths.class_doc(class_id))
    return True
