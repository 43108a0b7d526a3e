import logging
from typing import Dict, Optional

from fastapi import status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth import services as identity
from app.auth.schemas import AccountCreate
from app.core import account_deletion, document_store, paths
from app.core.account_deletion import DeleteAccountResult
from app.core.exceptions import ServiceError
from app.core.timestamps import utc_now_iso

from .schemas import StudentCreate, StudentListResponse, StudentResponse, StudentUpdate

logger = logging.getLogger(__name__)


async def _class_names(db: AsyncSession) -> Dict[str, str]:
    classes = await document_store.list_documents(db, paths.CLASSES)
    return {c["id"]: c.get("name", "") for c in classes}


def _profile_to_response(doc: dict, class_names: Optional[Dict[str, str]] = None) -> StudentResponse:
    class_id = doc.get("classId")
    return StudentResponse(
        id=doc["id"],
        first_name=doc.get("firstName", ""),
        last_name=doc.get("lastName", ""),
        email=doc.get("email", ""),
        class_id=class_id,
        class_name=(class_names or {}).get(class_id) if class_id else None,
        created_at=doc.get("createdAt"),
        updated_at=doc.get("updatedAt"),
    )


async def _require_class(db: AsyncSession, class_id: str) -> None:
    if not await document_store.document_exists(db, paths.class_doc(class_id)):
        raise ServiceError("Invalid class", status.HTTP_400_BAD_REQUEST)


async def create_student(db: AsyncSession, payload: StudentCreate) -> StudentResponse:
    """Create the account first (the profile is keyed by its uid), then the profile document."""
    await _require_class(db, payload.class_id)

    account = await identity.create_account(
        db,
        AccountCreate(
            email=payload.email,
            password=payload.password,
            display_name=f"{payload.first_name} {payload.last_name}",
        ),
    )
    uid = account.id
    now = utc_now_iso()
    profile = {
        "id": uid,
        "firstName": payload.first_name.strip(),
        "lastName": payload.last_name.strip(),
        "email": account.email,
        "classId": payload.class_id,
        "createdAt": now,
        "updatedAt": now,
    }
    try:
        stored = await document_store.set_document(db, paths.student_doc(uid), profile)
    except ServiceError:
        logger.error("Profile write failed for new account %s, removing the account", uid)
        cleanup = await account_deletion.delete_account(db, uid)
        if not cleanup.success:
            logger.error("Cleanup of account %s failed: %s", uid, cleanup.error)
        raise
    return _profile_to_response(stored, await _class_names(db))


async def list_students(db: AsyncSession, class_id: Optional[str] = None) -> StudentListResponse:
    if class_id:
        docs = await document_store.query_documents(db, paths.STUDENTS, "classId", class_id)
    else:
        docs = await document_store.list_documents(db, paths.STUDENTS)
    class_names = await _class_names(db)
    items = sorted(
        (_profile_to_response(d, class_names) for d in docs),
        key=lambda s: (s.last_name.lower(), s.first_name.lower()),
    )
    return StudentListResponse(items=items, total=len(items))


async def get_student(db: AsyncSession, uid: str) -> Optional[StudentResponse]:
    doc = await document_store.get_document(db, paths.student_doc(uid))
    if not doc:
        return None
    return _profile_to_response(doc, await _class_names(db))


async def update_student(db: AsyncSession, uid: str, payload: StudentUpdate) -> Optional[StudentResponse]:
    doc = await document_store.get_document(db, paths.student_doc(uid))
    if not doc:
        return None
    changes = {}
    if payload.first_name is not None:
        changes["firstName"] = payload.first_name.strip()
    if payload.last_name is not None:
        changes["lastName"] = payload.last_name.strip()
    if payload.class_id is not None and payload.class_id != doc.get("classId"):
        await _require_class(db, payload.class_id)
        changes["classId"] = payload.class_id
    previous_email = None
    if payload.email is not None and payload.email.lower() != (doc.get("email") or "").lower():
        # Keep the login email and the profile email in step
        account = await identity.get_account(db, uid)
        previous_email = account.email if account else None
        await identity.update_account_email(db, uid, payload.email)
        changes["email"] = payload.email.lower()
    if changes:
        changes["updatedAt"] = utc_now_iso()
        try:
            doc = await document_store.set_document(db, paths.student_doc(uid), changes, merge=True)
        except ServiceError:
            if previous_email:
                logger.error("Profile update for %s failed, restoring login email", uid)
                await identity.update_account_email(db, uid, previous_email)
            raise
    return _profile_to_response(doc, await _class_names(db))


async def delete_student(db: AsyncSession, uid: str) -> DeleteAccountResult:
    return await account_deletion.delete_account(db, uid)


async def student_index(db: AsyncSession) -> Dict[str, dict]:
    """Student profiles by uid."""
    docs = await document_store.list_documents(db, paths.STUDENTS)
    return {d["id"]: d for d in docs}


def full_name(profile: Optional[dict]) -> Optional[str]:
    if not profile:
        return None
    return f"{profile.get('firstName', '')} {profile.get('lastName', '')}".strip()
