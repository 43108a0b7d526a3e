from typing import List, Optional, Set

from fastapi import status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core import document_store, paths
from app.core.exceptions import ServiceError
from app.core.timestamps import utc_now_iso

from .schemas import BROADCAST_TARGET, AnnouncementCreate, AnnouncementResponse, AnnouncementUpdate


async def _all_class_ids(db: AsyncSession) -> Set[str]:
    return {c["id"] for c in await document_store.list_documents(db, paths.CLASSES)}


def _announcement_to_response(doc: dict, all_class_ids: Optional[Set[str]] = None) -> AnnouncementResponse:
    class_ids = doc.get("classIds") or []
    return AnnouncementResponse(
        id=doc["id"],
        title=doc.get("title", ""),
        content=doc.get("content", ""),
        class_ids=class_ids,
        is_broadcast=bool(all_class_ids) and set(class_ids) == all_class_ids,
        created_at=doc.get("createdAt"),
        updated_at=doc.get("updatedAt"),
    )


async def resolve_target(db: AsyncSession, target_class: str) -> List[str]:
    """The "all" target expands to every class that exists now; anything else must be a class id."""
    all_ids = await _all_class_ids(db)
    if target_class == BROADCAST_TARGET:
        if not all_ids:
            raise ServiceError("No classes exist to broadcast to", status.HTTP_400_BAD_REQUEST)
        return sorted(all_ids)
    if target_class not in all_ids:
        raise ServiceError("Invalid class", status.HTTP_400_BAD_REQUEST)
    return [target_class]


async def create_announcement(db: AsyncSession, payload: AnnouncementCreate) -> AnnouncementResponse:
    class_ids = await resolve_target(db, payload.target_class)
    now = utc_now_iso()
    doc = await document_store.add_document(
        db,
        paths.ANNOUNCEMENTS,
        {
            "title": payload.title.strip(),
            "content": payload.content.strip(),
            "classIds": class_ids,
            "createdAt": now,
            "updatedAt": now,
        },
    )
    return _announcement_to_response(doc, await _all_class_ids(db))


async def update_announcement(
    db: AsyncSession,
    announcement_id: str,
    payload: AnnouncementUpdate,
) -> Optional[AnnouncementResponse]:
    path = paths.announcement_doc(announcement_id)
    if not await document_store.document_exists(db, path):
        return None
    changes = {"updatedAt": utc_now_iso()}
    if payload.title is not None:
        changes["title"] = payload.title.strip()
    if payload.content is not None:
        changes["content"] = payload.content.strip()
    if payload.target_class is not None:
        changes["classIds"] = await resolve_target(db, payload.target_class)
    doc = await document_store.set_document(db, path, changes, merge=True)
    return _announcement_to_response(doc, await _all_class_ids(db))


async def delete_announcement(db: AsyncSession, announcement_id: str) -> bool:
    return await document_store.delete_document(db, paths.announcement_doc(announcement_id))


async def list_announcements(db: AsyncSession, class_id: Optional[str] = None) -> List[AnnouncementResponse]:
    """Newest first. With `class_id`, only announcements addressed to that class."""
    docs = await document_store.list_documents(db, paths.ANNOUNCEMENTS, order_by="createdAt", descending=True)
    if class_id is not None:
        docs = [d for d in docs if class_id in (d.get("classIds") or [])]
    all_ids = await _all_class_ids(db)
    return [_announcement_to_response(d, all_ids) for d in docs]
