from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.rbac import require_admin
from app.core.exceptions import ServiceError
from app.db.session import get_db

from .schemas import AnnouncementCreate, AnnouncementResponse, AnnouncementUpdate
from . import service

router = APIRouter(prefix="/api/v1/announcements", tags=["announcements"], dependencies=[Depends(require_admin)])


@router.post("", response_model=AnnouncementResponse, status_code=status.HTTP_201_CREATED)
async def create_announcement(
    payload: AnnouncementCreate,
    db: AsyncSession = Depends(get_db),
) -> AnnouncementResponse:
    try:
        return await service.create_announcement(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("", response_model=List[AnnouncementResponse])
async def list_announcements(
    class_id: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
) -> List[AnnouncementResponse]:
    return await service.list_announcements(db, class_id=class_id)


@router.put("/{announcement_id}", response_model=AnnouncementResponse)
async def update_announcement(
    announcement_id: str,
    payload: AnnouncementUpdate,
    db: AsyncSession = Depends(get_db),
) -> AnnouncementResponse:
    try:
        obj = await service.update_announcement(db, announcement_id, payload)
        if not obj:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Announcement not found")
        return obj
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete("/{announcement_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_announcement(
    announcement_id: str,
    db: AsyncSession = Depends(get_db),
) -> None:
    if not await service.delete_announcement(db, announcement_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Announcement not found")
