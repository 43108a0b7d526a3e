from typing import List, Optional

from pydantic import BaseModel, Field

BROADCAST_TARGET = "all"


class AnnouncementCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1)
    target_class: str = Field(..., min_length=1, description='A class id, or "all" for every class')


class AnnouncementUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    content: Optional[str] = Field(None, min_length=1)
    target_class: Optional[str] = Field(None, min_length=1)


class AnnouncementResponse(BaseModel):
    id: str
    title: str
    content: str
    class_ids: List[str] = Field(default_factory=list)
    is_broadcast: bool = False
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
