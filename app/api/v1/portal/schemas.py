from typing import List, Optional

from pydantic import BaseModel, Field

from app.api.v1.announcements.schemas import AnnouncementResponse
from app.api.v1.students.schemas import StudentResponse


class StudentDashboardResponse(BaseModel):
    profile: Optional[StudentResponse] = None
    subjects: List[str] = Field(default_factory=list)
    announcements: List[AnnouncementResponse] = Field(default_factory=list)
