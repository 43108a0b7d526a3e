from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


def _clean_subjects(subjects: Optional[List[str]]) -> Optional[List[str]]:
    if subjects is None:
        return None
    return [s.strip() for s in subjects if s and s.strip()]


class ClassCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str = ""
    subjects: List[str] = Field(default_factory=list)

    @field_validator("subjects")
    @classmethod
    def strip_subjects(cls, v):
        return _clean_subjects(v)


class ClassUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    subjects: Optional[List[str]] = None

    @field_validator("subjects")
    @classmethod
    def strip_subjects(cls, v):
        return _clean_subjects(v)


class ClassResponse(BaseModel):
    id: str
    name: str
    description: str = ""
    subjects: List[str] = Field(default_factory=list)
    student_count: int = 0


class ClassStudent(BaseModel):
    id: str
    first_name: str
    last_name: str
    email: str


class ClassDetailResponse(ClassResponse):
    students: List[ClassStudent] = Field(default_factory=list)
