from typing import List, Optional

from pydantic import BaseModel, Field

from app.core.enums import Grade, Term


class ResultUpsert(BaseModel):
    id: Optional[str] = Field(None, description="Existing result id to update; omit to create")
    class_name: str = Field(..., min_length=1, max_length=100, description="Subject the result is for")
    term: Term
    year: int = Field(..., ge=1900, le=2100)
    grade: Grade
    comments: Optional[str] = None
    position: Optional[str] = None


class ResultResponse(BaseModel):
    id: str
    student_id: str
    class_name: str
    term: Term
    year: int
    grade: Grade
    comments: Optional[str] = None
    position: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class ResultTermGroup(BaseModel):
    """Results of one term of one year."""

    year: int
    term: Term
    results: List[ResultResponse]


class ResultBulkFailureItem(BaseModel):
    row: int
    reason: str


class ResultBulkResponse(BaseModel):
    created: int
    results: List[ResultResponse]
    failed: Optional[List[ResultBulkFailureItem]] = None
