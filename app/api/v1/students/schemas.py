from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field


class StudentCreate(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6)
    class_id: str = Field(..., min_length=1)


class StudentUpdate(BaseModel):
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    class_id: Optional[str] = Field(None, min_length=1)


class StudentResponse(BaseModel):
    id: str
    first_name: str
    last_name: str
    email: str
    class_id: Optional[str] = None
    class_name: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class StudentListResponse(BaseModel):
    items: List[StudentResponse]
    total: int
