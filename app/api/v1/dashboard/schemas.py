from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from app.api.v1.fees.schemas import FeeResponse


class FeeStatusCounts(BaseModel):
    paid: int = 0
    pending: int = 0
    partial: int = 0


class AdminDashboardResponse(BaseModel):
    total_students: int
    total_classes: int
    fee_status: FeeStatusCounts
    total_collected: float
    total_outstanding: float
    recent_fees: List[FeeResponse] = Field(default_factory=list)


class ActivityItem(BaseModel):
    id: str
    type: Literal["fee", "announcement", "result"]
    description: str
    status: Optional[str] = None
    grade: Optional[str] = None
    student_name: Optional[str] = None
    class_name: Optional[str] = None
    timestamp: str
