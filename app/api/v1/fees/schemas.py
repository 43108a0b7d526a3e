"""Fees schemas."""

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field

from app.core.enums import FeeStatus, Term


class FeeUpsert(BaseModel):
    """Create a fee record, or replace the one with this `id`."""

    id: Optional[str] = Field(None, description="Existing fee id to update; omit to create")
    term: Term
    session: str = Field(..., min_length=1, max_length=20, description="Academic session, e.g. 2023/2024")
    amount: float = Field(..., ge=0)
    amount_paid: float = Field(0, ge=0)
    status: Optional[FeeStatus] = Field(None, description="Derived from the amounts when omitted")
    due_date: date
    paid_date: Optional[date] = None


class FeeResponse(BaseModel):
    id: str
    student_id: str
    student_name: Optional[str] = None
    term: Term
    session: str
    amount: float
    amount_paid: float
    balance_remaining: float
    status: FeeStatus
    due_date: str
    paid_date: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class FeeSummary(BaseModel):
    total_amount: float = 0
    total_paid: float = 0
    total_balance: float = 0
    current: Optional[FeeResponse] = None
    history: List[FeeResponse] = Field(default_factory=list)
