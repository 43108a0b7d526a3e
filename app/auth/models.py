import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, String, Text, UniqueConstraint

from app.db.session import Base


def _new_uid() -> str:
    return uuid.uuid4().hex


class Account(Base):
    """Identity record. `id` is the uid every profile and record document is keyed by."""

    __tablename__ = "accounts"
    __table_args__ = (
        UniqueConstraint("email", name="uq_account_email"),
    )

    id = Column(String(128), primary_key=True, default=_new_uid)
    email = Column(String(255), nullable=False)
    display_name = Column(String(255), nullable=True)
    password_hash = Column(Text, nullable=False)
    status = Column(String(20), nullable=False, default="ACTIVE")
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
