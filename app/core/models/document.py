"""Path-addressed JSON documents. One row per document; collections are the parent path."""
from datetime import datetime

from sqlalchemy import JSON, Column, DateTime, Index, String

from app.db.session import Base


class Document(Base):
    """
    A document at `path` (e.g. "students/abc/fees/fee_1").
    `collection` is everything before the last segment ("students/abc/fees"),
    `doc_id` the last segment. `data` holds the document fields.
    """

    __tablename__ = "documents"
    __table_args__ = (
        Index("ix_documents_collection_doc_id", "collection", "doc_id"),
    )

    path = Column(String(512), primary_key=True)
    collection = Column(String(512), nullable=False)
    doc_id = Column(String(255), nullable=False)
    data = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
