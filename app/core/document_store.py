"""
Record store: path-addressed JSON documents over the relational database.

Paths alternate collection and document segments ("students/{uid}/fees/{id}").
Every public operation runs as one unit of work: transient failures are retried
with backoff after a rollback, anything else surfaces as RecordStoreError.
Deleting an absent document is a no-op.
"""
import functools
import logging
import uuid
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from app.core.config import settings
from app.core.exceptions import RecordStoreError
from app.core.models import Document
from app.core.paths import split_path

logger = logging.getLogger(__name__)


def _retrying() -> AsyncRetrying:
    return AsyncRetrying(
        stop=stop_after_attempt(settings.store_retry_attempts),
        wait=wait_exponential(multiplier=0.1, max=2),
        retry=retry_if_exception_type(OperationalError),
        reraise=True,
    )


async def run_in_store(db: AsyncSession, operation, *args, **kwargs):
    """Run `operation(db, *args, **kwargs)` with bounded retry and error translation."""
    try:
        async for attempt in _retrying():
            with attempt:
                try:
                    return await operation(db, *args, **kwargs)
                except OperationalError:
                    await db.rollback()
                    logger.warning(
                        "Transient store error in %s (attempt %d)",
                        operation.__name__,
                        attempt.retry_state.attempt_number,
                    )
                    raise
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error("Store operation %s failed: %s", operation.__name__, e)
        raise RecordStoreError(f"Record store error during {operation.__name__}: {e}") from e


def store_operation(fn):
    @functools.wraps(fn)
    async def wrapper(db: AsyncSession, *args, **kwargs):
        return await run_in_store(db, fn, *args, **kwargs)

    return wrapper


def new_document_id() -> str:
    return uuid.uuid4().hex


def _to_dict(doc: Document) -> Dict[str, Any]:
    data = dict(doc.data or {})
    data.setdefault("id", doc.doc_id)
    return data


def _field(name: str, value: Any):
    """JSON field expression typed after the value it is compared with."""
    expr = Document.data[name]
    if isinstance(value, bool):
        return expr.as_boolean()
    if isinstance(value, int):
        return expr.as_integer()
    if isinstance(value, float):
        return expr.as_float()
    return expr.as_string()


async def _put(db: AsyncSession, path: str, data: Dict[str, Any], merge: bool = False) -> Dict[str, Any]:
    collection, doc_id = split_path(path)
    doc = await db.get(Document, path)
    if doc is None:
        doc = Document(path=path, collection=collection, doc_id=doc_id, data=dict(data))
        db.add(doc)
    elif merge:
        # Reassign so the JSON column is marked dirty
        doc.data = {**(doc.data or {}), **data}
    else:
        doc.data = dict(data)
    await db.flush()
    return _to_dict(doc)


class WriteBatch:
    """Set/delete operations applied together in one commit."""

    def __init__(self) -> None:
        self._sets: List[tuple] = []
        self._deletes: List[str] = []

    def set(self, path: str, data: Dict[str, Any], merge: bool = False) -> "WriteBatch":
        split_path(path)
        self._sets.append((path, dict(data), merge))
        return self

    def delete(self, path: str) -> "WriteBatch":
        split_path(path)
        self._deletes.append(path)
        return self

    def __len__(self) -> int:
        return len(self._sets) + len(self._deletes)

    async def commit(self, db: AsyncSession) -> None:
        await run_in_store(db, self._apply)

    async def _apply(self, db: AsyncSession) -> None:
        for path, data, merge in self._sets:
            await _put(db, path, data, merge=merge)
        if self._deletes:
            await db.execute(delete(Document).where(Document.path.in_(self._deletes)))
        await db.commit()


@store_operation
async def get_document(db: AsyncSession, path: str) -> Optional[Dict[str, Any]]:
    doc = await db.get(Document, path, populate_existing=True)
    return _to_dict(doc) if doc else None


@store_operation
async def document_exists(db: AsyncSession, path: str) -> bool:
    result = await db.execute(select(Document.path).where(Document.path == path))
    return result.scalar_one_or_none() is not None


@store_operation
async def set_document(
    db: AsyncSession,
    path: str,
    data: Dict[str, Any],
    merge: bool = False,
) -> Dict[str, Any]:
    stored = await _put(db, path, data, merge=merge)
    await db.commit()
    return stored


@store_operation
async def add_document(db: AsyncSession, collection: str, data: Dict[str, Any]) -> Dict[str, Any]:
    """Create a document with a generated id; the id is also stored in the `id` field."""
    doc_id = new_document_id()
    stored = await _put(db, f"{collection}/{doc_id}", {**data, "id": doc_id})
    await db.commit()
    return stored


@store_operation
async def delete_document(db: AsyncSession, path: str) -> bool:
    """Delete one document. Returns whether it existed."""
    result = await db.execute(delete(Document).where(Document.path == path))
    await db.commit()
    return bool(result.rowcount)


@store_operation
async def delete_documents(db: AsyncSession, paths: Iterable[str]) -> int:
    """Delete the given documents in one atomic batch. Returns the number removed."""
    paths = list(paths)
    if not paths:
        return 0
    result = await db.execute(delete(Document).where(Document.path.in_(paths)))
    await db.commit()
    return result.rowcount or 0


@store_operation
async def list_documents(
    db: AsyncSession,
    collection: str,
    order_by: Optional[str] = None,
    descending: bool = False,
    limit: Optional[int] = None,
) -> List[Dict[str, Any]]:
    stmt = select(Document).where(Document.collection == collection)
    if order_by:
        key = Document.data[order_by].as_string()
        stmt = stmt.order_by(key.desc() if descending else key, Document.doc_id)
    else:
        stmt = stmt.order_by(Document.doc_id)
    if limit is not None:
        stmt = stmt.limit(limit)
    result = await db.execute(stmt.execution_options(populate_existing=True))
    return [_to_dict(d) for d in result.scalars().all()]


@store_operation
async def query_documents(
    db: AsyncSession,
    collection: str,
    field: str,
    value: Any,
    limit: Optional[int] = None,
) -> List[Dict[str, Any]]:
    """Documents of `collection` whose `field` equals `value`, ordered by document id."""
    stmt = (
        select(Document)
        .where(Document.collection == collection, _field(field, value) == value)
        .order_by(Document.doc_id)
    )
    if limit is not None:
        stmt = stmt.limit(limit)
    result = await db.execute(stmt.execution_options(populate_existing=True))
    return [_to_dict(d) for d in result.scalars().all()]


@store_operation
async def list_document_paths(
    db: AsyncSession,
    collection: str,
    limit: int,
    field: Optional[str] = None,
    value: Any = None,
) -> List[str]:
    """First `limit` document paths of a collection by document id, optionally filtered on one field."""
    stmt = select(Document.path).where(Document.collection == collection)
    if field is not None:
        stmt = stmt.where(_field(field, value) == value)
    stmt = stmt.order_by(Document.doc_id).limit(limit)
    result = await db.execute(stmt)
    return list(result.scalars().all())


@store_operation
async def count_documents(
    db: AsyncSession,
    collection: str,
    field: Optional[str] = None,
    value: Any = None,
) -> int:
    stmt = select(func.count()).select_from(Document).where(Document.collection == collection)
    if field is not None:
        stmt = stmt.where(_field(field, value) == value)
    result = await db.execute(stmt)
    return result.scalar_one()
