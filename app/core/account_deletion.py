"""
Cascading account deletion.

Removes a student's profile, their private fee/result sub-collections, the matching
entries in the global flat collections, any admin grant, and finally the account
itself. Database records go first so a failure leaves the account in place and the
whole operation can be re-run; every step tolerates already-deleted data.
"""
import logging
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth import services as identity
from app.core import document_store, paths
from app.core.config import settings
from app.core.enums import RecordKind
from app.core.exceptions import AccountNotFoundError, ServiceError

logger = logging.getLogger(__name__)

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred during user deletion."


class DeletionStage(str, Enum):
    START = "START"
    DELETING_PROFILE = "DELETING_PROFILE"
    DELETING_PRIVATE_SUBCOLLECTIONS = "DELETING_PRIVATE_SUBCOLLECTIONS"
    DELETING_GLOBAL_RECORDS = "DELETING_GLOBAL_RECORDS"
    DELETING_GRANT = "DELETING_GRANT"
    DELETING_ACCOUNT = "DELETING_ACCOUNT"
    DONE = "DONE"
    FAILED = "FAILED"


class DeleteAccountResult(BaseModel):
    success: bool
    error: Optional[str] = None


async def delete_next_batch(
    db: AsyncSession,
    collection: str,
    batch_size: int,
    field: Optional[str] = None,
    value: Any = None,
) -> int:
    """Delete up to `batch_size` documents of `collection` (ordered by id). Returns how many were removed."""
    batch_paths = await document_store.list_document_paths(
        db, collection, batch_size, field=field, value=value
    )
    if not batch_paths:
        return 0
    await document_store.delete_documents(db, batch_paths)
    # The listed count, not the delete rowcount: a concurrent delete may already have
    # removed some of them and the next round must still run.
    return len(batch_paths)


async def delete_collection(
    db: AsyncSession,
    collection: str,
    batch_size: int,
    field: Optional[str] = None,
    value: Any = None,
) -> int:
    """Empty a collection (or its `field == value` subset) in sequential rounds. Returns documents seen."""
    total = 0
    while True:
        deleted = await delete_next_batch(db, collection, batch_size, field=field, value=value)
        if deleted == 0:
            return total
        total += deleted


async def delete_account(
    db: AsyncSession,
    uid: str,
    batch_size: Optional[int] = None,
) -> DeleteAccountResult:
    """Delete an account and everything keyed by it. Never raises; safe to call repeatedly."""
    if not uid or not str(uid).strip():
        return DeleteAccountResult(success=False, error="UID is required.")
    uid = str(uid).strip()
    batch_size = batch_size or settings.delete_batch_size

    stage = DeletionStage.START
    logger.info("Starting deletion for student UID: %s", uid)
    try:
        stage = DeletionStage.DELETING_PROFILE
        profile_path = paths.student_doc(uid)
        if await document_store.document_exists(db, profile_path):
            await document_store.delete_document(db, profile_path)
            logger.info("Deleted student document for %s", uid)
        else:
            logger.warning("Student document not found for %s, continuing with remaining cleanup", uid)

        stage = DeletionStage.DELETING_PRIVATE_SUBCOLLECTIONS
        for kind in (RecordKind.RESULT, RecordKind.FEE):
            removed = await delete_collection(db, paths.scoped_collection(uid, kind), batch_size)
            logger.info("Deleted %d documents from %s", removed, paths.scoped_collection(uid, kind))

        stage = DeletionStage.DELETING_GLOBAL_RECORDS
        for kind in (RecordKind.RESULT, RecordKind.FEE):
            collection = paths.collection_for(kind)
            removed = await delete_collection(db, collection, batch_size, field="studentId", value=uid)
            logger.info("Deleted %d documents from global %s", removed, collection)

        stage = DeletionStage.DELETING_GRANT
        grant_path = paths.admin_grant_doc(uid)
        if await document_store.document_exists(db, grant_path):
            await document_store.delete_document(db, grant_path)
            logger.info("Deleted admin role document for %s", uid)

        stage = DeletionStage.DELETING_ACCOUNT
        try:
            await identity.delete_account(db, uid)
            logger.info("Deleted account %s", uid)
        except AccountNotFoundError:
            logger.info("Account %s was already removed", uid)

        stage = DeletionStage.DONE
        logger.info("Deletion for %s reached %s", uid, stage.value)
        return DeleteAccountResult(success=True)

    except ServiceError as e:
        logger.exception("Account deletion for %s failed at stage %s", uid, stage.value)
        return _failed(uid, e.message)
    except Exception as e:
        logger.exception("Account deletion for %s failed at stage %s", uid, stage.value)
        return _failed(uid, str(e) or UNEXPECTED_ERROR_MESSAGE)


def _failed(uid: str, error: str) -> DeleteAccountResult:
    logger.info("Deletion for %s reached %s", uid, DeletionStage.FAILED.value)
    return DeleteAccountResult(success=False, error=error)
