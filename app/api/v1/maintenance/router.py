from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.rbac import require_admin
from app.core.enums import RecordKind
from app.core.exceptions import ServiceError
from app.core.reconciliation import ReconciliationReport, reconcile_records
from app.db.session import get_db

router = APIRouter(prefix="/api/v1/maintenance", tags=["maintenance"], dependencies=[Depends(require_admin)])


@router.post("/reconcile", response_model=List[ReconciliationReport])
async def reconcile(
    repair: bool = Query(False, description="Rewrite diverged copies instead of only reporting them"),
    db: AsyncSession = Depends(get_db),
) -> List[ReconciliationReport]:
    """Compare student-scoped and global copies of fee and result records."""
    try:
        return [await reconcile_records(db, kind, repair=repair) for kind in RecordKind]
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
