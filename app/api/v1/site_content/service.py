from sqlalchemy.ext.asyncio import AsyncSession

from app.core import document_store, paths
from app.core.timestamps import utc_now_iso

from .defaults import DEFAULT_SITE_CONTENT
from .schemas import SiteContent, SiteContentUpdate


async def get_site_content(db: AsyncSession) -> SiteContent:
    stored = await document_store.get_document(db, paths.site_content_doc()) or {}
    # Blank stored values fall back to the defaults
    merged = {**DEFAULT_SITE_CONTENT, **{k: v for k, v in stored.items() if v not in (None, "")}}
    merged.pop("id", None)
    return SiteContent.model_validate(merged)


async def update_site_content(db: AsyncSession, payload: SiteContentUpdate) -> SiteContent:
    changes = payload.model_dump(by_alias=True, exclude_unset=True)
    changes["updatedAt"] = utc_now_iso()
    await document_store.set_document(db, paths.site_content_doc(), changes, merge=True)
    return await get_site_content(db)
