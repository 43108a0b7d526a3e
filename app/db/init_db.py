"""
Create the tables the app needs (documents, accounts) if they do not exist.

Run once before first start:
  python -m app.db.init_db
"""
import asyncio

from sqlalchemy.ext.asyncio import AsyncEngine

import app.auth.models  # noqa: F401  (registers accounts)
import app.core.models  # noqa: F401  (registers documents)
from app.db.session import Base, engine


async def ensure_tables(db_engine: AsyncEngine) -> None:
    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    print("Tables ready: " + ", ".join(sorted(Base.metadata.tables)))


async def main() -> None:
    await ensure_tables(engine)
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
