"""
Grant administrator access to an account (creates roles_admin/{uid}).

Admin grants are never created through the API. Run with env set:
  ADMIN_EMAIL=admin@school.example
  ADMIN_PASSWORD=YourSecurePassword

  python -m app.scripts.grant_admin [--email other@school.example]

Creates the account when no account has that email (ADMIN_PASSWORD required then).
"""
import argparse
import asyncio
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.auth import services as identity
from app.auth.schemas import AccountCreate
from app.core import document_store, paths
from app.core.config import settings
from app.core.timestamps import utc_now_iso
from app.db.session import AsyncSessionLocal


async def grant_admin(db: AsyncSession, email: str, password: Optional[str] = None) -> str:
    account = await identity.get_account_by_email(db, email)
    if account is None:
        if not password:
            raise ValueError(f"No account for {email}; set ADMIN_PASSWORD to create one")
        account = await identity.create_account(
            db, AccountCreate(email=email, password=password, display_name="Admin")
        )
        print("Created account:", account.email)
    else:
        print("Account already exists:", account.email)

    grant_path = paths.admin_grant_doc(account.id)
    if await document_store.document_exists(db, grant_path):
        print("Admin grant already present for", account.id)
    else:
        await document_store.set_document(db, grant_path, {"id": account.id, "grantedAt": utc_now_iso()})
        print("Granted admin to", account.id)
    return account.id


async def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--email", default=settings.admin_email)
    args = parser.parse_args(argv)
    if not args.email:
        parser.error("Provide --email or set ADMIN_EMAIL")

    async with AsyncSessionLocal() as db:
        try:
            await grant_admin(db, args.email, settings.admin_password)
        except Exception as e:
            await db.rollback()
            print("Error:", e)
            raise


if __name__ == "__main__":
    asyncio.run(main())
