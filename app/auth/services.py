"""Identity service: accounts, credentials and access tokens."""
import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import status
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.models import Account
from app.auth.schemas import AccountCreate, CurrentUser, LoginRequest, LoginResponse, UserInfo
from app.auth.security import create_access_token, hash_password, verify_password
from app.core import document_store, paths
from app.core.enums import UserRole
from app.core.exceptions import AccountNotFoundError, ServiceError

logger = logging.getLogger(__name__)

EMAIL_IN_USE_MESSAGE = "This email address is already in use by another account."


def _normalize_email(email: str) -> str:
    return email.strip().lower()


async def get_account(db: AsyncSession, uid: str) -> Optional[Account]:
    return await db.get(Account, uid)


async def get_account_by_email(db: AsyncSession, email: str) -> Optional[Account]:
    result = await db.execute(select(Account).where(Account.email == _normalize_email(email)))
    return result.scalar_one_or_none()


async def create_account(db: AsyncSession, payload: AccountCreate) -> Account:
    email = _normalize_email(payload.email)
    if await get_account_by_email(db, email):
        raise ServiceError(EMAIL_IN_USE_MESSAGE, status.HTTP_409_CONFLICT)
    try:
        account = Account(
            email=email,
            display_name=payload.display_name,
            password_hash=hash_password(payload.password),
            status="ACTIVE",
        )
        db.add(account)
        await db.commit()
        await db.refresh(account)
    except IntegrityError as e:
        await db.rollback()
        raise ServiceError(EMAIL_IN_USE_MESSAGE, status.HTTP_409_CONFLICT) from e
    logger.info("Created account %s", account.id)
    return account


async def update_account_email(db: AsyncSession, uid: str, email: str) -> None:
    account = await get_account(db, uid)
    if account is None:
        raise AccountNotFoundError(uid)
    email = _normalize_email(email)
    if account.email == email:
        return
    existing = await get_account_by_email(db, email)
    if existing and existing.id != uid:
        raise ServiceError(EMAIL_IN_USE_MESSAGE, status.HTTP_409_CONFLICT)
    account.email = email
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        raise ServiceError(EMAIL_IN_USE_MESSAGE, status.HTTP_409_CONFLICT) from e


async def delete_account(db: AsyncSession, uid: str) -> None:
    """Remove an account. Raises AccountNotFoundError when there is none."""
    result = await db.execute(delete(Account).where(Account.id == uid))
    await db.commit()
    if not result.rowcount:
        raise AccountNotFoundError(uid)
    logger.info("Deleted account %s", uid)


async def resolve_user(db: AsyncSession, account: Account) -> CurrentUser:
    """Admin when roles_admin/{uid} exists, otherwise a student with the class from their profile."""
    if await document_store.document_exists(db, paths.admin_grant_doc(account.id)):
        return CurrentUser(
            id=account.id,
            email=account.email,
            display_name=account.display_name or "Admin",
            role=UserRole.ADMIN,
        )
    profile = await document_store.get_document(db, paths.student_doc(account.id))
    if profile is None:
        logger.warning("No student profile found for uid %s", account.id)
        return CurrentUser(
            id=account.id,
            email=account.email,
            display_name=account.display_name or account.email,
            role=UserRole.STUDENT,
        )
    return CurrentUser(
        id=account.id,
        email=account.email,
        display_name=f"{profile.get('firstName', '')} {profile.get('lastName', '')}".strip(),
        role=UserRole.STUDENT,
        class_id=profile.get("classId"),
    )


async def login_user(db: AsyncSession, payload: LoginRequest) -> LoginResponse:
    account = await get_account_by_email(db, payload.email)
    if not account or not verify_password(payload.password, account.password_hash):
        raise ServiceError("Invalid email or password", status.HTTP_401_UNAUTHORIZED)
    if account.status != "ACTIVE":
        raise ServiceError("Account is disabled", status.HTTP_403_FORBIDDEN)

    user = await resolve_user(db, account)
    access_token = create_access_token(account.id, user.role.value)
    return LoginResponse(
        access_token=access_token,
        user=UserInfo(
            id=user.id,
            email=user.email,
            display_name=user.display_name,
            role=user.role,
            class_id=user.class_id,
        ),
        issued_at=datetime.now(timezone.utc),
    )
