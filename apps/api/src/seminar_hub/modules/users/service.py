"""
User Service

Business logic for admin user management. Users are never deleted;
deactivation is a status change.
"""

import logging
import secrets
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from seminar_hub.core.errors import ConflictError, ValidationFailedError
from seminar_hub.core.security import hash_password
from seminar_hub.modules.audit.recorded_write import RecordedWrite
from seminar_hub.modules.identity.session import Session
from seminar_hub.modules.shared.filters import ListFilters
from seminar_hub.modules.shared.models import new_id, utc_now
from seminar_hub.modules.shared.pagination import Page, PageRequest
from seminar_hub.modules.tenants import repository as tenant_repository
from seminar_hub.modules.users.models import (
    VALID_USER_STATUS_TRANSITIONS,
    User,
    UserStatus,
)
from seminar_hub.modules.users.repository import UserRepository, users
from seminar_hub.modules.users.schemas import UserCreate, UserImportRow, UserUpdate

logger = logging.getLogger(__name__)

TEMP_PASSWORD_ALPHABET = (
    "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789!@#$%^&*"
)
TEMP_PASSWORD_LENGTH = 12


def generate_temporary_password(length: int = TEMP_PASSWORD_LENGTH) -> str:
    return "".join(secrets.choice(TEMP_PASSWORD_ALPHABET) for _ in range(length))


def validate_passwords(password: str, confirm_password: str) -> None:
    """
    Raises:
        ValidationFailedError: If the confirmation does not match
    """
    if password != confirm_password:
        raise ValidationFailedError("Passwords do not match", error_code="PASSWORD_MISMATCH")


async def remaining_capacity(db: AsyncSession, tenant_id: str) -> int:
    """How many more users the tenant's maxUsers setting allows."""
    tenant = await tenant_repository.get_by_id(db, tenant_id)
    if tenant is None:
        return 0
    current = await UserRepository.count_for_tenant(db, tenant_id)
    return max(int(tenant.setting("maxUsers")) - current, 0)


async def create_user(db: AsyncSession, session: Session, data: UserCreate) -> User:
    """
    Create an active user in the admin's tenant.

    Raises:
        ValidationFailedError: Password mismatch or tenant user limit reached
        ConflictError: Email already registered
    """
    users.require_kind(session)
    tenant_id = users.require_tenant(session)
    validate_passwords(data.password, data.confirm_password)

    email = data.email.lower()
    if await UserRepository.email_exists(db, email):
        raise ConflictError(f"A user with email {email} already exists", error_code="EMAIL_EXISTS")

    if await remaining_capacity(db, tenant_id) < 1:
        raise ValidationFailedError(
            "This tenant has reached its maximum number of users",
            error_code="TENANT_USER_LIMIT",
        )

    user = await users.create(
        db,
        session,
        {
            "email": email,
            "display_name": data.display_name,
            "role": data.role,
            "status": UserStatus.ACTIVE,
            "password_hash": hash_password(data.password),
            "must_change_password": False,
        },
        action="user_created",
        details={"email": email, "role": data.role, "tenantId": tenant_id},
    )

    logger.info(f"Created user: {user.email} (role: {user.role.value})")
    return user


async def list_users(
    db: AsyncSession,
    session: Session,
    filters: ListFilters | None = None,
    page: PageRequest | None = None,
) -> Page[User]:
    return await users.list(db, session, filters, page)


async def get_user(db: AsyncSession, session: Session, user_id: str) -> User:
    return await users.get_or_raise(db, session, user_id)


async def update_user(
    db: AsyncSession,
    session: Session,
    user_id: str,
    data: UserUpdate,
) -> User:
    patch: dict[str, Any] = data.model_dump(exclude_none=True)
    if not patch:
        raise ValidationFailedError("No changes supplied", error_code="EMPTY_UPDATE")

    return await users.update(
        db,
        session,
        user_id,
        patch,
        action="user_updated",
        details={"fields": sorted(patch), **patch},
    )


async def set_user_status(
    db: AsyncSession,
    session: Session,
    user_id: str,
    new_status: UserStatus,
) -> User:
    """
    Activate, deactivate or suspend a user.

    Raises:
        ValidationFailedError: If an admin tries to lock themselves out
        InvalidStatusTransitionError: If the user is already in that status
    """
    if user_id == session.principal_id and new_status != UserStatus.ACTIVE:
        raise ValidationFailedError(
            "You cannot deactivate your own account",
            error_code="SELF_DEACTIVATION",
        )

    return await users.set_status(
        db,
        session,
        user_id,
        new_status,
        transitions=VALID_USER_STATUS_TRANSITIONS,
        action="user_status_updated",
    )


async def import_users(
    db: AsyncSession,
    session: Session,
    rows: list[UserImportRow],
) -> dict[str, Any]:
    """
    Bulk-create users with temporary passwords.

    Rows that fail (duplicate email, over the tenant limit) are reported
    and skipped. The valid rows and a single ``users_bulk_imported``
    audit entry commit together.

    Returns:
        Dict with successful (including temporary passwords), failed and total
    """
    users.require_kind(session)
    tenant_id = users.require_tenant(session)

    existing = await UserRepository.existing_emails(db, [row.email for row in rows])
    capacity = await remaining_capacity(db, tenant_id)

    seen: set[str] = set()
    new_users: list[User] = []
    successful: list[dict[str, str]] = []
    failed: list[dict[str, str]] = []

    for row in rows:
        email = row.email.lower()
        if email in existing or email in seen:
            failed.append({"email": email, "error": "Email already registered"})
            continue
        if len(new_users) >= capacity:
            failed.append({"email": email, "error": "Tenant user limit reached"})
            continue

        temporary_password = generate_temporary_password()
        now = utc_now()
        user = User(
            id=new_id(),
            tenant_id=tenant_id,
            email=email,
            display_name=row.display_name,
            role=row.role,
            status=UserStatus.ACTIVE,
            password_hash=hash_password(temporary_password),
            must_change_password=True,
            created_at=now,
            updated_at=now,
        )
        seen.add(email)
        new_users.append(user)
        successful.append(
            {"email": email, "id": user.id, "temporary_password": temporary_password}
        )

    await RecordedWrite(
        action="users_bulk_imported",
        entity_type="user",
        entity_id=None,
        details={
            "tenantId": tenant_id,
            "successful": len(successful),
            "failed": len(failed),
            "total": len(rows),
        },
        added=new_users,
    ).execute(db, session)

    logger.info(
        f"Bulk import into tenant {tenant_id}: {len(successful)} created, {len(failed)} failed"
    )
    return {"successful": successful, "failed": failed, "total": len(rows)}
