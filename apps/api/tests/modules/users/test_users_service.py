"""
Tests for admin user management.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest

from seminar_hub.core.errors import (
    ConflictError,
    InvalidStatusTransitionError,
    PermissionDeniedError,
    ValidationFailedError,
)
from seminar_hub.modules.audit.models import AuditLogEntry
from seminar_hub.modules.users import service
from seminar_hub.modules.users.models import User, UserRole, UserStatus
from seminar_hub.modules.users.schemas import UserCreate, UserImportRow, UserUpdate

SERVICE = "seminar_hub.modules.users.service"


def _create_data(**overrides) -> UserCreate:
    values = {
        "email": "New.Teacher@example.edu",
        "display_name": "New Teacher",
        "role": UserRole.TEACHER,
        "password": "correct-horse",
        "confirm_password": "correct-horse",
    }
    values.update(overrides)
    return UserCreate(**values)


def _user(tenant_id: str, user_id: str = "u-1", status=UserStatus.ACTIVE) -> User:
    return User(
        id=user_id,
        tenant_id=tenant_id,
        email="someone@example.edu",
        display_name="Someone",
        password_hash="hashed",
        role=UserRole.STUDENT,
        status=status,
    )


def _audit_entries(mock_db):
    return [c.args[0] for c in mock_db.add.call_args_list if isinstance(c.args[0], AuditLogEntry)]


# ============================================
# create_user
# ============================================


def test_temporary_password_shape():
    password = service.generate_temporary_password()
    assert len(password) == 12
    assert set(password) <= set(service.TEMP_PASSWORD_ALPHABET)


@pytest.mark.asyncio
async def test_create_user_rejects_password_mismatch(mock_db, admin_session):
    with pytest.raises(ValidationFailedError) as exc_info:
        await service.create_user(
            mock_db, admin_session, _create_data(confirm_password="something-else")
        )
    assert exc_info.value.error_code == "PASSWORD_MISMATCH"
    mock_db.commit.assert_not_called()


@pytest.mark.asyncio
async def test_create_user_rejects_existing_email(mock_db, admin_session):
    with patch.object(
        service.UserRepository, "email_exists", new_callable=AsyncMock, return_value=True
    ):
        with pytest.raises(ConflictError) as exc_info:
            await service.create_user(mock_db, admin_session, _create_data())
    assert exc_info.value.error_code == "EMAIL_EXISTS"


@pytest.mark.asyncio
async def test_create_user_respects_tenant_limit(mock_db, admin_session):
    with (
        patch.object(
            service.UserRepository, "email_exists", new_callable=AsyncMock, return_value=False
        ),
        patch(f"{SERVICE}.remaining_capacity", new_callable=AsyncMock, return_value=0),
    ):
        with pytest.raises(ValidationFailedError) as exc_info:
            await service.create_user(mock_db, admin_session, _create_data())
    assert exc_info.value.error_code == "TENANT_USER_LIMIT"


@pytest.mark.asyncio
async def test_create_user_success_is_audited(mock_db, admin_session):
    with (
        patch.object(
            service.UserRepository, "email_exists", new_callable=AsyncMock, return_value=False
        ),
        patch(f"{SERVICE}.remaining_capacity", new_callable=AsyncMock, return_value=10),
        patch(f"{SERVICE}.hash_password", return_value="hashed-password"),
    ):
        user = await service.create_user(mock_db, admin_session, _create_data())

    assert user.email == "new.teacher@example.edu"
    assert user.tenant_id == admin_session.tenant_id
    assert user.password_hash == "hashed-password"
    assert user.status == UserStatus.ACTIVE

    [entry] = _audit_entries(mock_db)
    assert entry.action == "user_created"
    assert entry.details["email"] == "new.teacher@example.edu"
    assert "password" not in entry.details


@pytest.mark.asyncio
async def test_create_user_requires_admin(mock_db, specialist_session):
    with pytest.raises(PermissionDeniedError):
        await service.create_user(mock_db, specialist_session, _create_data())


@pytest.mark.asyncio
async def test_remaining_capacity_uses_tenant_setting(mock_db, tenant_id):
    tenant = SimpleNamespace(setting=lambda key: 3)

    with (
        patch.object(
            service.tenant_repository, "get_by_id", new_callable=AsyncMock, return_value=tenant
        ),
        patch.object(
            service.UserRepository, "count_for_tenant", new_callable=AsyncMock, return_value=5
        ),
    ):
        assert await service.remaining_capacity(mock_db, tenant_id) == 0


# ============================================
# update / status
# ============================================


@pytest.mark.asyncio
async def test_empty_update_rejected(mock_db, admin_session):
    with pytest.raises(ValidationFailedError) as exc_info:
        await service.update_user(mock_db, admin_session, "u-1", UserUpdate())
    assert exc_info.value.error_code == "EMPTY_UPDATE"


@pytest.mark.asyncio
async def test_admin_cannot_deactivate_self(mock_db, admin_session):
    with pytest.raises(ValidationFailedError) as exc_info:
        await service.set_user_status(
            mock_db, admin_session, admin_session.principal_id, UserStatus.INACTIVE
        )
    assert exc_info.value.error_code == "SELF_DEACTIVATION"


@pytest.mark.asyncio
async def test_deactivate_user(mock_db, admin_session, tenant_id):
    user = _user(tenant_id)
    mock_db.get.return_value = user

    result = await service.set_user_status(mock_db, admin_session, "u-1", UserStatus.INACTIVE)

    assert result.status == UserStatus.INACTIVE
    [entry] = _audit_entries(mock_db)
    assert entry.action == "user_status_updated"
    assert entry.details["from"] == "active"
    assert entry.details["to"] == "inactive"


@pytest.mark.asyncio
async def test_same_status_is_invalid_transition(mock_db, admin_session, tenant_id):
    mock_db.get.return_value = _user(tenant_id, status=UserStatus.SUSPENDED)

    with pytest.raises(InvalidStatusTransitionError):
        await service.set_user_status(mock_db, admin_session, "u-1", UserStatus.SUSPENDED)


@pytest.mark.asyncio
async def test_cannot_touch_user_in_other_tenant(mock_db, admin_session, other_tenant_id):
    mock_db.get.return_value = _user(other_tenant_id)

    with pytest.raises(PermissionDeniedError):
        await service.set_user_status(mock_db, admin_session, "u-1", UserStatus.SUSPENDED)
    mock_db.commit.assert_not_called()


# ============================================
# import_users
# ============================================


@pytest.mark.asyncio
async def test_import_skips_duplicates_and_over_limit_rows(mock_db, admin_session):
    rows = [
        UserImportRow(email="taken@example.edu", display_name="Taken"),
        UserImportRow(email="first@example.edu", display_name="First"),
        UserImportRow(email="FIRST@example.edu", display_name="First Again"),
        UserImportRow(email="second@example.edu", display_name="Second"),
    ]

    with (
        patch.object(
            service.UserRepository,
            "existing_emails",
            new_callable=AsyncMock,
            return_value={"taken@example.edu"},
        ),
        patch(f"{SERVICE}.remaining_capacity", new_callable=AsyncMock, return_value=1),
        patch(f"{SERVICE}.hash_password", return_value="hashed"),
    ):
        result = await service.import_users(mock_db, admin_session, rows)

    assert result["total"] == 4
    assert [row["email"] for row in result["successful"]] == ["first@example.edu"]
    assert [row["email"] for row in result["failed"]] == [
        "taken@example.edu",
        "first@example.edu",
        "second@example.edu",
    ]
    assert result["failed"][2]["error"] == "Tenant user limit reached"

    created = [c.args[0] for c in mock_db.add.call_args_list if isinstance(c.args[0], User)]
    assert len(created) == 1
    assert created[0].must_change_password is True

    [entry] = _audit_entries(mock_db)
    assert entry.action == "users_bulk_imported"
    assert entry.details == {
        "tenantId": admin_session.tenant_id,
        "successful": 1,
        "failed": 3,
        "total": 4,
    }
    mock_db.commit.assert_awaited_once()
