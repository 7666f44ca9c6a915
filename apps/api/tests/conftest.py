"""
Shared fixtures: a mocked AsyncSession and Sessions for each role.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from seminar_hub.modules.identity.session import Profile, Session
from seminar_hub.modules.users.models import UserRole, UserStatus

TENANT_A = "11111111-1111-1111-1111-111111111111"
TENANT_B = "22222222-2222-2222-2222-222222222222"


@pytest.fixture
def mock_db():
    """Create a mock database session."""
    db = AsyncMock()
    db.add = MagicMock()
    db.delete = AsyncMock()
    db.flush = AsyncMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    db.refresh = AsyncMock()
    db.get = AsyncMock(return_value=None)
    db.execute = AsyncMock()
    return db


@pytest.fixture
def rows_result():
    """Build the object returned by ``db.execute`` for ``scalars().all()`` reads."""

    def build(rows):
        result = MagicMock()
        result.scalars.return_value.all.return_value = list(rows)
        return result

    return build


@pytest.fixture
def tenant_id():
    return TENANT_A


@pytest.fixture
def other_tenant_id():
    return TENANT_B


def _session(principal_id: str, role: UserRole, tenant_id: str | None) -> Session:
    return Session(
        principal_id=principal_id,
        role=role,
        tenant_id=tenant_id,
        profile=Profile(
            display_name=f"{role.value.title()} User",
            email=f"{role.value}@example.edu",
            status=UserStatus.ACTIVE,
        ),
    )


@pytest.fixture
def admin_session():
    return _session("aaaaaaaa-0000-0000-0000-000000000001", UserRole.ADMIN, TENANT_A)


@pytest.fixture
def specialist_session():
    return _session("aaaaaaaa-0000-0000-0000-000000000002", UserRole.SPECIALIST, TENANT_A)


@pytest.fixture
def other_specialist_session():
    return _session("aaaaaaaa-0000-0000-0000-000000000003", UserRole.SPECIALIST, TENANT_A)


@pytest.fixture
def counselor_session():
    return _session("aaaaaaaa-0000-0000-0000-000000000004", UserRole.COUNSELOR, TENANT_A)


@pytest.fixture
def teacher_session():
    return _session("aaaaaaaa-0000-0000-0000-000000000005", UserRole.TEACHER, TENANT_A)


@pytest.fixture
def student_session():
    return _session("aaaaaaaa-0000-0000-0000-000000000006", UserRole.STUDENT, TENANT_A)


@pytest.fixture
def foreign_admin_session():
    return _session("bbbbbbbb-0000-0000-0000-000000000001", UserRole.ADMIN, TENANT_B)
