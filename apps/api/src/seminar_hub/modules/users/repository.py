"""
User Repository

Lookups that run outside a Session (sign-in, profile resolution) and
the tenant-scoped repository used by admin user management.
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from seminar_hub.core.database import store_errors
from seminar_hub.modules.identity.capabilities import EntityKind
from seminar_hub.modules.shared.repository import TenantRepository
from seminar_hub.modules.shared.models import utc_now
from seminar_hub.modules.users.models import User

logger = logging.getLogger(__name__)


class UserRepository:
    """Unscoped user lookups used by authentication and identity resolution."""

    @staticmethod
    async def get_by_id(db: AsyncSession, user_id: str) -> User | None:
        with store_errors("load user profile"):
            return await db.get(User, user_id)

    @staticmethod
    async def get_by_email(db: AsyncSession, email: str) -> User | None:
        with store_errors("find user by email"):
            result = await db.execute(select(User).where(User.email == email.lower()))
        return result.scalar_one_or_none()

    @staticmethod
    async def email_exists(db: AsyncSession, email: str) -> bool:
        with store_errors("check email"):
            result = await db.execute(select(User.id).where(User.email == email.lower()))
        return result.scalar_one_or_none() is not None

    @staticmethod
    async def existing_emails(db: AsyncSession, emails: list[str]) -> set[str]:
        """Return which of ``emails`` are already registered."""
        if not emails:
            return set()
        lowered = [email.lower() for email in emails]
        with store_errors("check emails"):
            result = await db.execute(select(User.email).where(User.email.in_(lowered)))
        return set(result.scalars().all())

    @staticmethod
    async def count_for_tenant(db: AsyncSession, tenant_id: str) -> int:
        with store_errors("count users"):
            result = await db.execute(
                select(func.count()).select_from(User).where(User.tenant_id == tenant_id)
            )
        return result.scalar_one()

    @staticmethod
    async def record_login(db: AsyncSession, user: User) -> None:
        """Stamp last_login_at. Committed together with the login audit entry."""
        user.last_login_at = utc_now()
        db.add(user)


users = TenantRepository(
    User,
    EntityKind.USER,
    search_fields=("display_name", "email"),
    filter_fields=("role", "status"),
)
