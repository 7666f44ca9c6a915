"""
Seed Tenant and Admin User

Creates a tenant and its first admin account. Run once per new
organization. For the operator organization, set PLATFORM_TENANT_ID
to the tenant id printed at the end.

Usage:
    cd apps/api
    SEED_ADMIN_PASSWORD=... python scripts/seed_tenant_admin.py \
        --name "Example School" --domain example.edu --email admin@example.edu
"""

import argparse
import asyncio
import os
import sys

from sqlalchemy import select

from seminar_hub.core.database import async_session_maker, close_db
from seminar_hub.core.security import hash_password
from seminar_hub.modules.audit.repository import build_entry
from seminar_hub.modules.tenants.models import DEFAULT_TENANT_SETTINGS, Tenant, TenantStatus
from seminar_hub.modules.users.models import User, UserRole, UserStatus


async def seed_tenant_admin(name: str, domain: str, email: str, password: str) -> None:
    """Create the tenant and admin if they don't exist."""
    try:
        await _seed(name, domain, email, password)
    finally:
        await close_db()


async def _seed(name: str, domain: str, email: str, password: str) -> None:
    async with async_session_maker() as db:
        tenant = (await db.execute(select(Tenant).where(Tenant.domain == domain))).scalar_one_or_none()
        if tenant is None:
            tenant = Tenant(
                name=name,
                domain=domain,
                status=TenantStatus.ACTIVE,
                settings=dict(DEFAULT_TENANT_SETTINGS),
            )
            db.add(tenant)
            await db.flush()
            print(f"Tenant created: {domain} ({tenant.id})")
        else:
            print(f"Tenant already exists: {domain} ({tenant.id})")

        existing = (await db.execute(select(User).where(User.email == email))).scalar_one_or_none()
        if existing:
            await db.commit()
            print(f"Admin already exists: {email} ({existing.id}, role {existing.role.value})")
            return

        admin = User(
            tenant_id=tenant.id,
            email=email,
            display_name="Administrator",
            password_hash=hash_password(password),
            role=UserRole.ADMIN,
            status=UserStatus.ACTIVE,
            must_change_password=True,
        )
        db.add(admin)
        await db.flush()

        db.add(
            build_entry(
                actor_id="system:seed",
                tenant_id=tenant.id,
                action="user_created",
                entity_type="user",
                entity_id=admin.id,
                details={"email": email, "role": UserRole.ADMIN, "seeded": True},
            )
        )
        await db.commit()

        print("Admin created successfully!")
        print(f"  Email: {email}")
        print(f"  ID: {admin.id}")
        print(f"  Tenant: {tenant.id}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Create a tenant and its first admin")
    parser.add_argument("--name", required=True)
    parser.add_argument("--domain", required=True)
    parser.add_argument("--email", required=True)
    args = parser.parse_args()

    password = os.environ.get("SEED_ADMIN_PASSWORD")
    if not password or len(password) < 8:
        sys.exit("Set SEED_ADMIN_PASSWORD (at least 8 characters)")

    asyncio.run(seed_tenant_admin(args.name, args.domain.lower(), args.email.lower(), password))


if __name__ == "__main__":
    main()
