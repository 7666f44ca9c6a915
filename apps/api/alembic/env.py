import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy.engine import Connection

from seminar_hub.core.database import Base, engine
from seminar_hub.modules.appointments import models as appointment_models  # noqa: F401
from seminar_hub.modules.audit import models as audit_models  # noqa: F401
from seminar_hub.modules.interventions import models as intervention_models  # noqa: F401
from seminar_hub.modules.notes import models as note_models  # noqa: F401
from seminar_hub.modules.reports import models as report_models  # noqa: F401
from seminar_hub.modules.tenants import models as tenant_models  # noqa: F401
from seminar_hub.modules.users import models as user_models  # noqa: F401

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    context.configure(
        url=engine.url.render_as_string(hide_password=False),
        target_metadata=target_metadata,
        literal_binds=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def _run_sync(connection: Connection) -> None:
    context.configure(connection=connection, target_metadata=target_metadata)
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    async with engine.connect() as connection:
        await connection.run_sync(_run_sync)
    await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
