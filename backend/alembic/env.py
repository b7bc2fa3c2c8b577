from logging.config import fileConfig

from sqlalchemy import create_engine, pool
from alembic import context

from lootledger.config import get_settings
from lootledger.database import Base
import lootledger.models  # noqa: F401 - registriert alle Tabellen an Base.metadata

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

# Verbindung kommt aus den Settings (.env / DATABASE_URL)
db_url = get_settings().database_url


def run_migrations_offline() -> None:
    context.configure(
        url=db_url,
        target_metadata=target_metadata,
        literal_binds=True,
        compare_type=True,
        render_as_batch=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = create_engine(db_url, poolclass=pool.NullPool)
    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            render_as_batch=True,  # SQLite kann kein ALTER COLUMN
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
