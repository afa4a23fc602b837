"""
Alembic migration environment.
Supports both online (connected to DB) and offline (SQL script generation) modes.
SQLite migrations run in batch mode since it cannot ALTER most constraints.
"""

from logging.config import fileConfig
from sqlalchemy import engine_from_config, pool
from alembic import context

from tigertix.db.base import Base
from tigertix.db.session import is_sqlite
from tigertix.models import Booking, Event, User  # noqa: F401 - Import models for autogenerate
from tigertix.core.config import get_settings

config = context.config
settings = get_settings()

config.set_main_option("sqlalchemy.url", settings.DATABASE_URL_SYNC)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata
render_as_batch = is_sqlite(settings.DATABASE_URL_SYNC)


def run_migrations_offline() -> None:
    """Generate SQL script without connecting to the database."""
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=render_as_batch,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations against a live database connection."""
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            render_as_batch=render_as_batch,
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
