"""
Alembic migration environment for the Book Library API.

The database URL comes from library_api.config.Settings, and the engine
is built with library_api.database.build_engine, exactly as create_app()
does. alembic.ini carries no URL.

    alembic upgrade head
    alembic revision --autogenerate -m "add column"
"""

from logging.config import fileConfig

from alembic import context

from library_api.config import get_settings
from library_api.database import Base, build_engine
from library_api.models import Author, Book, User  # noqa: F401  registers the tables

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

settings = get_settings()
target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """Emit SQL for users, books and authors without a connection (--sql)."""
    context.configure(
        url=settings.database_url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    engine = build_engine(settings)
    try:
        with engine.connect() as connection:
            context.configure(
                connection=connection,
                target_metadata=target_metadata,
                compare_type=True,
                # SQLite cannot ALTER most constraints in place
                render_as_batch=connection.dialect.name == "sqlite",
            )
            with context.begin_transaction():
                context.run_migrations()
    finally:
        engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
