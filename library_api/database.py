"""
Database Configuration Module

SQLAlchemy 2.0 setup for the Book Library API.

The catalog is stored through SQLAlchemy so the same code runs against
SQLite (development and tests) and PostgreSQL (deployment). Uniqueness of
ISBNs and e-mail addresses is enforced by unique indexes in the database;
the application maps the resulting IntegrityError to a 409 conflict.

Session Management Pattern
==========================
"Session per request":
1. Request arrives → get_db() opens a session from the app's factory
2. The pipeline and the handler share that session
3. Handlers commit explicitly; failures roll back
4. The session is closed when the request ends

The engine and session factory are built by create_app() from an explicit
Settings object and kept on app.state, so no module-level engine exists.
"""

from collections.abc import Generator

from fastapi import Request
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from library_api.config import Settings


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    Alembic reads Base.metadata to discover the tables for migrations.
    """
    pass


# =============================================================================
# Engine / Session Factory
# =============================================================================
def build_engine(settings: Settings) -> Engine:
    """
    Create the SQLAlchemy engine described by the settings.

    Pool sizing only applies to server databases; SQLite uses its own
    pooling and rejects pool_size / max_overflow.

    Args:
        settings: Application settings

    Returns:
        Configured Engine
    """
    if settings.database_url.startswith("sqlite"):
        return create_engine(
            settings.database_url,
            connect_args={"check_same_thread": False},
            echo=settings.debug,
        )

    return create_engine(
        settings.database_url,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=True,  # Verify connections are alive before using
        echo=settings.debug,
    )


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Create the session factory bound to an engine."""
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
    )


# =============================================================================
# Dependency Injection
# =============================================================================
def get_db(request: Request) -> Generator[Session, None, None]:
    """
    Database session dependency for FastAPI.

    Opens a session from the factory stored on app.state by create_app()
    and closes it when the request ends, even if the handler raised.

    Tests override this dependency to hand out their own session.

    Yields:
        SQLAlchemy Session instance
    """
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


# =============================================================================
# Utility Functions
# =============================================================================
def create_tables(engine: Engine) -> None:
    """
    Create all database tables.

    Used for development (create_tables_on_startup) and tests.
    In production, use Alembic migrations instead.
    """
    # Models must be imported so their tables are registered on Base.metadata
    import library_api.models  # noqa: F401

    Base.metadata.create_all(bind=engine)


def drop_tables(engine: Engine) -> None:
    """
    Drop all database tables.

    DANGER: This deletes all data! Development and tests only.
    """
    Base.metadata.drop_all(bind=engine)
