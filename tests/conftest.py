"""
pytest Fixtures for Book Library API Tests

Shared fixtures used across all test files.

DATABASE STRATEGY:
==================
Every test gets its own in-memory SQLite engine with freshly created
tables. StaticPool keeps the single in-memory connection alive for the
whole test; without it the database would vanish between connections.

A new engine per test (rather than a rolled-back outer transaction) lets
handlers commit and roll back freely, which the conflict tests rely on.

APP STRATEGY:
=============
Each test builds its own app with create_app(test_settings), so settings
such as Google credentials or rate limiting can differ per test. get_db is
overridden to hand out the test session.
"""

# =============================================================================
# TEST ENVIRONMENT SETUP
# =============================================================================
# IMPORTANT: Set environment variables BEFORE importing the app
# (library_api.main builds a module-level app from the environment)
import os

os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key-for-unit-tests-at-least-32-characters-long"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"

from collections.abc import Generator
from datetime import date

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from library_api.config import Settings
from library_api.database import Base, get_db
from library_api.main import create_app
from library_api.models import Author, Book, User
from library_api.services.rate_limiter import limiter
from library_api.services.security import PasswordHasher

TEST_SECRET_KEY = os.environ["SECRET_KEY"]
TEST_PASSWORD = "secret123"

API = "/api/v1"


def make_settings(**overrides) -> Settings:
    """Build test Settings; keyword arguments override the defaults."""
    values = {
        "secret_key": TEST_SECRET_KEY,
        "database_url": "sqlite://",
        "rate_limit_enabled": False,
        "bcrypt_rounds": 4,
        "google_client_id": None,
        "google_client_secret": None,
        "log_level": "WARNING",
    }
    values.update(overrides)
    return Settings(**values)


# =============================================================================
# DATABASE FIXTURES
# =============================================================================
@pytest.fixture
def engine():
    """Create a private in-memory database with all tables."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    import library_api.models  # noqa: F401

    Base.metadata.create_all(bind=engine)

    yield engine

    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine) -> Generator[Session, None, None]:
    """Create a database session for one test."""
    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestSessionLocal()

    yield session

    session.close()


# =============================================================================
# APPLICATION FIXTURES
# =============================================================================
@pytest.fixture
def settings() -> Settings:
    return make_settings()


def build_test_app(settings: Settings, db_session: Session) -> FastAPI:
    app = create_app(settings)

    def override_get_db():
        """Provide the test session instead of one from the app's engine."""
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    return app


@pytest.fixture
def app(settings: Settings, db_session: Session) -> FastAPI:
    return build_test_app(settings, db_session)


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """
    Test client bound to the test app.

    Used as a context manager so the lifespan handler runs.
    """
    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
    limiter.reset()


@pytest.fixture
def hasher(settings: Settings) -> PasswordHasher:
    return PasswordHasher(rounds=settings.bcrypt_rounds)


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================
@pytest.fixture
def book_payload() -> dict:
    """A valid create-book request body."""
    return {
        "title": "1984",
        "author": "George Orwell",
        "isbn": "978-0-451-52493-5",
        "genre": "Fiction",
        "publishedDate": "1949-06-08",
        "pages": 328,
        "description": "A dystopian social science fiction novel.",
        "publisher": "Secker & Warburg",
        "price": 12.99,
        "stockQuantity": 5,
    }


@pytest.fixture
def author_payload() -> dict:
    """A valid create-author request body."""
    return {
        "firstName": "George",
        "lastName": "Orwell",
        "email": "George.Orwell@Example.com",
        "biography": "English novelist, essayist and critic.",
        "birthDate": "1903-06-25",
        "nationality": "British",
        "website": "https://www.orwell.org",
    }


@pytest.fixture
def sample_book(db_session: Session) -> Book:
    book = Book(
        title="Brave New World",
        author="Aldous Huxley",
        isbn="9780060850524",
        genre="Science Fiction",
        published_date=date(1932, 1, 1),
        pages=288,
        description="A futuristic World State of genetically modified citizens.",
        publisher="Chatto & Windus",
        price=14.5,
        stock_quantity=3,
        in_stock=True,
    )
    db_session.add(book)
    db_session.commit()
    db_session.refresh(book)
    return book


@pytest.fixture
def multiple_books(db_session: Session) -> list[Book]:
    """25 books with distinct ISBNs, alternating genres and stock."""
    books = []
    for i in range(25):
        books.append(
            Book(
                title=f"Book {i:02d}",
                author=f"Writer {i % 5}",
                isbn=f"97800000000{i:02d}",
                genre="Mystery" if i % 2 else "Fantasy",
                published_date=date(2000 + i % 20, 1, 1),
                pages=100 + i,
                description=f"Description of book number {i}.",
                publisher="Test House",
                price=10 + i,
                stock_quantity=i % 3,
                in_stock=i % 3 > 0,
            )
        )
    db_session.add_all(books)
    db_session.commit()
    return books


@pytest.fixture
def sample_author(db_session: Session) -> Author:
    author = Author(
        first_name="Jane",
        last_name="Austen",
        email="jane.austen@example.com",
        biography="English novelist of manners.",
        birth_date=date(1775, 12, 16),
        nationality="British",
    )
    db_session.add(author)
    db_session.commit()
    db_session.refresh(author)
    return author


@pytest.fixture
def sample_user(db_session: Session, hasher: PasswordHasher) -> User:
    """An active e-mail/password user; password is TEST_PASSWORD."""
    user = User(
        email="reader@example.com",
        name="Test Reader",
        hashed_password=hasher.hash(TEST_PASSWORD),
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def auth_token(app: FastAPI, sample_user: User) -> str:
    return app.state.token_service.create_access_token(sample_user.id)


@pytest.fixture
def auth_headers(auth_token: str) -> dict[str, str]:
    """Authorization header for sample_user."""
    return {"Authorization": f"Bearer {auth_token}"}
