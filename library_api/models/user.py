"""
User Model

The Identity record: a user who can authenticate either with an
e-mail/password pair or through Google OAuth.

SQLAlchemy 2.0 Features Used:
- mapped_column(): Columns with full type support
- Mapped[]: Type hint wrapper for SQLAlchemy columns
"""

from datetime import datetime
from enum import Enum

from sqlalchemy import Boolean, DateTime, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from library_api.database import Base


class UserRole(str, Enum):
    """Roles a user can hold."""

    USER = "user"
    ADMIN = "admin"


class User(Base):
    """
    User model representing registered users in the system.

    Table: users

    A user always has at least one credential: a bcrypt password hash, a
    Google account id, or both (after an existing password account signs in
    with Google). services.identity.ensure_credential() checks this before
    every write; the database does not.

    Users are never deleted. Setting is_active to False disables them:
    their tokens stop working and they cannot log in.

    Example:
        # Email/password user
        user = User(
            email="john@example.com",
            name="John Doe",
            hashed_password=hasher.hash("secret123"),
        )

        # Google user
        user = User(
            email="jane@gmail.com",
            name="Jane Doe",
            google_id="104583829139587623",
        )
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)

    # -------------------------------------------------------------------------
    # Authentication Fields
    # -------------------------------------------------------------------------
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
        comment="User's e-mail address (lower-cased, used for login)"
    )

    # Nullable because Google-only users don't have passwords
    hashed_password: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        comment="Bcrypt hashed password (null for Google-only users)"
    )

    google_id: Mapped[str | None] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=True,
        comment="Google account id"
    )

    # -------------------------------------------------------------------------
    # Profile Fields
    # -------------------------------------------------------------------------
    name: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        comment="Display name"
    )

    avatar_url: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="URL to user's avatar image"
    )

    # -------------------------------------------------------------------------
    # Account Status
    # -------------------------------------------------------------------------
    role: Mapped[str] = mapped_column(
        String(20),
        default=UserRole.USER.value,
        nullable=False,
        comment="user or admin"
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
        comment="Whether the account is active"
    )

    # -------------------------------------------------------------------------
    # Timestamps
    # -------------------------------------------------------------------------
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        comment="When the user registered"
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
        comment="When the user profile was last updated"
    )

    last_login_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        comment="When the user last logged in"
    )

    def __repr__(self) -> str:
        """Developer-friendly string representation."""
        return f"User(id={self.id}, email='{self.email}')"
