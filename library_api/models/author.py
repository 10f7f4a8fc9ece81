"""
Author Model

Represents an author in the catalog.

fullName and age are not columns: they are derived on read by
services.derived.full_name() / compute_age() (see schemas.author).
"""

from datetime import date, datetime

from sqlalchemy import Boolean, Date, DateTime, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from library_api.database import Base


class Author(Base):
    """
    Author model representing writers in the system.

    Table: authors

    Indexes:
    - email: Unique index (stored lower-cased)
    - last_name: For sorting and searching
    - nationality: For the nationality filter

    Example:
        author = Author(
            first_name="George",
            last_name="Orwell",
            email="george.orwell@example.com",
            birth_date=date(1903, 6, 25),
            nationality="British",
        )
    """

    __tablename__ = "authors"

    id: Mapped[int] = mapped_column(primary_key=True)

    # -------------------------------------------------------------------------
    # Name
    # -------------------------------------------------------------------------
    first_name: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        comment="Author's first name"
    )

    last_name: Mapped[str] = mapped_column(
        String(50),
        index=True,
        nullable=False,
        comment="Author's last name"
    )

    # -------------------------------------------------------------------------
    # Contact / Profile
    # -------------------------------------------------------------------------
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
        comment="Contact e-mail (lower-cased)"
    )

    biography: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="Author biography"
    )

    birth_date: Mapped[date | None] = mapped_column(
        Date,
        nullable=True,
        comment="Date of birth"
    )

    nationality: Mapped[str | None] = mapped_column(
        String(50),
        index=True,
        nullable=True,
        comment="Nationality"
    )

    website: Mapped[str | None] = mapped_column(
        String(500),
        nullable=True,
        comment="Personal or official website URL"
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
        comment="Whether the author is currently active"
    )

    # -------------------------------------------------------------------------
    # Timestamps
    # -------------------------------------------------------------------------
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        comment="When the author record was created"
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
        comment="When the author record was last updated"
    )

    def __repr__(self) -> str:
        return (
            f"Author(id={self.id}, first_name='{self.first_name}', "
            f"last_name='{self.last_name}')"
        )
