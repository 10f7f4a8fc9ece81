"""
Book Model

The central catalog record.

Field-level rules (lengths, ranges, ISBN shape, dates not in the future)
live in the validation rulesets (library_api.schemas.book), not here.
The model only declares what the database itself must guarantee:
column types, NOT NULL, and the unique ISBN index.

`in_stock` is stored so it can be filtered on, but it is never trusted from
the client: handlers recompute it with services.derived.compute_in_stock()
right before every insert or update.
"""

from datetime import date, datetime
from enum import Enum

from sqlalchemy import Boolean, Date, DateTime, Integer, Numeric, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from library_api.database import Base


class Genre(str, Enum):
    """The fixed set of genres a book can belong to."""

    FICTION = "Fiction"
    NON_FICTION = "Non-Fiction"
    MYSTERY = "Mystery"
    ROMANCE = "Romance"
    SCIENCE_FICTION = "Science Fiction"
    FANTASY = "Fantasy"
    BIOGRAPHY = "Biography"
    HISTORY = "History"
    SELF_HELP = "Self-Help"
    TECHNOLOGY = "Technology"
    OTHER = "Other"


class Book(Base):
    """
    Book model representing books in the library.

    Table: books

    Indexes:
    - isbn: Unique index (duplicate ISBNs surface as 409 Conflict)
    - title: For sorting and searching
    - genre: For the genre filter and /books/genre/{genre}
    - published_date: For sorting

    Example:
        book = Book(
            title="1984",
            author="George Orwell",
            isbn="9780451524935",
            genre=Genre.FICTION.value,
            published_date=date(1949, 6, 8),
            pages=328,
            description="A dystopian social science fiction novel.",
            publisher="Secker & Warburg",
            price=12.99,
            stock_quantity=4,
            in_stock=True,
        )
    """

    __tablename__ = "books"

    id: Mapped[int] = mapped_column(primary_key=True)

    # -------------------------------------------------------------------------
    # Basic Fields
    # -------------------------------------------------------------------------
    title: Mapped[str] = mapped_column(
        String(200),
        index=True,
        nullable=False,
        comment="Book title"
    )

    # Free-text author name, independent of the authors table
    author: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="Author name as printed on the book"
    )

    # Stored without hyphens or spaces so "978-0-..." and "9780..." collide
    isbn: Mapped[str] = mapped_column(
        String(20),
        unique=True,
        index=True,
        nullable=False,
        comment="International Standard Book Number"
    )

    genre: Mapped[str] = mapped_column(
        String(30),
        index=True,
        nullable=False,
        default=Genre.OTHER.value,
        comment="One of the fixed Genre values"
    )

    published_date: Mapped[date] = mapped_column(
        Date,
        index=True,
        nullable=False,
        comment="Date of publication"
    )

    pages: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Number of pages"
    )

    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Book description or summary"
    )

    publisher: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="Publisher name"
    )

    language: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        default="English",
        comment="Language the book is written in"
    )

    # asdecimal=False: prices travel as JSON numbers, already rounded to cents
    price: Mapped[float] = mapped_column(
        Numeric(10, 2, asdecimal=False),
        nullable=False,
        comment="Book price"
    )

    # -------------------------------------------------------------------------
    # Stock
    # -------------------------------------------------------------------------
    in_stock: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        comment="Derived: stock_quantity > 0"
    )

    stock_quantity: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment="Copies in stock"
    )

    # -------------------------------------------------------------------------
    # Timestamps
    # -------------------------------------------------------------------------
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"Book(id={self.id}, title='{self.title}', isbn='{self.isbn}')"
