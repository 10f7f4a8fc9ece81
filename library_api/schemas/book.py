"""
Book Pydantic Schemas

- BookCreate / BookUpdate: the create and update rulesets
- BookResponse: what the API returns (adds the derived isAvailable)
- BookQuery: query-string ruleset for GET /books

ISBNs are accepted with hyphens, spaces and an optional "ISBN-13:" style
prefix and stored as bare digits, so two spellings of the same ISBN collide
on the unique index.
"""

from datetime import date, datetime
from typing import Annotated, ClassVar, Literal

from pydantic import AfterValidator, BeforeValidator, ConfigDict, Field, computed_field

from library_api.models.book import Genre
from library_api.schemas.common import (
    ISBN,
    CamelModel,
    PartialUpdateModel,
    Price,
    blank_to_none,
    not_in_future,
    reject_bool,
)
from library_api.services import derived

PublishedDate = Annotated[date, AfterValidator(not_in_future("Published date"))]
Title = Annotated[str, Field(min_length=1, max_length=200)]
AuthorName = Annotated[str, Field(min_length=1, max_length=100)]
Pages = Annotated[int, BeforeValidator(reject_bool("Pages")), Field(ge=1, le=10000)]
Description = Annotated[str, Field(min_length=10, max_length=1000)]
Publisher = Annotated[str, Field(min_length=1, max_length=100)]
Language = Annotated[str, Field(min_length=1, max_length=100)]
StockQuantity = Annotated[int, BeforeValidator(reject_bool("Stock quantity")), Field(ge=0)]

BookSortField = Literal["title", "author", "publishedDate", "price", "createdAt"]


class BookCreate(CamelModel):
    """
    Ruleset for creating a book.

    inStock is accepted so clients sending it are not rejected, but the
    stored value is always recomputed from stockQuantity.
    """

    title: Title
    author: AuthorName
    isbn: ISBN
    genre: Genre = Genre.OTHER
    published_date: PublishedDate
    pages: Pages
    description: Description
    publisher: Publisher
    language: Language = "English"
    price: Price
    stock_quantity: StockQuantity = 0
    in_stock: bool | None = None


class BookUpdate(PartialUpdateModel):
    """
    Ruleset for updating a book.

    Every field is optional; fields that are sent follow the create rules.
    """

    title: Title | None = None
    author: AuthorName | None = None
    isbn: ISBN | None = None
    genre: Genre | None = None
    published_date: PublishedDate | None = None
    pages: Pages | None = None
    description: Description | None = None
    publisher: Publisher | None = None
    language: Language | None = None
    price: Price | None = None
    stock_quantity: StockQuantity | None = None
    in_stock: bool | None = None

    nullable_fields: ClassVar[frozenset[str]] = frozenset({"in_stock"})


class BookResponse(CamelModel):
    """
    Book as returned by the API.

    Built from the ORM object with BookResponse.model_validate(book).
    """

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    author: str
    isbn: str
    genre: str
    published_date: date
    pages: int
    description: str
    publisher: str
    language: str
    price: float
    in_stock: bool
    stock_quantity: int
    created_at: datetime
    updated_at: datetime

    @computed_field(alias="isAvailable")
    @property
    def is_available(self) -> bool:
        return derived.is_available(self.in_stock, self.stock_quantity)


class BookQuery(CamelModel):
    """Query-string ruleset for listing books."""

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=100)
    genre: Genre | None = None
    sort_by: BookSortField = "createdAt"
    order: Literal["asc", "desc"] = "desc"
    search: Annotated[str | None, BeforeValidator(blank_to_none)] = None
