"""
Books Router

CRUD endpoints for the book catalog, plus two canned lists:

- GET    /books                 list (filter, search, sort, paginate)
- GET    /books/available       books that can be ordered now
- GET    /books/genre/{genre}   books of one genre
- GET    /books/{book_id}       one book
- POST   /books                 create          (token required)
- PUT    /books/{book_id}       partial update  (token required)
- DELETE /books/{book_id}       delete          (token required)

Every route runs through a RequestPipeline (validate, then authenticate);
handlers receive already-validated data in RequestContext.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy import Select, func, or_, select

from library_api.dependencies import DbSession
from library_api.exceptions import ConflictError, NotFoundError, ValidationError
from library_api.models import Book, Genre
from library_api.pipeline import RequestContext, RequestPipeline
from library_api.schemas import (
    BookQuery,
    BookResponse,
    DataEnvelope,
    EmptyDataEnvelope,
    ListEnvelope,
)
from library_api.services.derived import compute_in_stock
from library_api.services.persistence import commit_or_conflict, paginate
from library_api.validation import Mode, ResourceKind, get_ruleset

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/books",
    tags=["Books"],
    responses={
        404: {"description": "Book not found"},
    },
)

ISBN_TAKEN = "A book with this ISBN already exists"

SORT_COLUMNS = {
    "title": Book.title,
    "author": Book.author,
    "publishedDate": Book.published_date,
    "price": Book.price,
    "createdAt": Book.created_at,
}

# =============================================================================
# Pipelines
# =============================================================================
list_pipeline = RequestPipeline(query=BookQuery)
read_pipeline = RequestPipeline()
create_pipeline = RequestPipeline(
    body=get_ruleset(ResourceKind.BOOK, Mode.CREATE), protected=True
)
update_pipeline = RequestPipeline(
    body=get_ruleset(ResourceKind.BOOK, Mode.UPDATE), protected=True
)
delete_pipeline = RequestPipeline(protected=True)


# =============================================================================
# Helper Functions
# =============================================================================
def get_book_or_404(db: DbSession, book_id: int) -> Book:
    book = db.get(Book, book_id)
    if book is None:
        raise NotFoundError("Book not found")
    return book


def ensure_isbn_free(db: DbSession, isbn: str, exclude_id: int | None = None) -> None:
    stmt = select(Book.id).where(Book.isbn == isbn)
    if exclude_id is not None:
        stmt = stmt.where(Book.id != exclude_id)
    if db.scalar(stmt) is not None:
        raise ConflictError(ISBN_TAKEN)


def apply_book_filters(stmt: Select, query: BookQuery) -> Select:
    """
    Apply the genre filter and the free-text search.

    Search is a case-insensitive substring match on title, author and
    description; LIKE wildcards in the term are matched literally.
    """
    if query.genre:
        stmt = stmt.where(Book.genre == query.genre)

    if query.search:
        term = query.search.lower()
        stmt = stmt.where(
            or_(
                func.lower(Book.title).contains(term, autoescape=True),
                func.lower(Book.author).contains(term, autoescape=True),
                func.lower(Book.description).contains(term, autoescape=True),
            )
        )

    return stmt


def apply_sorting(stmt: Select, sort_by: str, order: str) -> Select:
    """Order by the requested column, with id as a stable tie-breaker."""
    column = SORT_COLUMNS[sort_by]
    if order == "asc":
        return stmt.order_by(column.asc(), Book.id.asc())
    return stmt.order_by(column.desc(), Book.id.desc())


def build_list_response(
    db: DbSession,
    stmt: Select,
    query: BookQuery,
    message: str,
) -> ListEnvelope[BookResponse]:
    books, total, pagination = paginate(db, stmt, query.page, query.limit)
    return ListEnvelope[BookResponse](
        message=message,
        count=len(books),
        total=total,
        pagination=pagination,
        data=[BookResponse.model_validate(book) for book in books],
    )


# =============================================================================
# Endpoints
# =============================================================================
@router.get(
    "",
    response_model=ListEnvelope[BookResponse],
    summary="List books",
    description="Paginated list with genre filter, search and sorting.",
)
def list_books(
    db: DbSession,
    ctx: Annotated[RequestContext, Depends(list_pipeline)],
) -> ListEnvelope[BookResponse]:
    """
    List books.

    Query parameters: page, limit (1-100), genre, search,
    sortBy (title|author|publishedDate|price|createdAt), order (asc|desc).
    Defaults to newest first.
    """
    query: BookQuery = ctx.query
    stmt = apply_book_filters(select(Book), query)
    stmt = apply_sorting(stmt, query.sort_by, query.order)
    return build_list_response(db, stmt, query, "Books retrieved successfully")


@router.get(
    "/available",
    response_model=ListEnvelope[BookResponse],
    summary="List available books",
)
def list_available_books(
    db: DbSession,
    ctx: Annotated[RequestContext, Depends(list_pipeline)],
) -> ListEnvelope[BookResponse]:
    """Books in stock with at least one copy, newest first."""
    query: BookQuery = ctx.query
    stmt = (
        select(Book)
        .where(Book.in_stock.is_(True), Book.stock_quantity > 0)
        .order_by(Book.created_at.desc(), Book.id.desc())
    )
    return build_list_response(db, stmt, query, "Available books retrieved successfully")


@router.get(
    "/genre/{genre}",
    response_model=ListEnvelope[BookResponse],
    summary="List books by genre",
)
def list_books_by_genre(
    genre: str,
    db: DbSession,
    ctx: Annotated[RequestContext, Depends(list_pipeline)],
) -> ListEnvelope[BookResponse]:
    """Books of one genre, newest first. The genre must be one of Genre."""
    if genre not in {g.value for g in Genre}:
        raise ValidationError(errors=[{"field": "genre", "message": "Invalid genre"}])

    query: BookQuery = ctx.query
    stmt = (
        select(Book)
        .where(Book.genre == genre)
        .order_by(Book.created_at.desc(), Book.id.desc())
    )
    return build_list_response(db, stmt, query, f"{genre} books retrieved successfully")


@router.get(
    "/{book_id}",
    response_model=DataEnvelope[BookResponse],
    summary="Get a book by ID",
)
def get_book(
    book_id: int,
    db: DbSession,
    ctx: Annotated[RequestContext, Depends(read_pipeline)],
) -> DataEnvelope[BookResponse]:
    book = get_book_or_404(db, book_id)
    return DataEnvelope[BookResponse](
        message="Book retrieved successfully",
        data=BookResponse.model_validate(book),
    )


@router.post(
    "",
    response_model=DataEnvelope[BookResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create a book",
    description="Requires a bearer token. inStock is derived from stockQuantity.",
)
def create_book(
    db: DbSession,
    ctx: Annotated[RequestContext, Depends(create_pipeline)],
) -> DataEnvelope[BookResponse]:
    """
    Create a book.

    Raises:
        ConflictError: 409 if the ISBN is already in the catalog
    """
    data = ctx.body.model_dump(exclude={"in_stock"})
    ensure_isbn_free(db, data["isbn"])

    book = Book(**data)
    book.in_stock = compute_in_stock(book.stock_quantity)

    with commit_or_conflict(db, ISBN_TAKEN):
        db.add(book)
    db.refresh(book)

    logger.info(f"Book created: id={book.id} isbn={book.isbn} by user {ctx.user.id}")
    return DataEnvelope[BookResponse](
        message="Book created successfully",
        data=BookResponse.model_validate(book),
    )


@router.put(
    "/{book_id}",
    response_model=DataEnvelope[BookResponse],
    summary="Update a book",
    description="Requires a bearer token. Only the fields sent are changed.",
)
def update_book(
    book_id: int,
    db: DbSession,
    ctx: Annotated[RequestContext, Depends(update_pipeline)],
) -> DataEnvelope[BookResponse]:
    """
    Update a book.

    inStock is recomputed from the resulting stockQuantity whatever the
    client sent.

    Raises:
        NotFoundError: 404 if the book does not exist
        ConflictError: 409 if the new ISBN belongs to another book
    """
    book = get_book_or_404(db, book_id)
    changes = ctx.body.model_dump(exclude_unset=True, exclude={"in_stock"})

    if "isbn" in changes and changes["isbn"] != book.isbn:
        ensure_isbn_free(db, changes["isbn"], exclude_id=book.id)

    for field, value in changes.items():
        setattr(book, field, value)
    book.in_stock = compute_in_stock(book.stock_quantity)

    with commit_or_conflict(db, ISBN_TAKEN):
        db.flush()
    db.refresh(book)

    logger.info(f"Book updated: id={book.id} fields={sorted(changes)}")
    return DataEnvelope[BookResponse](
        message="Book updated successfully",
        data=BookResponse.model_validate(book),
    )


@router.delete(
    "/{book_id}",
    response_model=EmptyDataEnvelope,
    summary="Delete a book",
    description="Requires a bearer token.",
)
def delete_book(
    book_id: int,
    db: DbSession,
    ctx: Annotated[RequestContext, Depends(delete_pipeline)],
) -> EmptyDataEnvelope:
    book = get_book_or_404(db, book_id)
    db.delete(book)
    db.commit()

    logger.info(f"Book deleted: id={book_id}")
    return EmptyDataEnvelope(message="Book deleted successfully")
