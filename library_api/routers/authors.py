"""
Authors Router

CRUD endpoints for authors:

- GET    /authors                              list (filter, search, sort, paginate)
- GET    /authors/active                       active authors
- GET    /authors/nationality/{nationality}    authors of one nationality
- GET    /authors/{author_id}                  one author
- POST   /authors                              create          (token required)
- PUT    /authors/{author_id}                  partial update  (token required)
- DELETE /authors/{author_id}                  delete          (token required)

Authors are independent of books: Book.author is a free-text name.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy import Select, func, or_, select

from library_api.dependencies import DbSession
from library_api.exceptions import ConflictError, NotFoundError
from library_api.models import Author
from library_api.pipeline import RequestContext, RequestPipeline
from library_api.schemas import (
    AuthorQuery,
    AuthorResponse,
    DataEnvelope,
    EmptyDataEnvelope,
    ListEnvelope,
)
from library_api.services.persistence import commit_or_conflict, paginate
from library_api.validation import Mode, ResourceKind, get_ruleset

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/authors",
    tags=["Authors"],
    responses={
        404: {"description": "Author not found"},
    },
)

EMAIL_TAKEN = "An author with this email already exists"

SORT_COLUMNS = {
    "firstName": Author.first_name,
    "lastName": Author.last_name,
    "email": Author.email,
    "birthDate": Author.birth_date,
    "nationality": Author.nationality,
    "createdAt": Author.created_at,
}

list_pipeline = RequestPipeline(query=AuthorQuery)
read_pipeline = RequestPipeline()
create_pipeline = RequestPipeline(
    body=get_ruleset(ResourceKind.AUTHOR, Mode.CREATE), protected=True
)
update_pipeline = RequestPipeline(
    body=get_ruleset(ResourceKind.AUTHOR, Mode.UPDATE), protected=True
)
delete_pipeline = RequestPipeline(protected=True)


# =============================================================================
# Helper Functions
# =============================================================================
def get_author_or_404(db: DbSession, author_id: int) -> Author:
    author = db.get(Author, author_id)
    if author is None:
        raise NotFoundError("Author not found")
    return author


def ensure_email_free(db: DbSession, email: str, exclude_id: int | None = None) -> None:
    stmt = select(Author.id).where(Author.email == email)
    if exclude_id is not None:
        stmt = stmt.where(Author.id != exclude_id)
    if db.scalar(stmt) is not None:
        raise ConflictError(EMAIL_TAKEN)


def apply_author_filters(stmt: Select, query: AuthorQuery) -> Select:
    """
    Apply nationality, isActive and free-text search filters.

    Nationality matches case-insensitively; search looks for a substring of
    first name, last name, e-mail or biography.
    """
    if query.nationality:
        stmt = stmt.where(func.lower(Author.nationality) == query.nationality.lower())

    if query.is_active is not None:
        stmt = stmt.where(Author.is_active.is_(query.is_active))

    if query.search:
        term = query.search.lower()
        stmt = stmt.where(
            or_(
                func.lower(Author.first_name).contains(term, autoescape=True),
                func.lower(Author.last_name).contains(term, autoescape=True),
                func.lower(Author.email).contains(term, autoescape=True),
                func.lower(Author.biography).contains(term, autoescape=True),
            )
        )

    return stmt


def apply_sorting(stmt: Select, sort_by: str, order: str) -> Select:
    column = SORT_COLUMNS[sort_by]
    if order == "asc":
        return stmt.order_by(column.asc(), Author.id.asc())
    return stmt.order_by(column.desc(), Author.id.desc())


def build_list_response(
    db: DbSession,
    stmt: Select,
    query: AuthorQuery,
    message: str,
) -> ListEnvelope[AuthorResponse]:
    authors, total, pagination = paginate(db, stmt, query.page, query.limit)
    return ListEnvelope[AuthorResponse](
        message=message,
        count=len(authors),
        total=total,
        pagination=pagination,
        data=[AuthorResponse.model_validate(author) for author in authors],
    )


# =============================================================================
# Endpoints
# =============================================================================
@router.get(
    "",
    response_model=ListEnvelope[AuthorResponse],
    summary="List authors",
    description="Paginated list with nationality/isActive filters, search and sorting.",
)
def list_authors(
    db: DbSession,
    ctx: Annotated[RequestContext, Depends(list_pipeline)],
) -> ListEnvelope[AuthorResponse]:
    query: AuthorQuery = ctx.query
    stmt = apply_author_filters(select(Author), query)
    stmt = apply_sorting(stmt, query.sort_by, query.order)
    return build_list_response(db, stmt, query, "Authors retrieved successfully")


@router.get(
    "/active",
    response_model=ListEnvelope[AuthorResponse],
    summary="List active authors",
)
def list_active_authors(
    db: DbSession,
    ctx: Annotated[RequestContext, Depends(list_pipeline)],
) -> ListEnvelope[AuthorResponse]:
    stmt = (
        select(Author)
        .where(Author.is_active.is_(True))
        .order_by(Author.created_at.desc(), Author.id.desc())
    )
    return build_list_response(db, stmt, ctx.query, "Active authors retrieved successfully")


@router.get(
    "/nationality/{nationality}",
    response_model=ListEnvelope[AuthorResponse],
    summary="List authors by nationality",
)
def list_authors_by_nationality(
    nationality: str,
    db: DbSession,
    ctx: Annotated[RequestContext, Depends(list_pipeline)],
) -> ListEnvelope[AuthorResponse]:
    """Authors whose nationality matches (case-insensitive), by last then first name."""
    stmt = (
        select(Author)
        .where(func.lower(Author.nationality) == nationality.strip().lower())
        .order_by(Author.last_name.asc(), Author.first_name.asc(), Author.id.asc())
    )
    return build_list_response(
        db, stmt, ctx.query, f"{nationality} authors retrieved successfully"
    )


@router.get(
    "/{author_id}",
    response_model=DataEnvelope[AuthorResponse],
    summary="Get an author by ID",
)
def get_author(
    author_id: int,
    db: DbSession,
    ctx: Annotated[RequestContext, Depends(read_pipeline)],
) -> DataEnvelope[AuthorResponse]:
    author = get_author_or_404(db, author_id)
    return DataEnvelope[AuthorResponse](
        message="Author retrieved successfully",
        data=AuthorResponse.model_validate(author),
    )


@router.post(
    "",
    response_model=DataEnvelope[AuthorResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create an author",
    description="Requires a bearer token.",
)
def create_author(
    db: DbSession,
    ctx: Annotated[RequestContext, Depends(create_pipeline)],
) -> DataEnvelope[AuthorResponse]:
    """
    Create an author.

    Raises:
        ConflictError: 409 if the e-mail is already used by another author
    """
    data = ctx.body.model_dump()
    ensure_email_free(db, data["email"])

    author = Author(**data)
    with commit_or_conflict(db, EMAIL_TAKEN):
        db.add(author)
    db.refresh(author)

    logger.info(f"Author created: id={author.id} by user {ctx.user.id}")
    return DataEnvelope[AuthorResponse](
        message="Author created successfully",
        data=AuthorResponse.model_validate(author),
    )


@router.put(
    "/{author_id}",
    response_model=DataEnvelope[AuthorResponse],
    summary="Update an author",
    description="Requires a bearer token. Only the fields sent are changed.",
)
def update_author(
    author_id: int,
    db: DbSession,
    ctx: Annotated[RequestContext, Depends(update_pipeline)],
) -> DataEnvelope[AuthorResponse]:
    author = get_author_or_404(db, author_id)
    changes = ctx.body.model_dump(exclude_unset=True)

    if "email" in changes and changes["email"] != author.email:
        ensure_email_free(db, changes["email"], exclude_id=author.id)

    for field, value in changes.items():
        setattr(author, field, value)

    with commit_or_conflict(db, EMAIL_TAKEN):
        db.flush()
    db.refresh(author)

    logger.info(f"Author updated: id={author.id} fields={sorted(changes)}")
    return DataEnvelope[AuthorResponse](
        message="Author updated successfully",
        data=AuthorResponse.model_validate(author),
    )


@router.delete(
    "/{author_id}",
    response_model=EmptyDataEnvelope,
    summary="Delete an author",
    description="Requires a bearer token.",
)
def delete_author(
    author_id: int,
    db: DbSession,
    ctx: Annotated[RequestContext, Depends(delete_pipeline)],
) -> EmptyDataEnvelope:
    author = get_author_or_404(db, author_id)
    db.delete(author)
    db.commit()

    logger.info(f"Author deleted: id={author_id}")
    return EmptyDataEnvelope(message="Author deleted successfully")
