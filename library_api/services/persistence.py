"""
Persistence Helpers

Shared by the catalog and auth handlers:

- commit_or_conflict(): commit a unit of work, turning a unique-index
  violation into a 409 ConflictError
- paginate(): run a filtered, sorted SELECT one page at a time and count
  the full result set
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import Select, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from library_api.exceptions import ConflictError
from library_api.schemas.envelope import PaginationMeta

logger = logging.getLogger(__name__)


@contextmanager
def commit_or_conflict(db: Session, message: str) -> Iterator[None]:
    """
    Commit the changes made inside the block.

    The handlers pre-check uniqueness, but two concurrent requests can
    both pass the check; the unique index decides, and the loser gets 409.

    Example:
        with commit_or_conflict(db, "A book with this ISBN already exists"):
            db.add(book)
    """
    try:
        yield
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.warning(f"Integrity error on commit: {exc.orig}")
        raise ConflictError(message) from exc


def paginate(
    db: Session,
    stmt: Select[Any],
    page: int,
    limit: int,
) -> tuple[list[Any], int, PaginationMeta]:
    """
    Fetch one page of a query.

    Args:
        db: Database session
        stmt: SELECT with filters and ordering already applied
        page: 1-based page number
        limit: Page size

    Returns:
        (items, total, pagination)
    """
    total = db.scalar(select(func.count()).select_from(stmt.order_by(None).subquery())) or 0
    items = list(db.scalars(stmt.offset((page - 1) * limit).limit(limit)))
    return items, total, PaginationMeta.build(page=page, limit=limit, total=total)
