"""
Response Envelopes

Every endpoint answers with the same wrapper:

    Success:  {"success": true, "message": "...", "data": {...}}
    List:     {"success": true, "message": "...", "count": 10, "total": 25,
               "pagination": {...}, "data": [...]}
    Auth:     {"success": true, "message": "...", "token": "...", "user": {...}}

Failures are rendered from library_api.exceptions.APIError.to_envelope().
"""

from math import ceil
from typing import Any, Generic, TypeVar

from pydantic import Field

from library_api.schemas.common import CamelModel
from library_api.schemas.user import UserResponse

T = TypeVar("T")


class PaginationMeta(CamelModel):
    """Pagination block of a list envelope."""

    current_page: int
    total_pages: int
    has_next: bool
    has_prev: bool

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "PaginationMeta":
        """
        Compute pagination metadata for one page of results.

        Example:
            >>> PaginationMeta.build(page=2, limit=10, total=25)
            PaginationMeta(current_page=2, total_pages=3, has_next=True, has_prev=True)
        """
        return cls(
            current_page=page,
            total_pages=ceil(total / limit) if total else 0,
            has_next=page * limit < total,
            has_prev=page > 1,
        )


class MessageEnvelope(CamelModel):
    success: bool = True
    message: str


class DataEnvelope(MessageEnvelope, Generic[T]):
    data: T


class EmptyDataEnvelope(MessageEnvelope):
    """Returned by deletes: the record is gone, data is an empty object."""

    data: dict[str, Any] = Field(default_factory=dict)


class ListEnvelope(MessageEnvelope, Generic[T]):
    count: int
    total: int
    pagination: PaginationMeta
    data: list[T]


class UserEnvelope(MessageEnvelope):
    user: UserResponse


class AuthEnvelope(UserEnvelope):
    """Returned by register, login and the Google callback."""

    token: str
