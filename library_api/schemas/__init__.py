"""
Pydantic Schemas Package

Schemas define the shape of data entering and leaving the API. The request
schemas double as the validation rulesets registered in
library_api.validation.
"""

from library_api.schemas.author import AuthorCreate, AuthorQuery, AuthorResponse, AuthorUpdate
from library_api.schemas.book import BookCreate, BookQuery, BookResponse, BookUpdate
from library_api.schemas.envelope import (
    AuthEnvelope,
    DataEnvelope,
    EmptyDataEnvelope,
    ListEnvelope,
    MessageEnvelope,
    PaginationMeta,
    UserEnvelope,
)
from library_api.schemas.user import (
    LoginRequest,
    PasswordChange,
    ProfileUpdate,
    RegisterRequest,
    UserResponse,
)

__all__ = [
    # Author
    "AuthorCreate",
    "AuthorQuery",
    "AuthorResponse",
    "AuthorUpdate",
    # Book
    "BookCreate",
    "BookQuery",
    "BookResponse",
    "BookUpdate",
    # Envelopes
    "AuthEnvelope",
    "DataEnvelope",
    "EmptyDataEnvelope",
    "ListEnvelope",
    "MessageEnvelope",
    "PaginationMeta",
    "UserEnvelope",
    # User
    "LoginRequest",
    "PasswordChange",
    "ProfileUpdate",
    "RegisterRequest",
    "UserResponse",
]
