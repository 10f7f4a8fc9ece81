"""
FastAPI Dependencies Module

Reusable components injected into route handlers with Depends().

The process-wide objects (settings, password hasher, token service) are
built once by create_app() and stored on app.state; these dependencies
hand them to handlers so nothing reads module-level globals.
"""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from library_api.config import Settings
from library_api.database import get_db
from library_api.services.security import PasswordHasher, TokenService

# =============================================================================
# Type Aliases with Annotated
# =============================================================================
# Instead of writing:
#   def get_book(db: Session = Depends(get_db)):
# write:
#   def get_book(db: DbSession):

DbSession = Annotated[Session, Depends(get_db)]


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


AppSettings = Annotated[Settings, Depends(get_app_settings)]
Hasher = Annotated[PasswordHasher, Depends(get_password_hasher)]
Tokens = Annotated[TokenService, Depends(get_token_service)]
