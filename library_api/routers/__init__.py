"""
API Routers Package

Router Structure:
- books.py: /api/v1/books/* endpoints
- authors.py: /api/v1/authors/* endpoints
- auth.py: /api/v1/auth/* endpoints (registration, login, profile, Google)

Each router is imported and registered in main.create_app().
"""

from library_api.routers.auth import router as auth_router
from library_api.routers.authors import router as authors_router
from library_api.routers.books import router as books_router

__all__ = [
    "auth_router",
    "authors_router",
    "books_router",
]
