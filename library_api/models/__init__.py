"""
SQLAlchemy Models Package

Import all models here to:
1. Make them available as: from library_api.models import Book, Author, User
2. Ensure Alembic and create_tables() discover them
"""

from library_api.models.author import Author
from library_api.models.book import Book, Genre
from library_api.models.user import User, UserRole

__all__ = [
    "Author",
    "Book",
    "Genre",
    "User",
    "UserRole",
]
