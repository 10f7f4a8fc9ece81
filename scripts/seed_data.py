#!/usr/bin/env python3
"""
Database Seed Script

Populates the database with sample authors and books for development.

USAGE:
    # From the project root with the virtualenv active
    python scripts/seed_data.py

    # Keep existing rows
    python scripts/seed_data.py --keep

This script:
1. Connects to the database using the application settings
2. Clears existing authors and books (unless --keep)
3. Runs every sample record through the same validation rulesets the API
   uses, so the seed data obeys the same rules as client data
"""

import argparse
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy import delete
from sqlalchemy.orm import Session

from library_api.config import get_settings
from library_api.database import build_engine, build_session_factory, create_tables
from library_api.models import Author, Book
from library_api.services.derived import compute_in_stock
from library_api.validation import Mode, ResourceKind, validate

AUTHORS = [
    {
        "firstName": "George",
        "lastName": "Orwell",
        "email": "george.orwell@example.com",
        "biography": "English novelist and essayist, journalist and critic. "
                     "Best known for '1984' and 'Animal Farm'.",
        "birthDate": "1903-06-25",
        "nationality": "British",
        "isActive": False,
    },
    {
        "firstName": "Jane",
        "lastName": "Austen",
        "email": "jane.austen@example.com",
        "biography": "English novelist known for six major novels that critique "
                     "the British landed gentry at the end of the 18th century.",
        "birthDate": "1775-12-16",
        "nationality": "British",
        "isActive": False,
    },
    {
        "firstName": "Agatha",
        "lastName": "Christie",
        "email": "agatha.christie@example.com",
        "biography": "English writer known for her 66 detective novels.",
        "birthDate": "1890-09-15",
        "nationality": "British",
        "isActive": False,
    },
    {
        "firstName": "Isaac",
        "lastName": "Asimov",
        "email": "isaac.asimov@example.com",
        "biography": "American writer and professor of biochemistry.",
        "birthDate": "1920-01-02",
        "nationality": "American",
        "website": "https://www.asimovonline.com",
        "isActive": False,
    },
    {
        "firstName": "Chimamanda",
        "lastName": "Ngozi Adichie",
        "email": "chimamanda@example.com",
        "biography": "Nigerian writer of novels, short stories and non-fiction.",
        "birthDate": "1977-09-15",
        "nationality": "Nigerian",
        "website": "https://www.chimamanda.com",
    },
]

BOOKS = [
    {
        "title": "1984",
        "author": "George Orwell",
        "isbn": "978-0-451-52493-5",
        "genre": "Fiction",
        "publishedDate": "1949-06-08",
        "pages": 328,
        "description": "A dystopian novel set in a totalitarian society under constant surveillance.",
        "publisher": "Secker & Warburg",
        "price": 12.99,
        "stockQuantity": 14,
    },
    {
        "title": "Pride and Prejudice",
        "author": "Jane Austen",
        "isbn": "9780141439518",
        "genre": "Romance",
        "publishedDate": "1813-01-28",
        "pages": 432,
        "description": "A romantic novel following the emotional development of Elizabeth Bennet.",
        "publisher": "T. Egerton",
        "price": 8.99,
        "stockQuantity": 3,
    },
    {
        "title": "Murder on the Orient Express",
        "author": "Agatha Christie",
        "isbn": "9780062693662",
        "genre": "Mystery",
        "publishedDate": "1934-01-01",
        "pages": 256,
        "description": "Hercule Poirot investigates a murder on a train stuck in a snowdrift.",
        "publisher": "Collins Crime Club",
        "price": 14.99,
        "stockQuantity": 0,
    },
    {
        "title": "Foundation",
        "author": "Isaac Asimov",
        "isbn": "9780553293357",
        "genre": "Science Fiction",
        "publishedDate": "1951-05-01",
        "pages": 244,
        "description": "The first novel in the Foundation series about the fall of the Galactic Empire.",
        "publisher": "Gnome Press",
        "price": 15.99,
        "stockQuantity": 7,
    },
    {
        "title": "Half of a Yellow Sun",
        "author": "Chimamanda Ngozi Adichie",
        "isbn": "9781400095209",
        "genre": "Fiction",
        "publishedDate": "2006-08-11",
        "pages": 448,
        "description": "Three lives caught up in the Nigerian Civil War of the late 1960s.",
        "publisher": "Fourth Estate",
        "price": 16.5,
        "stockQuantity": 5,
    },
]


def clear_data(db: Session) -> None:
    """Delete all authors and books. Users are left alone."""
    print("Clearing existing data...")
    db.execute(delete(Book))
    db.execute(delete(Author))
    db.commit()
    print("Data cleared.")


def create_authors(db: Session) -> list[Author]:
    print("Creating authors...")
    authors = [Author(**validate(ResourceKind.AUTHOR, Mode.CREATE, data)) for data in AUTHORS]
    db.add_all(authors)
    db.commit()
    print(f"Created {len(authors)} authors.")
    return authors


def create_books(db: Session) -> list[Book]:
    print("Creating books...")
    books = []
    for data in BOOKS:
        values = validate(ResourceKind.BOOK, Mode.CREATE, data)
        values.pop("in_stock", None)
        book = Book(**values)
        book.in_stock = compute_in_stock(book.stock_quantity)
        books.append(book)

    db.add_all(books)
    db.commit()
    print(f"Created {len(books)} books.")
    return books


def seed_database(clear_existing: bool = True) -> None:
    """
    Seed the database configured by the environment.

    Args:
        clear_existing: If True, clears existing authors and books first.
    """
    print("=" * 60)
    print("Starting database seed...")
    print("=" * 60)

    settings = get_settings()
    engine = build_engine(settings)
    create_tables(engine)
    db = build_session_factory(engine)()

    try:
        if clear_existing:
            clear_data(db)

        authors = create_authors(db)
        books = create_books(db)

        print("=" * 60)
        print("Database seeding completed successfully!")
        print("=" * 60)
        print("\nSummary:")
        print(f"  - Authors: {len(authors)}")
        print(f"  - Books: {len(books)}")
        print(f"\nAPI documentation at http://{settings.host}:{settings.port}/docs")

    except Exception as e:
        print(f"Error seeding database: {e}")
        db.rollback()
        raise
    finally:
        db.close()
        engine.dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed the Book Library database")
    parser.add_argument("--keep", action="store_true", help="Keep existing rows")
    args = parser.parse_args()

    seed_database(clear_existing=not args.keep)
