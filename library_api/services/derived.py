"""
Derived Field Functions

Pure functions for the fields that are computed rather than supplied:

- in_stock:      recomputed from stock_quantity before every book write
- is_available:  exposed on every book response
- full_name:     exposed on every author response
- age:           exposed on every author response

They take plain values (not ORM objects) so they can be unit-tested
without a database and reused by the response schemas and the handlers.
"""

from datetime import date


def compute_in_stock(stock_quantity: int) -> bool:
    """A book is in stock exactly when at least one copy is left."""
    return stock_quantity > 0


def is_available(in_stock: bool, stock_quantity: int) -> bool:
    """Return True if the book can be ordered right now."""
    return in_stock and stock_quantity > 0


def full_name(first_name: str, last_name: str) -> str:
    return f"{first_name} {last_name}"


def compute_age(birth_date: date | None, today: date | None = None) -> int | None:
    """
    Compute an age in whole years using calendar arithmetic.

    The naive year difference is reduced by one when this year's birthday
    has not happened yet (earlier month, or same month and earlier day).
    A 29 February birthday counts as reached on 1 March in common years.

    Args:
        birth_date: Date of birth, or None
        today: Reference date (defaults to date.today())

    Returns:
        Age in years, or None when there is no birth date

    Example:
        >>> compute_age(date(1990, 6, 15), today=date(2024, 6, 14))
        33
        >>> compute_age(date(1990, 6, 15), today=date(2024, 6, 15))
        34
    """
    if birth_date is None:
        return None

    today = today or date.today()
    age = today.year - birth_date.year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        age -= 1
    return age
