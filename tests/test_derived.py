"""
Tests for derived fields and pagination metadata.
"""

from datetime import date

import pytest

from library_api.schemas.envelope import PaginationMeta
from library_api.services.derived import compute_age, compute_in_stock, full_name, is_available


class TestComputeAge:
    @pytest.mark.parametrize(
        "birth,today,expected",
        [
            (date(1990, 6, 15), date(2024, 6, 14), 33),
            (date(1990, 6, 15), date(2024, 6, 15), 34),
            (date(1990, 6, 15), date(2024, 5, 30), 33),
            (date(1990, 6, 15), date(2024, 7, 1), 34),
            (date(2000, 1, 1), date(2000, 1, 1), 0),
            # leap-day birthday: reached on 1 March in common years
            (date(2000, 2, 29), date(2023, 2, 28), 22),
            (date(2000, 2, 29), date(2023, 3, 1), 23),
            (date(2000, 2, 29), date(2024, 2, 29), 24),
        ],
    )
    def test_compute_age(self, birth, today, expected):
        assert compute_age(birth, today=today) == expected

    def test_no_birth_date(self):
        assert compute_age(None) is None

    def test_defaults_to_today(self):
        today = date.today()

        assert compute_age(date(today.year - 30, 1, 1)) in (29, 30)


class TestStockFields:
    @pytest.mark.parametrize("quantity,expected", [(0, False), (1, True), (500, True)])
    def test_compute_in_stock(self, quantity, expected):
        assert compute_in_stock(quantity) is expected

    def test_is_available_needs_both(self):
        assert is_available(True, 3) is True
        assert is_available(True, 0) is False
        assert is_available(False, 3) is False


def test_full_name():
    assert full_name("Ursula", "Le Guin") == "Ursula Le Guin"


class TestPaginationMeta:
    @pytest.mark.parametrize(
        "page,limit,total,expected",
        [
            (1, 10, 0, (0, False, False)),
            (1, 10, 25, (3, True, False)),
            (2, 10, 25, (3, True, True)),
            (3, 10, 25, (3, False, True)),
            (1, 10, 10, (1, False, False)),
            (5, 10, 25, (3, False, True)),
        ],
    )
    def test_build(self, page, limit, total, expected):
        meta = PaginationMeta.build(page=page, limit=limit, total=total)

        assert (meta.total_pages, meta.has_next, meta.has_prev) == expected
        assert meta.current_page == page

    def test_serializes_camel_case(self):
        dumped = PaginationMeta.build(page=1, limit=10, total=5).model_dump(by_alias=True)

        assert set(dumped) == {"currentPage", "totalPages", "hasNext", "hasPrev"}
