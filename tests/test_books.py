"""
Tests for Books API Endpoints

CRUD operations on /api/v1/books plus the available and genre lists.

TEST NAMING CONVENTION:
- test_<action>_<scenario>
- Examples: test_create_book_success, test_get_book_not_found
"""

from datetime import date, timedelta

from fastapi import status

from tests.conftest import API


class TestListBooks:
    """Tests for GET /api/v1/books."""

    def test_list_books_empty(self, client):
        response = client.get(f"{API}/books")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["success"] is True
        assert data["data"] == []
        assert data["count"] == 0
        assert data["total"] == 0
        assert data["pagination"] == {
            "currentPage": 1,
            "totalPages": 0,
            "hasNext": False,
            "hasPrev": False,
        }

    def test_list_books_with_data(self, client, sample_book):
        response = client.get(f"{API}/books")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["total"] == 1
        book = data["data"][0]
        assert book["title"] == "Brave New World"
        assert book["publishedDate"] == "1932-01-01"
        assert book["stockQuantity"] == 3
        assert book["isAvailable"] is True

    def test_list_books_second_page_of_25(self, client, multiple_books):
        """page=2&limit=10 over 25 books: 10 items, both neighbours, 3 pages."""
        response = client.get(f"{API}/books?page=2&limit=10")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["count"] == 10
        assert len(data["data"]) == 10
        assert data["total"] == 25
        assert data["pagination"]["currentPage"] == 2
        assert data["pagination"]["totalPages"] == 3
        assert data["pagination"]["hasNext"] is True
        assert data["pagination"]["hasPrev"] is True

    def test_list_books_last_page(self, client, multiple_books):
        data = client.get(f"{API}/books?page=3&limit=10").json()

        assert data["count"] == 5
        assert data["pagination"]["hasNext"] is False
        assert data["pagination"]["hasPrev"] is True

    def test_list_books_defaults_to_newest_first(self, client, multiple_books):
        data = client.get(f"{API}/books?limit=3").json()

        assert [b["title"] for b in data["data"]] == ["Book 24", "Book 23", "Book 22"]

    def test_list_books_filter_by_genre(self, client, multiple_books):
        data = client.get(f"{API}/books?genre=Mystery&limit=100").json()

        assert data["total"] == 12
        assert all(b["genre"] == "Mystery" for b in data["data"])

    def test_list_books_search_is_case_insensitive(self, client, multiple_books):
        data = client.get(f"{API}/books?search=WRITER 3&limit=100").json()

        assert data["total"] == 5
        assert all(b["author"] == "Writer 3" for b in data["data"])

    def test_list_books_search_matches_description(self, client, sample_book):
        data = client.get(f"{API}/books?search=genetically").json()

        assert data["total"] == 1

    def test_list_books_sort_by_price_ascending(self, client, multiple_books):
        data = client.get(f"{API}/books?sortBy=price&order=asc&limit=3").json()

        assert [b["price"] for b in data["data"]] == [10, 11, 12]

    def test_list_books_invalid_query_params(self, client):
        for query in ("page=0", "limit=101", "limit=0", "sortBy=pages", "order=up", "genre=Poetry"):
            response = client.get(f"{API}/books?{query}")
            assert response.status_code == status.HTTP_400_BAD_REQUEST, query
            assert response.json()["message"] == "Validation failed"


class TestSpecialBookLists:
    """Tests for /books/available and /books/genre/{genre}."""

    def test_available_books_only_in_stock(self, client, multiple_books):
        data = client.get(f"{API}/books/available?limit=100").json()

        # stock_quantity = i % 3, so one book in three has no copies
        assert data["total"] == 16
        assert all(b["isAvailable"] for b in data["data"])

    def test_books_by_genre(self, client, multiple_books):
        data = client.get(f"{API}/books/genre/Fantasy?limit=100").json()

        assert data["total"] == 13
        assert all(b["genre"] == "Fantasy" for b in data["data"])

    def test_books_by_genre_with_space(self, client, sample_book):
        response = client.get(f"{API}/books/genre/Science Fiction")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["total"] == 1

    def test_books_by_unknown_genre(self, client):
        response = client.get(f"{API}/books/genre/Poetry")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["errors"][0]["field"] == "genre"


class TestGetBook:
    """Tests for GET /api/v1/books/{book_id}."""

    def test_get_book_success(self, client, sample_book):
        response = client.get(f"{API}/books/{sample_book.id}")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()["data"]
        assert data["id"] == sample_book.id
        assert data["isbn"] == "9780060850524"
        assert data["inStock"] is True

    def test_get_book_not_found(self, client):
        response = client.get(f"{API}/books/99999")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {"success": False, "message": "Book not found"}

    def test_get_book_id_out_of_range(self, client):
        response = client.get(f"{API}/books/99999999999999999999")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["errors"][0]["message"] == "Invalid ID format"

    def test_get_book_invalid_id(self, client):
        response = client.get(f"{API}/books/not-a-number")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["errors"] == [
            {"field": "book_id", "message": "Invalid ID format"}
        ]


class TestCreateBook:
    """Tests for POST /api/v1/books."""

    def test_create_book_success(self, client, auth_headers, book_payload):
        response = client.post(f"{API}/books", json=book_payload, headers=auth_headers)

        assert response.status_code == status.HTTP_201_CREATED
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Book created successfully"
        data = body["data"]
        assert data["id"] is not None
        assert data["isbn"] == "9780451524935"
        assert data["language"] == "English"
        assert data["inStock"] is True
        assert data["isAvailable"] is True

    def test_create_book_defaults(self, client, auth_headers, book_payload):
        del book_payload["genre"]
        del book_payload["stockQuantity"]

        data = client.post(f"{API}/books", json=book_payload, headers=auth_headers).json()["data"]

        assert data["genre"] == "Other"
        assert data["stockQuantity"] == 0
        assert data["inStock"] is False

    def test_create_book_ignores_client_in_stock(self, client, auth_headers, book_payload):
        book_payload["stockQuantity"] = 0
        book_payload["inStock"] = True

        data = client.post(f"{API}/books", json=book_payload, headers=auth_headers).json()["data"]

        assert data["inStock"] is False
        assert data["isAvailable"] is False

    def test_create_book_rounds_price(self, client, auth_headers, book_payload):
        book_payload["price"] = 9.999

        data = client.post(f"{API}/books", json=book_payload, headers=auth_headers).json()["data"]

        assert data["price"] == 10.0

    def test_create_book_requires_token(self, client, book_payload):
        response = client.post(f"{API}/books", json=book_payload)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["message"] == "Access denied. No token provided."

    def test_create_book_duplicate_isbn(self, client, auth_headers, book_payload, sample_book):
        book_payload["isbn"] = "978-0-06-085052-4"

        response = client.post(f"{API}/books", json=book_payload, headers=auth_headers)

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["success"] is False

    def test_create_book_missing_fields(self, client, auth_headers):
        response = client.post(f"{API}/books", json={"title": "Only a title"}, headers=auth_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        fields = {e["field"] for e in response.json()["errors"]}
        assert {"author", "isbn", "publishedDate", "pages", "description",
                "publisher", "price"} <= fields

    def test_create_book_pages_boundaries(self, client, auth_headers, book_payload):
        for i, (pages, expected) in enumerate(
            [(0, 400), (1, 201), (10000, 201), (10001, 400)]
        ):
            book_payload["pages"] = pages
            book_payload["isbn"] = f"978000000010{i}"
            response = client.post(f"{API}/books", json=book_payload, headers=auth_headers)
            assert response.status_code == expected, pages

    def test_create_book_rejects_boolean_pages(self, client, auth_headers, book_payload):
        book_payload["pages"] = True

        response = client.post(f"{API}/books", json=book_payload, headers=auth_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["errors"] == [
            {"field": "pages", "message": "Pages must be an integer"}
        ]

    def test_create_book_price_rounds_half_up(self, client, auth_headers, book_payload):
        book_payload["price"] = 0.125

        data = client.post(f"{API}/books", json=book_payload, headers=auth_headers).json()["data"]

        assert data["price"] == 0.13

    def test_create_book_future_published_date(self, client, auth_headers, book_payload):
        book_payload["publishedDate"] = (date.today() + timedelta(days=1)).isoformat()

        response = client.post(f"{API}/books", json=book_payload, headers=auth_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["errors"] == [
            {"field": "publishedDate", "message": "Published date cannot be in the future"}
        ]

    def test_create_book_invalid_json(self, client, auth_headers):
        response = client.post(
            f"{API}/books",
            content=b"{not json",
            headers={**auth_headers, "Content-Type": "application/json"},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST


class TestUpdateBook:
    """Tests for PUT /api/v1/books/{book_id}."""

    def test_update_book_partial(self, client, auth_headers, sample_book):
        response = client.put(
            f"{API}/books/{sample_book.id}",
            json={"title": "Brave New World Revisited"},
            headers=auth_headers,
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()["data"]
        assert data["title"] == "Brave New World Revisited"
        assert data["author"] == "Aldous Huxley"

    def test_update_book_recomputes_in_stock(self, client, auth_headers, sample_book):
        data = client.put(
            f"{API}/books/{sample_book.id}",
            json={"stockQuantity": 0, "inStock": True},
            headers=auth_headers,
        ).json()["data"]

        assert data["inStock"] is False
        assert data["isAvailable"] is False

    def test_update_book_rejects_null(self, client, auth_headers, sample_book):
        response = client.put(
            f"{API}/books/{sample_book.id}", json={"title": None}, headers=auth_headers
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["errors"] == [{"field": "title", "message": "Title cannot be empty"}]

    def test_update_book_rejects_blank(self, client, auth_headers, sample_book):
        response = client.put(
            f"{API}/books/{sample_book.id}", json={"publisher": "   "}, headers=auth_headers
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_update_book_not_found(self, client, auth_headers):
        response = client.put(f"{API}/books/99999", json={"pages": 10}, headers=auth_headers)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_update_book_isbn_conflict(self, client, auth_headers, sample_book, multiple_books):
        response = client.put(
            f"{API}/books/{sample_book.id}",
            json={"isbn": multiple_books[0].isbn},
            headers=auth_headers,
        )

        assert response.status_code == status.HTTP_409_CONFLICT


class TestDeleteBook:
    """Tests for DELETE /api/v1/books/{book_id}."""

    def test_delete_book_success(self, client, auth_headers, sample_book):
        book_id = sample_book.id

        response = client.delete(f"{API}/books/{book_id}", headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {
            "success": True,
            "message": "Book deleted successfully",
            "data": {},
        }
        assert client.get(f"{API}/books/{book_id}").status_code == status.HTTP_404_NOT_FOUND

    def test_delete_book_not_found(self, client, auth_headers):
        response = client.delete(f"{API}/books/99999", headers=auth_headers)

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["message"] == "Book not found"

    def test_delete_book_requires_token(self, client, sample_book):
        response = client.delete(f"{API}/books/{sample_book.id}")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
