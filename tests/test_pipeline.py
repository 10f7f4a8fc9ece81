"""
Tests for the Request Pipeline

Validation runs before authentication: a malformed request to a
protected route is answered with 400 whether or not a token is sent.
"""

import pytest
from fastapi import status

from library_api.pipeline import check_path_ids
from tests.conftest import API


class TestOrdering:
    def test_invalid_body_without_token_is_400(self, client, book_payload):
        book_payload["pages"] = 0

        response = client.post(f"{API}/books", json=book_payload)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["errors"][0]["field"] == "pages"

    def test_valid_body_without_token_is_401(self, client, book_payload):
        response = client.post(f"{API}/books", json=book_payload)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_invalid_body_with_bad_token_is_400(self, client, author_payload):
        author_payload["email"] = "nope"

        response = client.post(
            f"{API}/authors", json=author_payload, headers={"Authorization": "Bearer junk"}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_invalid_id_without_token_is_400(self, client):
        response = client.delete(f"{API}/books/abc")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["errors"] == [{"field": "book_id", "message": "Invalid ID format"}]

    def test_id_and_body_errors_are_reported_together(self, client):
        response = client.put(f"{API}/authors/xyz", json={"firstName": ""})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        fields = [e["field"] for e in response.json()["errors"]]
        assert fields == ["author_id", "firstName"]

    def test_unknown_id_with_token_is_404(self, client, auth_headers):
        response = client.put(f"{API}/authors/5", json={"firstName": "Ann"}, headers=auth_headers)

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestBodyParsing:
    def test_empty_body_lists_required_fields(self, client, auth_headers):
        response = client.post(f"{API}/authors", headers=auth_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        fields = {e["field"] for e in response.json()["errors"]}
        assert fields == {"firstName", "lastName", "email"}

    def test_non_object_body(self, client, auth_headers):
        response = client.post(f"{API}/authors", json=[1, 2, 3], headers=auth_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["errors"][0]["field"] == "body"

    def test_malformed_json(self, client):
        response = client.post(
            f"{API}/auth/login",
            content=b'{"email": ',
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["success"] is False


class TestEnvelopes:
    def test_unknown_route(self, client):
        response = client.get(f"{API}/shelves")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["success"] is False
        assert "/api/v1/shelves" in response.json()["message"]

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["success"] is True


@pytest.mark.parametrize(
    "params,expected",
    [
        ({"book_id": "12"}, []),
        ({"book_id": "0"}, ["book_id"]),
        ({"book_id": "-3"}, ["book_id"]),
        ({"author_id": "1e3"}, ["author_id"]),
        ({"book_id": str(2**63 - 1)}, []),
        ({"book_id": str(2**63)}, ["book_id"]),
        ({"book_id": "99999999999999999999"}, ["book_id"]),
        ({"book_id": "\u00b2"}, ["book_id"]),
        ({"genre": "Fantasy"}, []),
    ],
)
def test_check_path_ids(params, expected):
    assert [e["field"] for e in check_path_ids(params)] == expected
