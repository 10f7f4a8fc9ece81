"""
Test Suite for the Book Library API

Test Organization:
- conftest.py: Shared fixtures (test database, app, client, sample data)
- test_books.py: /api/v1/books endpoints
- test_authors.py: /api/v1/authors endpoints
- test_auth.py: registration, login, profile, password change, rate limits
- test_auth_social.py: Google sign-in (provider calls mocked)
- test_pipeline.py: validate-before-authenticate ordering, error envelopes
- test_validation.py: rulesets run against plain dicts
- test_security.py: password hashing and session tokens
- test_derived.py: inStock, isAvailable, fullName, age, pagination

Running Tests:
    # Run all tests
    pytest

    # Run with coverage
    pytest --cov=library_api --cov-report=html

    # Run specific file
    pytest tests/test_books.py

    # Run with verbose output
    pytest -v
"""
