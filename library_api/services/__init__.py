"""
Services Package

Logic that sits between the HTTP layer (routers, pipeline) and the models:

- derived.py: computed fields (inStock, isAvailable, fullName, age)
- identity.py: token authentication, registration, login, Google linking
- oauth.py: Google OAuth handshake (authlib + httpx)
- persistence.py: commit/conflict handling and pagination
- rate_limiter.py: slowapi limiter and 429 handler
- security.py: password hashing and session tokens
"""
