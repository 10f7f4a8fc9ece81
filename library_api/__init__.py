"""
Book Library API

A FastAPI service for a book and author catalog with e-mail/password and
Google sign-in.
"""

__version__ = "1.0.0"
