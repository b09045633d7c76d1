"""WSGI API service for cask warehouse listings, with CORS, flags and user checks."""

__version__ = "0.0.1"
__all__ = ["auth", "config", "service", "warehouse"]