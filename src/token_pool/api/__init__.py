"""HTTP transport for the token pool."""

from .app import create_app

__all__ = ["create_app"]
