"""HTTP API for table formula evaluation."""

from .app import create_app

__all__ = ["create_app"]
