"""HTTP API exposing the submission workflow."""

from .app import create_app

__all__ = ["create_app"]
