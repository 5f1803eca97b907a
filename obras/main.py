"""ASGI entrypoint: `uvicorn obras.main:app`."""

from .api.main import app

__all__ = ["app"]
