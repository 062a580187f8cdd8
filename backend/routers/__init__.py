"""Routers module - FastAPI route handlers"""

from . import artifacts, cache

__all__ = ["artifacts", "cache"]
