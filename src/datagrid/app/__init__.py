"""Application-level configuration helpers."""

from .config_store import GridConfig  # noqa: F401

__all__ = ["GridConfig"]
