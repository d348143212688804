"""Headless view models (no Qt dependency)."""

from .table_viewmodel import DataTableViewModel  # noqa: F401

__all__ = ["DataTableViewModel"]
