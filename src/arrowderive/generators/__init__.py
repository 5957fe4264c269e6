"""Generators for columnar engines."""

from .polars import create_polars_schema

__all__ = [
    "create_polars_schema",
]
