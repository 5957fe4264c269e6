"""Columnar data type vocabulary and named field descriptors."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import polars as pl

# Name of the child field of a list data type
ITEM_FIELD_NAME = "item"


class TimeUnit(Enum):
    """Resolution of a timestamp data type."""

    SECOND = "s"
    MILLISECOND = "ms"
    MICROSECOND = "us"
    NANOSECOND = "ns"


@dataclass(frozen=True)
class DataType:
    """
    A columnar data type.

    Instances are immutable and compare by value. Parameterless kinds are
    exposed as module-level singletons (``UInt8``, ``Utf8``, ...); the two
    parameterised kinds are built with `timestamp` and `list_`.

    Parameters
    ----------
    kind : str
        One of the names in ``KINDS``.
    unit : TimeUnit, optional
        Resolution, only for ``Timestamp``.
    tz : str, optional
        Time zone, only for ``Timestamp``. None means naive.
    item : Field, optional
        Child field descriptor, only for ``List``.
    """

    kind: str
    unit: TimeUnit | None = None
    tz: str | None = None
    item: Field | None = None

    def __post_init__(self) -> None:
        if self.kind not in KINDS:
            raise ValueError(f"Unknown data type kind: {self.kind!r}")
        if (self.kind == "Timestamp") != (self.unit is not None):
            raise ValueError("Only Timestamp data types carry a time unit")
        if (self.kind == "List") != (self.item is not None):
            raise ValueError("Only List data types carry an item field")

    def __repr__(self) -> str:
        if self.unit is not None:
            return f"Timestamp({self.unit.name.capitalize()}, {self.tz!r})"
        if self.item is not None:
            return f"List({self.item!r})"
        return self.kind

    __str__ = __repr__

    @property
    def is_nested(self) -> bool:
        """Whether this data type has a child field."""
        return self.item is not None

    def to_polars(self) -> pl.DataType:
        """Return the equivalent Polars dtype."""
        # __post_init__ ties unit to Timestamp and item to List
        if self.unit is not None:
            return pl.Datetime(time_unit=self.unit.value, time_zone=self.tz)  # type: ignore[arg-type]
        if self.item is not None:
            return pl.List(self.item.data_type.to_polars())
        return _POLARS_DTYPES[self.kind]


@dataclass(frozen=True)
class Field:
    """Named field descriptor: ``(name, data_type, nullable)``."""

    name: str
    data_type: DataType
    nullable: bool = False

    def __repr__(self) -> str:
        return (
            f"Field({self.name!r}, {self.data_type!r}, nullable={self.nullable})"
        )

    def to_polars(self) -> pl.DataType:
        """Return the Polars dtype of this field (nullability is implicit in Polars)."""
        return self.data_type.to_polars()


_POLARS_DTYPES: dict[str, pl.DataType] = {
    "UInt8": pl.UInt8,
    "UInt16": pl.UInt16,
    "UInt32": pl.UInt32,
    "UInt64": pl.UInt64,
    "Int8": pl.Int8,
    "Int16": pl.Int16,
    "Int32": pl.Int32,
    "Int64": pl.Int64,
    "Float32": pl.Float32,
    "Float64": pl.Float64,
    "Boolean": pl.Boolean,
    "Utf8": pl.Utf8,
    "Binary": pl.Binary,
    "Date32": pl.Date,
}

KINDS = frozenset(_POLARS_DTYPES) | {"Timestamp", "List"}

UInt8 = DataType("UInt8")
UInt16 = DataType("UInt16")
UInt32 = DataType("UInt32")
UInt64 = DataType("UInt64")
Int8 = DataType("Int8")
Int16 = DataType("Int16")
Int32 = DataType("Int32")
Int64 = DataType("Int64")
Float32 = DataType("Float32")
Float64 = DataType("Float64")
Boolean = DataType("Boolean")
Utf8 = DataType("Utf8")
Binary = DataType("Binary")
Date32 = DataType("Date32")


def timestamp(unit: TimeUnit = TimeUnit.NANOSECOND, tz: str | None = None) -> DataType:
    """Build a ``Timestamp`` data type."""
    return DataType("Timestamp", unit=unit, tz=tz)


def list_(item: Field) -> DataType:
    """Build a ``List`` data type whose elements are described by ``item``."""
    return DataType("List", item=item)
