"""Shared fixtures for arrowderive tests."""

from datetime import date, datetime

import pytest

from arrowderive import (
    Annotation,
    ArrowRecord,
    FieldDefinition,
    RecordDefinition,
    TypeRegistry,
)
from arrowderive.primitives import Float32, Int32, UInt8
from arrowderive.registry import _register_builtins


@pytest.fixture
def registry():
    """Fresh registry with the built-in types, isolated from the default one."""
    registry = TypeRegistry()
    _register_builtins(registry)
    return registry


@pytest.fixture
def point_definition():
    """Plain-data definition of Point { x: Int32, y: Int32 }."""
    return RecordDefinition(
        name="Point",
        fields=(
            FieldDefinition(name="x", type=Int32),
            FieldDefinition(name="y", type=Int32),
        ),
    )


@pytest.fixture
def make_definition():
    """Factory for Point definitions carrying the given annotations."""

    def _make(*annotations):
        return RecordDefinition(
            name="Point",
            fields=(
                FieldDefinition(name="x", type=Int32),
                FieldDefinition(name="y", type=Int32),
            ),
            annotations=tuple(
                a if isinstance(a, Annotation) else Annotation(key=a[0], value=a[1])
                for a in annotations
            ),
        )

    return _make


@pytest.fixture
def sensor_record():
    """Record type touching every kind of field composition."""

    class SensorReading(ArrowRecord):
        sensor: str
        taken_on: date
        taken_at: datetime
        value: Float32
        error: float | None = None
        ok: bool = True
        payload: list[UInt8] = []
        labels: list[str | None] = []

    return SensorReading
