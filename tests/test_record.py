"""Tests for the ArrowRecord metaclass and the class front-end."""

import enum
from dataclasses import dataclass
from typing import ClassVar, NamedTuple

import pytest

from arrowderive import (
    ArrowRecord,
    ConflictingDirectives,
    DeriveMode,
    MalformedDirective,
    Shape,
    TypeResolutionFailure,
    UnknownDirectiveValue,
    UnsupportedShape,
    Visibility,
    derive_type,
    record_definition,
)
from arrowderive import datatypes as dt
from arrowderive.primitives import Int32, UInt8


class TestRecordMetaclass:
    """Test derivation at class-definition time."""

    def test_point_derived_on_definition(self):
        """Subclassing derives the model immediately."""

        class Point(ArrowRecord):
            x: Int32
            y: Int32

        model = Point.derivation()
        assert model.name == "Point"
        assert model.mode is DeriveMode.ALL
        assert [(f.name, f.type) for f in model.fields] == [("x", Int32), ("y", Int32)]
        assert model.artifact_names() == (
            "MutablePointArray",
            "PointArray",
            "PointArrayIterator",
        )

    def test_directive_as_class_keyword(self):
        """Class keywords are directive annotations."""

        class Reading(ArrowRecord, arrow_convert="serialize_only"):
            value: float

        assert Reading.derivation().mode is DeriveMode.SERIALIZE_ONLY

    def test_unrelated_class_keywords_ignored(self):
        """Keywords other than the directive key are ignored."""

        class Reading(ArrowRecord, table="readings", arrow_convert="field_only"):
            value: float

        assert Reading.derivation().mode is DeriveMode.FIELD_ONLY

    def test_directive_errors_abort_class_statement(self):
        """Bad directives fail when the class is defined."""
        with pytest.raises(UnknownDirectiveValue, match="'bogus'") as exc:

            class Broken(ArrowRecord, arrow_convert="bogus"):
                value: float

        assert exc.value.location.endswith("Broken")

        with pytest.raises(ConflictingDirectives):

            class Twice(ArrowRecord, arrow_convert="field_only,deserialize_only"):
                value: float

        with pytest.raises(MalformedDirective):

            class NotAString(ArrowRecord, arrow_convert=["field_only"]):
                value: float

    def test_private_attributes_and_classvars_skipped(self):
        """Only public, per-instance annotations are fields."""

        class User(ArrowRecord):
            name: str
            _cache: dict
            registry: ClassVar[str] = "users"

            def greet(self):
                return f"hello {self.name}"

        assert [f.name for f in User.derivation().fields] == ["name"]

    def test_inherited_fields_come_first(self):
        """Fields from parent records are collected before the child's."""

        class Base(ArrowRecord):
            id: Int32

        class Child(Base):
            name: str

        assert [f.name for f in Child.derivation().fields] == ["id", "name"]
        assert [f.name for f in Base.derivation().fields] == ["id"]

    def test_private_record_visibility(self):
        """Underscore-prefixed record names are private."""

        class _Internal(ArrowRecord):
            x: Int32

        assert _Internal.derivation().visibility is Visibility.PRIVATE
        assert _Internal.derivation().array_name == "_InternalArray"

    def test_field_types_resolved_lazily(self):
        """Unresolvable field types only fail when descriptors are requested."""

        class Ledger(ArrowRecord):
            amounts: list[float]

        assert Ledger.derivation().fields[0].type == list[float]
        with pytest.raises(TypeResolutionFailure, match="Ledger"):
            Ledger.arrow_fields()

    def test_arrow_fields(self, sensor_record):
        """Field descriptors follow the composition rules."""
        fields = {f.name: f for f in sensor_record.arrow_fields()}

        assert fields["sensor"] == dt.Field("sensor", dt.Utf8)
        assert fields["taken_on"] == dt.Field("taken_on", dt.Date32)
        assert fields["taken_at"] == dt.Field("taken_at", dt.timestamp())
        assert fields["value"] == dt.Field("value", dt.Float32)
        assert fields["error"] == dt.Field("error", dt.Float64, nullable=True)
        assert fields["ok"] == dt.Field("ok", dt.Boolean)
        assert fields["payload"] == dt.Field("payload", dt.Binary)
        assert fields["labels"] == dt.Field(
            "labels", dt.list_(dt.Field("item", dt.Utf8, nullable=True))
        )

    def test_arrow_fields_with_custom_registry(self, registry):
        """A custom registry can be passed through."""
        from decimal import Decimal

        class Invoice(ArrowRecord):
            total: Decimal

        registry.register(Decimal, dt.Float64)
        assert Invoice.arrow_fields(registry) == (dt.Field("total", dt.Float64),)

    def test_unresolvable_annotation_string(self):
        """Unevaluable annotations are kept and fail only at resolution."""

        class Forward(ArrowRecord):
            count: "int"
            other: "DoesNotExist"  # noqa: F821

        fields = Forward.derivation().fields
        assert [(f.name, f.type) for f in fields] == [
            ("count", int),
            ("other", "DoesNotExist"),
        ]
        with pytest.raises(TypeResolutionFailure, match="Record 'Forward', field 'other'"):
            Forward.arrow_fields()


class TestRecordDefinition:
    """Test building plain-data definitions from arbitrary classes."""

    def test_dataclass(self):
        """Plain dataclasses become record definitions."""

        @dataclass
        class Pixel:
            x: Int32
            y: Int32
            data: list[UInt8]

        definition = record_definition(Pixel, {"arrow_convert": "field_only"})
        assert definition.shape is Shape.RECORD
        assert [f.name for f in definition.fields] == ["x", "y", "data"]
        assert definition.annotations[0].key == "arrow_convert"
        assert definition.annotations[0].location.endswith("Pixel")

    def test_named_tuple(self):
        """NamedTuples have named fields too."""

        class Pair(NamedTuple):
            left: str
            right: str

        assert derive_type(Pair).fields[1].name == "right"

    def test_enum_is_variant(self):
        """Enums are variant shapes."""

        class Color(enum.Enum):
            RED = 1
            GREEN = 2

        assert record_definition(Color).shape is Shape.VARIANT

    def test_enum_rejected_regardless_of_directives(self):
        """Deriving an enum always raises UnsupportedShape."""

        class Color(enum.Enum):
            RED = 1

        with pytest.raises(UnsupportedShape, match="Color"):
            derive_type(Color)
        with pytest.raises(UnsupportedShape):
            derive_type(Color, arrow_convert="field_only")

    def test_derive_type_with_directive(self):
        """derive_type forwards directives as annotations."""

        @dataclass
        class Pixel:
            x: Int32

        assert derive_type(Pixel, arrow_convert="deserialize_only").mode is (
            DeriveMode.DESERIALIZE_ONLY
        )

    def test_idempotent_from_class(self):
        """Deriving a class twice yields equal models."""

        @dataclass
        class Pixel:
            x: Int32
            y: Int32

        assert derive_type(Pixel) == derive_type(Pixel)
