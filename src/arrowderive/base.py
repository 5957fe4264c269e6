"""Core `ArrowRecord` class with metaclass-driven derivation."""

from __future__ import annotations

import enum
import inspect
import sys
import typing
from typing import Any, ClassVar, get_origin

import polars as pl

from . import datatypes as dt
from .derivation import (
    Annotation,
    DerivationInput,
    FieldDefinition,
    RecordDefinition,
    Shape,
    Visibility,
    derive,
)
from .registry import TypeRegistry


def record_definition(
    cls: type, directives: dict[str, Any] | None = None
) -> RecordDefinition:
    """
    Build a `RecordDefinition` from a Python class.

    Enum subclasses are variant shapes. For any other class, fields are the
    class's type hints in declaration order, inherited fields first. Private
    (``_``-prefixed) names and ``ClassVar`` annotations are skipped.

    Parameters
    ----------
    cls : type
        The class to read.
    directives : dict, optional
        Annotations to attach, in order, as ``{key: value}``.

    Returns
    -------
    RecordDefinition
    """
    location = f"{cls.__module__}.{cls.__qualname__}"
    annotations = tuple(
        Annotation(key=key, value=value, location=location)
        for key, value in (directives or {}).items()
    )
    visibility = (
        Visibility.PRIVATE if cls.__name__.startswith("_") else Visibility.PUBLIC
    )

    if isinstance(cls, type) and issubclass(cls, enum.Enum):
        return RecordDefinition(
            name=cls.__name__,
            shape=Shape.VARIANT,
            annotations=annotations,
            visibility=visibility,
        )

    try:
        type_hints = typing.get_type_hints(cls)
    except NameError:
        # Postponed annotations naming types outside module scope; resolution
        # reports whatever stays unevaluated
        type_hints = _raw_type_hints(cls)

    fields = []
    for field_name, type_hint in type_hints.items():
        # Skip private attributes and classvars
        if field_name.startswith("_") or _is_classvar(type_hint):
            continue
        fields.append(FieldDefinition(name=field_name, type=type_hint))

    return RecordDefinition(
        name=cls.__name__,
        shape=Shape.RECORD,
        fields=tuple(fields),
        annotations=annotations,
        visibility=visibility,
    )


def _raw_type_hints(cls: type) -> dict[str, Any]:
    """
    Collect annotations along the MRO, evaluating each string on its own.

    Strings that cannot be evaluated are kept as they are.
    """
    hints: dict[str, Any] = {}
    for klass in reversed(cls.__mro__):
        module = sys.modules.get(klass.__module__)
        globalns = vars(module) if module is not None else {}
        for name, hint in inspect.get_annotations(klass).items():
            if isinstance(hint, str):
                try:
                    hint = eval(hint, globalns, dict(vars(klass)))  # noqa: S307
                except NameError:
                    pass
            hints[name] = hint
    return hints


def _is_classvar(type_hint: Any) -> bool:
    if isinstance(type_hint, str):
        return type_hint.split("[", 1)[0].rsplit(".", 1)[-1] == "ClassVar"
    return get_origin(type_hint) is ClassVar


def derive_type(cls: type, **directives: Any) -> DerivationInput:
    """
    Derive the model for any class.

    Examples
    --------
        >>> from dataclasses import dataclass
        >>> from arrowderive.primitives import Int32
        >>> @dataclass
        ... class Point:
        ...     x: Int32
        ...     y: Int32
        >>> derive_type(Point, arrow_convert="field_only").mode
        <DeriveMode.FIELD_ONLY: 'field_only'>
    """
    return derive(record_definition(cls, directives))


class RecordMeta(type):
    """
    Metaclass that derives every `ArrowRecord` subclass as it is defined.

    Directives are passed as class keywords:

        class Reading(ArrowRecord, arrow_convert="serialize_only"):
            sensor: str
            value: Float32

    A derivation error aborts the class statement.
    """

    def __new__(mcs, name, bases, namespace, **directives):
        cls = super().__new__(mcs, name, bases, namespace)

        # The ArrowRecord base itself is not a record
        if any(isinstance(base, RecordMeta) for base in bases):
            cls._derivation = derive(record_definition(cls, directives))
        return cls

    def __init__(cls, name, bases, namespace, **directives):
        super().__init__(name, bases, namespace)


class ArrowRecord(metaclass=RecordMeta):
    """
    Base class for record types convertible to columnar arrays.

    Fields are declared with type annotations. Each annotation must resolve
    through the type registry, though resolution only happens when field
    descriptors are requested.

    Examples
    --------
        >>> from arrowderive import ArrowRecord
        >>> from arrowderive.primitives import Int32
        >>> class Point(ArrowRecord):
        ...     x: Int32
        ...     y: Int32
        >>> Point.derivation().artifact_names()
        ('MutablePointArray', 'PointArray', 'PointArrayIterator')
        >>> Point.arrow_fields()
        (Field('x', Int32, nullable=False), Field('y', Int32, nullable=False))
    """

    _derivation: ClassVar[DerivationInput]

    @classmethod
    def derivation(cls) -> DerivationInput:
        """Return the derivation input model for this record type."""
        return cls._derivation

    @classmethod
    def arrow_fields(cls, registry: TypeRegistry | None = None) -> tuple[dt.Field, ...]:
        """Return the field descriptors of this record type, in field order."""
        return cls._derivation.arrow_fields(registry)

    @classmethod
    def to_polars_schema(
        cls, registry: TypeRegistry | None = None
    ) -> dict[str, pl.DataType]:
        """
        Generate the Polars schema of this record type.

        Examples
        --------
            >>> from arrowderive import ArrowRecord
            >>> class User(ArrowRecord):
            ...     name: str
            ...     tags: list[str]
            >>> User.to_polars_schema()
            {'name': String, 'tags': List(String)}
        """
        from .generators.polars import create_polars_schema

        return create_polars_schema(cls._derivation, registry=registry)
