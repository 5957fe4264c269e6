"""
Derivation input model.

`derive` turns a `RecordDefinition` (name, shape, ordered fields and
annotations) into a `DerivationInput`: the normalized, immutable model that
codec synthesis consumes to name and scope the artifacts it generates for a
record type.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from loguru import logger
from pydantic import BaseModel, ConfigDict

from . import datatypes as dt
from .errors import (
    ConflictingDirectives,
    MalformedDirective,
    TypeResolutionFailure,
    UnknownDirectiveValue,
    UnsupportedShape,
)
from .registry import TypeRegistry, default_registry

# Annotation key holding derivation directives
DIRECTIVE_KEY = "arrow_convert"


class Shape(Enum):
    """Shape of a record-type definition."""

    RECORD = "record"
    VARIANT = "variant"


class Visibility(Enum):
    PUBLIC = "public"
    PRIVATE = "private"


class DeriveMode(Enum):
    """Which conversions are derived for a record type."""

    FIELD_ONLY = "field_only"
    SERIALIZE_ONLY = "serialize_only"
    DESERIALIZE_ONLY = "deserialize_only"
    ALL = "all"

    @property
    def derives_serialize(self) -> bool:
        return self in (DeriveMode.SERIALIZE_ONLY, DeriveMode.ALL)

    @property
    def derives_deserialize(self) -> bool:
        return self in (DeriveMode.DESERIALIZE_ONLY, DeriveMode.ALL)


# Tokens accepted in a directive value; each selects one exclusive mode
EXCLUSIVE_MODES: dict[str, DeriveMode] = {
    "field_only": DeriveMode.FIELD_ONLY,
    "serialize_only": DeriveMode.SERIALIZE_ONLY,
    "deserialize_only": DeriveMode.DESERIALIZE_ONLY,
}


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)


class Annotation(_Frozen):
    """
    A ``key=value`` annotation attached to a record-type definition.

    `value` is kept as given; `derive` checks its shape for the directive key
    only, so unrelated annotations may carry anything.
    """

    key: str
    value: Any = None
    location: str | None = None


class FieldDefinition(_Frozen):
    """A declared field: its name and its unresolved type expression."""

    name: str
    type: Any


class RecordDefinition(_Frozen):
    """
    Plain-data view of a record-type definition, as produced by a front-end.

    Examples
    --------
        >>> from arrowderive.primitives import Int32
        >>> definition = RecordDefinition(
        ...     name="Point",
        ...     fields=(
        ...         FieldDefinition(name="x", type=Int32),
        ...         FieldDefinition(name="y", type=Int32),
        ...     ),
        ... )
        >>> derive(definition).mode
        <DeriveMode.ALL: 'all'>
    """

    name: str
    shape: Shape = Shape.RECORD
    fields: tuple[FieldDefinition, ...] = ()
    annotations: tuple[Annotation, ...] = ()
    visibility: Visibility = Visibility.PUBLIC


class DerivationInput(_Frozen):
    """
    Normalized input for codec synthesis of one record type.

    Instances are immutable and compare structurally, so deriving the same
    definition twice yields equal models.
    """

    name: str
    mode: DeriveMode = DeriveMode.ALL
    fields: tuple[FieldDefinition, ...] = ()
    visibility: Visibility = Visibility.PUBLIC

    @property
    def mutable_array_name(self) -> str:
        """Name of the mutable builder type."""
        return f"Mutable{self.name}Array"

    @property
    def array_name(self) -> str:
        """Name of the finished, immutable array type."""
        return f"{self.name}Array"

    @property
    def iterator_name(self) -> str:
        """Name of the deserializing iterator type."""
        return f"{self.name}ArrayIterator"

    def artifact_names(self) -> tuple[str, str, str]:
        """Return the reserved ``(builder, array, iterator)`` names."""
        return (self.mutable_array_name, self.array_name, self.iterator_name)

    def arrow_fields(self, registry: TypeRegistry | None = None) -> tuple[dt.Field, ...]:
        """
        Resolve every declared field to a field descriptor, in field order.

        Parameters
        ----------
        registry : TypeRegistry, optional
            Registry to resolve against. Defaults to the built-in registry.

        Raises
        ------
        TypeResolutionFailure
            If a field type cannot be resolved. The error names the record
            and the field.
        """
        registry = registry or default_registry
        resolved = []
        for field in self.fields:
            try:
                resolved.append(registry.field(field.name, field.type))
            except TypeResolutionFailure as e:
                raise TypeResolutionFailure(
                    f"Record '{self.name}', field '{field.name}': {e}",
                    type_hint=field.type,
                    field=field.name,
                    record=self.name,
                ) from e
        return tuple(resolved)


def derive(
    definition: RecordDefinition, *, directive_key: str = DIRECTIVE_KEY
) -> DerivationInput:
    """
    Build the derivation input model for a record-type definition.

    Parameters
    ----------
    definition : RecordDefinition
        The record type to derive.
    directive_key : str, default "arrow_convert"
        Annotation key holding directives. Annotations with any other key
        are ignored.

    Returns
    -------
    DerivationInput
        The normalized model. `mode` is `DeriveMode.ALL` unless a directive
        selects exactly one exclusive mode.

    Raises
    ------
    UnsupportedShape
        If the definition is not a named-field record.
    MalformedDirective
        If a directive value is not a string.
    UnknownDirectiveValue
        If a directive token is not a recognized keyword.
    ConflictingDirectives
        If more than one exclusive-mode token is given in total.
    """
    if definition.shape is not Shape.RECORD:
        raise UnsupportedShape(
            f"Record '{definition.name}': only records with named fields can be "
            f"derived, got a {definition.shape.value} definition",
            record=definition.name,
        )

    mode = DeriveMode.ALL
    seen: list[str] = []

    for annotation in definition.annotations:
        if annotation.key != directive_key:
            continue

        if not isinstance(annotation.value, str):
            raise MalformedDirective(
                f"Record '{definition.name}': {directive_key} expects a single "
                f"string value, got {annotation.value!r}",
                record=definition.name,
                location=annotation.location,
            )

        for token in _split_tokens(annotation.value):
            if token not in EXCLUSIVE_MODES:
                raise UnknownDirectiveValue(
                    f"Record '{definition.name}': unexpected {token!r} in "
                    f"{directive_key}. Expected one of: "
                    f"{', '.join(EXCLUSIVE_MODES)}",
                    record=definition.name,
                    token=token,
                    location=annotation.location,
                )
            if mode is not DeriveMode.ALL:
                raise ConflictingDirectives(
                    f"Record '{definition.name}': only one of "
                    f"{', '.join(EXCLUSIVE_MODES)} can be specified, "
                    f"got {token!r} after {seen[-1]!r}",
                    record=definition.name,
                    token=token,
                    location=annotation.location,
                )
            mode = EXCLUSIVE_MODES[token]
            seen.append(token)

    logger.debug(
        f"Derived '{definition.name}' with mode {mode.value} "
        f"and {len(definition.fields)} fields"
    )
    return DerivationInput(
        name=definition.name,
        mode=mode,
        fields=definition.fields,
        visibility=definition.visibility,
    )


def _split_tokens(value: str) -> list[str]:
    # An empty value carries no tokens; empty tokens elsewhere are rejected
    if not value.strip():
        return []
    return [token.strip() for token in value.split(",")]
