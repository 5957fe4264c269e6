"""Type capability registry mapping Python types to columnar data types."""

from __future__ import annotations

import inspect
import types
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional, TypeVar, Union, get_args, get_origin

from loguru import logger

from . import datatypes as dt
from . import primitives
from .errors import TypeResolutionFailure

T = TypeVar("T")


class ArrowField:
    """
    Capability interface for types that can be used as a columnar field.

    Subclass it and implement `columnar_descriptor` to make a leaf type usable
    in record annotations. `is_nullable` defaults to False. `field` is built
    from the two and should not be overridden.

    Being an `ArrowField` does not make ``list[T]`` valid; that requires an
    explicit `enable_vec_for_type` grant.

    Examples
    --------
        >>> from arrowderive import ArrowField, datatypes
        >>> class Celsius(float, ArrowField):
        ...     @classmethod
        ...     def columnar_descriptor(cls):
        ...         return datatypes.Float32
        >>> Celsius.field("temperature")
        Field('temperature', Float32, nullable=False)
    """

    @classmethod
    def columnar_descriptor(cls) -> dt.DataType:
        """Return the columnar data type of this type."""
        raise NotImplementedError

    @classmethod
    def is_nullable(cls) -> bool:
        """Whether values of this type may be null."""
        return False

    @classmethod
    def field(cls, name: str) -> dt.Field:
        """Return a field descriptor called `name` for this type."""
        return dt.Field(name, cls.columnar_descriptor(), cls.is_nullable())


@dataclass(frozen=True)
class Capability:
    """
    Resolved capabilities of a type expression.

    Parameters
    ----------
    data_type : DataType
        The columnar data type.
    nullable : bool, default False
        Whether values may be null.
    vec_enabled : bool, default False
        Whether ``list[T]`` is a valid type for this ``T``.
    """

    data_type: dt.DataType
    nullable: bool = False
    vec_enabled: bool = False

    def columnar_descriptor(self) -> dt.DataType:
        return self.data_type

    def is_nullable(self) -> bool:
        return self.nullable

    def field(self, name: str) -> dt.Field:
        return dt.Field(name, self.data_type, self.nullable)


def optional(inner: Capability) -> Capability:
    """
    Compose ``T | None`` from the capability of ``T``.

    The result is always nullable, so nested optionals collapse into a single
    level of nullability. Vector enablement carries over unchanged.
    """
    return Capability(inner.data_type, nullable=True, vec_enabled=inner.vec_enabled)


def sequence(inner: Capability, type_hint: Any = None) -> Capability:
    """
    Compose ``list[T]`` from the capability of ``T``.

    Raises
    ------
    TypeResolutionFailure
        If ``T`` was never granted vector enablement.
    """
    if not inner.vec_enabled:
        raise TypeResolutionFailure(
            f"list[{_type_name(type_hint)}] is not supported: "
            f"{_type_name(type_hint)} is not enabled for use as a list item",
            type_hint=type_hint,
        )
    return Capability(
        dt.list_(inner.field(dt.ITEM_FIELD_NAME)),
        nullable=False,
        vec_enabled=True,
    )


class TypeRegistry:
    """
    Registry resolving type expressions to `Capability` objects.

    Leaf types come from two places: an explicit table filled with
    `register` (for types the author cannot subclass), and subclasses of
    `ArrowField`. ``T | None`` and ``list[T]`` are composed from their parts.

    Resolution results are cached, so resolving the same type twice returns
    the same `Capability` object. Registering anything clears the cache.

    Examples
    --------
        >>> from decimal import Decimal
        >>> from arrowderive import datatypes
        >>> registry = TypeRegistry()
        >>> _ = registry.register(Decimal, datatypes.Float64)
        >>> registry.data_type(Decimal | None)
        Float64
    """

    def __init__(self) -> None:
        self._table: dict[Any, tuple[dt.DataType, bool]] = {}
        self._vec_enabled: set[Any] = set()
        self._cache: dict[Any, Capability] = {}

    def register(
        self,
        tp: Any,
        data_type: dt.DataType,
        *,
        nullable: bool = False,
        vec_enabled: bool = False,
    ) -> Any:
        """
        Register a leaf type with its columnar data type.

        Parameters
        ----------
        tp : type
            The Python type to register.
        data_type : DataType
            Its columnar data type.
        nullable : bool, default False
            Whether values of `tp` may be null on their own.
        vec_enabled : bool, default False
            Grant vector enablement at the same time.

        Returns
        -------
        type
            `tp`, unchanged.

        Raises
        ------
        ValueError
            If `tp` is already registered.
        """
        key = _normalize(tp)
        if key in self._table:
            raise ValueError(f"Type {_type_name(tp)} is already registered")
        if not isinstance(data_type, dt.DataType):
            raise TypeError(
                f"Type {_type_name(tp)}: expected a DataType, got {data_type!r}"
            )

        self._table[key] = (data_type, nullable)
        if vec_enabled:
            self._vec_enabled.add(key)
        self._cache.clear()
        logger.debug(f"Registered {_type_name(tp)} as {data_type!r}")
        return tp

    def enable_vec_for_type(self, tp: T) -> T:
        """
        Allow ``list[tp]`` as a field type.

        Can be used as a class decorator. The grant applies to `tp` only;
        subclasses need their own.

        Raises
        ------
        TypeError
            If `tp` is a composite such as ``T | None`` or ``list[T]``. Those
            are enabled through their leaf type.
        """
        key = _normalize(tp)
        if get_origin(key) is not None and key != list[primitives.UInt8]:
            raise TypeError(
                f"Cannot enable list[{_type_name(tp)}]: only leaf types can be "
                f"enabled, composites follow their item type"
            )
        self._vec_enabled.add(key)
        self._cache.clear()
        logger.debug(f"Enabled list[{_type_name(tp)}]")
        return tp

    def is_vec_enabled(self, tp: Any) -> bool:
        """Whether ``list[tp]`` is a valid field type."""
        return self.resolve(tp).vec_enabled

    def resolve(self, tp: Any) -> Capability:
        """
        Resolve a type expression to its capabilities.

        Raises
        ------
        TypeResolutionFailure
            If `tp` has no capability and no valid composition path.
        """
        key = _normalize(tp)
        try:
            cached = self._cache.get(key)
        except TypeError as e:
            raise TypeResolutionFailure(
                f"Unsupported type expression {tp!r}", type_hint=tp
            ) from e

        if cached is None:
            cached = self._resolve(key)
            self._cache[key] = cached
            logger.debug(f"Resolved {_type_name(key)} to {cached.data_type!r}")
        return cached

    def data_type(self, tp: Any) -> dt.DataType:
        """Return the columnar data type of `tp`."""
        return self.resolve(tp).data_type

    def is_nullable(self, tp: Any) -> bool:
        """Whether `tp` allows nulls."""
        return self.resolve(tp).nullable

    def field(self, name: str, tp: Any) -> dt.Field:
        """Return a field descriptor called `name` for `tp`."""
        return self.resolve(tp).field(name)

    def _resolve(self, tp: Any) -> Capability:
        # Explicit table entries win, which is how list[UInt8] becomes Binary
        entry = self._table.get(tp)
        if entry is not None:
            data_type, nullable = entry
            return Capability(data_type, nullable, tp in self._vec_enabled)

        origin = get_origin(tp)

        if _is_union(tp):
            args = get_args(tp)
            non_none = [a for a in args if a is not type(None)]
            if len(non_none) == 1 and len(non_none) < len(args):
                return optional(self.resolve(non_none[0]))
            raise TypeResolutionFailure(
                f"Union types other than Optional (T | None) are not supported. "
                f"Got: {tp}",
                type_hint=tp,
            )

        if origin is list:
            args = get_args(tp)
            if len(args) != 1:
                raise TypeResolutionFailure(
                    f"list needs exactly one item type, got {tp!r}", type_hint=tp
                )
            return sequence(self.resolve(args[0]), type_hint=args[0])

        if origin is None and isinstance(tp, type) and issubclass(tp, ArrowField):
            return self._resolve_arrow_field(tp)

        raise TypeResolutionFailure(
            f"Unsupported type {_type_name(tp)}. Register it with "
            f"TypeRegistry.register() or subclass ArrowField",
            type_hint=tp,
        )

    def _resolve_arrow_field(self, tp: type[ArrowField]) -> Capability:
        # Compare the raw class attributes so staticmethods and plain
        # functions count as implementations too
        if (
            inspect.getattr_static(tp, "columnar_descriptor")
            is ArrowField.__dict__["columnar_descriptor"]
        ):
            raise TypeResolutionFailure(
                f"{tp.__name__} subclasses ArrowField but does not implement "
                f"columnar_descriptor()",
                type_hint=tp,
            )

        data_type = tp.columnar_descriptor()
        if not isinstance(data_type, dt.DataType):
            raise TypeResolutionFailure(
                f"{tp.__name__}.columnar_descriptor() must return a DataType, "
                f"got {data_type!r}",
                type_hint=tp,
            )
        return Capability(data_type, tp.is_nullable(), tp in self._vec_enabled)


def _is_union(tp: Any) -> bool:
    # typing.Union covers Union[X, Y] and Optional[X]; X | Y is types.UnionType
    return get_origin(tp) is Union or isinstance(tp, types.UnionType)


def _normalize(tp: Any) -> Any:
    """Rewrite equivalent spellings (``typing.List``, ``X | None``) to one form."""
    origin = get_origin(tp)
    args = get_args(tp)

    if origin is list and len(args) == 1:
        return list[_normalize(args[0])]  # type: ignore[misc]

    if _is_union(tp):
        non_none = [a for a in args if a is not type(None)]
        if len(non_none) == 1 and len(non_none) < len(args):
            return Optional[_normalize(non_none[0])]

    return tp


def _type_name(tp: Any) -> str:
    if isinstance(tp, type) and get_origin(tp) is None:
        return tp.__name__
    return repr(tp)


def _register_builtins(registry: TypeRegistry) -> None:
    for tp, data_type in [
        (primitives.UInt8, dt.UInt8),
        (primitives.UInt16, dt.UInt16),
        (primitives.UInt32, dt.UInt32),
        (primitives.UInt64, dt.UInt64),
        (primitives.Int8, dt.Int8),
        (primitives.Int16, dt.Int16),
        (primitives.Int32, dt.Int32),
        (primitives.Int64, dt.Int64),
        (primitives.Float32, dt.Float32),
        (primitives.Float64, dt.Float64),
        (int, dt.Int64),
        (float, dt.Float64),
    ]:
        registry.register(tp, data_type)

    registry.register(bool, dt.Boolean, vec_enabled=True)
    registry.register(str, dt.Utf8, vec_enabled=True)
    registry.register(bytes, dt.Binary, vec_enabled=True)
    registry.register(date, dt.Date32, vec_enabled=True)
    registry.register(datetime, dt.timestamp(dt.TimeUnit.NANOSECOND), vec_enabled=True)
    # The byte sequence is binary, not a list of UInt8
    registry.register(list[primitives.UInt8], dt.Binary, vec_enabled=True)


default_registry = TypeRegistry()
_register_builtins(default_registry)


def register(
    tp: Any,
    data_type: dt.DataType,
    *,
    nullable: bool = False,
    vec_enabled: bool = False,
) -> Any:
    """Register `tp` in the default registry. See `TypeRegistry.register`."""
    return default_registry.register(
        tp, data_type, nullable=nullable, vec_enabled=vec_enabled
    )


def enable_vec_for_type(tp: T) -> T:
    """Allow ``list[tp]`` in the default registry. Usable as a class decorator."""
    return default_registry.enable_vec_for_type(tp)


def resolve(tp: Any) -> Capability:
    """Resolve `tp` against the default registry."""
    return default_registry.resolve(tp)
