"""Errors raised while deriving columnar artifacts from a record type."""

from __future__ import annotations

from typing import Any


class ArrowDeriveError(TypeError):
    """
    Base class for all derivation errors.

    Every error aborts processing of the record type it was raised for.

    Attributes
    ----------
    record : str or None
        Name of the offending record type, when known.
    token : str or None
        The offending directive token, when the error comes from one.
    location : str or None
        Where the offending directive was declared.
    """

    def __init__(
        self,
        message: str,
        *,
        record: str | None = None,
        token: str | None = None,
        location: str | None = None,
    ):
        if location:
            message = f"{location}: {message}"
        super().__init__(message)
        self.record = record
        self.token = token
        self.location = location


class UnsupportedShape(ArrowDeriveError):
    """The record definition is not a fixed-shape, named-field record."""


class MalformedDirective(ArrowDeriveError):
    """The directive value is not a single string literal."""


class UnknownDirectiveValue(ArrowDeriveError):
    """A directive token is not one of the recognized keywords."""


class ConflictingDirectives(ArrowDeriveError):
    """More than one exclusive-mode keyword was given for one record type."""


class TypeResolutionFailure(ArrowDeriveError):
    """
    A declared type has no capability and no valid composition path.

    Attributes
    ----------
    type_hint : Any
        The type expression that failed to resolve.
    field : str or None
        Name of the record field being resolved, when known.
    """

    def __init__(
        self,
        message: str,
        *,
        type_hint: Any = None,
        field: str | None = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.type_hint = type_hint
        self.field = field
