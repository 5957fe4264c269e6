"""Polars schema generator for derived record types."""

from typing import TYPE_CHECKING, Dict

import polars as pl
from loguru import logger

if TYPE_CHECKING:
    from ..derivation import DerivationInput
    from ..registry import TypeRegistry


def create_polars_schema(
    derivation: "DerivationInput", registry: "TypeRegistry | None" = None
) -> Dict[str, pl.DataType]:
    """
    Generate a Polars schema dict from a derivation input model.

    Parameters
    ----------
    derivation : DerivationInput
        The derived record type.
    registry : TypeRegistry, optional
        Registry to resolve field types against. Defaults to the built-in
        registry.

    Returns
    -------
    dict[str, pl.DataType]
        Column name to Polars dtype, in field order.

    Raises
    ------
    TypeResolutionFailure
        If a field type cannot be resolved.
    """
    schema = {}
    for field in derivation.arrow_fields(registry):
        schema[field.name] = field.to_polars()

    logger.debug(f"Built Polars schema for '{derivation.name}': {schema}")
    return schema
