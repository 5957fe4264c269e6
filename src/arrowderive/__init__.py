"""
arrowderive: columnar schemas derived from record types

Declare a record once. Get its columnar field descriptors and artifact names.
"""

from . import datatypes, primitives
from .base import ArrowRecord, derive_type, record_definition
from .datatypes import DataType, Field, TimeUnit
from .derivation import (
    DIRECTIVE_KEY,
    Annotation,
    DerivationInput,
    DeriveMode,
    FieldDefinition,
    RecordDefinition,
    Shape,
    Visibility,
    derive,
)
from .errors import (
    ArrowDeriveError,
    ConflictingDirectives,
    MalformedDirective,
    TypeResolutionFailure,
    UnknownDirectiveValue,
    UnsupportedShape,
)
from .registry import (
    ArrowField,
    Capability,
    TypeRegistry,
    default_registry,
    enable_vec_for_type,
    register,
    resolve,
)

__version__ = "0.1.0"

__all__ = [
    # Core
    "ArrowRecord",
    "ArrowField",
    "derive",
    "derive_type",
    "record_definition",
    "enable_vec_for_type",
    "register",
    "resolve",
    # Models
    "Annotation",
    "DerivationInput",
    "DeriveMode",
    "FieldDefinition",
    "RecordDefinition",
    "Shape",
    "Visibility",
    "DIRECTIVE_KEY",
    # Columnar types
    "DataType",
    "Field",
    "TimeUnit",
    "datatypes",
    "primitives",
    # Registry (for advanced use)
    "Capability",
    "TypeRegistry",
    "default_registry",
    # Errors
    "ArrowDeriveError",
    "UnsupportedShape",
    "MalformedDirective",
    "UnknownDirectiveValue",
    "ConflictingDirectives",
    "TypeResolutionFailure",
]
