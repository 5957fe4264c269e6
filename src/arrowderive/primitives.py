"""
Fixed-width value types for record annotations.

Python's ``int`` and ``float`` carry no width, so records that need a specific
columnar width annotate their fields with these instead:

    >>> from arrowderive import ArrowRecord
    >>> from arrowderive.primitives import Int32
    >>> class Point(ArrowRecord):
    ...     x: Int32
    ...     y: Int32

They are plain subclasses and behave exactly like ``int`` and ``float`` at
runtime. `UInt8` doubles as the byte type: ``list[UInt8]`` maps to ``Binary``.
"""


class UInt8(int):
    """8-bit unsigned integer (the byte type)."""


class UInt16(int):
    """16-bit unsigned integer."""


class UInt32(int):
    """32-bit unsigned integer."""


class UInt64(int):
    """64-bit unsigned integer."""


class Int8(int):
    """8-bit signed integer."""


class Int16(int):
    """16-bit signed integer."""


class Int32(int):
    """32-bit signed integer."""


class Int64(int):
    """64-bit signed integer."""


class Float32(float):
    """32-bit floating point."""


class Float64(float):
    """64-bit floating point."""


__all__ = [
    "UInt8",
    "UInt16",
    "UInt32",
    "UInt64",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "Float32",
    "Float64",
]
