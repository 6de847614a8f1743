"""Conversion functionality: accessor conversion plans and runtime coercion."""

from reflectcache.core.conversion.core import (
    Converter,
    build_converter,
    can_convert_value,
    convert_to,
    identity,
    try_convert,
)

__all__ = [
    "Converter",
    "build_converter",
    "can_convert_value",
    "convert_to",
    "identity",
    "try_convert",
]
