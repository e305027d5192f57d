"""Attribute compilation: expressions, key registry, tag defaults."""

from metatemplate.compile.attributes import compile_attributes, validate_attributes
from metatemplate.compile.defaults import apply_tag_defaults, data_type_for
from metatemplate.compile.expressions import parse_attribute_value, parse_expression
from metatemplate.compile.keys import DynamicKeyRegistry, KeyEntry

__all__ = [
    "DynamicKeyRegistry",
    "KeyEntry",
    "apply_tag_defaults",
    "compile_attributes",
    "data_type_for",
    "parse_attribute_value",
    "parse_expression",
    "validate_attributes",
]
