"""Data contracts for metatemplate.

Frozen dataclasses that flow between compile stages:
  node → list[TemplateAttribute] (each carrying DynamicKeys) → format renderer
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union

__all__ = [
    "Comparison",
    "DynamicKey",
    "DynamicKeyType",
    "EnumOption",
    "KeyTag",
    "RegisteredType",
    "TemplateAttribute",
    "TemplateInput",
    "TemplateUsage",
    "UsageNode",
    "UsageResult",
    "UsageValue",
    "ValueType",
    "is_enum_type",
]


class ValueType(str, Enum):
    """Primitive value types a dynamic key or attribute can carry."""

    STRING = "string"
    BOOLEAN = "boolean"
    NUMBER = "number"
    FUNCTION = "function"
    REFERENCE = "reference"
    NODE = "node"


class KeyTag(str, Enum):
    """Enumeration types whose allowed values come from the HTML vocabulary."""

    INPUT_AUTOCOMPLETE = "INPUT_AUTOCOMPLETE"
    INPUT_TYPE = "INPUT_TYPE"
    A_TARGET = "A_TARGET"
    CROSS_ORIGIN = "CROSS_ORIGIN"
    BUTTON_TYPE = "BUTTON_TYPE"
    ARIA_CURRENT = "ARIA_CURRENT"
    ONCHANGE = "ONCHANGE"
    ONCLICK = "ONCLICK"


class Comparison(str, Enum):
    """Comparison operators accepted by ``<mt-if key="name?=value">``."""

    EQUALS = "="
    NOT_EQUALS = "!="


@dataclass(frozen=True)
class EnumOption:
    """One enumeration option.

    ``value`` is the literal written to output (a class name, an HTML value);
    ``name`` is the label the consuming application passes in.
    """

    value: str
    name: str


DynamicKeyType = Union[ValueType, tuple[EnumOption, ...]]
RegisteredType = Union[ValueType, KeyTag, tuple[EnumOption, ...]]


def is_enum_type(key_type: object) -> bool:
    """Return True when ``key_type`` is an enumeration option list."""
    return isinstance(key_type, tuple)


@dataclass(frozen=True)
class DynamicKey:
    """A runtime-bindable variable bound into an attribute."""

    key: str
    type: DynamicKeyType = ValueType.STRING
    optional: bool = True
    if_true_value: str | None = None

    @property
    def options(self) -> tuple[EnumOption, ...]:
        """Enumeration options, or an empty tuple for non-enum keys."""
        if isinstance(self.type, tuple):
            return self.type
        return ()


@dataclass(frozen=True)
class TemplateAttribute:
    """One rendered HTML attribute of an element."""

    key: str
    value: str = ""
    data_type: ValueType = ValueType.STRING
    dynamic_keys: tuple[DynamicKey, ...] = field(default_factory=tuple)
    is_omitted_if_empty: bool = False

    @property
    def is_static(self) -> bool:
        return not self.dynamic_keys


@dataclass(frozen=True)
class TemplateInput:
    """One canonical HTML+CSS template."""

    id: str
    html: str
    css: str = ""


@dataclass(frozen=True)
class TemplateUsage:
    """One tag in a usage example.

    ``template_id`` names a compiled component when it contains an upper-case
    letter (``"Button"``) and a plain HTML element otherwise (``"p"``).
    Variable values are literal strings, booleans, or nested usages; the
    ``children`` variable becomes the tag's content.
    """

    template_id: str
    variables: dict[str, UsageValue] = field(default_factory=dict)

    @property
    def is_component(self) -> bool:
        return any(c.isupper() for c in self.template_id)


UsageNode = Union[str, TemplateUsage]
UsageValue = Union[str, bool, tuple[UsageNode, ...]]


@dataclass(frozen=True)
class UsageResult:
    """Example code that uses compiled templates, plus the components it imports."""

    code: str = ""
    imports: tuple[str, ...] = ()
