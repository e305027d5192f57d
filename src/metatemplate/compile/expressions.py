"""Variable-expression parser for attribute values.

An attribute value may embed any number of ``{{ ... }}`` markers::

    class="g-alert {{ level: g-alert--info as info | g-alert--error as error }}"
    class="g-flex-row {{ isReversed?: g-flex-reverse }}"
    href="{{ url }}"

Each marker becomes one ``DynamicKey``: no options gives a string key, one
option gives a boolean key whose ``if_true_value`` is that option, two or
more options give an enumeration. Markers are removed from the static value.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from metatemplate.exceptions import DynamicKeyError, ExpressionError
from metatemplate.types import DynamicKey, EnumOption, ValueType

if TYPE_CHECKING:
    from metatemplate.compile.keys import DynamicKeyRegistry

__all__ = [
    "ParsedValue",
    "VariableExpression",
    "parse_attribute_value",
    "parse_expression",
]

logger = logging.getLogger(__name__)

MARKER_PATTERN = re.compile(r"{{(.*?)}}", re.DOTALL)
_OPTION_ALIAS = " as "


@dataclass(frozen=True)
class VariableExpression:
    """The parsed contents of one ``{{ ... }}`` marker, before registration."""

    name: str
    optional: bool
    options: tuple[EnumOption, ...] = ()


@dataclass(frozen=True)
class ParsedValue:
    """An attribute value with its markers extracted."""

    value: str
    dynamic_keys: tuple[DynamicKey, ...] = ()


def parse_expression(source: str) -> VariableExpression:
    """Parse the text between ``{{`` and ``}}``.

    Raises:
        ExpressionError: If the key segment is empty.
    """
    colon = source.find(":")
    key_segment = source if colon == -1 else source[:colon]
    optional = "?" in key_segment
    name = key_segment.replace("?", "").strip()
    if not name:
        raise ExpressionError(f"Missing key name in attribute expression {{{{{source}}}}}")

    options: tuple[EnumOption, ...] = ()
    if colon != -1:
        expression = source[colon + 1 :].strip()
        options = tuple(_parse_option(token) for token in expression.split("|"))

    return VariableExpression(name=name, optional=optional, options=options)


def _parse_option(token: str) -> EnumOption:
    parts = token.split(_OPTION_ALIAS)
    value = parts[0].strip()
    name = parts[1].strip() if len(parts) == 2 else value
    return EnumOption(value=value, name=name)


def parse_attribute_value(
    raw: str,
    keys: DynamicKeyRegistry,
    tag_name: str | None = None,
) -> ParsedValue:
    """Extract every marker from ``raw``, registering one key per marker.

    Keys are registered and appended in left-to-right order. Static text
    around and between markers is kept, markers removed, and the result
    trimmed.

    Raises:
        ExpressionError: If a marker cannot be parsed.
        DynamicKeyError: If the registry hands back a blank key.
    """
    dynamic_keys: list[DynamicKey] = []

    def _replace(match: re.Match[str]) -> str:
        expression = parse_expression(match.group(1))
        dynamic_keys.append(_register(expression, keys, tag_name, match.group(0)))
        return ""

    value = MARKER_PATTERN.sub(_replace, raw).strip()
    return ParsedValue(value=value, dynamic_keys=tuple(dynamic_keys))


def _register(
    expression: VariableExpression,
    keys: DynamicKeyRegistry,
    tag_name: str | None,
    marker: str,
) -> DynamicKey:
    options = expression.options
    if len(options) == 1:
        safe_key = keys.register(expression.name, ValueType.BOOLEAN, expression.optional, tag_name)
        dynamic_key = DynamicKey(
            key=safe_key,
            type=ValueType.BOOLEAN,
            optional=expression.optional,
            if_true_value=options[0].value,
        )
    elif options:
        safe_key = keys.register(expression.name, options, expression.optional, tag_name)
        dynamic_key = DynamicKey(key=safe_key, type=options, optional=expression.optional)
    else:
        safe_key = keys.register(expression.name, ValueType.STRING, expression.optional, tag_name)
        dynamic_key = DynamicKey(key=safe_key, type=ValueType.STRING, optional=expression.optional)

    if not dynamic_key.key or not dynamic_key.key.strip():
        raise DynamicKeyError(
            f"Unable to parse attribute variable {marker!r}: key was registered as "
            f"{dynamic_key.key!r} from {expression.name!r}"
        )
    logger.debug("Parsed %s into key %s", marker, dynamic_key.key)
    return dynamic_key
