"""CSS rule tree.

A small brace-matching parser that turns template CSS into a tree of
``CssRule``, ``CssAtRule`` and ``CssDeclaration`` nodes, plus the selector
helpers the styled-component output needs. It is not a validating parser:
declarations without a ``:`` are skipped, but unbalanced braces are an error.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Union

from metatemplate.exceptions import CssParseError

__all__ = [
    "VENDOR_PROPERTIES_WITH_GENERIC_NAMES",
    "CssAtRule",
    "CssDeclaration",
    "CssNode",
    "CssRule",
    "parse_css",
    "pseudo_suffixes",
    "render_css",
    "split_selectors",
    "strip_pseudo",
]

logger = logging.getLogger(__name__)

_COMMENT = re.compile(r"/\*.*?\*/", re.DOTALL)
_NOT = re.compile(r":not\(.*?\)", re.IGNORECASE)
_PSEUDO = re.compile(r"::?[A-Za-z-]+(?:\([^)]*\))?")

# Prefixed properties whose unprefixed form is universally supported
VENDOR_PROPERTIES_WITH_GENERIC_NAMES = frozenset(
    {
        "-webkit-align-items",
        "-webkit-animation",
        "-webkit-appearance",
        "-moz-appearance",
        "-webkit-border-radius",
        "-moz-border-radius",
        "-webkit-box-shadow",
        "-moz-box-shadow",
        "-webkit-box-sizing",
        "-moz-box-sizing",
        "-webkit-flex",
        "-ms-flex",
        "-webkit-flex-direction",
        "-ms-flex-direction",
        "-webkit-flex-wrap",
        "-ms-flex-wrap",
        "-webkit-justify-content",
        "-webkit-transform",
        "-moz-transform",
        "-ms-transform",
        "-webkit-transition",
        "-moz-transition",
        "-o-transition",
        "-webkit-user-select",
        "-moz-user-select",
        "-ms-user-select",
    }
)


@dataclass(frozen=True)
class CssDeclaration:
    """``prop: value``"""

    prop: str
    value: str
    type: str = field(default="decl", init=False)

    def __str__(self) -> str:
        return f"{self.prop}: {self.value}"


@dataclass(frozen=True)
class CssRule:
    """A selector and its block."""

    selector: str
    nodes: tuple[CssNode, ...] = ()
    type: str = field(default="rule", init=False)


@dataclass(frozen=True)
class CssAtRule:
    """``@name params { ... }``, or ``@name params;`` when ``nodes`` is None."""

    name: str
    params: str = ""
    nodes: tuple[CssNode, ...] | None = None
    type: str = field(default="atrule", init=False)


CssNode = Union[CssRule, CssAtRule, CssDeclaration]


def parse_css(text: str) -> tuple[CssNode, ...]:
    """Parse a stylesheet into a rule tree.

    Raises:
        CssParseError: If braces are unbalanced or a string is unterminated.
    """
    source = _COMMENT.sub("", text)
    nodes, _ = _parse_block(source, 0, nested=False)
    return tuple(nodes)


def _parse_block(source: str, start: int, *, nested: bool) -> tuple[list[CssNode], int]:
    nodes: list[CssNode] = []
    segment_start = start
    position = start
    depth = 0  # parentheses, so that url(data:...;...) stays whole

    while position < len(source):
        char = source[position]
        if char in "\"'":
            position = _skip_string(source, position)
            continue
        if char == "(":
            depth += 1
        elif char == ")" and depth:
            depth -= 1
        elif depth:
            pass
        elif char == "{":
            prelude = source[segment_start:position].strip()
            children, position = _parse_block(source, position + 1, nested=True)
            nodes.append(_block_node(prelude, tuple(children)))
            segment_start = position
            continue
        elif char == ";":
            _append_statement(nodes, source[segment_start:position])
            segment_start = position + 1
        elif char == "}":
            if not nested:
                raise CssParseError(f"Unexpected '}}' at offset {position}")
            _append_statement(nodes, source[segment_start:position])
            return nodes, position + 1
        position += 1

    if nested:
        raise CssParseError("Unclosed '{' at end of stylesheet")
    _append_statement(nodes, source[segment_start:])
    return nodes, position


def _skip_string(source: str, start: int) -> int:
    quote = source[start]
    position = start + 1
    while position < len(source):
        char = source[position]
        if char == "\\":
            position += 2
            continue
        if char == quote:
            return position + 1
        position += 1
    raise CssParseError(f"Unterminated string starting at offset {start}")


def _block_node(prelude: str, children: tuple[CssNode, ...]) -> CssNode:
    if prelude.startswith("@"):
        name, _, params = prelude[1:].partition(" ")
        return CssAtRule(name=name.strip(), params=params.strip(), nodes=children)
    return CssRule(selector=" ".join(prelude.split()), nodes=children)


def _append_statement(nodes: list[CssNode], statement: str) -> None:
    statement = statement.strip()
    if not statement:
        return
    if statement.startswith("@"):
        name, _, params = statement[1:].partition(" ")
        nodes.append(CssAtRule(name=name.strip(), params=params.strip()))
        return
    prop, colon, value = statement.partition(":")
    if not colon or not prop.strip():
        logger.debug("Skipping CSS statement without a property: %r", statement)
        return
    nodes.append(CssDeclaration(prop=prop.strip().lower(), value=value.strip()))


def split_selectors(selector: str) -> list[str]:
    """Split a selector list on top-level commas.

    ``"a:not(.x, .y), b"`` gives ``["a:not(.x, .y)", "b"]``.
    """
    parts: list[str] = []
    depth = 0
    current: list[str] = []
    for char in selector:
        if char in "([":
            depth += 1
        elif char in ")]":
            depth = max(depth - 1, 0)
        if char == "," and depth == 0:
            parts.append("".join(current).strip())
            current = []
            continue
        current.append(char)
    parts.append("".join(current).strip())
    return [part for part in parts if part]


def pseudo_suffixes(selector: str) -> list[str]:
    """The pseudo-class tail of each selector in a list.

    ``":not(...)"`` is ignored, so ``".btn:not(.x):hover"`` gives
    ``[":hover"]``.
    """
    suffixes: list[str] = []
    for part in split_selectors(selector):
        cleaned = _NOT.sub("", part)
        if ":" in cleaned:
            suffixes.append(cleaned[cleaned.index(":") :].strip())
    return suffixes


def strip_pseudo(selector: str) -> str:
    """Remove pseudo-classes and pseudo-elements from one selector.

    An element that matches the stripped selector can match the original
    in some state (hover, focus, ...).
    """
    stripped = _PSEUDO.sub("", selector).strip()
    return stripped or "*"


def render_css(nodes: tuple[CssNode, ...] | list[CssNode], indent: str = "") -> str:
    """Serialize a rule tree back to CSS text."""
    lines: list[str] = []
    for node in nodes:
        if isinstance(node, CssDeclaration):
            lines.append(f"{indent}{node};")
        elif isinstance(node, CssRule):
            lines.append(f"{indent}{node.selector} {{")
            lines.append(render_css(node.nodes, indent + "  "))
            lines.append(f"{indent}}}")
        elif node.nodes is None:
            lines.append(f"{indent}@{node.name} {node.params};".replace(" ;", ";"))
        else:
            lines.append(f"{indent}@{node.name} {node.params} {{".replace("  {", " {"))
            lines.append(render_css(node.nodes, indent + "  "))
            lines.append(f"{indent}}}")
    return "\n".join(line for line in lines if line)
