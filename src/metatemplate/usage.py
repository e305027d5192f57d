"""Usage examples for compiled templates.

A usage tree describes how a page instantiates components, e.g.::

    [{"template": "Button", "variables": {"disabled": true, "children": ["Save"]}}]

Formats turn the tree into ready-to-paste code (see
:meth:`metatemplate.formats.base.BaseFormat.make_usage`); this module holds
the tag rendering they share and the JSON loader the CLI uses.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from metatemplate.exceptions import UsageError
from metatemplate.types import TemplateUsage, UsageResult

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from metatemplate.types import UsageNode, UsageValue

__all__ = ["parse_usages", "render_usage_tags"]

logger = logging.getLogger(__name__)

_TAG = re.compile(r"<[\s\S]*?>")


def render_usage_tags(
    usages: Sequence[UsageNode],
    *,
    flatten_attribute_values: bool = False,
    tag_name: Callable[[str], str] | None = None,
) -> UsageResult:
    """Render a usage tree as JSX-like tags.

    Args:
        usages: Root nodes, in order.
        flatten_attribute_values: Render nested usages inside attribute values
            as plain text, for template languages that only take string
            attribute values.
        tag_name: Maps a template id to the tag name written out.

    Returns:
        The tags and the component ids they reference, in first-use order.

    Raises:
        UsageError: If a boolean is given as ``children``.
    """
    imports: list[str] = []

    def render(node: UsageNode) -> str:
        if isinstance(node, str):
            return node
        if node.is_component:
            imports.append(node.template_id)
        name = tag_name(node.template_id) if tag_name else node.template_id

        parts = [f"<{name}"]
        for key, value in node.variables.items():
            if key != "children":
                parts.append(f" {key}{attribute_value(value)}")
        if "children" in node.variables:
            parts.append(f">\n{children(node, node.variables['children'])}\n</{name}>\n")
        else:
            parts.append("/>\n")
        return "".join(parts)

    def attribute_value(value: UsageValue) -> str:
        if isinstance(value, bool):
            return "" if value else "={false}"
        if isinstance(value, str):
            return '="' + value.strip().replace('"', "&quot;") + '"'
        rendered = [render(child) for child in value]
        if flatten_attribute_values:
            return '="' + "".join(_TAG.sub("", piece).strip() for piece in rendered) + '"'
        return "={" + "".join(rendered) + "}"

    def children(node: TemplateUsage, value: UsageValue) -> str:
        if isinstance(value, bool):
            raise UsageError(f"Children of <{node.template_id}> cannot be a boolean")
        if isinstance(value, str):
            return value.strip()
        return "".join(render(child) for child in value)

    code = "".join(render(node) for node in usages)
    return UsageResult(code=code, imports=tuple(dict.fromkeys(imports)))


def parse_usages(data: object) -> tuple[UsageNode, ...]:
    """Build a usage tree from decoded JSON.

    Each node is a string or an object with a ``template`` id and optional
    ``variables``; variable values are strings, booleans or lists of nodes.

    Raises:
        UsageError: On any other shape.
    """
    if not isinstance(data, list):
        raise UsageError("A usage example must be a JSON list of nodes")
    return tuple(_parse_node(item) for item in data)


def _parse_node(item: object) -> UsageNode:
    if isinstance(item, str):
        return item
    if not isinstance(item, dict):
        raise UsageError(f"Expected a string or an object, got {type(item).__name__}")
    template_id = item.get("template")
    if not isinstance(template_id, str) or not template_id.strip():
        raise UsageError(f"Usage node {item!r} needs a 'template' id")
    variables = item.get("variables", {})
    if not isinstance(variables, dict):
        raise UsageError(f"Variables of {template_id!r} must be an object")

    parsed: dict[str, UsageValue] = {}
    for key, value in variables.items():
        if isinstance(value, (str, bool)):
            parsed[key] = value
        elif isinstance(value, list):
            parsed[key] = tuple(_parse_node(child) for child in value)
        else:
            raise UsageError(f"Unsupported value for {template_id}.{key}: {value!r}")
    logger.debug("Parsed usage of %s with %d variables", template_id, len(parsed))
    return TemplateUsage(template_id=template_id.strip(), variables=parsed)
