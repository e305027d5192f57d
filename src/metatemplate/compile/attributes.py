"""Attribute compiler.

Turns one element's authored attributes into ``TemplateAttribute`` records:
markers are parsed into dynamic keys, id-like attributes are unified into
shared template-level keys, and the tag's default attributes are filled in.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from typing import TYPE_CHECKING

from metatemplate.compile.defaults import apply_tag_defaults, data_type_for
from metatemplate.compile.expressions import parse_attribute_value
from metatemplate.exceptions import (
    CompileError,
    DuplicateAttributeError,
    DynamicKeyError,
    TemplateCompileError,
)
from metatemplate.naming import camel_case
from metatemplate.types import DynamicKey, TemplateAttribute, ValueType

if TYPE_CHECKING:
    from collections.abc import Iterable

    from metatemplate.compile.keys import DynamicKeyRegistry
    from metatemplate.nodes.base import NodeAccess

__all__ = [
    "ID_SYNONYMS",
    "compile_attributes",
    "unify_id_synonym",
    "validate_attributes",
]

logger = logging.getLogger(__name__)

# Attributes whose value is one or more element ids
ID_SYNONYMS = frozenset({"id", "for", "aria-controls", "aria-labelledby", "aria-describedby"})


async def compile_attributes(
    node: NodeAccess,
    keys: DynamicKeyRegistry,
    *,
    template_id: str = "",
    html: str = "",
) -> list[TemplateAttribute]:
    """Compile every attribute of ``node`` against ``keys``.

    Attribute names are sorted first, so the result does not depend on the
    order they were written in. Values are read concurrently but parsed and
    registered one at a time in that sorted order.

    Args:
        node: Element to read attributes from.
        keys: The dynamic-key registry of the format being compiled.
        template_id: Template id, used only in error messages.
        html: Source markup of the element, used only in error messages.

    Returns:
        Attributes in sorted order, followed by injected tag defaults.

    Raises:
        TemplateCompileError: If an attribute expression is invalid, a key
            cannot be registered, or two attributes share a name.
    """
    tag_name = node.tag_name
    names = sorted(await node.get_attribute_names())
    raw_values = await asyncio.gather(*(node.read_attribute(name) for name in names))

    attributes: list[TemplateAttribute] = []
    name = ""
    try:
        for name, raw in zip(names, raw_values):
            parsed = parse_attribute_value(raw, keys, tag_name)
            attribute = TemplateAttribute(
                key=name,
                value=parsed.value,
                data_type=data_type_for(tag_name, name),
                dynamic_keys=parsed.dynamic_keys,
            )
            if name in ID_SYNONYMS:
                attribute = unify_id_synonym(attribute, keys, tag_name)
            attributes.append(attribute)

        name = ""
        attributes = apply_tag_defaults(tag_name, attributes, keys)
        validate_attributes(attributes)
    except TemplateCompileError:
        raise
    except CompileError as e:
        offending = getattr(e, "key", "") or name
        raise TemplateCompileError(
            f"Failed to compile <{tag_name}> attributes: {e}",
            template_id=template_id,
            html=html,
            key=offending,
        ) from e

    logger.debug("Compiled <%s> into %d attributes", tag_name, len(attributes))
    return attributes


def unify_id_synonym(
    attribute: TemplateAttribute,
    keys: DynamicKeyRegistry,
    tag_name: str | None = None,
) -> TemplateAttribute:
    """Bind every id token in ``attribute`` to a shared string key.

    ``aria-describedby="hint-id error-id"`` becomes two optional keys,
    ``hintId`` and ``errorId``, which are the same keys any ``id="hint-id"``
    in the template is bound to. An attribute with no static value is
    returned unchanged.
    """
    tokens = attribute.value.split()
    if not tokens:
        return attribute

    bound: list[DynamicKey] = []
    for token in tokens:
        name = camel_case(token)
        if not name:
            raise DynamicKeyError(
                f"{attribute.key}={attribute.value!r} has no usable id in {token!r}; "
                f"write {attribute.key}=\"someId\" rather than a variable expression"
            )
        key = keys.share(name, ValueType.STRING, True, tag_name)
        bound.append(DynamicKey(key=key, type=ValueType.STRING, optional=True))

    return replace(
        attribute,
        value="",
        dynamic_keys=(*bound, *attribute.dynamic_keys),
        is_omitted_if_empty=True,
    )


def validate_attributes(attributes: Iterable[TemplateAttribute]) -> None:
    """Raise if two attributes share a name.

    Raises:
        DuplicateAttributeError: On the first repeated name.
    """
    seen: set[str] = set()
    for attribute in attributes:
        if attribute.key in seen:
            raise DuplicateAttributeError(
                f"Duplicate attribute {attribute.key!r}", key=attribute.key
            )
        seen.add(attribute.key)
