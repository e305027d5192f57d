"""Template compilation pipeline for metatemplate.

Walks a template's HTML in document order and drives one format instance
per requested format: HTML → SoupNode → TemplateAttribute[] → format hooks →
output file map.
"""

from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString

from metatemplate.compile.attributes import compile_attributes
from metatemplate.css import CssAtRule, CssRule, parse_css, split_selectors, strip_pseudo
from metatemplate.exceptions import TemplateCompileError
from metatemplate.nodes.base import MutationScope
from metatemplate.nodes.soup import SoupNode
from metatemplate.registry import default_registry
from metatemplate.types import Comparison, TemplateInput, ValueType

if TYPE_CHECKING:
    from collections.abc import Iterable

    from metatemplate.css import CssNode
    from metatemplate.formats.base import BaseFormat
    from metatemplate.nodes.base import NodeAccess
    from metatemplate.registry import FormatRegistry
    from metatemplate.templates_engine import TemplateEngine
    from metatemplate.types import TemplateAttribute

__all__ = [
    "VOID_ELEMENTS",
    "IfExpression",
    "TemplateCompiler",
    "make_templates",
    "parse_if_key",
    "select_element_css",
]

logger = logging.getLogger(__name__)

VOID_ELEMENTS = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)

MT_VARIABLE = "mt-variable"
MT_IF = "mt-if"

_IF_KEY = re.compile(r"^\s*(?P<name>[^?!=\s]+)\s*\??\s*(?:(?P<op>!=|=)(?P<value>.*))?$", re.DOTALL)
_MEDIA_AT_RULES = frozenset({"media", "supports"})


@dataclass(frozen=True)
class IfExpression:
    """Parsed ``<mt-if key="...">`` value."""

    name: str
    comparison: Comparison | None = None
    equals: str | None = None


def parse_if_key(source: str) -> IfExpression:
    """Parse ``"name"``, ``"name?"``, ``"name?=value"`` or ``"name?!=value"``.

    Raises:
        TemplateCompileError: If no key name is present.
    """
    match = _IF_KEY.match(source)
    if match is None:
        raise TemplateCompileError(f"Invalid <mt-if> key {source!r}", key=source)
    op = match.group("op")
    if op is None:
        return IfExpression(name=match.group("name"))
    comparison = Comparison.NOT_EQUALS if op == "!=" else Comparison.EQUALS
    return IfExpression(
        name=match.group("name"),
        comparison=comparison,
        equals=match.group("value").strip(),
    )


def _possible_classes(class_attribute: TemplateAttribute | None) -> list[str]:
    """Static classes plus every class any bound variable can add."""
    if class_attribute is None:
        return []
    classes = class_attribute.value.split()
    for dynamic_key in class_attribute.dynamic_keys:
        if dynamic_key.if_true_value:
            classes.extend(dynamic_key.if_true_value.split())
        for option in dynamic_key.options:
            classes.extend(option.value.split())
    return list(dict.fromkeys(classes))


async def select_element_css(
    node: NodeAccess,
    attributes: Iterable[TemplateAttribute],
    rules: tuple[CssNode, ...],
    ancestors: Iterable[tuple[NodeAccess, TemplateAttribute | None]] = (),
) -> tuple[CssNode, ...]:
    """Return the rules of ``rules`` that can apply to ``node``.

    The class attribute of the element and of each ``(node, class attribute)``
    in ``ancestors`` is temporarily replaced by every class its variables can
    contribute, so that ``.base.base--modifier`` is kept for an element whose
    ``base--modifier`` is conditional, and variable markers in the authored
    value never match as class names. The changes are rolled back before
    returning.
    """
    class_attribute = next((a for a in attributes if a.key == "class"), None)
    async with MutationScope() as scope:
        for owner, owner_class in [*ancestors, (node, class_attribute)]:
            if owner_class is not None:
                classes = " ".join(_possible_classes(owner_class))
                await scope.track(owner.set_attribute("class", classes))
        return await _matching_rules(node, rules)


async def _matching_rules(node: NodeAccess, rules: tuple[CssNode, ...]) -> tuple[CssNode, ...]:
    matched: list[CssNode] = []
    for rule in rules:
        if isinstance(rule, CssRule):
            for part in split_selectors(rule.selector):
                if await node.matches(strip_pseudo(part)):
                    matched.append(rule)
                    break
        elif isinstance(rule, CssAtRule) and rule.nodes and rule.name in _MEDIA_AT_RULES:
            children = await _matching_rules(node, rule.nodes)
            if children:
                matched.append(CssAtRule(name=rule.name, params=rule.params, nodes=children))
    return tuple(matched)


def _has_multiple_root_nodes(soup: BeautifulSoup) -> bool:
    roots = 0
    for child in soup.children:
        if isinstance(child, Tag):
            roots += 1
        elif isinstance(child, NavigableString) and not isinstance(child, PreformattedString):
            if child.strip():
                roots += 1
    return roots > 1


class _DocumentWalker:
    """Feeds one parsed document to one format in document order."""

    def __init__(self, fmt: BaseFormat, template: TemplateInput, rules: tuple[CssNode, ...]) -> None:
        self.fmt = fmt
        self.template = template
        self.rules = rules
        self._ancestors: list[tuple[NodeAccess, TemplateAttribute | None]] = []

    async def walk(self, parent: Tag) -> None:
        for child in parent.children:
            if isinstance(child, Tag):
                await self._element(child)
            elif isinstance(child, PreformattedString):
                continue  # comments, doctype, CDATA
            elif isinstance(child, NavigableString):
                self.fmt.on_text(str(child))

    async def _element(self, tag: Tag) -> None:
        tag_name = tag.name.lower()
        if tag_name == MT_VARIABLE:
            key = self._shared_key(tag, ValueType.NODE)
            self.fmt.on_variable(key, tag.decode_contents().strip())
            return
        if tag_name == MT_IF:
            expression = parse_if_key(str(tag.get("key", "")))
            key_type = ValueType.BOOLEAN if expression.comparison is None else ValueType.STRING
            key = self.fmt.share_dynamic_key(expression.name, key_type, True)
            self.fmt.on_if(key, expression.comparison, expression.equals)
            await self.walk(tag)
            self.fmt.on_close_if()
            return

        node = SoupNode(tag)
        attributes = await compile_attributes(
            node, self.fmt.keys, template_id=self.template.id, html=str(tag)
        )
        css: tuple[CssNode, ...] = ()
        if self.rules:
            css = await select_element_css(node, attributes, self.rules, self._ancestors)
        is_void = tag_name in VOID_ELEMENTS
        alias = self.fmt.on_element(tag_name, attributes, css, is_void)
        if is_void:
            return
        class_attribute = next((a for a in attributes if a.key == "class"), None)
        self._ancestors.append((node, class_attribute))
        try:
            await self.walk(tag)
        finally:
            self._ancestors.pop()
        self.fmt.on_close_element(alias)

    def _shared_key(self, tag: Tag, key_type: ValueType) -> str:
        name = str(tag.get("key", "")).strip()
        if not name:
            raise TemplateCompileError(
                f"<{tag.name}> requires a key attribute",
                template_id=self.template.id,
                html=str(tag),
            )
        return self.fmt.share_dynamic_key(name, key_type, True)


class TemplateCompiler:
    """Compiles templates into every requested format.

    Each template gets a fresh format instance per format, so dynamic-key
    names never leak between templates.

    Usage::

        compiler = TemplateCompiler(["mustache", "react-ts-styled-components"])
        files = await compiler.compile(TemplateInput(id="button", html=html, css=css))
    """

    def __init__(
        self,
        format_ids: Iterable[str],
        registry: FormatRegistry | None = None,
        engine: TemplateEngine | None = None,
    ) -> None:
        self.registry = registry or default_registry
        self.format_ids = list(format_ids)
        self.engine = engine
        for format_id in self.format_ids:
            self.registry.get(format_id)  # unknown ids fail here, before any work

    async def compile(self, template: TemplateInput) -> dict[str, str]:
        """Compile one template for every format.

        Returns:
            Mapping of relative output path to file content.

        Raises:
            TemplateCompileError: If any format fails; no partial output is
                returned.
        """
        files: dict[str, str] = {}
        for format_id in self.format_ids:
            files.update(await self._compile_format(format_id, template))
        logger.info("Compiled %s into %d files", template.id, len(files))
        return files

    async def compile_many(
        self, templates: Iterable[TemplateInput], *, index: bool = True
    ) -> dict[str, str]:
        """Compile several templates, then add each format's index files.

        Raises:
            TemplateCompileError: If any template fails.
        """
        files: dict[str, str] = {}
        for template in templates:
            files.update(await self.compile(template))

        if index:
            for format_id in self.format_ids:
                fmt = self.registry.create(format_id, TemplateInput(id="index", html=""), self.engine)
                prefix = f"{fmt.dirname}/"
                paths = sorted(path for path in files if path.startswith(prefix))
                files.update(fmt.generate_index(paths))
        return files

    async def _compile_format(self, format_id: str, template: TemplateInput) -> dict[str, str]:
        try:
            fmt = self.registry.create(format_id, template, self.engine)
            soup = BeautifulSoup(template.html, "html.parser", multi_valued_attributes=None)
            rules = parse_css(template.css) if template.css.strip() else ()

            await _DocumentWalker(fmt, template, rules).walk(soup)
            result = fmt.serialize(template.css, _has_multiple_root_nodes(soup))
            logger.info("Compiled %s as %s", template.id, format_id)
            return result

        except TemplateCompileError as e:
            if not e.template_id:
                raise TemplateCompileError(
                    e.message, template_id=template.id, html=template.html, key=e.key
                ) from e
            raise
        except Exception as e:
            raise TemplateCompileError(
                f"Failed to compile as {format_id}: {e}",
                template_id=template.id,
                html=template.html,
                key=getattr(e, "key", ""),
            ) from e


def make_templates(
    template: TemplateInput,
    format_ids: Iterable[str],
    registry: FormatRegistry | None = None,
) -> dict[str, str]:
    """Synchronous convenience wrapper around :meth:`TemplateCompiler.compile`."""
    return asyncio.run(TemplateCompiler(format_ids, registry).compile(template))
