"""Logic-less template formats.

Mustache and the SilverStripe server-embed dialect share this renderer. The
dialect is a parameter, not a subclass: both walk attributes the same way
and differ only in how a variable, a conditional or an enumeration is
spelled.

Mustache has no comparisons, so two things are computed by the caller
before rendering:

- enumerations render as ``{{level}}``; the name-to-value lookup table is
  written next to the template as ``<id>.constants.json``.
- ``<mt-if key="mode?=live">`` binds a derived boolean ``modeIsLive``.

SilverStripe compares natively and renders both inline.
"""

from __future__ import annotations

import json
import logging
from enum import Enum
from html import escape
from typing import TYPE_CHECKING

from metatemplate.exceptions import FormatError
from metatemplate.formats.base import BaseFormat
from metatemplate.naming import camel_case
from metatemplate.types import Comparison, DynamicKey, UsageResult, ValueType
from metatemplate.usage import render_usage_tags

if TYPE_CHECKING:
    from collections.abc import Sequence

    from metatemplate.css import CssNode
    from metatemplate.templates_engine import TemplateEngine
    from metatemplate.types import TemplateAttribute, TemplateInput, UsageNode

__all__ = ["Dialect", "LogiclessFormat"]

logger = logging.getLogger(__name__)


class Dialect(str, Enum):
    """Concrete syntax of a logic-less format."""

    MUSTACHE = "mustache"
    SILVERSTRIPE = "silverstripe"


_EXTENSIONS = {Dialect.MUSTACHE: "mustache", Dialect.SILVERSTRIPE: "ss"}
_NOTES_TEMPLATES = {
    Dialect.MUSTACHE: "mustache_notes.j2",
    Dialect.SILVERSTRIPE: "silverstripe_notes.j2",
}


def _quote(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


class LogiclessFormat(BaseFormat):
    """Renders a template as Mustache or SilverStripe markup.

    Usage::

        fmt = LogiclessFormat(template, "mustache", Dialect.MUSTACHE)
    """

    def __init__(
        self,
        template: TemplateInput,
        format_id: str,
        dialect: Dialect,
        engine: TemplateEngine | None = None,
    ) -> None:
        super().__init__(template, format_id, engine)
        self.dialect = dialect
        self._data: list[str] = []
        self._unescaped_keys: list[str] = []
        self._conditions: dict[str, dict[str, str]] = {}
        self._constants: dict[str, dict[str, str]] = {}
        self._open_ifs: list[str] = []

    def _var(self, key: str) -> str:
        if self.dialect is Dialect.MUSTACHE:
            return f"{{{{{key}}}}}"
        return f"{{${key}}}"

    def _raw(self, key: str) -> str:
        if self.dialect is Dialect.MUSTACHE:
            return f"{{{{{{{key}}}}}}}"
        return f"{{${key}.RAW}}"

    def _if(self, key: str, body: str) -> str:
        return self._if_any([key], body)

    def _if_any(self, keys: list[str], body: str) -> str:
        """``body`` when at least one of ``keys`` is set."""
        if self.dialect is Dialect.SILVERSTRIPE:
            condition = " || ".join(f"${key}" for key in keys)
            return f"<% if {condition} %>{body}<% end_if %>"
        first, rest = keys[0], keys[1:]
        rendered = f"{{{{#{first}}}}}{body}{{{{/{first}}}}}"
        if rest:
            rendered += f"{{{{^{first}}}}}{self._if_any(rest, body)}{{{{/{first}}}}}"
        return rendered

    def _enum(self, dynamic_key: DynamicKey, separator: str) -> str:
        if self.dialect is Dialect.MUSTACHE:
            self._constants[dynamic_key.key] = {
                option.name: option.value for option in dynamic_key.options
            }
            return separator + self._var(dynamic_key.key)

        branches = []
        for index, option in enumerate(dynamic_key.options):
            keyword = "if" if index == 0 else "else_if"
            branches.append(
                f"<% {keyword} ${dynamic_key.key} == {_quote(option.name)} %>"
                f"{separator}{escape(option.value)}"
            )
        return "".join(branches) + "<% end_if %>"

    def render_attribute(self, attribute: TemplateAttribute) -> str:
        """Render one attribute, including its leading space."""
        if attribute.is_static:
            return f' {attribute.key}="{escape(attribute.value)}"'

        dynamic_keys = attribute.dynamic_keys
        only = dynamic_keys[0]
        if (
            attribute.is_omitted_if_empty
            and len(dynamic_keys) == 1
            and not attribute.value
            and only.type == ValueType.BOOLEAN
        ):
            literal = only.if_true_value or attribute.key
            return self._if(only.key, f' {attribute.key}="{escape(literal)}"')

        pieces = [escape(attribute.value)]
        has_preceding_value = bool(attribute.value)
        for index, dynamic_key in enumerate(dynamic_keys):
            if index >= 1:
                has_preceding_value = True
            separator = " " if has_preceding_value else ""
            pieces.append(self._render_key(attribute, dynamic_key, separator))

        rendered = f' {attribute.key}="{"".join(pieces)}"'
        if attribute.is_omitted_if_empty:
            rendered = self._if_any([dk.key for dk in dynamic_keys], rendered)
        return rendered

    def _render_key(
        self,
        attribute: TemplateAttribute,
        dynamic_key: DynamicKey,
        separator: str,
    ) -> str:
        if dynamic_key.options:
            return self._enum(dynamic_key, separator)
        if dynamic_key.type == ValueType.BOOLEAN:
            literal = dynamic_key.if_true_value or attribute.key
            return self._if(dynamic_key.key, separator + escape(literal))
        return separator + self._var(dynamic_key.key)

    def on_element(
        self,
        tag_name: str,
        attributes: list[TemplateAttribute],
        css: tuple[CssNode, ...],
        is_self_closing: bool,
    ) -> str:
        rendered = "".join(self.render_attribute(attribute) for attribute in attributes)
        self._data.append(f"<{tag_name}{rendered}{'/' if is_self_closing else ''}>")
        return tag_name

    def on_close_element(self, tag_name: str) -> None:
        self._data.append(f"</{tag_name}>")

    def on_text(self, text: str) -> None:
        self._data.append(escape(text, quote=False))

    def on_variable(self, key: str, default_value: str = "") -> None:
        if key not in self._unescaped_keys:
            self._unescaped_keys.append(key)
        if not default_value:
            self._data.append(self._raw(key))
        elif self.dialect is Dialect.MUSTACHE:
            self._data.append(
                f"{{{{#{key}}}}}{self._raw(key)}{{{{/{key}}}}}"
                f"{{{{^{key}}}}}{default_value}{{{{/{key}}}}}"
            )
        else:
            self._data.append(
                f"<% if ${key} %>{self._raw(key)}<% else %>{default_value}<% end_if %>"
            )

    def on_if(
        self,
        key: str,
        comparison: Comparison | None = None,
        equals: str | None = None,
    ) -> None:
        if self.dialect is Dialect.SILVERSTRIPE:
            if comparison is None:
                self._data.append(f"<% if ${key} %>")
            else:
                operator = "==" if comparison is Comparison.EQUALS else "!="
                self._data.append(f"<% if ${key} {operator} {_quote(equals or '')} %>")
            self._open_ifs.append("<% end_if %>")
            return

        section_key = key
        if comparison is not None:
            section_key = self.share_dynamic_key(
                camel_case(f"{key} is {equals or ''}") or key, ValueType.BOOLEAN, True
            )
            self._conditions[section_key] = {
                "key": section_key,
                "source": key,
                "value": equals or "",
            }
        opener = "^" if comparison is Comparison.NOT_EQUALS else "#"
        self._data.append(f"{{{{{opener}{section_key}}}}}")
        self._open_ifs.append(f"{{{{/{section_key}}}}}")

    def on_close_if(self) -> None:
        if not self._open_ifs:
            raise FormatError("on_close_if called without a matching on_if")
        self._data.append(self._open_ifs.pop())

    def serialize(self, css: str, has_multiple_root_nodes: bool) -> dict[str, str]:
        base = f"{self.dirname}/{self.template.id}"
        constants_file = f"{self.template.id}.constants.json"

        notes = ""
        if self._unescaped_keys or self._conditions or self._constants:
            notes = self.engine.render(
                _NOTES_TEMPLATES[self.dialect],
                unescaped_keys=self._unescaped_keys,
                conditions=list(self._conditions.values()),
                enums=list(self._constants),
                constants_file=constants_file,
            )

        files = {f"{base}.{_EXTENSIONS[self.dialect]}": (notes + "".join(self._data)).strip() + "\n"}
        if self._constants:
            files[f"{self.dirname}/{constants_file}"] = json.dumps(self._constants, indent=2) + "\n"

        logger.info("Serialized %s as %s (%d keys)", self.template.id, self.format_id, len(self.keys))
        return files

    def make_usage(self, usages: Sequence[UsageNode], import_prefix: str = "./") -> UsageResult:
        """SilverStripe Components markup (``<:Button>``) for ``usages``.

        Attribute values are flattened to text since the dialect cannot pass
        markup through an attribute. Mustache has no component syntax and
        returns empty code.
        """
        if self.dialect is not Dialect.SILVERSTRIPE:
            return super().make_usage(usages, import_prefix)

        tags = render_usage_tags(
            usages,
            flatten_attribute_values=True,
            tag_name=lambda name: f":{name}" if any(c.isupper() for c in name) else name,
        )
        code = tags.code.strip() + "\n"
        if tags.imports:
            styles = ", ".join(f"{name}.css" for name in tags.imports)
            code = f"<%--\nRemember to add these styles:\nin CSS: {styles}\n--%>\n{code}"
        return UsageResult(code=code, imports=tags.imports)
