"""React component formats.

One renderer covers four variants: TypeScript or JavaScript, with styles
either scoped through styled-components or imported as a plain stylesheet.
Language and style mode are parameters rather than subclasses.

The output is event-ready: form controls get an ``onChange`` handler and a
``ref``, buttons and links get ``onClick``. In styled mode, CSS rules whose
selector depends on a class contributed by a variable are rewritten into
conditionals on the same prop, e.g. for
``class="g-flex-row {{ isReversed?: g-flex-reverse }}"``::

    const StyledDiv = styled.div<Pick<Props, "isReversed">>`
      ${props => props.isReversed && css`
        flex-direction: row-reverse;
      `}
    `;
"""

from __future__ import annotations

import json
import logging
import re
from enum import Enum
from html import escape
from pathlib import PurePosixPath
from typing import TYPE_CHECKING

from metatemplate.compile.attributes import validate_attributes
from metatemplate.compile.keys import unique_key
from metatemplate.css import (
    VENDOR_PROPERTIES_WITH_GENERIC_NAMES,
    CssAtRule,
    CssDeclaration,
    parse_css,
    pseudo_suffixes,
    split_selectors,
    strip_pseudo,
)
from metatemplate.exceptions import FormatError
from metatemplate.formats.base import BaseFormat
from metatemplate.naming import camel_case, pascal_case
from metatemplate.types import (
    Comparison,
    DynamicKey,
    KeyTag,
    TemplateAttribute,
    UsageResult,
    ValueType,
)
from metatemplate.usage import render_usage_tags

if TYPE_CHECKING:
    from collections.abc import Sequence

    from metatemplate.compile.keys import KeyEntry
    from metatemplate.css import CssNode, CssRule
    from metatemplate.templates_engine import TemplateEngine
    from metatemplate.types import TemplateInput, UsageNode

__all__ = [
    "REACT_ATTRIBUTE_NAMES",
    "ComponentFormat",
    "Language",
    "StyleMode",
    "attributes_interface",
    "element_interface",
]

logger = logging.getLogger(__name__)


class Language(str, Enum):
    TYPESCRIPT = "typescript"
    JAVASCRIPT = "javascript"


class StyleMode(str, Enum):
    STYLED_COMPONENTS = "styled-components"
    IMPORT_CSS = "import-css"


# HTML attribute name -> React prop name
REACT_ATTRIBUTE_NAMES = {
    "class": "className",
    "for": "htmlFor",
    "autocomplete": "autoComplete",
    "autofocus": "autoFocus",
    "crossorigin": "crossOrigin",
    "fill-rule": "fillRule",
    "maxlength": "maxLength",
    "readonly": "readOnly",
    "spellcheck": "spellCheck",
    "srcset": "srcSet",
    "tabindex": "tabIndex",
}

# Props React only accepts as expressions, never as string literals
_EXPRESSION_PROPS = {
    "rows": ValueType.NUMBER,
    "tabIndex": ValueType.NUMBER,
    "maxLength": ValueType.NUMBER,
    "aria-disabled": ValueType.BOOLEAN,
    "aria-expanded": ValueType.BOOLEAN,
    "aria-current": ValueType.STRING,
    "disabled": ValueType.BOOLEAN,
    "open": ValueType.BOOLEAN,
}

_FORM_CONTROLS = frozenset({"input", "textarea", "select"})
_CLICK_INPUT_TYPES = frozenset({"submit", "image"})

_ELEMENT_NAMES = {
    "a": "Anchor",
    "blockquote": "Quote",
    "br": "BR",
    "caption": "TableCaption",
    "dl": "DList",
    "fieldset": "FieldSet",
    "h1": "Heading",
    "h2": "Heading",
    "h3": "Heading",
    "h4": "Heading",
    "h5": "Heading",
    "h6": "Heading",
    "hr": "HR",
    "iframe": "IFrame",
    "img": "Image",
    "li": "LI",
    "ol": "OList",
    "optgroup": "OptGroup",
    "p": "Paragraph",
    "q": "Quote",
    "tbody": "TableSection",
    "td": "TableCell",
    "textarea": "TextArea",
    "tfoot": "TableSection",
    "th": "TableCell",
    "thead": "TableSection",
    "tr": "TableRow",
    "ul": "UList",
}

_GENERIC_ELEMENTS = frozenset(
    {
        "abbr", "article", "aside", "b", "code", "em", "figcaption", "figure", "footer",
        "header", "i", "main", "mark", "nav", "section", "small", "strong", "sub", "sup",
    }
)

_ATTRIBUTE_INTERFACES = {
    "a": "Anchor",
    "audio": "Audio",
    "button": "Button",
    "details": "Details",
    "form": "Form",
    "iframe": "Iframe",
    "img": "Img",
    "input": "Input",
    "label": "Label",
    "li": "Li",
    "link": "Link",
    "meta": "Meta",
    "ol": "Ol",
    "option": "Option",
    "select": "Select",
    "table": "Table",
    "td": "Td",
    "textarea": "Textarea",
    "th": "Th",
    "time": "Time",
    "video": "Video",
}

_TAGGED_TYPES = {
    KeyTag.A_TARGET: 'React.AnchorHTMLAttributes<HTMLAnchorElement>["target"]',
    KeyTag.BUTTON_TYPE: 'React.ButtonHTMLAttributes<HTMLButtonElement>["type"]',
    KeyTag.CROSS_ORIGIN: 'React.ImgHTMLAttributes<HTMLImageElement>["crossOrigin"]',
    KeyTag.INPUT_TYPE: 'React.InputHTMLAttributes<HTMLInputElement>["type"]',
    KeyTag.INPUT_AUTOCOMPLETE: 'React.InputHTMLAttributes<HTMLInputElement>["autoComplete"]',
}

_PRIMITIVE_TYPES = {
    ValueType.STRING: "string",
    ValueType.BOOLEAN: "boolean",
    ValueType.NUMBER: "number",
    ValueType.FUNCTION: "any",
    ValueType.NODE: "React.ReactNode",
}

_CLASS_SELECTOR = re.compile(r"\.(-?[_a-zA-Z][\w-]*)")
_COMPOUND_SPLIT = re.compile(r"\s*[>+~]\s*|\s+")
_NUMBER = re.compile(r"-?\d+(\.\d+)?")
_BRACES = re.compile(r"[{}]")


def element_interface(tag_name: str) -> str:
    """DOM interface name, e.g. ``"a"`` -> ``"HTMLAnchorElement"``."""
    if tag_name in _GENERIC_ELEMENTS:
        return "HTMLElement"
    return f"HTML{_ELEMENT_NAMES.get(tag_name, tag_name.capitalize())}Element"


def attributes_interface(tag_name: str) -> str:
    """React attribute typing, e.g. ``"a"`` -> ``"React.AnchorHTMLAttributes<HTMLAnchorElement>"``."""
    prefix = _ATTRIBUTE_INTERFACES.get(tag_name, "")
    return f"React.{prefix}HTMLAttributes<{element_interface(tag_name)}>"


def _template_text(text: str) -> str:
    return text.replace("\\", "\\\\").replace("`", "\\`").replace("${", "\\${")


class ComponentFormat(BaseFormat):
    """Renders a template as a React function component.

    Args:
        template: The template being compiled.
        format_id: Registry id, also the output directory name.
        language: TypeScript adds a ``Props`` type and typed styled components.
        style_mode: Scoped styled-components or an imported stylesheet.
        engine: Jinja2 engine for the component skeleton.
    """

    def __init__(
        self,
        template: TemplateInput,
        format_id: str,
        *,
        language: Language = Language.TYPESCRIPT,
        style_mode: StyleMode = StyleMode.STYLED_COMPONENTS,
        engine: TemplateEngine | None = None,
    ) -> None:
        super().__init__(template, format_id, engine)
        self.language = language
        self.style_mode = style_mode
        self._render: list[str] = []
        self._styles: list[str] = []
        self._style_names: list[str] = []
        self._constants: dict[str, dict[str, str]] = {}
        self._uses_css_helper = False
        self._ancestor_classes: list[TemplateAttribute | None] = []

    @property
    def is_typescript(self) -> bool:
        return self.language is Language.TYPESCRIPT

    @property
    def extension(self) -> str:
        return ".tsx" if self.is_typescript else ".js"

    def on_element(
        self,
        tag_name: str,
        attributes: list[TemplateAttribute],
        css: tuple[CssNode, ...],
        is_self_closing: bool,
    ) -> str:
        attributes = [*attributes, *self._event_attributes(tag_name, attributes)]
        validate_attributes(attributes)
        class_attribute = next((a for a in attributes if a.key == "class"), None)

        alias = tag_name
        used_props: list[str] = []
        if self.style_mode is StyleMode.STYLED_COMPONENTS and css:
            body, used_props = self.render_styled_rules(css, class_attribute)
            if body.strip():
                alias = unique_key(f"Styled{pascal_case(tag_name)}", self._style_names)
                self._style_names.append(alias)
                generic = ""
                if self.is_typescript and used_props:
                    picked = " | ".join(json.dumps(prop) for prop in used_props)
                    generic = f"<Pick<Props, {picked}>>"
                self._styles.append(f"const {alias} = styled.{tag_name}{generic}`\n{body}\n`;")

        parts = [f"<{alias}"]
        is_styled = alias != tag_name
        passed: list[str] = []
        for attribute in attributes:
            if is_styled and attribute.key == "class":
                passed.extend(dk.key for dk in attribute.dynamic_keys)
                parts.extend(f" {key}={{{key}}}" for key in passed)
                continue
            parts.append(self.render_attribute(attribute))
        if is_styled:
            # props read by conditions on ancestor classes
            parts.extend(f" {prop}={{{prop}}}" for prop in used_props if prop not in passed)
        parts.append("/>" if is_self_closing else ">")
        self._render.append("".join(parts))
        if not is_self_closing:
            self._ancestor_classes.append(class_attribute)
        return alias

    def _event_attributes(
        self, tag_name: str, attributes: list[TemplateAttribute]
    ) -> list[TemplateAttribute]:
        type_attribute = next((a for a in attributes if a.key == "type"), None)
        input_type = type_attribute.value if type_attribute is not None else ""
        is_click_input = tag_name == "input" and input_type in _CLICK_INPUT_TYPES

        events: list[TemplateAttribute] = []
        if tag_name in _FORM_CONTROLS and not is_click_input:
            on_change = self.register_dynamic_key("onChange", KeyTag.ONCHANGE, True, tag_name)
            events.append(self._bind("onChange", on_change, ValueType.FUNCTION))
            ref = self.register_dynamic_key("ref", ValueType.REFERENCE, True, tag_name)
            events.append(self._bind("ref", ref, ValueType.REFERENCE))
        if tag_name in ("button", "a") or is_click_input:
            on_click = self.register_dynamic_key("onClick", KeyTag.ONCLICK, True, tag_name)
            events.append(self._bind("onClick", on_click, ValueType.FUNCTION))
        return events

    @staticmethod
    def _bind(name: str, key: str, value_type: ValueType) -> TemplateAttribute:
        return TemplateAttribute(
            key=name,
            data_type=value_type,
            dynamic_keys=(DynamicKey(key=key, type=value_type, optional=True),),
        )

    def render_attribute(self, attribute: TemplateAttribute) -> str:
        """Render one attribute as a JSX prop, including its leading space."""
        name = REACT_ATTRIBUTE_NAMES.get(attribute.key, attribute.key)
        if attribute.key == "style":
            return f" style={{{self._style_object(attribute)}}}"
        kind = _EXPRESSION_PROPS.get(name, attribute.data_type)
        if attribute.is_static:
            return f" {name}={self._static_value(attribute.value, kind)}"
        return f" {name}={{{self._expression(attribute, kind)}}}"

    @staticmethod
    def _static_value(value: str, kind: ValueType) -> str:
        if kind == ValueType.BOOLEAN:
            return "{false}" if value.lower() == "false" else "{true}"
        if kind == ValueType.NUMBER and _NUMBER.fullmatch(value):
            return f"{{{value}}}"
        return f'"{escape(value)}"'

    def _style_object(self, attribute: TemplateAttribute) -> str:
        if attribute.dynamic_keys:
            logger.warning(
                "Ignoring dynamic style=%r override in %s", attribute.value, self.template.id
            )
        declarations = {
            camel_case(node.prop): node.value
            for node in parse_css(attribute.value)
            if isinstance(node, CssDeclaration)
        }
        return json.dumps(declarations)

    def _expression(self, attribute: TemplateAttribute, kind: ValueType) -> str:
        dynamic_keys = attribute.dynamic_keys
        if len(dynamic_keys) == 1 and not attribute.value:
            return self._single_expression(attribute, dynamic_keys[0], kind)

        pieces = [_template_text(attribute.value)] if attribute.value else []
        for index, dynamic_key in enumerate(dynamic_keys):
            separator = " " if attribute.value or index else ""
            pieces.append("${" + self._piece(attribute, dynamic_key, separator) + "}")
        expression = "`" + "".join(pieces) + "`"

        if attribute.is_omitted_if_empty:
            conditions = [self._is_set(dk) for dk in dynamic_keys]
            condition = conditions[0] if len(conditions) == 1 else f"({' || '.join(conditions)})"
            expression = f"{condition} ? {expression} : undefined"
        return expression

    def _single_expression(
        self, attribute: TemplateAttribute, dynamic_key: DynamicKey, kind: ValueType
    ) -> str:
        key = dynamic_key.key
        if dynamic_key.options:
            lookup = self._lookup(dynamic_key)
            return lookup if attribute.is_omitted_if_empty else f'{lookup} || ""'
        if dynamic_key.type == ValueType.BOOLEAN and dynamic_key.if_true_value and kind == ValueType.STRING:
            fallback = "undefined" if attribute.is_omitted_if_empty else '""'
            return f"{key} ? {json.dumps(dynamic_key.if_true_value)} : {fallback}"
        return key

    def _piece(self, attribute: TemplateAttribute, dynamic_key: DynamicKey, separator: str) -> str:
        key = dynamic_key.key
        if dynamic_key.options:
            lookup = self._lookup(dynamic_key)
            prefix = f"{json.dumps(separator)} + " if separator else ""
            return f'{lookup} !== undefined ? {prefix}{lookup} : ""'
        if dynamic_key.type == ValueType.BOOLEAN:
            literal = dynamic_key.if_true_value or attribute.key
            return f'{key} ? {json.dumps(separator + literal)} : ""'
        prefix = f"{json.dumps(separator)} + " if separator else ""
        return f'{key} !== undefined ? {prefix}{key} : ""'

    def _lookup(self, dynamic_key: DynamicKey) -> str:
        self._constants[dynamic_key.key] = {
            option.name: option.value for option in dynamic_key.options
        }
        return f"constants.{dynamic_key.key}[{dynamic_key.key}]"

    @staticmethod
    def _is_set(dynamic_key: DynamicKey) -> str:
        if dynamic_key.type == ValueType.BOOLEAN:
            return dynamic_key.key
        return f"{dynamic_key.key} !== undefined"

    def render_styled_rules(
        self,
        nodes: tuple[CssNode, ...],
        class_attribute: TemplateAttribute | None,
    ) -> tuple[str, list[str]]:
        """Render ``nodes`` as a styled-components body.

        Returns:
            The body text and the props its conditionals read, in first-use
            order.
        """
        used_props: list[str] = []
        lines = self._style_lines(nodes, class_attribute, used_props, "  ")
        return "\n".join(lines), used_props

    def _style_lines(
        self,
        nodes: tuple[CssNode, ...],
        class_attribute: TemplateAttribute | None,
        used_props: list[str],
        indent: str,
    ) -> list[str]:
        lines: list[str] = []
        for node in nodes:
            if isinstance(node, CssDeclaration):
                if node.prop not in VENDOR_PROPERTIES_WITH_GENERIC_NAMES:
                    lines.append(f"{indent}{node};")
            elif isinstance(node, CssAtRule):
                if node.nodes is None:
                    continue
                inner = self._style_lines(node.nodes, class_attribute, used_props, indent + "  ")
                if inner:
                    header = f"@{node.name} {node.params}".strip()
                    lines.extend([f"{indent}{header} {{", *inner, f"{indent}}}"])
            else:
                lines.extend(self._rule_lines(node, class_attribute, used_props, indent))
        return lines

    def _rule_lines(
        self,
        rule: CssRule,
        class_attribute: TemplateAttribute | None,
        used_props: list[str],
        indent: str,
    ) -> list[str]:
        plain: list[str] = []
        stateful: list[str] = []
        for part in split_selectors(rule.selector):
            (stateful if pseudo_suffixes(part) else plain).append(part)

        lines: list[str] = []
        if plain:
            lines.extend(self._guarded_lines(rule, plain, class_attribute, used_props, indent))
        if stateful:
            inner = self._guarded_lines(
                rule, stateful, class_attribute, used_props, indent + "  "
            )
            if inner:
                suffixes = dict.fromkeys(s for part in stateful for s in pseudo_suffixes(part))
                selector = ", ".join(f"&{suffix}" for suffix in suffixes)
                lines.extend([f"{indent}{selector} {{", *inner, f"{indent}}}"])
        return lines

    def _guarded_lines(
        self,
        rule: CssRule,
        parts: list[str],
        class_attribute: TemplateAttribute | None,
        used_props: list[str],
        indent: str,
    ) -> list[str]:
        condition = self._selector_condition(parts, class_attribute, used_props)
        body_indent = indent + "  " if condition else indent
        lines = self._style_lines(rule.nodes, class_attribute, used_props, body_indent)
        if not lines or not condition:
            return lines
        self._uses_css_helper = True
        return [f"{indent}${{props => {condition} && css`", *lines, f"{indent}`}}"]

    def _selector_condition(
        self,
        parts: list[str],
        class_attribute: TemplateAttribute | None,
        used_props: list[str],
    ) -> str | None:
        """Translate the classes selector ``parts`` need beyond the static ones into props.

        The last compound of a part is checked against the element's own
        class attribute, the compounds before a combinator against the open
        ancestors. Returns None when the rule applies unconditionally: some
        part is satisfied by static classes alone, or by classes no variable
        can contribute (a sibling's, for instance).
        """
        own = [class_attribute] if class_attribute is not None else []
        context = [a for a in self._ancestor_classes if a is not None]

        alternatives: list[str] = []
        props: list[str] = []
        for part in parts:
            compounds = [c for c in _COMPOUND_SPLIT.split(strip_pseudo(part).strip()) if c]
            terms: list[str] = []
            for index, compound in enumerate(compounds):
                owners = own if index == len(compounds) - 1 else context
                static_classes = {c for owner in owners for c in owner.value.split()}
                for class_name in _CLASS_SELECTOR.findall(compound):
                    if class_name in static_classes:
                        continue
                    found = self._class_term(class_name, owners)
                    if found is not None:
                        terms.append(found[0])
                        props.append(found[1])
            if not terms:
                return None
            alternatives.append(" && ".join(dict.fromkeys(terms)))

        for prop in props:
            if prop not in used_props:
                used_props.append(prop)
        unique = list(dict.fromkeys(alternatives))
        if len(unique) == 1:
            return unique[0]
        return " || ".join(f"({a})" if "&&" in a else a for a in unique)

    @staticmethod
    def _class_term(
        class_name: str, owners: list[TemplateAttribute]
    ) -> tuple[str, str] | None:
        for dynamic_key in (dk for owner in owners for dk in owner.dynamic_keys):
            key = dynamic_key.key
            if dynamic_key.options:
                names = [o.name for o in dynamic_key.options if class_name in o.value.split()]
                if len(names) == 1:
                    return f"props.{key} === {json.dumps(names[0])}", key
                if names:
                    joined = " || ".join(f"props.{key} === {json.dumps(n)}" for n in names)
                    return f"({joined})", key
            elif (
                dynamic_key.type == ValueType.BOOLEAN
                and dynamic_key.if_true_value
                and class_name in dynamic_key.if_true_value.split()
            ):
                return f"props.{key}", key
        return None

    def on_close_element(self, tag_name: str) -> None:
        self._ancestor_classes.pop()
        self._render.append(f"</{tag_name}>")

    def on_text(self, text: str) -> None:
        escaped = escape(text, quote=False)
        self._render.append(_BRACES.sub(lambda m: "{" + json.dumps(m.group()) + "}", escaped))

    def on_variable(self, key: str, default_value: str = "") -> None:
        if default_value:
            self._render.append(
                f"{{{key} !== undefined ? {key} : <React.Fragment>{default_value}</React.Fragment>}}"
            )
        else:
            self._render.append(f"{{{key}}}")

    def on_if(
        self,
        key: str,
        comparison: Comparison | None = None,
        equals: str | None = None,
    ) -> None:
        if comparison is None:
            self._render.append(f"{{{key} !== undefined ? <React.Fragment>")
            return
        operator = "!==" if comparison is Comparison.NOT_EQUALS else "==="
        self._render.append(f"{{{key} {operator} {json.dumps(equals or '')} ? <React.Fragment>")

    def on_close_if(self) -> None:
        self._render.append("</React.Fragment> : null}")

    def prop_type(self, key: str, entry: KeyEntry) -> str:
        """TypeScript type of one prop.

        Raises:
            FormatError: If a DOM-dependent type has no tag to resolve against.
        """
        key_type = entry.type
        if isinstance(key_type, tuple):
            return " | ".join(json.dumps(option.name) for option in key_type)
        if key_type in _PRIMITIVE_TYPES:
            return _PRIMITIVE_TYPES[key_type]  # type: ignore[index]
        if key_type in _TAGGED_TYPES:
            return _TAGGED_TYPES[key_type]  # type: ignore[index]

        if not entry.tag_name:
            raise FormatError(f"Prop {key!r} of type {key_type} needs a tag name to be typed")
        if key_type == ValueType.REFERENCE:
            return f"React.RefObject<{element_interface(entry.tag_name)}>"
        if key_type == KeyTag.ARIA_CURRENT:
            return f'{attributes_interface(entry.tag_name)}["aria-current"]'
        if key_type == KeyTag.ONCHANGE:
            return f'{attributes_interface(entry.tag_name)}["onChange"]'
        if key_type == KeyTag.ONCLICK:
            return f'{attributes_interface(entry.tag_name)}["onClick"]'
        return "any"

    def serialize(self, css: str, has_multiple_root_nodes: bool) -> dict[str, str]:
        name = pascal_case(self.template.id) or "Component"
        files: dict[str, str] = {}

        css_import = ""
        if self.style_mode is StyleMode.IMPORT_CSS and self.template.css.strip():
            css_path = f"css/{self.template.id}.css"
            files[css_path] = self.template.css.strip() + "\n"
            css_import = f"../{css_path}"

        body = "".join(self._render).strip()
        if has_multiple_root_nodes:
            body = f"<React.Fragment>{body}</React.Fragment>"

        params = self.keys.keys()
        signature = f"{{ {', '.join(params)} }}" if params else ""
        if self.is_typescript and params:
            signature += ": Props"

        props = [
            {"name": key, "optional": entry.optional, "type": self.prop_type(key, entry)}
            for key, entry in self.keys.entries()
        ]
        files[f"{self.dirname}/{name}{self.extension}"] = self.engine.render(
            "component.j2",
            typescript=self.is_typescript,
            styles=self._styles,
            uses_css_helper=self._uses_css_helper,
            css_import=css_import,
            props=props,
            constants=json.dumps(self._constants, indent=2) if self._constants else "",
            name=name,
            signature=signature,
            body=body,
        )
        logger.info("Serialized %s as %s (%d props)", self.template.id, self.format_id, len(props))
        return files

    def generate_index(self, file_paths: list[str]) -> dict[str, str]:
        """Lazy (``index``) and eager (``indexNotLazy``) barrels over the components.

        Raises:
            FormatError: If a path is outside this format's directory.
        """
        for file_path in file_paths:
            if not file_path.startswith(f"{self.dirname}/"):
                raise FormatError(f"Expected {file_path!r} to start with {self.dirname}/")

        index_names = {"index", "indexNotLazy"}
        names = sorted(
            PurePosixPath(path).stem
            for path in file_paths
            if path.endswith(self.extension) and PurePosixPath(path).stem not in index_names
        )
        exports = [{"alias": camel_case(name), "name": name} for name in names]
        return {
            f"{self.dirname}/index{self.extension}": self.engine.render("index.j2", names=names),
            f"{self.dirname}/indexNotLazy{self.extension}": self.engine.render(
                "index_not_lazy.j2", exports=exports
            ),
        }

    def make_usage(self, usages: Sequence[UsageNode], import_prefix: str = "./") -> UsageResult:
        """A module whose default export renders ``usages``, with its imports."""
        tags = render_usage_tags(usages)
        lines = ['import React from "react";']
        for name in tags.imports:
            lines.append(f'import {name} from "{import_prefix}{self.dirname}/{name}";')
            if self.style_mode is StyleMode.IMPORT_CSS:
                lines.append(f'import "{import_prefix}css/{name}.css";')

        body = tags.code
        if len(usages) > 1:
            body = f"<React.Fragment>\n{body}</React.Fragment>\n"
        code = "\n".join(lines) + f"\n\nexport default () => (\n{body});\n"
        logger.debug("Rendered usage of %d components as %s", len(tags.imports), self.format_id)
        return UsageResult(code=code, imports=tags.imports)
