"""Tag default-attribute ruleset.

For each HTML tag, the attributes a reusable template should always expose
as variables, whether or not the author wrote them. ``<a>`` always gets a
required ``href``; a text ``<input>`` always gets an omittable ``maxlength``.

The ruleset only fills gaps: an attribute the author already bound to a
variable, or gave a literal value, is left as written. The exceptions are
``<input name>`` and ``<input value>``, whose literal becomes the variable's
name.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from metatemplate.exceptions import DuplicateAttributeError
from metatemplate.naming import camel_case
from metatemplate.types import (
    DynamicKey,
    DynamicKeyType,
    EnumOption,
    KeyTag,
    RegisteredType,
    TemplateAttribute,
    ValueType,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from metatemplate.compile.keys import DynamicKeyRegistry

__all__ = [
    "BOOLEAN_ATTRIBUTES",
    "BUTTON_INPUT_TYPES",
    "MAXLENGTH_INPUT_TYPES",
    "NUMERIC_ATTRIBUTES",
    "Directive",
    "apply_tag_defaults",
    "data_type_for",
    "rules_for",
]

logger = logging.getLogger(__name__)

BUTTON_INPUT_TYPES = frozenset({"submit", "image", "button"})
CHECKED_INPUT_TYPES = frozenset({"radio", "checkbox"})
MAXLENGTH_INPUT_TYPES = frozenset({"text", "email", "search", "password", "tel", "url"})

BOOLEAN_ATTRIBUTES = frozenset(
    {
        "allowfullscreen",
        "allowpaymentrequest",
        "autofocus",
        "autoplay",
        "checked",
        "controls",
        "disabled",
        "hidden",
        "loop",
        "multiple",
        "muted",
        "open",
        "readonly",
        "required",
        "selected",
    }
)

NUMERIC_ATTRIBUTES = frozenset(
    {"cols", "colspan", "max", "maxlength", "min", "rows", "rowspan", "tabindex"}
)


def data_type_for(tag_name: str, attribute: str) -> ValueType:
    """Infer the value type of an authored attribute from its name."""
    name = attribute.lower()
    if name in BOOLEAN_ATTRIBUTES:
        return ValueType.BOOLEAN
    if name in NUMERIC_ATTRIBUTES:
        return ValueType.NUMBER
    if name.startswith("on"):
        return ValueType.FUNCTION
    return ValueType.STRING


@dataclass(frozen=True)
class Directive:
    """Ensure ``attribute`` exists and is bound to one variable."""

    attribute: str
    optional: bool
    value_type: DynamicKeyType = ValueType.STRING
    registered_type: RegisteredType | None = None
    key_name: str | None = None

    @property
    def data_type(self) -> ValueType:
        if self.value_type in (ValueType.BOOLEAN, ValueType.NUMBER):
            return self.value_type  # type: ignore[return-value]
        return ValueType.STRING


def required(attribute: str) -> Directive:
    return Directive(attribute, optional=False)


def optional(attribute: str) -> Directive:
    return Directive(attribute, optional=True)


def boolean(attribute: str, key_name: str) -> Directive:
    return Directive(attribute, optional=True, value_type=ValueType.BOOLEAN, key_name=key_name)


def number(attribute: str, key_name: str) -> Directive:
    return Directive(attribute, optional=True, value_type=ValueType.NUMBER, key_name=key_name)


def tagged(attribute: str, tag: KeyTag, *, is_optional: bool, key_name: str) -> Directive:
    return Directive(
        attribute,
        optional=is_optional,
        registered_type=tag,
        key_name=key_name,
    )


def choice(attribute: str, options: tuple[EnumOption, ...], key_name: str) -> Directive:
    return Directive(attribute, optional=True, value_type=options, key_name=key_name)


_MEDIA = (
    boolean("controls", "controls"),
    boolean("autoplay", "autoplay"),
    boolean("muted", "muted"),
    boolean("preload", "preload"),
    boolean("loop", "loop"),
)

_CROSS_ORIGIN_OPTIONS = (
    EnumOption(value="anonymous", name="anonymous"),
    EnumOption(value="use-credentials", name="use-credentials"),
)

_TAG_RULES: dict[str, tuple[Directive, ...]] = {
    "html": (required("lang"),),
    "link": (required("href"), optional("rel")),
    "meta": (optional("name"), optional("http-equiv"), optional("charset"), optional("content")),
    "details": (boolean("open", "open"),),
    "textarea": (
        required("name"),
        boolean("disabled", "disabled"),
        boolean("readonly", "readOnly"),
        number("rows", "rows"),
        number("cols", "cols"),
        boolean("autofocus", "autoFocus"),
        boolean("spellcheck", "spellCheck"),
        tagged("autocomplete", KeyTag.INPUT_AUTOCOMPLETE, is_optional=False, key_name="autoComplete"),
        number("maxlength", "maxLength"),
        optional("value"),
    ),
    "select": (required("name"), boolean("multiple", "multiple")),
    "option": (boolean("selected", "selected"),),
    # An <a> without href is only an id target, which any element with an id
    # can be, so href is required.
    "a": (
        required("href"),
        optional("rel"),
        tagged("target", KeyTag.A_TARGET, is_optional=True, key_name="target"),
    ),
    "abbr": (required("title"),),
    "time": (required("datetime"),),
    "img": (
        required("src"),
        optional("width"),
        optional("height"),
        optional("srcset"),
        tagged("crossorigin", KeyTag.CROSS_ORIGIN, is_optional=True, key_name="crossOrigin"),
    ),
    "audio": (optional("src"), *_MEDIA),
    "video": (
        optional("src"),
        optional("width"),
        optional("height"),
        optional("poster"),
        *_MEDIA,
        choice("crossorigin", _CROSS_ORIGIN_OPTIONS, "crossOrigin"),
    ),
    "iframe": (
        optional("src"),
        optional("width"),
        optional("height"),
        optional("allow"),
        boolean("allowfullscreen", "allowFullscreen"),
        boolean("allowpaymentrequest", "allowPaymentRequest"),
    ),
    "td": (optional("colspan"), optional("rowspan")),
    "button": (
        optional("name"),
        tagged("type", KeyTag.BUTTON_TYPE, is_optional=True, key_name="type"),
    ),
}


class _Attributes:
    """Ordered, key-unique view over one element's attributes."""

    def __init__(
        self,
        tag_name: str,
        attributes: list[TemplateAttribute],
        keys: DynamicKeyRegistry,
    ) -> None:
        self.tag_name = tag_name
        self.keys = keys
        self._items: dict[str, TemplateAttribute] = {}
        for attribute in attributes:
            if attribute.key in self._items:
                raise DuplicateAttributeError(
                    f"Duplicate attribute {attribute.key!r}", key=attribute.key
                )
            self._items[attribute.key] = attribute

    def get(self, name: str) -> TemplateAttribute | None:
        return self._items.get(name)

    def set(self, attribute: TemplateAttribute) -> TemplateAttribute:
        self._items[attribute.key] = attribute
        return attribute

    def literal(self, name: str) -> str | None:
        """The static value of ``name`` if the author wrote a non-empty one."""
        attribute = self._items.get(name)
        if attribute is None or attribute.dynamic_keys or not attribute.value:
            return None
        return attribute.value

    def ensure(self, directive: Directive) -> TemplateAttribute:
        existing = self._items.get(directive.attribute)
        if existing is not None and (existing.dynamic_keys or existing.value):
            return existing
        key_name = directive.key_name or camel_case(directive.attribute)
        registered = directive.registered_type or directive.value_type
        key = self.keys.register(key_name, registered, directive.optional, self.tag_name)
        return self.bind(directive, key)

    def bind(self, directive: Directive, key: str) -> TemplateAttribute:
        dynamic_key = DynamicKey(key=key, type=directive.value_type, optional=directive.optional)
        return self.set(
            TemplateAttribute(
                key=directive.attribute,
                value="",
                data_type=directive.data_type,
                dynamic_keys=(dynamic_key,),
                is_omitted_if_empty=True,
            )
        )

    def bind_literal(self, directive: Directive) -> TemplateAttribute:
        """Bind ``directive`` to a variable named after the author's literal value."""
        literal = self.literal(directive.attribute)
        name = camel_case(literal or "") or directive.key_name or camel_case(directive.attribute)
        registered = directive.registered_type or directive.value_type
        key = self.keys.register(name, registered, directive.optional, self.tag_name)
        return self.bind(directive, key)

    def to_list(self) -> list[TemplateAttribute]:
        return list(self._items.values())


def _input_rule(attrs: _Attributes) -> None:
    attrs.ensure(boolean("disabled", "disabled"))
    attrs.ensure(boolean("readonly", "readOnly"))
    attrs.ensure(boolean("autofocus", "autoFocus"))

    type_attribute = attrs.get("type")
    input_type = type_attribute.value if type_attribute is not None else None
    is_button = input_type is not None and input_type in BUTTON_INPUT_TYPES
    # No type means type="text", which needs a name; only button-like inputs may omit it.
    is_name_optional = type_attribute is not None and is_button

    name_directive = Directive("name", optional=is_name_optional)
    if attrs.literal("name"):
        attrs.bind_literal(name_directive)
    else:
        attrs.ensure(name_directive)

    is_file = input_type == "file"
    is_checked_input = input_type is not None and input_type in CHECKED_INPUT_TYPES

    # type=file has a value the page cannot set.
    if not is_file:
        value_directive = optional("value")
        if attrs.literal("value"):
            attrs.bind_literal(value_directive)
        else:
            attrs.ensure(value_directive)

    if is_checked_input:
        attrs.ensure(boolean("checked", "checked"))
        return
    if is_file:
        return

    if type_attribute is None or input_type == "number":
        attrs.ensure(number("min", "min"))
        attrs.ensure(number("max", "max"))

    if type_attribute is None:
        attrs.ensure(tagged("type", KeyTag.INPUT_TYPE, is_optional=False, key_name="type"))

    attrs.ensure(boolean("spellcheck", "spellCheck"))

    max_length = attrs.get("maxlength")
    supports_max_length = input_type is None or input_type in MAXLENGTH_INPUT_TYPES
    if max_length is not None and type_attribute is not None and not supports_max_length:
        logger.warning(
            "input type=%r and maxlength are incompatible; maxlength will be ignored by browsers",
            input_type,
        )
    if max_length is None and supports_max_length:
        max_length = attrs.ensure(number("maxlength", "maxLength"))
    if max_length is not None:
        attrs.set(replace(max_length, is_omitted_if_empty=True))

    attrs.ensure(
        tagged("autocomplete", KeyTag.INPUT_AUTOCOMPLETE, is_optional=False, key_name="autoComplete")
    )


_FUNCTION_RULES: dict[str, Callable[[_Attributes], None]] = {
    "input": _input_rule,
}


def rules_for(tag_name: str) -> tuple[Directive, ...]:
    """Static directives for ``tag_name`` (``input`` is computed, not tabled)."""
    return _TAG_RULES.get(tag_name.lower(), ())


def apply_tag_defaults(
    tag_name: str,
    attributes: list[TemplateAttribute],
    keys: DynamicKeyRegistry,
) -> list[TemplateAttribute]:
    """Return ``attributes`` with the tag's default variables filled in.

    Attributes the author wrote keep their position; injected attributes are
    appended in rule order.
    """
    name = tag_name.lower()
    attrs = _Attributes(name, attributes, keys)

    rule = _FUNCTION_RULES.get(name)
    if rule is not None:
        rule(attrs)
    else:
        for directive in _TAG_RULES.get(name, ()):
            attrs.ensure(directive)

    return attrs.to_list()
