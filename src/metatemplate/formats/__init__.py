"""Output formats: logic-less templates and React components."""

from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING

from metatemplate.formats.base import BaseFormat
from metatemplate.formats.component import ComponentFormat, Language, StyleMode
from metatemplate.formats.logicless import Dialect, LogiclessFormat
from metatemplate.registry import default_registry

if TYPE_CHECKING:
    from metatemplate.registry import FormatRegistry
    from metatemplate.templates_engine import TemplateEngine
    from metatemplate.types import TemplateInput

__all__ = [
    "BaseFormat",
    "ComponentFormat",
    "Dialect",
    "Language",
    "LogiclessFormat",
    "StyleMode",
    "register_builtin_formats",
]


def _logicless(
    format_id: str, dialect: Dialect, template: TemplateInput, engine: TemplateEngine | None
) -> LogiclessFormat:
    return LogiclessFormat(template, format_id, dialect, engine)


def _component(
    format_id: str,
    language: Language,
    style_mode: StyleMode,
    template: TemplateInput,
    engine: TemplateEngine | None,
) -> ComponentFormat:
    return ComponentFormat(
        template, format_id, language=language, style_mode=style_mode, engine=engine
    )


_BUILTIN = (
    ("mustache", partial(_logicless, "mustache", Dialect.MUSTACHE), "Mustache (logic-less)"),
    (
        "silverstripe",
        partial(_logicless, "silverstripe", Dialect.SILVERSTRIPE),
        "SilverStripe template (server-embed)",
    ),
    (
        "react-ts-styled-components",
        partial(
            _component,
            "react-ts-styled-components",
            Language.TYPESCRIPT,
            StyleMode.STYLED_COMPONENTS,
        ),
        "React + TypeScript with styled-components",
    ),
    (
        "react-js-styled-components",
        partial(
            _component,
            "react-js-styled-components",
            Language.JAVASCRIPT,
            StyleMode.STYLED_COMPONENTS,
        ),
        "React + JavaScript with styled-components",
    ),
    (
        "react-ts",
        partial(_component, "react-ts", Language.TYPESCRIPT, StyleMode.IMPORT_CSS),
        "React + TypeScript with an imported stylesheet",
    ),
    (
        "react-js",
        partial(_component, "react-js", Language.JAVASCRIPT, StyleMode.IMPORT_CSS),
        "React + JavaScript with an imported stylesheet",
    ),
)


def register_builtin_formats(registry: FormatRegistry) -> None:
    """Register every built-in format not already present in ``registry``."""
    for format_id, factory, description in _BUILTIN:
        if not registry.has_format(format_id):
            registry.register(format_id, factory, description)


register_builtin_formats(default_registry)
