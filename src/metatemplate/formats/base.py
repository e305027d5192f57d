"""Abstract base class for output formats."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from metatemplate.compile.keys import DynamicKeyRegistry
from metatemplate.templates_engine import TemplateEngine
from metatemplate.types import UsageResult

if TYPE_CHECKING:
    from collections.abc import Sequence

    from metatemplate.css import CssNode
    from metatemplate.types import (
        Comparison,
        RegisteredType,
        TemplateAttribute,
        TemplateInput,
        UsageNode,
    )

__all__ = ["BaseFormat"]

logger = logging.getLogger(__name__)


class BaseFormat(ABC):
    """Base class for all output formats.

    A format instance renders exactly one template. The document walker
    calls the ``on_*`` hooks in document order, then :meth:`serialize`.
    Each instance owns its own :class:`DynamicKeyRegistry`, so variable
    names never leak between formats or templates.

    Args:
        template: The template being compiled.
        format_id: Registry id, also the output directory name.
        engine: Jinja2 engine for file skeletons; a default one is created
            when omitted.
    """

    def __init__(
        self,
        template: TemplateInput,
        format_id: str,
        engine: TemplateEngine | None = None,
    ) -> None:
        self.template = template
        self.format_id = format_id
        self.dirname = format_id
        self.keys = DynamicKeyRegistry()
        self.engine = engine or TemplateEngine()

    def register_dynamic_key(
        self,
        name: str,
        key_type: RegisteredType,
        optional: bool,
        tag_name: str | None = None,
    ) -> str:
        """Register a collision-free key in this format's namespace."""
        return self.keys.register(name, key_type, optional, tag_name)

    def share_dynamic_key(
        self,
        name: str,
        key_type: RegisteredType,
        optional: bool,
        tag_name: str | None = None,
    ) -> str:
        """Bind a template-level key (element id, ``mt-if``, ``mt-variable``)."""
        return self.keys.share(name, key_type, optional, tag_name)

    @abstractmethod
    def on_element(
        self,
        tag_name: str,
        attributes: list[TemplateAttribute],
        css: tuple[CssNode, ...],
        is_self_closing: bool,
    ) -> str:
        """Render an opening tag.

        Args:
            tag_name: Lower-cased HTML tag name.
            attributes: Compiled attributes of the element.
            css: The CSS rules that can apply to this element.
            is_self_closing: Whether the element is void.

        Returns:
            The tag name to close the element with, which may differ from
            ``tag_name`` when the format wraps the element.
        """

    @abstractmethod
    def on_close_element(self, tag_name: str) -> None:
        """Render a closing tag for the name :meth:`on_element` returned."""

    @abstractmethod
    def on_text(self, text: str) -> None:
        """Render literal text."""

    @abstractmethod
    def on_variable(self, key: str, default_value: str = "") -> None:
        """Render an ``<mt-variable>`` slot."""

    @abstractmethod
    def on_if(
        self,
        key: str,
        comparison: Comparison | None = None,
        equals: str | None = None,
    ) -> None:
        """Open an ``<mt-if>`` block.

        Without ``comparison`` the block renders when ``key`` is set.
        """

    @abstractmethod
    def on_close_if(self) -> None:
        """Close the innermost ``<mt-if>`` block."""

    @abstractmethod
    def serialize(self, css: str, has_multiple_root_nodes: bool) -> dict[str, str]:
        """Finish rendering.

        Returns:
            Mapping of relative output path to file content.
        """

    def generate_index(self, file_paths: list[str]) -> dict[str, str]:
        """Build barrel files over ``file_paths``; formats without one return ``{}``."""
        return {}

    def make_usage(self, usages: Sequence[UsageNode], import_prefix: str = "./") -> UsageResult:
        """Example code using compiled templates; formats without one return empty code.

        Args:
            usages: The usage tree, see :mod:`metatemplate.usage`.
            import_prefix: Path from the example to the output root.
        """
        return UsageResult()
