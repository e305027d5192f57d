"""Output format registry for metatemplate.

Maps format ids to factory functions that create format instances.
Example: ``registry.create("mustache", template)`` → ``LogiclessFormat``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from metatemplate.exceptions import FormatError, PluginError

if TYPE_CHECKING:
    from collections.abc import Callable

    from metatemplate.formats.base import BaseFormat
    from metatemplate.templates_engine import TemplateEngine
    from metatemplate.types import TemplateInput

__all__ = ["FormatInfo", "FormatRegistry", "default_registry"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FormatInfo:
    """A registered output format."""

    id: str
    factory: Callable[..., Any]
    description: str = ""


class FormatRegistry:
    """Id-driven factory that maps a format id → format instance.

    When ``auto_discover`` is ``True``, the first lookup triggers a lazy
    import of ``metatemplate.formats`` so that the built-in formats are
    registered without requiring an explicit import.

    Usage::

        registry = FormatRegistry()
        registry.register("mustache", lambda t, e: LogiclessFormat(t, "mustache", Dialect.MUSTACHE, e))
        fmt = registry.create("mustache", template)
    """

    def __init__(self, *, auto_discover: bool = False) -> None:
        self._formats: dict[str, FormatInfo] = {}
        self._auto_discover = auto_discover
        self._discovered = False

    def register(
        self,
        format_id: str,
        factory: Callable[..., Any],
        description: str = "",
    ) -> None:
        """Register a format factory.

        Args:
            format_id: Format id (e.g. "mustache", "react-ts").
            factory: Callable accepting ``(TemplateInput, TemplateEngine | None)``
                and returning a :class:`BaseFormat`.
            description: One-line summary shown by ``metatemplate formats``.

        Raises:
            PluginError: If a format with the same id already exists.
        """
        if format_id in self._formats:
            raise PluginError(f"Format '{format_id}' already registered")

        self._formats[format_id] = FormatInfo(format_id, factory, description)
        logger.debug("Registered format %s", format_id)

    def _ensure_discovered(self) -> None:
        """Lazily import built-in format modules on first use."""
        if self._discovered or not self._auto_discover:
            return
        self._discovered = True
        import metatemplate.formats  # noqa: F401  registers the built-in formats

    def create(
        self,
        format_id: str,
        template: TemplateInput,
        engine: TemplateEngine | None = None,
    ) -> BaseFormat:
        """Create a fresh format instance for one template.

        Raises:
            FormatError: If the format id is not registered.
        """
        info = self.get(format_id)
        logger.debug("Creating format %s for %s", format_id, template.id)
        return info.factory(template, engine)

    def get(self, format_id: str) -> FormatInfo:
        """Look up a registered format.

        Raises:
            FormatError: If the format id is not registered.
        """
        self._ensure_discovered()
        if format_id not in self._formats:
            raise FormatError(
                f"Unknown format '{format_id}'. Available: {sorted(self._formats)}"
            )
        return self._formats[format_id]

    def list_formats(self) -> list[str]:
        """List registered format ids."""
        self._ensure_discovered()
        return sorted(self._formats)

    def has_format(self, format_id: str) -> bool:
        """Check whether a format is registered."""
        self._ensure_discovered()
        return format_id in self._formats


default_registry = FormatRegistry(auto_discover=True)
