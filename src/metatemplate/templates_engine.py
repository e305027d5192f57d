"""Jinja2 template engine for generated files.

Loads templates from built-in and user-override directories. User overrides
in ``.metatemplate/templates/`` take precedence over the built-in templates
in ``src/metatemplate/templates/``, so a project can restyle the generated
component file or the developer notes without forking a format.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import jinja2

from metatemplate.exceptions import FormatError

__all__ = ["TemplateEngine"]

logger = logging.getLogger(__name__)


class TemplateEngine:
    """Jinja2 template engine with built-in and user-override support.

    Template search order:
      1. .metatemplate/templates/ (user overrides, optional)
      2. src/metatemplate/templates/ (built-in, always present)

    Args:
        project_root: Project root directory. If provided, enables user
            template overrides from ``project_root/.metatemplate/templates/``.
    """

    def __init__(self, project_root: Path | None = None) -> None:
        from importlib.resources import files

        search_paths: list[str] = []
        self._user_template_dir: Path | None = None

        if project_root is not None:
            user_dir = project_root / ".metatemplate" / "templates"
            self._user_template_dir = user_dir
            if user_dir.is_dir():
                search_paths.append(str(user_dir))
                logger.info("User template overrides enabled: %s", user_dir)

        builtin_dir = Path(str(files("metatemplate") / "templates"))
        if not builtin_dir.is_dir():
            logger.debug("Expected template dir at: %s", builtin_dir)
            raise FormatError(
                "Built-in template directory not found, installation may be corrupted"
            )
        search_paths.append(str(builtin_dir))

        self._loader = jinja2.FileSystemLoader(search_paths)
        self._env = jinja2.Environment(
            loader=self._loader,
            autoescape=False,
            undefined=jinja2.StrictUndefined,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        logger.debug("TemplateEngine initialized with %d search path(s)", len(search_paths))

    def render(self, template_name: str, **context: Any) -> str:
        """Render a template with keyword context.

        Args:
            template_name: Template filename (e.g., ``"component.j2"``).
            **context: Template variables.

        Returns:
            Rendered template content as a string.

        Raises:
            FormatError: If the template is not found or rendering fails.
        """
        try:
            template = self._env.get_template(template_name)
        except jinja2.TemplateNotFound as e:
            raise FormatError(f"Template not found: {template_name}") from e

        try:
            return template.render(**context)
        except jinja2.TemplateError as e:
            raise FormatError(f"Failed to render template {template_name}: {e}") from e

    def list_templates(self) -> list[str]:
        """List all available template names (built-in + overrides)."""
        return sorted(self._loader.list_templates())

    def is_overridden(self, template_name: str) -> bool:
        """Check if a template has a user override in .metatemplate/templates/.

        Returns False if no project root was provided or the user
        override directory does not exist.
        """
        if self._user_template_dir is None:
            return False
        return (self._user_template_dir / template_name).is_file()
