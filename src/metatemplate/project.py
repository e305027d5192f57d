"""Project manager for metatemplate.

Handles project initialization, status reporting, template discovery and
project root discovery.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from metatemplate.config import MetaTemplateConfig, default_config, load_config, save_config
from metatemplate.exceptions import ProjectError
from metatemplate.types import TemplateInput

__all__ = [
    "CONFIG_FILE",
    "PROJECT_DIR",
    "ProjectManager",
    "ProjectStatus",
]

logger = logging.getLogger(__name__)

PROJECT_DIR = ".metatemplate"
CONFIG_FILE = "config.toml"

SUBDIRS = ["templates"]


@dataclass
class ProjectStatus:
    """Summary of the current project state."""

    initialized: bool
    root: Path
    template_count: int
    config: MetaTemplateConfig | None


class ProjectManager:
    """Manages metatemplate project lifecycle."""

    def __init__(self, root: Path | None = None) -> None:
        self.root = root or Path.cwd()

    @property
    def project_dir(self) -> Path:
        return self.root / PROJECT_DIR

    @property
    def config_path(self) -> Path:
        return self.project_dir / CONFIG_FILE

    @property
    def is_initialized(self) -> bool:
        return self.project_dir.is_dir() and self.config_path.exists()

    def templates_dir(self, config: MetaTemplateConfig | None = None) -> Path:
        """Directory holding the ``<id>.html`` / ``<id>.css`` sources."""
        config = config or load_config(self.config_path)
        return self.root / config.templates.source_dir

    def output_dir(self, config: MetaTemplateConfig | None = None) -> Path:
        config = config or load_config(self.config_path)
        return self.root / config.output.directory

    def init(self, name: str = "", formats: list[str] | None = None) -> Path:
        """Initialize a new metatemplate project.

        Creates the .metatemplate/ directory, a default config and the
        template source directory. Safe to call on an already-initialized
        project (idempotent).

        Returns the .metatemplate/ directory path.
        """
        self.project_dir.mkdir(parents=True, exist_ok=True)
        for subdir in SUBDIRS:
            (self.project_dir / subdir).mkdir(parents=True, exist_ok=True)

        if self.config_path.exists():
            config = load_config(self.config_path)
            logger.info("Existing config found at %s", self.config_path)
        else:
            config = default_config()

        if name:
            config.project.name = name
        elif not config.project.name:
            config.project.name = self.root.name
        if formats:
            config.output.formats = list(formats)

        (self.root / config.templates.source_dir).mkdir(parents=True, exist_ok=True)
        save_config(config, self.config_path)

        logger.info("Initialized metatemplate project at %s", self.project_dir)
        return self.project_dir

    def status(self) -> ProjectStatus:
        """Get current project status."""
        if not self.is_initialized:
            return ProjectStatus(initialized=False, root=self.root, template_count=0, config=None)

        config = load_config(self.config_path)
        source_dir = self.templates_dir(config)
        count = len(list(source_dir.glob("*.html"))) if source_dir.is_dir() else 0
        return ProjectStatus(initialized=True, root=self.root, template_count=count, config=config)

    def load_templates(self, config: MetaTemplateConfig | None = None) -> list[TemplateInput]:
        """Read every ``<id>.html`` in the source directory, with its optional ``<id>.css``.

        Raises:
            ProjectError: If the source directory is missing or a file
                cannot be read.
        """
        source_dir = self.templates_dir(config)
        if not source_dir.is_dir():
            raise ProjectError(f"Template directory not found: {source_dir}")

        templates: list[TemplateInput] = []
        for html_path in sorted(source_dir.glob("*.html")):
            css_path = html_path.with_suffix(".css")
            try:
                html = html_path.read_text(encoding="utf-8")
                css = css_path.read_text(encoding="utf-8") if css_path.exists() else ""
            except OSError as e:
                raise ProjectError(f"Failed to read template {html_path}: {e}") from e
            templates.append(TemplateInput(id=html_path.stem, html=html, css=css))

        logger.info("Found %d template(s) in %s", len(templates), source_dir)
        return templates

    @staticmethod
    def find_project_root(start: Path | None = None) -> Path | None:
        """Walk up from start directory to find a .metatemplate/ directory.

        Returns the project root (parent of .metatemplate/) or None if not found.
        """
        current = (start or Path.cwd()).resolve()
        while True:
            if (current / PROJECT_DIR).is_dir():
                return current
            parent = current.parent
            if parent == current:
                return None
            current = parent
