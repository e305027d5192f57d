"""Shared fixtures for metatemplate tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from bs4 import BeautifulSoup

from metatemplate.compile.keys import DynamicKeyRegistry
from metatemplate.config import MetaTemplateConfig, save_config
from metatemplate.nodes.soup import SoupNode
from metatemplate.project import CONFIG_FILE, PROJECT_DIR

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

BUTTON_HTML = '<button class="g-button {{ isPrimary?: g-button--primary }}">Go</button>\n'
BUTTON_CSS = ".g-button { padding: 4px; }\n.g-button.g-button--primary { color: white; }\n"


def parse_element(html: str) -> SoupNode:
    """Parse ``html`` and wrap its first element."""
    soup = BeautifulSoup(html, "html.parser", multi_valued_attributes=None)
    tag = soup.find(True)
    assert tag is not None
    return SoupNode(tag)


@pytest.fixture
def keys() -> DynamicKeyRegistry:
    """An empty dynamic-key registry."""
    return DynamicKeyRegistry()


@pytest.fixture
def element() -> Callable[[str], SoupNode]:
    """Factory turning an HTML snippet into a SoupNode."""
    return parse_element


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """A temporary directory simulating a project root."""
    return tmp_path


@pytest.fixture
def initialized_project(tmp_path: Path) -> Path:
    """A temporary project with .metatemplate/ initialized and one template."""
    project = tmp_path / PROJECT_DIR
    (project / "templates").mkdir(parents=True)

    config = MetaTemplateConfig()
    config.project.name = "test-project"
    save_config(config, project / CONFIG_FILE)

    templates = tmp_path / "templates"
    templates.mkdir()
    (templates / "button.html").write_text(BUTTON_HTML, encoding="utf-8")
    (templates / "button.css").write_text(BUTTON_CSS, encoding="utf-8")

    return tmp_path
