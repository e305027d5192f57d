"""Tests for metatemplate.cli module."""

from __future__ import annotations

from typing import TYPE_CHECKING

from typer.testing import CliRunner

from metatemplate import __version__
from metatemplate.cli import app
from metatemplate.config import load_config, save_config
from metatemplate.project import CONFIG_FILE, PROJECT_DIR

if TYPE_CHECKING:
    from pathlib import Path

    import pytest

runner = CliRunner()


class TestVersion:
    def test_prints_version(self):
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestInit:
    def test_init_creates_project_dir(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.chdir(tmp_path)
        result = runner.invoke(app, ["init"])
        assert result.exit_code == 0
        assert (tmp_path / PROJECT_DIR).is_dir()
        assert (tmp_path / "templates").is_dir()
        assert "Initialized" in result.output

    def test_init_with_formats(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.chdir(tmp_path)
        result = runner.invoke(app, ["init", "-n", "kit", "-f", "silverstripe", "-f", "react-js"])
        assert result.exit_code == 0
        config = load_config(tmp_path / PROJECT_DIR / CONFIG_FILE)
        assert config.project.name == "kit"
        assert config.output.formats == ["silverstripe", "react-js"]
        assert "silverstripe, react-js" in result.output

    def test_init_warns_about_unknown_format(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ):
        monkeypatch.chdir(tmp_path)
        result = runner.invoke(app, ["init", "-f", "handlebars"])
        assert result.exit_code == 0
        assert "Unknown format" in result.output
        assert "handlebars" in result.output

    def test_init_idempotent(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.chdir(tmp_path)
        runner.invoke(app, ["init", "--name", "kit"])
        result = runner.invoke(app, ["init"])
        assert result.exit_code == 0
        assert load_config(tmp_path / PROJECT_DIR / CONFIG_FILE).project.name == "kit"

    def test_init_error_shows_friendly_message(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ):
        def _fail_init(*_a: object, **_kw: object) -> None:
            raise OSError("Permission denied")

        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr("metatemplate.cli.ProjectManager.init", _fail_init)
        result = runner.invoke(app, ["init"])
        assert result.exit_code == 1
        assert "Permission denied" in result.output


class TestStatus:
    def test_status_uninitialized(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.chdir(tmp_path)
        result = runner.invoke(app, ["status"])
        assert result.exit_code == 1
        assert "No metatemplate project found" in result.output

    def test_status_initialized(self, initialized_project: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.chdir(initialized_project)
        result = runner.invoke(app, ["status"])
        assert result.exit_code == 0
        assert "test-project" in result.output
        assert "Templates" in result.output
        assert "mustache" in result.output

    def test_status_shows_no_templates_hint(
        self, initialized_project: Path, monkeypatch: pytest.MonkeyPatch
    ):
        for path in (initialized_project / "templates").iterdir():
            path.unlink()
        monkeypatch.chdir(initialized_project)
        result = runner.invoke(app, ["status"])
        assert result.exit_code == 0
        assert "No templates found" in result.output


class TestFormats:
    def test_lists_builtin_formats(self):
        result = runner.invoke(app, ["formats"])
        assert result.exit_code == 0
        for format_id in ("mustache", "silverstripe", "react-ts"):
            assert format_id in result.output


class TestBuild:
    def test_build_uninitialized(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.chdir(tmp_path)
        result = runner.invoke(app, ["build"])
        assert result.exit_code == 1

    def test_build_writes_configured_formats(
        self, initialized_project: Path, monkeypatch: pytest.MonkeyPatch
    ):
        monkeypatch.chdir(initialized_project)
        result = runner.invoke(app, ["build"])
        assert result.exit_code == 0, result.output
        assert "Built 1 template(s)" in result.output

        dist = initialized_project / "dist"
        mustache = (dist / "mustache" / "button.mustache").read_text(encoding="utf-8")
        assert "{{#isPrimary}} g-button--primary{{/isPrimary}}" in mustache

        component = (dist / "react-ts-styled-components" / "Button.tsx").read_text(encoding="utf-8")
        assert "isPrimary" in component
        assert (dist / "react-ts-styled-components" / "index.tsx").exists()

    def test_build_format_and_output_overrides(
        self, initialized_project: Path, monkeypatch: pytest.MonkeyPatch
    ):
        monkeypatch.chdir(initialized_project)
        result = runner.invoke(app, ["build", "-f", "react-js", "-o", "out"])
        assert result.exit_code == 0, result.output

        out = initialized_project / "out"
        assert (out / "react-js" / "Button.js").exists()
        assert (out / "css" / "button.css").exists()
        assert not (initialized_project / "dist").exists()

    def test_build_without_index(self, initialized_project: Path, monkeypatch: pytest.MonkeyPatch):
        config_path = initialized_project / PROJECT_DIR / CONFIG_FILE
        config = load_config(config_path)
        config.output.index = False
        save_config(config, config_path)

        monkeypatch.chdir(initialized_project)
        result = runner.invoke(app, ["build", "-f", "react-ts"])
        assert result.exit_code == 0, result.output
        assert (initialized_project / "dist" / "react-ts" / "Button.tsx").exists()
        assert not (initialized_project / "dist" / "react-ts" / "index.tsx").exists()

    def test_build_no_templates(self, initialized_project: Path, monkeypatch: pytest.MonkeyPatch):
        for path in (initialized_project / "templates").iterdir():
            path.unlink()
        monkeypatch.chdir(initialized_project)
        result = runner.invoke(app, ["build"])
        assert result.exit_code == 0
        assert "No templates to build" in result.output

    def test_build_unknown_format(self, initialized_project: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.chdir(initialized_project)
        result = runner.invoke(app, ["build", "-f", "handlebars"])
        assert result.exit_code == 1
        assert "Build failed" in result.output

    def test_build_reports_template_errors(
        self, initialized_project: Path, monkeypatch: pytest.MonkeyPatch
    ):
        (initialized_project / "templates" / "broken.html").write_text(
            "<p><mt-variable></mt-variable></p>", encoding="utf-8"
        )
        monkeypatch.chdir(initialized_project)
        result = runner.invoke(app, ["build", "-f", "mustache"])
        assert result.exit_code == 1
        assert "Failed to compile broken" in result.output
        assert not (initialized_project / "dist").exists()


class TestUsage:
    def test_prints_component_usage(self, tmp_path: Path):
        usage_file = tmp_path / "usage.json"
        usage_file.write_text(
            '[{"template": "Button", "variables": {"children": "Save"}}]', encoding="utf-8"
        )
        result = runner.invoke(app, ["usage", str(usage_file), "-f", "react-js"])
        assert result.exit_code == 0, result.output
        assert 'import Button from "./react-js/Button";' in result.output
        assert 'import "./css/Button.css";' in result.output
        assert "<Button>\nSave\n</Button>" in result.output

    def test_silverstripe_usage(self, tmp_path: Path):
        usage_file = tmp_path / "usage.json"
        usage_file.write_text('[{"template": "Button"}]', encoding="utf-8")
        result = runner.invoke(app, ["usage", str(usage_file), "-f", "silverstripe"])
        assert result.exit_code == 0, result.output
        assert "<:Button/>" in result.output

    def test_format_without_usage(self, tmp_path: Path):
        usage_file = tmp_path / "usage.json"
        usage_file.write_text('[{"template": "Button"}]', encoding="utf-8")
        result = runner.invoke(app, ["usage", str(usage_file), "-f", "mustache"])
        assert result.exit_code == 0
        assert "has no usage syntax" in result.output

    def test_invalid_json(self, tmp_path: Path):
        usage_file = tmp_path / "usage.json"
        usage_file.write_text("[{", encoding="utf-8")
        result = runner.invoke(app, ["usage", str(usage_file), "-f", "react-ts"])
        assert result.exit_code == 1
        assert "Cannot read" in result.output

    def test_malformed_tree(self, tmp_path: Path):
        usage_file = tmp_path / "usage.json"
        usage_file.write_text('{"template": "Button"}', encoding="utf-8")
        result = runner.invoke(app, ["usage", str(usage_file), "-f", "react-ts"])
        assert result.exit_code == 1
        assert "Usage failed" in result.output
