"""Tests for metatemplate.writer module."""

from __future__ import annotations

from pathlib import Path

import pytest

from metatemplate.exceptions import OutputError
from metatemplate.writer import write_files


class TestWriteFiles:
    def test_writes_nested_paths(self, tmp_path: Path):
        files = {
            "mustache/button.mustache": "<button>Go</button>\n",
            "react-ts/Button.tsx": "export default Button;\n",
            "css/button.css": ".a {}\n",
        }
        written = write_files(files, tmp_path / "dist")

        assert written == [
            tmp_path / "dist" / "mustache" / "button.mustache",
            tmp_path / "dist" / "react-ts" / "Button.tsx",
            tmp_path / "dist" / "css" / "button.css",
        ]
        for relative, content in files.items():
            assert (tmp_path / "dist" / relative).read_text(encoding="utf-8") == content

    def test_overwrites_existing(self, tmp_path: Path):
        write_files({"a/b.txt": "old"}, tmp_path)
        write_files({"a/b.txt": "new"}, tmp_path)
        assert (tmp_path / "a" / "b.txt").read_text(encoding="utf-8") == "new"

    def test_writes_utf8(self, tmp_path: Path):
        write_files({"t.mustache": "Māori\n"}, tmp_path)
        assert (tmp_path / "t.mustache").read_bytes() == "Māori\n".encode()

    def test_empty_mapping(self, tmp_path: Path):
        assert write_files({}, tmp_path / "dist") == []

    @pytest.mark.parametrize("relative", ["", "/etc/passwd", "../outside.txt", "a/../../b.txt"])
    def test_refuses_escaping_paths(self, tmp_path: Path, relative: str):
        with pytest.raises(OutputError, match="outside the output directory"):
            write_files({"ok.txt": "x", relative: "y"}, tmp_path / "dist")
        assert not (tmp_path / "dist").exists()

    def test_os_error_wrapped(self, tmp_path: Path):
        (tmp_path / "blocker").write_text("not a directory", encoding="utf-8")
        with pytest.raises(OutputError, match="Failed to write"):
            write_files({"blocker/file.txt": "x"}, tmp_path)
