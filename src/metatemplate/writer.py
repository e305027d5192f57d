"""Output artifact writer for metatemplate.

Writes the ``{relative path: content}`` maps produced by the pipeline into
an output directory.
"""

from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING

from metatemplate.exceptions import OutputError

if TYPE_CHECKING:
    from collections.abc import Mapping

__all__ = ["write_files"]

logger = logging.getLogger(__name__)


def _target(output_dir: Path, relative: str) -> Path:
    """Resolve ``relative`` under ``output_dir``, refusing paths that escape it."""
    parts = PurePosixPath(relative).parts
    if not parts or PurePosixPath(relative).is_absolute() or ".." in parts:
        raise OutputError(f"Refusing to write outside the output directory: {relative!r}")
    return output_dir.joinpath(*parts)


def write_files(files: Mapping[str, str], output_dir: Path) -> list[Path]:
    """Write every artifact in ``files`` below ``output_dir``.

    Parent directories are created as needed and existing files are
    overwritten.

    Args:
        files: Mapping of POSIX-style relative path to file content.
        output_dir: Directory the relative paths are resolved against.

    Returns:
        The written paths, in the order of ``files``.

    Raises:
        OutputError: If a path escapes ``output_dir`` or a file cannot be
            written.
    """
    targets = [(_target(output_dir, relative), content) for relative, content in files.items()]

    written: list[Path] = []
    for path, content in targets:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except OSError as e:
            logger.error("Failed to write %s: %s", path, e)
            raise OutputError(f"Failed to write {path}: {e}") from e
        logger.debug("Wrote %s", path)
        written.append(path)

    logger.info("Wrote %d files to %s", len(written), output_dir)
    return written
