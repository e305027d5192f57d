"""Identifier helpers shared by the compiler and the formats."""

from __future__ import annotations

import re

__all__ = ["camel_case", "pascal_case"]

_WORD_SPLIT = re.compile(r"[^0-9A-Za-z]+")


def camel_case(text: str) -> str:
    """Convert ``"hint-id"`` / ``"hint id"`` / ``"hintId"`` to ``"hintId"``.

    Existing inner capitals are kept, so an identifier that is already
    camel-cased passes through unchanged.
    """
    words = [word for word in _WORD_SPLIT.split(text) if word]
    if not words:
        return ""
    first, rest = words[0], words[1:]
    return first[:1].lower() + first[1:] + "".join(w[:1].upper() + w[1:] for w in rest)


def pascal_case(text: str) -> str:
    """Convert ``"list-item"`` to ``"ListItem"``."""
    camel = camel_case(text)
    return camel[:1].upper() + camel[1:]
