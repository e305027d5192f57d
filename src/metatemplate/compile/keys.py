"""Dynamic-key registry.

One registry belongs to one format instance and lives for one template
compilation. It hands out collision-free variable names and remembers the
declared type of each one so a format can emit type declarations later.
Example: registering ``"disabled"`` twice yields ``"disabled"`` then
``"disabled2"``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from metatemplate.exceptions import DynamicKeyError

if TYPE_CHECKING:
    from collections.abc import Container, Iterator

    from metatemplate.types import RegisteredType

__all__ = ["DynamicKeyRegistry", "KeyEntry", "unique_key"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeyEntry:
    """What the registry knows about one assigned key."""

    type: RegisteredType
    optional: bool
    tag_name: str | None = None


def unique_key(name: str, taken: Container[str]) -> str:
    """Return ``name`` or the first ``name2``, ``name3`` … not in ``taken``."""
    if name not in taken:
        return name
    suffix = 2
    while f"{name}{suffix}" in taken:
        suffix += 1
    return f"{name}{suffix}"


class DynamicKeyRegistry:
    """Collision-free name assignment for one compilation run.

    Usage::

        keys = DynamicKeyRegistry()
        keys.register("onClick", KeyTag.ONCLICK, True, "button")   # "onClick"
        keys.register("onClick", KeyTag.ONCLICK, True, "a")        # "onClick2"
        keys.share("hintId", ValueType.STRING, True)               # "hintId"
        keys.share("hintId", ValueType.STRING, True)               # "hintId"
    """

    def __init__(self) -> None:
        self._entries: dict[str, KeyEntry] = {}

    def register(
        self,
        name: str,
        key_type: RegisteredType,
        optional: bool,
        tag_name: str | None = None,
    ) -> str:
        """Register a new key, suffixing the name if it is already taken.

        Raises:
            DynamicKeyError: If ``name`` is empty or blank.
        """
        proposed = self._validate(name, key_type, tag_name)
        key = unique_key(proposed, self._entries)
        self._entries[key] = KeyEntry(type=key_type, optional=optional, tag_name=tag_name)
        logger.debug("Registered dynamic key %s (%s, optional=%s)", key, key_type, optional)
        return key

    def share(
        self,
        name: str,
        key_type: RegisteredType,
        optional: bool,
        tag_name: str | None = None,
    ) -> str:
        """Bind a template-level identity, reusing the key if it already exists.

        Element ids, ``mt-if`` keys and ``mt-variable`` keys name one variable
        wherever they appear, so they are shared rather than suffixed. A shared
        key remains optional only while every binding is optional.

        Raises:
            DynamicKeyError: If ``name`` is empty or blank.
        """
        key = self._validate(name, key_type, tag_name)
        existing = self._entries.get(key)
        if existing is None:
            self._entries[key] = KeyEntry(type=key_type, optional=optional, tag_name=tag_name)
            logger.debug("Registered shared key %s (%s, optional=%s)", key, key_type, optional)
            return key

        if existing.type != key_type:
            logger.debug(
                "Shared key %s already declared as %s; ignoring %s", key, existing.type, key_type
            )
        if existing.optional and not optional:
            self._entries[key] = replace(existing, optional=False)
        return key

    def get(self, key: str) -> KeyEntry | None:
        return self._entries.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def keys(self) -> list[str]:
        """Assigned keys in registration order."""
        return list(self._entries)

    def entries(self) -> Iterator[tuple[str, KeyEntry]]:
        """``(key, entry)`` pairs in registration order."""
        yield from self._entries.items()

    @staticmethod
    def _validate(name: str, key_type: RegisteredType, tag_name: str | None) -> str:
        if not name or not name.strip():
            raise DynamicKeyError(
                f"Required key but given {name!r} (type={key_type!r}, tag={tag_name!r})"
            )
        return name.strip()
