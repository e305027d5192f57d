"""Node-access capability consumed by the compiler.

The compiler never inspects which adapter it has. Every accessor is async so
that an in-process DOM and a remote browser handle look the same, and every
mutation returns an undo action so callers can roll changes back.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable
    from types import TracebackType

__all__ = ["MutationScope", "NodeAccess"]

logger = logging.getLogger(__name__)


class NodeAccess(ABC):
    """Attribute-level access to one element."""

    @property
    @abstractmethod
    def tag_name(self) -> str:
        """Lower-cased tag name."""

    @abstractmethod
    async def get_attribute_names(self) -> list[str]:
        """Attribute names in source order."""

    @abstractmethod
    async def get_attribute(self, name: str) -> str | None:
        """Current value of ``name``, or None when absent."""

    @abstractmethod
    async def get_original_attribute(self, name: str) -> str | None:
        """Value of ``name`` before any transformation, or None if unknown."""

    @abstractmethod
    async def set_attribute(self, name: str, value: str) -> Callable[[], Awaitable[None]]:
        """Set ``name`` and return an action restoring the previous state."""

    @abstractmethod
    async def remove_attribute(self, name: str) -> Callable[[], Awaitable[None]]:
        """Remove ``name`` and return an action restoring it."""

    @abstractmethod
    async def class_list_add(self, class_name: str) -> Callable[[], Awaitable[None]]:
        """Add a class and return an action removing it again."""

    @abstractmethod
    async def class_list_remove(self, class_name: str) -> Callable[[], Awaitable[None]]:
        """Remove a class and return an action adding it back."""

    @abstractmethod
    async def matches(self, selector: str) -> bool:
        """Whether the element currently matches a CSS selector."""

    async def read_attribute(self, name: str) -> str:
        """Original value when known, otherwise the current value, else ``""``."""
        original = await self.get_original_attribute(name)
        if original:
            return original
        return await self.get_attribute(name) or ""


class MutationScope:
    """Collects undo actions and replays them in reverse on exit.

    Usage::

        async with MutationScope() as scope:
            await scope.track(node.class_list_add("is-open"))
            matched = await node.matches(".is-open")
        # the class is gone again here, even if matches() raised
    """

    def __init__(self) -> None:
        self._undos: list[Callable[[], Awaitable[None]]] = []

    async def track(
        self, mutation: Awaitable[Callable[[], Awaitable[None]]]
    ) -> Callable[[], Awaitable[None]]:
        undo = await mutation
        self._undos.append(undo)
        return undo

    async def rollback(self) -> None:
        while self._undos:
            undo = self._undos.pop()
            await undo()

    async def __aenter__(self) -> MutationScope:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.rollback()
