"""Remote node adapter over a browser-automation element handle.

Works with Playwright's ``ElementHandle`` (``playwright.async_api``) or any
object exposing the same two coroutines: ``get_attribute(name)`` and
``evaluate(expression, arg)``. Playwright itself is only needed by whoever
creates the handle.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Protocol

from metatemplate.nodes.base import NodeAccess

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Mapping

__all__ = ["BrowserNode", "ElementHandleLike"]

logger = logging.getLogger(__name__)

_ATTRIBUTE_NAMES_JS = "el => el.getAttributeNames()"
_SET_ATTRIBUTE_JS = "(el, [name, value]) => el.setAttribute(name, value)"
_REMOVE_ATTRIBUTE_JS = "(el, name) => el.removeAttribute(name)"
_CLASS_ADD_JS = "(el, name) => { const had = el.classList.contains(name); el.classList.add(name); return had; }"
_CLASS_REMOVE_JS = "(el, name) => { const had = el.classList.contains(name); el.classList.remove(name); return had; }"
_MATCHES_JS = "(el, selector) => { try { return el.matches(selector); } catch (e) { return false; } }"


class ElementHandleLike(Protocol):
    async def get_attribute(self, name: str) -> str | None: ...

    async def evaluate(self, expression: str, arg: Any = None) -> Any: ...


class BrowserNode(NodeAccess):
    """Node access through a live browser page.

    Use :meth:`create` so the authored attribute values are captured before
    anything is mutated::

        handle = await page.query_selector("input")
        node = await BrowserNode.create(handle)
    """

    def __init__(
        self,
        handle: ElementHandleLike,
        tag_name: str,
        original_attributes: Mapping[str, str] | None = None,
    ) -> None:
        self._handle = handle
        self._tag_name = tag_name.lower()
        self._original = dict(original_attributes or {})

    @classmethod
    async def create(cls, handle: ElementHandleLike) -> BrowserNode:
        tag_name = await handle.evaluate("el => el.tagName")
        names = await handle.evaluate(_ATTRIBUTE_NAMES_JS)
        original: dict[str, str] = {}
        for name in names:
            value = await handle.get_attribute(name)
            if value is not None:
                original[name] = value
        return cls(handle, str(tag_name), original)

    @property
    def tag_name(self) -> str:
        return self._tag_name

    async def get_attribute_names(self) -> list[str]:
        return list(await self._handle.evaluate(_ATTRIBUTE_NAMES_JS))

    async def get_attribute(self, name: str) -> str | None:
        return await self._handle.get_attribute(name)

    async def get_original_attribute(self, name: str) -> str | None:
        return self._original.get(name)

    async def set_attribute(self, name: str, value: str) -> Callable[[], Awaitable[None]]:
        previous = await self._handle.get_attribute(name)
        await self._handle.evaluate(_SET_ATTRIBUTE_JS, [name, value])

        async def undo() -> None:
            if previous is None:
                await self._handle.evaluate(_REMOVE_ATTRIBUTE_JS, name)
            else:
                await self._handle.evaluate(_SET_ATTRIBUTE_JS, [name, previous])

        return undo

    async def remove_attribute(self, name: str) -> Callable[[], Awaitable[None]]:
        previous = await self._handle.get_attribute(name)
        await self._handle.evaluate(_REMOVE_ATTRIBUTE_JS, name)

        async def undo() -> None:
            if previous is not None:
                await self._handle.evaluate(_SET_ATTRIBUTE_JS, [name, previous])

        return undo

    async def class_list_add(self, class_name: str) -> Callable[[], Awaitable[None]]:
        had = await self._handle.evaluate(_CLASS_ADD_JS, class_name)

        async def undo() -> None:
            if not had:
                await self._handle.evaluate(_CLASS_REMOVE_JS, class_name)

        return undo

    async def class_list_remove(self, class_name: str) -> Callable[[], Awaitable[None]]:
        had = await self._handle.evaluate(_CLASS_REMOVE_JS, class_name)

        async def undo() -> None:
            if had:
                await self._handle.evaluate(_CLASS_ADD_JS, class_name)

        return undo

    async def matches(self, selector: str) -> bool:
        return bool(await self._handle.evaluate(_MATCHES_JS, selector))
