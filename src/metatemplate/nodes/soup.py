"""In-process node adapter over a BeautifulSoup ``Tag``."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from soupsieve import SelectorSyntaxError

from metatemplate.nodes.base import NodeAccess

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from bs4 import Tag

__all__ = ["SoupNode"]

logger = logging.getLogger(__name__)


def _as_text(value: object) -> str:
    # bs4 returns multi-valued attributes such as class as lists
    if isinstance(value, (list, tuple)):
        return " ".join(str(v) for v in value)
    return str(value)


class SoupNode(NodeAccess):
    """Wraps a parsed ``bs4.Tag``.

    The attribute values seen at construction are kept as the originals, so
    ``get_original_attribute`` keeps returning the authored value while the
    compiler temporarily rewrites the live tag.
    """

    def __init__(self, tag: Tag) -> None:
        self._tag = tag
        self._original = {name: _as_text(value) for name, value in tag.attrs.items()}

    @property
    def tag(self) -> Tag:
        return self._tag

    @property
    def tag_name(self) -> str:
        return self._tag.name.lower()

    async def get_attribute_names(self) -> list[str]:
        return list(self._tag.attrs)

    async def get_attribute(self, name: str) -> str | None:
        value = self._tag.get(name)
        if value is None:
            return None
        return _as_text(value)

    async def get_original_attribute(self, name: str) -> str | None:
        return self._original.get(name)

    async def set_attribute(self, name: str, value: str) -> Callable[[], Awaitable[None]]:
        previous = await self.get_attribute(name)
        self._tag[name] = value

        async def undo() -> None:
            if previous is None:
                self._tag.attrs.pop(name, None)
            else:
                self._tag[name] = previous

        return undo

    async def remove_attribute(self, name: str) -> Callable[[], Awaitable[None]]:
        previous = await self.get_attribute(name)
        self._tag.attrs.pop(name, None)

        async def undo() -> None:
            if previous is not None:
                self._tag[name] = previous

        return undo

    async def class_list_add(self, class_name: str) -> Callable[[], Awaitable[None]]:
        classes = (await self.get_attribute("class") or "").split()
        if class_name in classes:

            async def noop() -> None:
                return None

            return noop
        self._tag["class"] = " ".join([*classes, class_name])

        async def undo() -> None:
            await self.class_list_remove(class_name)

        return undo

    async def class_list_remove(self, class_name: str) -> Callable[[], Awaitable[None]]:
        classes = (await self.get_attribute("class") or "").split()
        if class_name not in classes:

            async def noop() -> None:
                return None

            return noop
        self._tag["class"] = " ".join(c for c in classes if c != class_name)

        async def undo() -> None:
            await self.class_list_add(class_name)

        return undo

    async def matches(self, selector: str) -> bool:
        try:
            return bool(self._tag.css.match(selector))
        except SelectorSyntaxError:
            logger.debug("Selector %r is not matchable in-process, skipping", selector)
            return False
