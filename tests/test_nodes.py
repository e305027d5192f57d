"""Tests for metatemplate.nodes: SoupNode, BrowserNode and MutationScope."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

import pytest

from metatemplate.nodes import BrowserNode, MutationScope

if TYPE_CHECKING:
    from collections.abc import Callable

    from metatemplate.nodes.soup import SoupNode


class FakeHandle:
    """In-memory stand-in for a Playwright ElementHandle."""

    def __init__(self, tag_name: str, attributes: dict[str, str]) -> None:
        self.tag_name = tag_name
        self.attributes = dict(attributes)
        self.evaluated: list[str] = []

    async def get_attribute(self, name: str) -> str | None:
        return self.attributes.get(name)

    async def evaluate(self, expression: str, arg: Any = None) -> Any:
        self.evaluated.append(expression)
        if "tagName" in expression:
            return self.tag_name.upper()
        if "getAttributeNames" in expression:
            return list(self.attributes)
        if "classList.add(" in expression:
            return self._toggle_class(arg, add=True)
        if "classList.remove(" in expression:
            return self._toggle_class(arg, add=False)
        if "removeAttribute" in expression:
            self.attributes.pop(arg, None)
            return None
        if "setAttribute" in expression:
            name, value = arg
            self.attributes[name] = value
            return None
        if "matches" in expression:
            return arg.startswith(".") and arg[1:] in self._classes()
        raise AssertionError(f"unexpected expression {expression!r}")

    def _classes(self) -> list[str]:
        return self.attributes.get("class", "").split()

    def _toggle_class(self, name: str, *, add: bool) -> bool:
        classes = self._classes()
        had = name in classes
        if add and not had:
            classes.append(name)
        if not add:
            classes = [c for c in classes if c != name]
        self.attributes["class"] = " ".join(classes)
        return had


def _run(coro: Any) -> Any:
    return asyncio.run(coro)


class TestSoupNode:
    def test_reads_attributes(self, element: Callable[[str], SoupNode]):
        node = element('<INPUT Type="text" class="a  b">')
        assert node.tag_name == "input"
        assert _run(node.get_attribute_names()) == ["type", "class"]
        assert _run(node.get_attribute("class")) == "a  b"
        assert _run(node.get_attribute("missing")) is None

    def test_original_survives_mutation(self, element: Callable[[str], SoupNode]):
        node = element('<div title="{{ label }}"></div>')
        _run(node.set_attribute("title", "changed"))
        assert _run(node.get_attribute("title")) == "changed"
        assert _run(node.get_original_attribute("title")) == "{{ label }}"
        assert _run(node.read_attribute("title")) == "{{ label }}"

    def test_read_attribute_falls_back_to_empty(self, element: Callable[[str], SoupNode]):
        node = element("<div></div>")
        assert _run(node.read_attribute("title")) == ""

    def test_set_attribute_undo(self, element: Callable[[str], SoupNode]):
        node = element('<div title="before"></div>')

        async def scenario() -> tuple[str | None, str | None, str | None]:
            undo_existing = await node.set_attribute("title", "after")
            undo_new = await node.set_attribute("role", "note")
            await undo_new()
            await undo_existing()
            return (
                await node.get_attribute("title"),
                await node.get_attribute("role"),
                await node.get_original_attribute("role"),
            )

        assert _run(scenario()) == ("before", None, None)

    def test_remove_attribute_undo(self, element: Callable[[str], SoupNode]):
        node = element('<div hidden="hidden"></div>')

        async def scenario() -> tuple[str | None, str | None]:
            undo = await node.remove_attribute("hidden")
            removed = await node.get_attribute("hidden")
            await undo()
            return removed, await node.get_attribute("hidden")

        assert _run(scenario()) == (None, "hidden")

    def test_class_list(self, element: Callable[[str], SoupNode]):
        node = element('<div class="a"></div>')

        async def scenario() -> list[str | None]:
            seen = []
            undo_add = await node.class_list_add("b")
            seen.append(await node.get_attribute("class"))
            undo_remove = await node.class_list_remove("a")
            seen.append(await node.get_attribute("class"))
            await undo_remove()
            await undo_add()
            seen.append(await node.get_attribute("class"))
            return seen

        assert _run(scenario()) == ["a b", "b", "a"]

    def test_class_list_add_existing_is_noop(self, element: Callable[[str], SoupNode]):
        node = element('<div class="a"></div>')

        async def scenario() -> str | None:
            undo = await node.class_list_add("a")
            await undo()
            return await node.get_attribute("class")

        assert _run(scenario()) == "a"

    def test_matches(self, element: Callable[[str], SoupNode]):
        node = element('<p class="a b" id="x"></p>')
        assert _run(node.matches("p.a.b")) is True
        assert _run(node.matches("#x")) is True
        assert _run(node.matches(".c")) is False

    def test_invalid_selector_does_not_match(self, element: Callable[[str], SoupNode]):
        node = element('<p class="a"></p>')
        assert _run(node.matches("p[")) is False


class TestMutationScope:
    def test_rolls_back_in_reverse(self, element: Callable[[str], SoupNode]):
        node = element('<div class="a"></div>')

        async def scenario() -> tuple[bool, str | None]:
            async with MutationScope() as scope:
                await scope.track(node.set_attribute("class", "a b"))
                await scope.track(node.class_list_add("c"))
                matched = await node.matches(".b.c")
            return matched, await node.get_attribute("class")

        assert _run(scenario()) == (True, "a")

    def test_rolls_back_on_error(self, element: Callable[[str], SoupNode]):
        node = element("<div></div>")

        async def scenario() -> None:
            async with MutationScope() as scope:
                await scope.track(node.set_attribute("title", "temporary"))
                raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            _run(scenario())
        assert _run(node.get_attribute("title")) is None


class TestBrowserNode:
    def test_create_captures_originals(self):
        handle = FakeHandle("input", {"type": "text", "name": "{{ field }}"})
        node = _run(BrowserNode.create(handle))

        assert node.tag_name == "input"
        assert _run(node.get_attribute_names()) == ["type", "name"]
        assert _run(node.get_original_attribute("name")) == "{{ field }}"

    def test_set_and_undo(self):
        handle = FakeHandle("div", {"title": "before"})
        node = _run(BrowserNode.create(handle))

        async def scenario() -> None:
            undo_existing = await node.set_attribute("title", "after")
            undo_new = await node.set_attribute("role", "note")
            assert handle.attributes == {"title": "after", "role": "note"}
            await undo_new()
            await undo_existing()

        _run(scenario())
        assert handle.attributes == {"title": "before"}

    def test_remove_and_undo(self):
        handle = FakeHandle("div", {"hidden": ""})
        node = BrowserNode(handle, "div")

        async def scenario() -> None:
            undo = await node.remove_attribute("hidden")
            assert "hidden" not in handle.attributes
            await undo()

        _run(scenario())
        assert handle.attributes == {"hidden": ""}

    def test_class_list_undo_respects_existing(self):
        handle = FakeHandle("div", {"class": "a"})
        node = BrowserNode(handle, "DIV")

        async def scenario() -> None:
            async with MutationScope() as scope:
                await scope.track(node.class_list_add("a"))
                await scope.track(node.class_list_add("b"))
                assert await node.matches(".b")

        _run(scenario())
        assert node.tag_name == "div"
        assert handle.attributes["class"] == "a"

    def test_read_attribute_uses_live_value_without_original(self):
        handle = FakeHandle("a", {"href": "/home"})
        node = BrowserNode(handle, "a")
        assert _run(node.read_attribute("href")) == "/home"
