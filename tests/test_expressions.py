"""Tests for metatemplate.compile.expressions module."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from metatemplate.compile.expressions import parse_attribute_value, parse_expression
from metatemplate.exceptions import ExpressionError
from metatemplate.types import EnumOption, ValueType

if TYPE_CHECKING:
    from metatemplate.compile.keys import DynamicKeyRegistry


class TestParseExpression:
    def test_plain_key(self):
        expression = parse_expression(" url ")
        assert expression.name == "url"
        assert expression.optional is False
        assert expression.options == ()

    def test_optional_single_option(self):
        expression = parse_expression(" isReversed?: g-flex-reverse ")
        assert expression.name == "isReversed"
        assert expression.optional is True
        assert expression.options == (EnumOption(value="g-flex-reverse", name="g-flex-reverse"),)

    def test_named_options(self):
        expression = parse_expression("level: g-alert--info as info | g-alert--error as error")
        assert expression.options == (
            EnumOption(value="g-alert--info", name="info"),
            EnumOption(value="g-alert--error", name="error"),
        )

    def test_option_without_alias_uses_value_as_name(self):
        expression = parse_expression("size: small | large as big")
        assert expression.options[0] == EnumOption(value="small", name="small")
        assert expression.options[1] == EnumOption(value="large", name="big")

    @pytest.mark.parametrize("source", ["", "   ", "?", " : foo", "?: foo"])
    def test_missing_name_raises(self, source: str):
        with pytest.raises(ExpressionError, match="Missing key name"):
            parse_expression(source)


class TestParseAttributeValue:
    def test_no_markers_is_static(self, keys: DynamicKeyRegistry):
        parsed = parse_attribute_value("btn btn--primary", keys, "button")
        assert parsed.value == "btn btn--primary"
        assert parsed.dynamic_keys == ()
        assert len(keys) == 0

    def test_string_key(self, keys: DynamicKeyRegistry):
        parsed = parse_attribute_value("{{ url }}", keys, "a")
        assert parsed.value == ""
        (dynamic_key,) = parsed.dynamic_keys
        assert dynamic_key.key == "url"
        assert dynamic_key.type == ValueType.STRING
        assert dynamic_key.optional is False
        assert keys.get("url").tag_name == "a"

    def test_single_option_is_boolean(self, keys: DynamicKeyRegistry):
        parsed = parse_attribute_value("g-flex-row {{ isReversed?: g-flex-reverse }}", keys)
        assert parsed.value == "g-flex-row"
        (dynamic_key,) = parsed.dynamic_keys
        assert dynamic_key.type == ValueType.BOOLEAN
        assert dynamic_key.if_true_value == "g-flex-reverse"
        assert dynamic_key.optional is True
        assert keys.get("isReversed").type == ValueType.BOOLEAN

    def test_several_options_are_an_enumeration(self, keys: DynamicKeyRegistry):
        parsed = parse_attribute_value(
            "g-alert {{ level: g-alert--info as info | g-alert--error as error }}", keys
        )
        assert parsed.value == "g-alert"
        (dynamic_key,) = parsed.dynamic_keys
        assert [option.name for option in dynamic_key.options] == ["info", "error"]
        assert keys.get("level").type == dynamic_key.options

    def test_markers_in_order_with_static_text_kept(self, keys: DynamicKeyRegistry):
        parsed = parse_attribute_value("{{ first }} middle {{ second? }}", keys)
        assert parsed.value == "middle"
        assert [dk.key for dk in parsed.dynamic_keys] == ["first", "second"]
        assert keys.keys() == ["first", "second"]

    def test_taken_name_gets_suffix(self, keys: DynamicKeyRegistry):
        keys.register("url", ValueType.STRING, False)
        parsed = parse_attribute_value("{{ url }}", keys)
        assert parsed.dynamic_keys[0].key == "url2"

    def test_invalid_marker_raises(self, keys: DynamicKeyRegistry):
        with pytest.raises(ExpressionError):
            parse_attribute_value("prefix {{ }}", keys)
