"""Tests for metatemplate.compile.defaults module: the tag default-attribute ruleset."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest

from metatemplate.compile.defaults import apply_tag_defaults, data_type_for, rules_for
from metatemplate.exceptions import DuplicateAttributeError
from metatemplate.types import DynamicKey, KeyTag, TemplateAttribute, ValueType

if TYPE_CHECKING:
    from metatemplate.compile.keys import DynamicKeyRegistry


def _by_key(attributes: list[TemplateAttribute]) -> dict[str, TemplateAttribute]:
    return {attribute.key: attribute for attribute in attributes}


def _static(key: str, value: str) -> TemplateAttribute:
    return TemplateAttribute(key=key, value=value)


class TestDataTypeFor:
    @pytest.mark.parametrize(
        ("tag", "attribute", "expected"),
        [
            ("input", "disabled", ValueType.BOOLEAN),
            ("details", "open", ValueType.BOOLEAN),
            ("td", "colspan", ValueType.NUMBER),
            ("textarea", "rows", ValueType.NUMBER),
            ("button", "onclick", ValueType.FUNCTION),
            ("a", "href", ValueType.STRING),
            ("div", "class", ValueType.STRING),
        ],
    )
    def test_inference(self, tag: str, attribute: str, expected: ValueType):
        assert data_type_for(tag, attribute) == expected


class TestInputNameRequiredness:
    @pytest.mark.parametrize(
        ("input_type", "has_name", "expected_optional"),
        [
            (None, False, False),
            (None, True, False),
            ("text", False, False),
            ("text", True, False),
            ("email", False, False),
            ("checkbox", False, False),
            ("radio", True, False),
            ("submit", False, True),
            ("submit", True, True),
            ("image", False, True),
            ("button", False, True),
            ("button", True, True),
        ],
    )
    def test_truth_table(
        self,
        keys: DynamicKeyRegistry,
        input_type: str | None,
        has_name: bool,
        expected_optional: bool,
    ):
        authored = []
        if input_type is not None:
            authored.append(_static("type", input_type))
        if has_name:
            authored.append(_static("name", "field-name"))

        attributes = _by_key(apply_tag_defaults("input", authored, keys))

        name = attributes["name"]
        (dynamic_key,) = name.dynamic_keys
        assert dynamic_key.optional is expected_optional
        assert keys.get(dynamic_key.key).optional is expected_optional
        assert name.is_omitted_if_empty is True
        if has_name:
            assert dynamic_key.key == "fieldName"


class TestInputDefaults:
    def test_bare_input(self, keys: DynamicKeyRegistry):
        attributes = _by_key(apply_tag_defaults("input", [], keys))

        assert list(attributes) == [
            "disabled",
            "readonly",
            "autofocus",
            "name",
            "value",
            "min",
            "max",
            "type",
            "spellcheck",
            "maxlength",
            "autocomplete",
        ]
        assert keys.get("type").type == KeyTag.INPUT_TYPE
        assert keys.get("type").optional is False
        assert keys.get("autoComplete").type == KeyTag.INPUT_AUTOCOMPLETE
        assert attributes["maxlength"].data_type == ValueType.NUMBER
        assert attributes["disabled"].data_type == ValueType.BOOLEAN

    def test_checkbox(self, keys: DynamicKeyRegistry):
        authored = [_static("name", "agree"), _static("type", "checkbox"), _static("value", "yes")]
        attributes = _by_key(apply_tag_defaults("input", authored, keys))

        assert attributes["checked"].dynamic_keys[0].type == ValueType.BOOLEAN
        assert attributes["name"].dynamic_keys[0].key == "agree"
        assert attributes["value"].dynamic_keys[0].key == "yes"
        assert attributes["type"].value == "checkbox"
        assert attributes["type"].is_static
        for absent in ("maxlength", "min", "max", "spellcheck", "autocomplete"):
            assert absent not in attributes

    def test_file_input_has_no_value(self, keys: DynamicKeyRegistry):
        attributes = _by_key(apply_tag_defaults("input", [_static("type", "file")], keys))
        assert "value" not in attributes
        assert "maxlength" not in attributes
        assert "name" in attributes

    def test_number_input_has_range_not_maxlength(self, keys: DynamicKeyRegistry):
        attributes = _by_key(apply_tag_defaults("input", [_static("type", "number")], keys))
        assert attributes["min"].data_type == ValueType.NUMBER
        assert attributes["max"].data_type == ValueType.NUMBER
        assert "maxlength" not in attributes

    def test_text_input_gets_maxlength(self, keys: DynamicKeyRegistry):
        attributes = _by_key(apply_tag_defaults("input", [_static("type", "text")], keys))
        assert attributes["maxlength"].dynamic_keys[0].key == "maxLength"
        assert "min" not in attributes

    def test_incompatible_maxlength_warns_and_is_kept(
        self, keys: DynamicKeyRegistry, caplog: pytest.LogCaptureFixture
    ):
        authored = [_static("maxlength", "5"), _static("type", "number")]
        with caplog.at_level(logging.WARNING, logger="metatemplate.compile.defaults"):
            attributes = _by_key(apply_tag_defaults("input", authored, keys))

        assert "incompatible" in caplog.text
        assert attributes["maxlength"].value == "5"
        assert attributes["maxlength"].is_omitted_if_empty is True

    def test_authored_variable_is_left_alone(self, keys: DynamicKeyRegistry):
        disabled = TemplateAttribute(
            key="disabled",
            data_type=ValueType.BOOLEAN,
            dynamic_keys=(DynamicKey(key="isLocked", type=ValueType.STRING, optional=False),),
        )
        attributes = _by_key(apply_tag_defaults("input", [disabled], keys))
        assert attributes["disabled"] is disabled
        assert "disabled" not in keys


class TestTableRules:
    def test_bare_anchor(self, keys: DynamicKeyRegistry):
        attributes = apply_tag_defaults("a", [], keys)

        assert [a.key for a in attributes] == ["href", "rel", "target"]
        href = attributes[0]
        assert href.dynamic_keys[0].optional is False
        assert href.is_omitted_if_empty is True
        assert keys.get("href").optional is False
        assert keys.get("rel").optional is True
        assert keys.get("target").type == KeyTag.A_TARGET

    def test_authored_literal_kept(self, keys: DynamicKeyRegistry):
        attributes = _by_key(apply_tag_defaults("a", [_static("href", "/home")], keys))
        assert attributes["href"].value == "/home"
        assert attributes["href"].is_static
        assert "href" not in keys

    def test_authored_attributes_keep_position(self, keys: DynamicKeyRegistry):
        authored = [_static("class", "link"), _static("href", "/home")]
        attributes = apply_tag_defaults("a", authored, keys)
        assert [a.key for a in attributes] == ["class", "href", "rel", "target"]

    def test_textarea_key_names(self, keys: DynamicKeyRegistry):
        apply_tag_defaults("textarea", [], keys)
        assert keys.keys() == [
            "name",
            "disabled",
            "readOnly",
            "rows",
            "cols",
            "autoFocus",
            "spellCheck",
            "autoComplete",
            "maxLength",
            "value",
        ]
        assert keys.get("rows").type == ValueType.NUMBER

    def test_video_crossorigin_is_an_enumeration(self, keys: DynamicKeyRegistry):
        attributes = _by_key(apply_tag_defaults("video", [], keys))
        options = attributes["crossorigin"].dynamic_keys[0].options
        assert [o.name for o in options] == ["anonymous", "use-credentials"]

    def test_unknown_tag_unchanged(self, keys: DynamicKeyRegistry):
        authored = [_static("class", "box")]
        assert apply_tag_defaults("div", authored, keys) == authored
        assert len(keys) == 0

    def test_rules_for(self):
        assert [d.attribute for d in rules_for("IMG")][:1] == ["src"]
        assert rules_for("input") == ()

    @pytest.mark.parametrize("tag", ["a", "input", "div"])
    def test_duplicate_authored_attributes_raise(self, keys: DynamicKeyRegistry, tag: str):
        authored = [_static("class", "one"), _static("class", "two")]
        with pytest.raises(DuplicateAttributeError, match="Duplicate attribute 'class'"):
            apply_tag_defaults(tag, authored, keys)
