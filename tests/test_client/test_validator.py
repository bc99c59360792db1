"""Tests for ramlconsole.client.validator."""

from __future__ import annotations

from typing import Any

import pytest

from ramlconsole.client.validator import ValidationResult, Validator
from ramlconsole.exceptions import DefinitionError
from ramlconsole.models import NamedParameter


def _errors(definition: dict[str, Any], value: Any) -> Any:
    return Validator.from_definition(definition).validate(value)


# ---------------------------------------------------------------------------
# Rule selection
# ---------------------------------------------------------------------------


class TestRuleSelection:
    def test_string_defaults(self) -> None:
        assert Validator.from_definition({}).rule_names == []

    def test_required_first(self) -> None:
        validator = Validator.from_definition({"type": "integer", "required": True, "minimum": 1})
        assert validator.rule_names == ["required", "integer", "minimum"]

    def test_zero_bound_is_not_registered(self) -> None:
        validator = Validator.from_definition({"type": "integer", "minimum": 0})
        assert validator.rule_names == ["integer"]

    def test_unknown_type_has_no_rules(self) -> None:
        assert Validator.from_definition({"type": "file", "required": True}).rule_names == []

    def test_named_parameter(self) -> None:
        parameter = NamedParameter.model_validate({"minLength": 2, "maxLength": 4})
        assert Validator.from_definition(parameter).rule_names == ["minLength", "maxLength"]

    def test_missing_definition(self) -> None:
        with pytest.raises(DefinitionError):
            Validator.from_definition(None)


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------


class TestRules:
    @pytest.mark.parametrize(
        "definition, value, expected",
        [
            ({"required": True}, "", ["required"]),
            ({"required": True}, "x", None),
            ({"type": "integer"}, "42", None),
            ({"type": "integer"}, "-7", None),
            ({"type": "integer"}, "4.2", ["integer"]),
            ({"type": "integer"}, "007", ["integer"]),
            ({"type": "number"}, "4.2", None),
            ({"type": "number"}, "1e10", None),
            ({"type": "number"}, "abc", ["number"]),
            ({"type": "boolean"}, "true", None),
            ({"type": "boolean"}, "True", ["boolean"]),
            ({"type": "date"}, "Sun, 06 Nov 1994 08:49:37 GMT", None),
            ({"type": "date"}, "1994-11-06", ["date"]),
            ({"enum": ["a", "b"]}, "c", ["enum"]),
            ({"enum": [1, 2]}, "2", None),
            ({"pattern": "^[a-z]+$"}, "abc", None),
            ({"pattern": "^[a-z]+$"}, "ABC", ["pattern"]),
            ({"pattern": "[0-9]"}, "a1b", None),
            ({"minLength": 3}, "ab", ["minLength"]),
            ({"maxLength": 3}, "abcd", ["maxLength"]),
            ({"type": "integer", "minimum": 1, "maximum": 10}, "11", ["maximum"]),
            ({"type": "integer", "minimum": 5}, "4", ["minimum"]),
            ({"type": "number", "maximum": 2.5}, "2.5", None),
        ],
    )
    def test_rule_outcomes(self, definition: dict[str, Any], value: Any, expected: Any) -> None:
        assert _errors(definition, value) == expected

    def test_empty_string_passes_everything_but_required(self) -> None:
        definition = {"type": "integer", "minimum": 1, "maximum": 10}
        assert _errors(definition, "") is None
        assert _errors({**definition, "required": True}, "") == ["required"]

    def test_none_is_exempt(self) -> None:
        assert _errors({"type": "number", "minimum": 3}, None) is None

    def test_non_numeric_fails_bounds(self) -> None:
        assert _errors({"type": "integer", "minimum": 1, "maximum": 9}, "x") == [
            "integer",
            "minimum",
            "maximum",
        ]

    def test_errors_keep_registration_order(self) -> None:
        definition = {"required": True, "minLength": 5, "pattern": "^[0-9]+$"}
        assert _errors(definition, "ab") == ["minLength", "pattern"]


class TestCheck:
    def test_valid(self) -> None:
        result = Validator.from_definition({"type": "integer"}).check("3")
        assert result == ValidationResult([])
        assert result.is_valid
        assert bool(result)

    def test_invalid(self) -> None:
        result = Validator.from_definition({"type": "integer"}).check("x")
        assert result.errors == ["integer"]
        assert not result
