"""Client-side validation of a single named-parameter value.

A :class:`Validator` is built from a parameter definition and holds an
ordered set of named rules selected by the definition's ``type``. Values are
the strings a user typed; the empty string passes every rule except
``required`` so optional fields may be left blank.

Bound rules (``minimum``, ``maximum``, ``minLength``, ``maxLength``) and the
``enum``/``pattern`` rules are registered only when the bound is truthy, so
a bound of ``0`` is never enforced.

Validation never raises. :meth:`Validator.validate` returns the failed rule
names, or ``None`` when everything passes; :meth:`Validator.check` wraps the
same outcome in a :class:`ValidationResult`.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional

from ramlconsole.exceptions import DefinitionError

Rule = Callable[[Any], bool]

INTEGER_RE = re.compile(r"^-?(0|[1-9][0-9]*)$")
NUMBER_RE = re.compile(r"^-?(0|[1-9][0-9]*)(\.[0-9]*)?([eE][-+]?[0-9]+)?$")
RFC1123_RE = re.compile(
    r"^(Mon|Tue|Wed|Thu|Fri|Sat|Sun), \d{2} "
    r"(Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec) "
    r"\d{4} \d{2}:\d{2}:\d{2} GMT$"
)


def _as_number(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


# --- Rules ---


def required(value: Any) -> bool:
    return value is not None and value != ""


def boolean(value: Any) -> bool:
    return value in ("", "true", "false") or value is None


def integer(value: Any) -> bool:
    return value is None or value == "" or bool(INTEGER_RE.match(str(value)))


def number(value: Any) -> bool:
    return value is None or value == "" or bool(NUMBER_RE.match(str(value)))


def date(value: Any) -> bool:
    return value is None or value == "" or bool(RFC1123_RE.match(str(value)))


def enum(enumeration: list[Any]) -> Rule:
    allowed = {str(item) for item in enumeration}

    def rule(value: Any) -> bool:
        return value is None or value == "" or str(value) in allowed

    return rule


def minimum(bound: float) -> Rule:
    def rule(value: Any) -> bool:
        # NaN compares false, so non-numeric input fails
        return value is None or value == "" or _as_number(value) >= bound

    return rule


def maximum(bound: float) -> Rule:
    def rule(value: Any) -> bool:
        return value is None or value == "" or _as_number(value) <= bound

    return rule


def min_length(bound: int) -> Rule:
    def rule(value: Any) -> bool:
        return value is None or value == "" or len(str(value)) >= bound

    return rule


def max_length(bound: int) -> Rule:
    def rule(value: Any) -> bool:
        return value is None or value == "" or len(str(value)) <= bound

    return rule


def pattern(expression: str) -> Rule:
    regex = re.compile(expression)

    def rule(value: Any) -> bool:
        return value is None or value == "" or bool(regex.search(str(value)))

    return rule


# --- Rule sets per parameter type ---


def _get(definition: Any, name: str, alias: Optional[str] = None) -> Any:
    if isinstance(definition, Mapping):
        if alias is not None and alias in definition:
            return definition[alias]
        return definition.get(name)
    return getattr(definition, name, None)


def _base_rules(definition: Any) -> dict[str, Rule]:
    rules: dict[str, Rule] = {}
    if _get(definition, "required"):
        rules["required"] = required
    return rules


def _bound_rules(rules: dict[str, Rule], definition: Any) -> None:
    lower = _get(definition, "minimum")
    upper = _get(definition, "maximum")
    if lower:
        rules["minimum"] = minimum(lower)
    if upper:
        rules["maximum"] = maximum(upper)


def _string_rules(definition: Any) -> dict[str, Rule]:
    rules = _base_rules(definition)
    enumeration = _get(definition, "enum")
    shortest = _get(definition, "min_length", "minLength")
    longest = _get(definition, "max_length", "maxLength")
    expression = _get(definition, "pattern")
    if enumeration:
        rules["enum"] = enum(enumeration)
    if shortest:
        rules["minLength"] = min_length(shortest)
    if longest:
        rules["maxLength"] = max_length(longest)
    if expression:
        rules["pattern"] = pattern(expression)
    return rules


def _integer_rules(definition: Any) -> dict[str, Rule]:
    rules = _base_rules(definition)
    rules["integer"] = integer
    _bound_rules(rules, definition)
    return rules


def _number_rules(definition: Any) -> dict[str, Rule]:
    rules = _base_rules(definition)
    rules["number"] = number
    _bound_rules(rules, definition)
    return rules


def _boolean_rules(definition: Any) -> dict[str, Rule]:
    rules = _base_rules(definition)
    rules["boolean"] = boolean
    return rules


def _date_rules(definition: Any) -> dict[str, Rule]:
    rules = _base_rules(definition)
    rules["date"] = date
    return rules


RULES_FOR_TYPE: dict[str, Callable[[Any], dict[str, Rule]]] = {
    "string": _string_rules,
    "integer": _integer_rules,
    "number": _number_rules,
    "boolean": _boolean_rules,
    "date": _date_rules,
}


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of :meth:`Validator.check`; ``errors`` is empty when valid."""

    errors: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def __bool__(self) -> bool:
        return self.is_valid


class Validator:
    """An ordered set of named validation rules."""

    def __init__(self, rules: dict[str, Rule]) -> None:
        self._rules = dict(rules)

    @property
    def rule_names(self) -> list[str]:
        return list(self._rules)

    @classmethod
    def from_definition(cls, definition: Any) -> Validator:
        """Build a validator for a parameter definition.

        Args:
            definition: A :class:`~ramlconsole.models.NamedParameter` or a
                raw mapping. Unknown types get no rules.

        Raises:
            DefinitionError: If *definition* is ``None``.
        """
        if definition is None:
            raise DefinitionError("A parameter definition is required to build a validator")

        factory = RULES_FOR_TYPE.get(_get(definition, "type") or "string")
        return cls(factory(definition) if factory else {})

    def validate(self, value: Any) -> Optional[list[str]]:
        """Return failed rule names in registration order, or ``None``."""
        errors = [name for name, rule in self._rules.items() if not rule(value)]
        return errors or None

    def check(self, value: Any) -> ValidationResult:
        return ValidationResult(self.validate(value) or [])
