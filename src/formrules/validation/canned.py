"""Canned rule types for formrules.

These are ready-to-use rules that can be declared in form definitions
and configured via parameters.

Available types:
- required: Value must be non-empty
- email / phone / url / uuid: Format checks
- pattern: Regex match (params: pattern)
- minLength / maxLength: String length bounds (params: length)
- min / max: Numeric bounds (params: value; messages show it as {limit})
- oneOf: Value must be one of a list (params: values)
- equalTo: Value must equal another field's value (params: field)
"""

import re
from typing import Any

from formrules.validation.errors import ConfigurationError
from formrules.validation.registry import RuleFactoryRegistry
from formrules.validation.rules import REQUIRED_MESSAGE, required_rule
from formrules.validation.types import FieldContext, Rule, RuleDefinition


# =============================================================================
# Format Patterns
# =============================================================================

EMAIL_PATTERN = re.compile(
    r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
)

PHONE_PATTERN = re.compile(
    r"^[\+]?[(]?[0-9]{1,3}[)]?[-\s\.]?[(]?[0-9]{1,4}[)]?[-\s\.]?[0-9]{1,4}[-\s\.]?[0-9]{1,9}$"
)

URL_PATTERN = re.compile(
    r"^https?://[^\s/$.?#].[^\s]*$",
    re.IGNORECASE
)

UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE
)


def _param(definition: RuleDefinition, name: str) -> Any:
    if name not in definition.params:
        raise ConfigurationError(
            f"Rule type '{definition.type}' requires parameter '{name}'"
        )
    return definition.params[name]


def _as_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


def _number_param(definition: RuleDefinition, name: str) -> float:
    raw = _param(definition, name)
    number = _as_number(raw)
    if number is None:
        raise ConfigurationError(
            f"Rule type '{definition.type}' parameter '{name}' must be a number, got {raw!r}"
        )
    return number


def _length_param(definition: RuleDefinition) -> int:
    length = _number_param(definition, "length")
    if length < 0 or length != int(length):
        raise ConfigurationError(
            f"Rule type '{definition.type}' parameter 'length' must be a non-negative integer"
        )
    return int(length)


# =============================================================================
# Factories
# =============================================================================


def _required_factory(definition: RuleDefinition) -> Rule:
    return required_rule(definition.message or REQUIRED_MESSAGE)


def _format_factory(pattern: re.Pattern, default_message: str):
    def factory(definition: RuleDefinition) -> Rule:
        def check(value: Any, ctx: FieldContext) -> bool:
            return isinstance(value, str) and bool(pattern.match(value.strip()))

        return Rule(
            check=check,
            message=definition.message or default_message,
            params=dict(definition.params),
        )

    return factory


def _pattern_factory(definition: RuleDefinition) -> Rule:
    raw = _param(definition, "pattern")
    if not isinstance(raw, str):
        raise ConfigurationError(
            f"Rule type '{definition.type}' parameter 'pattern' must be a string"
        )
    try:
        compiled = re.compile(raw)
    except re.error as e:
        raise ConfigurationError(f"Invalid regex pattern '{raw}': {e}") from e

    def check(value: Any, ctx: FieldContext) -> bool:
        return bool(compiled.match("" if value is None else str(value)))

    return Rule(
        check=check,
        message=definition.message or "{field} format is invalid",
        params=dict(definition.params),
    )


def _min_length_factory(definition: RuleDefinition) -> Rule:
    length = _length_param(definition)

    def check(value: Any, ctx: FieldContext) -> bool:
        return len("" if value is None else str(value)) >= length

    return Rule(
        check=check,
        message=definition.message or "{field} must be at least {length} characters",
        params=dict(definition.params),
    )


def _max_length_factory(definition: RuleDefinition) -> Rule:
    length = _length_param(definition)

    def check(value: Any, ctx: FieldContext) -> bool:
        return len("" if value is None else str(value)) <= length

    return Rule(
        check=check,
        message=definition.message or "{field} must be at most {length} characters",
        params=dict(definition.params),
    )


def _min_factory(definition: RuleDefinition) -> Rule:
    bound = _number_param(definition, "value")

    def check(value: Any, ctx: FieldContext) -> bool:
        number = _as_number(value)
        return number is not None and number >= bound

    return Rule(
        check=check,
        message=definition.message or "{field} must be at least {limit}",
        params={"limit": definition.params["value"], **definition.params},
    )


def _max_factory(definition: RuleDefinition) -> Rule:
    bound = _number_param(definition, "value")

    def check(value: Any, ctx: FieldContext) -> bool:
        number = _as_number(value)
        return number is not None and number <= bound

    return Rule(
        check=check,
        message=definition.message or "{field} must be at most {limit}",
        params={"limit": definition.params["value"], **definition.params},
    )


def _one_of_factory(definition: RuleDefinition) -> Rule:
    allowed = _param(definition, "values")
    if not isinstance(allowed, (list, tuple)):
        raise ConfigurationError(
            f"Rule type '{definition.type}' parameter 'values' must be a list"
        )

    def check(value: Any, ctx: FieldContext) -> bool:
        return value in allowed

    return Rule(
        check=check,
        message=definition.message or "{field} must be one of: {values}",
        params=dict(definition.params),
    )


def _equal_to_factory(definition: RuleDefinition) -> Rule:
    other = _param(definition, "field")

    def check(value: Any, ctx: FieldContext) -> bool:
        if ctx.surface is None:
            return False
        return value == ctx.surface.get_field_value(other)

    return Rule(
        check=check,
        message=definition.message or "{field} must match {field_label}",
        params={"field_label": other, **definition.params},
    )


def register_canned_rules() -> None:
    """Register all canned rule types. Safe to call more than once."""
    RuleFactoryRegistry.register("required", _required_factory)
    RuleFactoryRegistry.register(
        "email", _format_factory(EMAIL_PATTERN, "{field} must be a valid email address")
    )
    RuleFactoryRegistry.register(
        "phone", _format_factory(PHONE_PATTERN, "{field} must be a valid phone number")
    )
    RuleFactoryRegistry.register(
        "url", _format_factory(URL_PATTERN, "{field} must be a valid URL")
    )
    RuleFactoryRegistry.register(
        "uuid", _format_factory(UUID_PATTERN, "{field} must be a valid UUID")
    )
    RuleFactoryRegistry.register("pattern", _pattern_factory)
    RuleFactoryRegistry.register("minLength", _min_length_factory)
    RuleFactoryRegistry.register("maxLength", _max_length_factory)
    RuleFactoryRegistry.register("min", _min_factory)
    RuleFactoryRegistry.register("max", _max_factory)
    RuleFactoryRegistry.register("oneOf", _one_of_factory)
    RuleFactoryRegistry.register("equalTo", _equal_to_factory)
