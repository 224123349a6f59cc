"""Core types for the formrules validation engine.

- Rule: a named predicate plus its default failure message
- FieldDescriptor: which rules apply to a field and how it is displayed
- FieldResult / SubmissionResult: outcomes of per-field and whole-form passes
"""

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field, fields as dataclass_fields, replace
from enum import Enum
from typing import Any

from formrules.validation.errors import ConfigurationError


@dataclass(frozen=True)
class FieldContext:
    """Context passed to rule predicates and field success callbacks.

    Attributes:
        field_name: Name of the field being validated
        element: The surface's handle for the field's bound element
        surface: The form surface the field belongs to (for cross-field rules)
    """

    field_name: str
    element: Any = None
    surface: Any = None

    @property
    def value(self) -> Any:
        if self.surface is None:
            return None
        return self.surface.get_field_value(self.field_name)


# Rule predicate signature: (value, FieldContext) -> bool
Check = Callable[[Any, FieldContext], bool]


def is_empty(value: Any) -> bool:
    """Check if a value is considered empty for validation purposes."""
    if value is None:
        return True
    if isinstance(value, str) and value.strip() == "":
        return True
    if isinstance(value, (list, tuple, set, dict)) and len(value) == 0:
        return True
    return False


@dataclass
class Rule:
    """A reusable validation rule.

    Attributes:
        check: Predicate returning True when the value passes
        message: Default failure message (may contain placeholders)
        params: Parameters the rule was built with, available to messages
    """

    check: Check
    message: str = ""
    params: dict[str, Any] = field(default_factory=dict)

    def passes(self, value: Any, ctx: FieldContext) -> bool:
        return bool(self.check(value, ctx))

    @classmethod
    def from_value(cls, name: str, value: "Rule | Mapping[str, Any]") -> "Rule":
        """Coerce a Rule or a {check, message, params} mapping into a Rule."""
        if isinstance(value, Rule):
            return value
        if isinstance(value, Mapping):
            check = value.get("check")
            if not callable(check):
                raise ConfigurationError(f"Rule '{name}' needs a callable 'check'")
            return cls(
                check=check,
                message=value.get("message", ""),
                params=dict(value.get("params", {})),
            )
        raise ConfigurationError(
            f"Rule '{name}' must be a Rule or a mapping, got {type(value).__name__}"
        )


def _noop_success(ctx: FieldContext) -> None:
    return None


# Option keys accepted for fields, in the original camelCase and in snake_case
_FIELD_OPTION_KEYS = {
    "rules": "rules",
    "auto": "auto",
    "validateBind": "validate_bind",
    "validate_bind": "validate_bind",
    "resetErrorBind": "reset_error_bind",
    "reset_error_bind": "reset_error_bind",
    "success": "success",
    "messagePlace": "message_place",
    "message_place": "message_place",
    "messages": "messages",
    "label": "label",
}


def unique_names(names: str | Iterable[str]) -> list[str]:
    """Normalize a rule name or names into an ordered, deduplicated list."""
    if isinstance(names, str):
        names = [names]
    result: list[str] = []
    for name in names:
        if name not in result:
            result.append(name)
    return result


@dataclass
class FieldDescriptor:
    """Validation settings for one named field.

    Attributes:
        name: Field name, matching an element name on the surface
        rules: Rule names in attachment order (no duplicates)
        auto: Validate on interaction instead of only on submit
        validate_bind: Interaction trigger(s) that validate the field
        reset_error_bind: Interaction trigger(s) that clear its messages
        success: Called with a FieldContext when auto-validation passes
        message_place: Where this field's messages are rendered
        messages: Rule name -> override failure message
        label: Display label used in message placeholders
    """

    name: str
    rules: list[str] = field(default_factory=list)
    auto: bool = False
    validate_bind: str = "blur"
    reset_error_bind: str = "click focus"
    success: Callable[[FieldContext], Any] = _noop_success
    message_place: Any = False
    messages: dict[str, str] = field(default_factory=dict)
    label: str | None = None

    @classmethod
    def from_options(
        cls,
        name: str,
        options: "FieldDescriptor | Mapping[str, Any] | None" = None,
    ) -> "FieldDescriptor":
        """Merge field options over the field defaults.

        Each call builds fresh defaults, so descriptors never share
        their rule lists or message maps.
        """
        if isinstance(options, FieldDescriptor):
            return replace(
                options,
                name=name,
                rules=unique_names(options.rules),
                messages=dict(options.messages),
            )

        values: dict[str, Any] = {}
        for key, value in (options or {}).items():
            attr = _FIELD_OPTION_KEYS.get(key)
            if attr is None:
                raise ConfigurationError(f"Unknown option '{key}' for field '{name}'")
            values[attr] = value

        if "rules" in values:
            values["rules"] = unique_names(values["rules"] or [])
        if "messages" in values:
            values["messages"] = dict(values["messages"] or {})
        if values.get("success") is None:
            values.pop("success", None)

        return cls(name=name, **values)

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in dataclass_fields(self)}


class FieldStatus(Enum):
    """Outcome of validating one field.

    VALID: Every attached rule passed
    INVALID: A rule failed; its message was rendered
    SKIPPED: Empty value on a field without the required rule
    NOT_FOUND: No element is bound to the field name
    """

    VALID = "valid"
    INVALID = "invalid"
    SKIPPED = "skipped"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class FieldResult:
    """Result of validating one field.

    Truthy only for VALID and SKIPPED, so a missing field is never
    mistaken for a valid one.
    """

    field: str
    status: FieldStatus
    rule: str | None = None
    message: str | None = None

    @property
    def valid(self) -> bool:
        return self.status in (FieldStatus.VALID, FieldStatus.SKIPPED)

    def __bool__(self) -> bool:
        return self.valid

    def to_dict(self) -> dict[str, Any]:
        return {
            "field": self.field,
            "status": self.status.value,
            "rule": self.rule,
            "message": self.message,
        }


class SubmissionState(Enum):
    """States of one whole-form validation attempt."""

    IDLE = "idle"
    VALIDATING = "validating"
    INVOKING_SUCCESS = "invoking_success"
    BLOCKED = "blocked"


@dataclass
class SubmissionResult:
    """Result of a whole-form validation pass.

    Attributes:
        proceed: Whether the submission should go ahead
        valid: True if no evaluated field failed
        results: Per-field results, in evaluation order
        missing: Registered fields with no bound element
        stopped_early: True when stopOnError cut the pass short
    """

    proceed: bool
    valid: bool
    results: list[FieldResult] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)
    stopped_early: bool = False

    @property
    def errors(self) -> list[FieldResult]:
        return [r for r in self.results if r.status == FieldStatus.INVALID]

    def to_dict(self) -> dict[str, Any]:
        return {
            "proceed": self.proceed,
            "valid": self.valid,
            "results": [r.to_dict() for r in self.results],
            "missing": list(self.missing),
            "stoppedEarly": self.stopped_early,
        }


@dataclass
class RuleDefinition:
    """Declarative rule definition (from YAML or JSON).

    Gets resolved to a Rule by the factory registered for its type.

    Attributes:
        type: Rule type ("email", "pattern", "minLength", ...)
        params: Type-specific parameters
        message: Failure message template; the factory default when empty
    """

    type: str
    params: dict[str, Any] = field(default_factory=dict)
    message: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RuleDefinition":
        """Create RuleDefinition from YAML/JSON dict."""
        return cls(
            type=data["type"],
            params=dict(data.get("params") or {}),
            message=data.get("message", ""),
        )
