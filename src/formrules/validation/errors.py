"""Exceptions raised by the formrules validation engine.

Validation failures are never exceptions; they are reported through
FieldResult / SubmissionResult. The classes here cover configuration
problems that should surface as soon as they are detected.
"""


class FormRulesError(Exception):
    """Base class for all formrules errors."""


class ConfigurationError(FormRulesError, ValueError):
    """A form, rule or field was configured incorrectly."""


class RuleNotFoundError(ConfigurationError):
    """A field references a rule name that is not in the rule registry."""

    def __init__(self, rule_name: str, field_name: str | None = None):
        self.rule_name = rule_name
        self.field_name = field_name
        if field_name:
            message = f"Rule '{rule_name}' referenced by field '{field_name}' is not registered"
        else:
            message = f"Rule '{rule_name}' is not registered"
        super().__init__(message)


class UnknownRuleTypeError(ConfigurationError):
    """A rule definition names a type with no registered factory."""

    def __init__(self, rule_type: str, available: list[str]):
        self.rule_type = rule_type
        super().__init__(
            f"Rule type '{rule_type}' is not registered. "
            "Available types: " + ", ".join(available)
        )


class DefinitionError(ConfigurationError):
    """A form definition file could not be loaded."""
