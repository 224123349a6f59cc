"""formrules validation engine.

Components, one set per form container:
- OptionStore: the container's option set, reloaded before every access
- RuleRegistry: named rules, seeded with a built-in "required" rule
- FieldRegistry: field descriptors and the per-field validation pass
- ValidationRunner: the whole-form pass run on submission

Usage:
    from formrules.validation import register_canned_rules

    # At application startup, to make canned rule types available
    # to form definitions
    register_canned_rules()
"""

from formrules.validation.canned import register_canned_rules
from formrules.validation.errors import (
    ConfigurationError,
    DefinitionError,
    FormRulesError,
    RuleNotFoundError,
    UnknownRuleTypeError,
)
from formrules.validation.fields import FieldRegistry
from formrules.validation.messages import MessageInterpolator
from formrules.validation.options import OptionStore, default_options
from formrules.validation.registry import RuleFactoryRegistry
from formrules.validation.rules import RuleRegistry, required_rule
from formrules.validation.runner import ValidationRunner
from formrules.validation.types import (
    FieldContext,
    FieldDescriptor,
    FieldResult,
    FieldStatus,
    Rule,
    RuleDefinition,
    SubmissionResult,
    SubmissionState,
    is_empty,
)

__all__ = [
    # Types
    "FieldContext",
    "FieldDescriptor",
    "FieldResult",
    "FieldStatus",
    "Rule",
    "RuleDefinition",
    "SubmissionResult",
    "SubmissionState",
    "is_empty",
    # Errors
    "ConfigurationError",
    "DefinitionError",
    "FormRulesError",
    "RuleNotFoundError",
    "UnknownRuleTypeError",
    # Components
    "FieldRegistry",
    "MessageInterpolator",
    "OptionStore",
    "RuleRegistry",
    "ValidationRunner",
    "default_options",
    "required_rule",
    # Rule types
    "RuleFactoryRegistry",
    "register_canned_rules",
]
