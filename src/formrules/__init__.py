"""formrules — declarative field validation for form containers.

Usage:
    from formrules import InMemoryForm, attach

    form = InMemoryForm({"email": ""})
    validator = attach(form, {"fields": {"email": {"rules": ["required"]}}})
    form.submit()  # False; the "required" message is rendered
"""

from formrules.surface import InMemoryForm, ManualScheduler
from formrules.validation import (
    FieldContext,
    FieldResult,
    FieldStatus,
    Rule,
    RuleNotFoundError,
    SubmissionResult,
    register_canned_rules,
)
from formrules.validator import FormValidator, attach, detach

__all__ = [
    "FieldContext",
    "FieldResult",
    "FieldStatus",
    "FormValidator",
    "InMemoryForm",
    "ManualScheduler",
    "Rule",
    "RuleNotFoundError",
    "SubmissionResult",
    "attach",
    "detach",
    "register_canned_rules",
]
