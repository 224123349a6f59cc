"""Form container handle.

attach() builds the option store, rule registry, field registry and
submission runner for a form surface, registers the runner as the
surface's submit gate and keeps the result on the surface itself.
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from formrules.surface.protocol import FormSurface
from formrules.surface.scheduling import Scheduler, default_scheduler
from formrules.validation.fields import FieldOptions, FieldRegistry
from formrules.validation.messages import MessageInterpolator
from formrules.validation.options import OptionStore
from formrules.validation.rules import RuleRegistry
from formrules.validation.runner import ValidationRunner
from formrules.validation.types import (
    FieldDescriptor,
    FieldResult,
    Rule,
    SubmissionResult,
)

logger = logging.getLogger(__name__)

# Attribute on the surface that holds its FormValidator
_ATTR = "_formrules_validator"


class FormValidator:
    """Public API for validating one form container.

    Example:
        form = InMemoryForm({"email": "ann@example.com"})
        validator = attach(form)
        validator.set_rule("company", {"check": is_company_email, "message": "..."})
        validator.add_field("email", {"rules": ["required", "company"]})
        validator.validate("email")
    """

    def __init__(
        self,
        surface: FormSurface,
        options: Mapping[str, Any] | None = None,
        scheduler: Scheduler | None = None,
        interpolator: MessageInterpolator | None = None,
    ):
        self.surface = surface
        self.options = OptionStore(surface, options)
        self.rules = RuleRegistry(self.options)
        self.fields = FieldRegistry(surface, self.options, self.rules, interpolator)
        self.runner = ValidationRunner(
            surface, self.options, self.fields, scheduler or default_scheduler()
        )
        surface.on_submit(self.runner.handle_submit)

    # ------------------------------------------------------------------
    # Options
    # ------------------------------------------------------------------

    def configure(self, options: Mapping[str, Any]) -> "FormValidator":
        """Update global options; "rules" and "fields" are registered."""
        options = dict(options)
        rules = options.pop("rules", None)
        fields = options.pop("fields", None)
        if options:
            self.options.set_many(options)
        if rules:
            self.rules.set_rules(rules)
        if fields:
            self.fields.add_fields(fields)
        return self

    def get_option(self, name: str) -> Any:
        return self.options.get(name)

    # ------------------------------------------------------------------
    # Rules
    # ------------------------------------------------------------------

    def get_rule(self, name: str) -> Rule | None:
        return self.rules.get_rule(name)

    def set_rule(self, name: str, rule: Rule | Mapping[str, Any]) -> "FormValidator":
        self.rules.set_rule(name, rule)
        return self

    add_rule = set_rule

    def get_rules(self, names: Iterable[str] | None = None) -> dict[str, Rule | None]:
        return self.rules.get_rules(names)

    def set_rules(self, rules: Mapping[str, Rule | Mapping[str, Any]]) -> "FormValidator":
        self.rules.set_rules(rules)
        return self

    # ------------------------------------------------------------------
    # Fields
    # ------------------------------------------------------------------

    def add_field(self, name: str, field_options: FieldOptions = None) -> "FormValidator":
        self.fields.add_field(name, field_options)
        return self

    def add_fields(self, field_data: Mapping[str, FieldOptions]) -> "FormValidator":
        self.fields.add_fields(field_data)
        return self

    def remove_field(self, name: str) -> "FormValidator":
        self.fields.remove_field(name)
        return self

    def get_field(self, name: str) -> FieldDescriptor | None:
        return self.fields.get_field(name)

    def get_fields(self, names: Iterable[str] | None = None) -> dict[str, FieldDescriptor | None]:
        return self.fields.get_fields(names)

    def add_rules(self, name: str, rule_names: str | Iterable[str]) -> "FormValidator":
        self.fields.add_rules(name, rule_names)
        return self

    def remove_rules(self, name: str, rule_names: str | Iterable[str]) -> "FormValidator":
        self.fields.remove_rules(name, rule_names)
        return self

    def set_messages(self, name: str, messages: Mapping[str, str]) -> "FormValidator":
        self.fields.set_messages(name, messages)
        return self

    def get_messages(self, name: str) -> dict[str, str] | None:
        return self.fields.get_messages(name)

    def get_field_rules(self, name: str) -> dict[str, Rule | None] | None:
        return self.fields.get_rules(name)

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate(self, name: str, message_place: Any = None) -> FieldResult:
        return self.fields.validate(name, message_place)

    def submit(self) -> SubmissionResult:
        return self.runner.submit()


def attach(
    surface: FormSurface,
    options: Mapping[str, Any] | None = None,
    scheduler: Scheduler | None = None,
    interpolator: MessageInterpolator | None = None,
) -> FormValidator:
    """Attach validation to a form surface.

    The first call builds the FormValidator; later calls for the same
    surface return the cached instance and apply any options given via
    configure().

    The validator is stored as an attribute of the surface, so it lives
    exactly as long as the surface does.
    """
    existing = getattr(surface, _ATTR, None)
    if existing is not None:
        if options:
            existing.configure(options)
        return existing

    validator = FormValidator(surface, options, scheduler, interpolator)
    setattr(surface, _ATTR, validator)
    logger.debug("Attached validator to container '%s'", surface.container_id)
    return validator


def detach(surface: FormSurface) -> None:
    """Forget the cached validator for a surface."""
    validator = getattr(surface, _ATTR, None)
    if validator is not None:
        delattr(surface, _ATTR)
        validator.runner.cancel_timer()
