"""Field registry and per-field validation.

FieldRegistry stores field descriptors in the container's option set
under the "fields" key, wires auto-validated fields to their interaction
triggers and runs the single-field validation pass.
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from formrules.surface.protocol import FormSurface
from formrules.validation.errors import ConfigurationError
from formrules.validation.messages import MessageInterpolator
from formrules.validation.options import OptionStore
from formrules.validation.rules import RuleRegistry
from formrules.validation.types import (
    FieldContext,
    FieldDescriptor,
    FieldResult,
    FieldStatus,
    Rule,
    is_empty,
    unique_names,
)

logger = logging.getLogger(__name__)

FieldOptions = FieldDescriptor | Mapping[str, Any] | None


class FieldRegistry:
    """Field descriptors for one form container.

    Fields passed in the container's initial "fields" option are
    registered when the registry is built.
    """

    def __init__(
        self,
        surface: FormSurface,
        options: OptionStore,
        rules: RuleRegistry,
        interpolator: MessageInterpolator | None = None,
    ):
        self.surface = surface
        self.options = options
        self.rules = rules
        self.interpolator = interpolator or MessageInterpolator()
        # field name -> placement this registry created for it
        self._created: dict[str, Any] = {}

        seed = options.get("fields") or {}
        options.set("fields", {})
        self.add_fields(seed)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _table(self) -> dict[str, FieldDescriptor]:
        return self.options.get("fields") or {}

    def _prepare(self, name: str, field_options: FieldOptions) -> tuple[FieldDescriptor, bool]:
        """Build a descriptor and check that all of its rules exist.

        Returns:
            The descriptor, and whether a message placement was created for it
        """
        if not name:
            raise ConfigurationError("Field name must be a non-empty string")

        descriptor = FieldDescriptor.from_options(name, field_options)
        for rule_name in descriptor.rules:
            self.rules.require_rule(rule_name, name)

        if descriptor.message_place:
            return descriptor, False
        descriptor.message_place = self._create_message_place(name)
        return descriptor, True

    def _create_message_place(self, name: str) -> Any:
        settings = self.options.get_many(["errorPlacePrefix", "errorCSS", "messagesPlace"])
        return self.surface.create_message_place(
            name,
            element_id=f"{settings['errorPlacePrefix'] or ''}{name}",
            css=settings["errorCSS"] or {},
            parent=settings["messagesPlace"],
        )

    def _bind(self, descriptor: FieldDescriptor) -> None:
        if not descriptor.auto:
            return
        name = descriptor.name
        self.surface.bind_interaction(
            name, descriptor.validate_bind, lambda: self.auto_validate(name)
        )
        self.surface.bind_interaction(
            name, descriptor.reset_error_bind, lambda: self.reset_messages(name)
        )

    def _unbind(self, descriptor: FieldDescriptor) -> None:
        if not descriptor.auto:
            return
        self.surface.unbind_interaction(descriptor.name, descriptor.validate_bind)
        self.surface.unbind_interaction(descriptor.name, descriptor.reset_error_bind)

    def _release(self, name: str, place: Any) -> None:
        """Remove a field's placement if this registry created it."""
        if place is not None and self._created.get(name) is place:
            del self._created[name]
            self.surface.remove_message_place(place)

    def _store(
        self,
        fields: dict[str, FieldDescriptor],
        descriptor: FieldDescriptor,
        created: bool,
    ) -> None:
        name = descriptor.name
        previous = fields.get(name)
        if previous is not None:
            self._unbind(previous)
            if previous.message_place is not descriptor.message_place:
                self._release(name, previous.message_place)
        if created:
            self._created[name] = descriptor.message_place
        fields[name] = descriptor
        self._bind(descriptor)

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def add_field(self, name: str, field_options: FieldOptions = None) -> "FieldRegistry":
        """Add a field, replacing any existing field of the same name.

        Raises:
            RuleNotFoundError: If the field references an unregistered rule
        """
        descriptor, created = self._prepare(name, field_options)
        fields = self._table()
        self._store(fields, descriptor, created)
        self.options.set("fields", fields)
        return self

    def add_fields(self, field_data: Mapping[str, FieldOptions]) -> "FieldRegistry":
        """Add several fields and save them in one write."""
        if not field_data:
            return self
        prepared: list[tuple[FieldDescriptor, bool]] = []
        try:
            for name, opts in field_data.items():
                prepared.append(self._prepare(name, opts))
        except ConfigurationError:
            # nothing is stored when any field is rejected
            for descriptor, created in prepared:
                if created:
                    self.surface.remove_message_place(descriptor.message_place)
            raise
        fields = self._table()
        for descriptor, created in prepared:
            self._store(fields, descriptor, created)
        self.options.set("fields", fields)
        return self

    def remove_field(self, name: str) -> "FieldRegistry":
        """Remove a field and its triggers.

        The field's placement is removed only when the registry created it;
        placements supplied through messagePlace belong to the caller.
        """
        fields = self._table()
        descriptor = fields.pop(name, None)
        if descriptor is not None:
            self._release(name, descriptor.message_place)
            self._unbind(descriptor)
            self.options.set("fields", fields)
        return self

    def get_field(self, name: str) -> FieldDescriptor | None:
        return self._table().get(name)

    def get_fields(self, names: Iterable[str] | None = None) -> dict[str, FieldDescriptor | None]:
        fields = self._table()
        if names is None:
            return dict(fields)
        return {name: fields.get(name) for name in names}

    def get_messages(self, name: str) -> dict[str, str] | None:
        descriptor = self.get_field(name)
        if descriptor is None:
            return None
        return descriptor.messages

    def set_messages(self, name: str, messages: Mapping[str, str]) -> "FieldRegistry":
        """Merge override messages into a field's message map."""
        fields = self._table()
        descriptor = fields.get(name)
        if descriptor is not None:
            descriptor.messages.update(messages)
            self.options.set("fields", fields)
        return self

    def add_rules(self, name: str, rule_names: str | Iterable[str]) -> "FieldRegistry":
        """Attach rules to a field. Already attached names are ignored."""
        new_rules = unique_names(rule_names)
        fields = self._table()
        descriptor = fields.get(name)
        if descriptor is not None:
            for rule_name in new_rules:
                self.rules.require_rule(rule_name, name)
            descriptor.rules = unique_names(descriptor.rules + new_rules)
            self.options.set("fields", fields)
        return self

    def remove_rules(self, name: str, rule_names: str | Iterable[str]) -> "FieldRegistry":
        """Detach rules from a field."""
        to_remove = set(unique_names(rule_names))
        fields = self._table()
        descriptor = fields.get(name)
        if descriptor is not None:
            descriptor.rules = [r for r in descriptor.rules if r not in to_remove]
            self.options.set("fields", fields)
        return self

    def get_rules(self, name: str) -> dict[str, Rule | None] | None:
        """Resolve a field's rules in attachment order.

        Rule names missing from the registry map to None.
        """
        descriptor = self.get_field(name)
        if descriptor is None:
            return None
        return self.rules.get_rules(descriptor.rules)

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate(self, name: str, message_place: Any = None) -> FieldResult:
        """Validate one field against its rules.

        Rules run in attachment order and stop at the first failure, whose
        message (the field's override or the rule's default) is rendered
        into the message placement.

        Args:
            name: The field name
            message_place: Placement to render into; defaults to the
                field's own placement, then the shared message area

        Returns:
            FieldResult with VALID, INVALID, SKIPPED or NOT_FOUND status

        Raises:
            RuleNotFoundError: If an attached rule is no longer registered
        """
        descriptor = self.get_field(name)
        if not message_place:
            message_place = (
                descriptor.message_place if descriptor else None
            ) or self.options.get("messagesPlace")
        overrides = self.get_messages(name) or {}

        element = self.surface.get_field_element(name)
        if element is None:
            logger.warning("Field '%s' has no bound element; not validated", name)
            return FieldResult(field=name, status=FieldStatus.NOT_FOUND)

        rule_names = descriptor.rules if descriptor else []
        value = self.surface.get_field_value(name)

        if "required" not in rule_names and is_empty(value):
            return FieldResult(field=name, status=FieldStatus.SKIPPED)

        ctx = FieldContext(field_name=name, element=element, surface=self.surface)
        for rule_name in rule_names:
            rule = self.rules.require_rule(rule_name, name)
            if rule.passes(value, ctx):
                continue

            template = overrides.get(rule_name) or rule.message
            message = self.interpolator.interpolate(
                template,
                name,
                value=value,
                params=rule.params,
                label=descriptor.label if descriptor else None,
            )
            self.surface.show_messages(message_place)
            self.surface.render_message(message_place, message)
            logger.debug("Field '%s' failed rule '%s'", name, rule_name)
            return FieldResult(
                field=name,
                status=FieldStatus.INVALID,
                rule=rule_name,
                message=message,
            )

        return FieldResult(field=name, status=FieldStatus.VALID)

    def reset_messages(self, name: str) -> None:
        """Clear and hide a field's message placement."""
        descriptor = self.get_field(name)
        if descriptor is None:
            return
        self.surface.clear_messages(descriptor.message_place)
        self.surface.hide_messages(descriptor.message_place)

    def auto_validate(self, name: str) -> FieldResult:
        """Interaction handler for auto-validated fields."""
        descriptor = self.get_field(name)
        if descriptor is None:
            return FieldResult(field=name, status=FieldStatus.NOT_FOUND)

        self.reset_messages(name)
        result = self.validate(name, descriptor.message_place)
        if result:
            descriptor.success(
                FieldContext(
                    field_name=name,
                    element=self.surface.get_field_element(name),
                    surface=self.surface,
                )
            )
        return result
