"""Per-container rule table.

Rules live in the container's option set under the "rules" key, so the
table is shared with anything else holding the same OptionStore.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from formrules.validation.errors import RuleNotFoundError
from formrules.validation.options import OptionStore
from formrules.validation.types import FieldContext, Rule, is_empty

REQUIRED_MESSAGE = "This field is required"


def _check_required(value: Any, ctx: FieldContext) -> bool:
    return not is_empty(value)


def required_rule(message: str = REQUIRED_MESSAGE) -> Rule:
    """The built-in rule every registry starts with."""
    return Rule(check=_check_required, message=message)


class RuleRegistry:
    """Named rule table for one form container.

    Seeded with a built-in "required" rule unless the caller supplied
    their own under that name.
    """

    def __init__(self, options: OptionStore):
        self.options = options
        seeded: dict[str, Rule] = {"required": required_rule()}
        for name, rule in (options.get("rules") or {}).items():
            seeded[name] = Rule.from_value(name, rule)
        options.set("rules", seeded)

    def _table(self) -> dict[str, Rule]:
        return self.options.get("rules") or {}

    def get_rule(self, name: str) -> Rule | None:
        return self._table().get(name)

    def has_rule(self, name: str) -> bool:
        return name in self._table()

    def require_rule(self, name: str, field_name: str | None = None) -> Rule:
        """Get a rule or raise RuleNotFoundError."""
        rule = self.get_rule(name)
        if rule is None:
            raise RuleNotFoundError(name, field_name)
        return rule

    def set_rule(self, name: str, rule: Rule | Mapping[str, Any]) -> "RuleRegistry":
        """Add or replace a rule."""
        rules = self._table()
        rules[name] = Rule.from_value(name, rule)
        self.options.set("rules", rules)
        return self

    add_rule = set_rule

    def get_rules(self, names: Iterable[str] | None = None) -> dict[str, Rule | None]:
        """Return every rule, or only the named ones.

        Names with no registered rule map to None; callers must check.
        """
        rules = self._table()
        if names is None:
            return dict(rules)
        return {name: rules.get(name) for name in names}

    def set_rules(self, rules: Mapping[str, Rule | Mapping[str, Any]]) -> "RuleRegistry":
        """Add or replace several rules at once."""
        table = self._table()
        for name, rule in rules.items():
            table[name] = Rule.from_value(name, rule)
        self.options.set("rules", table)
        return self
