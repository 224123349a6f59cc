"""Tests for the field registry and per-field validation."""

from unittest.mock import MagicMock

import pytest

from formrules.surface import InMemoryForm, MessagePlace
from formrules.validation.errors import ConfigurationError, RuleNotFoundError
from formrules.validation.fields import FieldRegistry
from formrules.validation.options import OptionStore
from formrules.validation.rules import REQUIRED_MESSAGE, RuleRegistry
from formrules.validation.types import FieldDescriptor, FieldStatus, Rule


class CountingRule:
    """A rule predicate that records how often it was called."""

    def __init__(self, result: bool):
        self.result = result
        self.calls = 0

    def __call__(self, value, ctx):
        self.calls += 1
        return self.result


def email_format(value, ctx):
    return "@" in str(value)


@pytest.fixture
def form():
    return InMemoryForm({"email": "", "name": "Ann", "age": ""}, container_id="signup")


def make_registry(form, options=None) -> FieldRegistry:
    store = OptionStore(form, options)
    rules = RuleRegistry(store)
    rules.set_rule("emailFormat", Rule(check=email_format, message="Not an email"))
    return FieldRegistry(form, store, rules)


@pytest.fixture
def registry(form):
    return make_registry(form)


# =============================================================================
# Registration tests
# =============================================================================


class TestAddField:
    def test_stores_under_field_name(self, registry):
        registry.add_field("email", {"rules": ["required"]})
        descriptor = registry.get_field("email")
        assert isinstance(descriptor, FieldDescriptor)
        assert descriptor.name == "email"
        assert descriptor.rules == ["required"]

    def test_defaults(self, registry):
        registry.add_field("name")
        descriptor = registry.get_field("name")
        assert descriptor.rules == []
        assert descriptor.auto is False
        assert descriptor.validate_bind == "blur"
        assert descriptor.reset_error_bind == "click focus"
        assert descriptor.messages == {}

    def test_camel_case_and_snake_case_options(self, registry):
        registry.add_field("a", {"validateBind": "change"})
        registry.add_field("b", {"validate_bind": "input"})
        assert registry.get_field("a").validate_bind == "change"
        assert registry.get_field("b").validate_bind == "input"

    def test_unknown_option_raises(self, registry):
        with pytest.raises(ConfigurationError, match="Unknown option"):
            registry.add_field("a", {"colour": "red"})

    def test_empty_name_raises(self, registry):
        with pytest.raises(ConfigurationError):
            registry.add_field("", {})

    def test_defaults_not_shared(self, registry):
        registry.add_field("a")
        registry.add_field("b")
        registry.get_field("a").messages["required"] = "x"
        registry.get_field("a").rules.append("required")
        assert registry.get_field("b").messages == {}
        assert registry.get_field("b").rules == []

    def test_duplicate_rules_deduplicated(self, registry):
        registry.add_field("email", {"rules": ["required", "emailFormat", "required"]})
        assert registry.get_field("email").rules == ["required", "emailFormat"]

    def test_single_rule_string(self, registry):
        registry.add_field("email", {"rules": "required"})
        assert registry.get_field("email").rules == ["required"]

    def test_unknown_rule_fails_fast(self, registry):
        with pytest.raises(RuleNotFoundError, match="'phoneFormat'.*'email'"):
            registry.add_field("email", {"rules": ["phoneFormat"]})
        assert registry.get_field("email") is None

    def test_creates_message_place(self, form, registry):
        registry.add_field("email")
        place = registry.get_field("email").message_place
        assert isinstance(place, MessagePlace)
        assert place.element_id == "error_email"
        assert place.css == {"color": "red"}
        assert place.parent is form.place("")
        assert place.visible is False

    def test_message_place_uses_global_settings(self, form):
        registry = make_registry(
            form,
            {"errorPlacePrefix": "err-", "errorCSS": {"color": "orange"}, "messagesPlace": "#box"},
        )
        registry.add_field("email")
        place = registry.get_field("email").message_place
        assert place.element_id == "err-email"
        assert place.css == {"color": "orange"}
        assert place.parent is form.place("#box")

    def test_explicit_message_place_kept(self, form, registry):
        registry.add_field("email", {"messagePlace": "#email-errors"})
        assert registry.get_field("email").message_place == "#email-errors"
        assert "error_email" not in form.places

    def test_readd_replaces_descriptor(self, registry):
        registry.add_field("email", {"rules": ["required"]})
        registry.add_field("email", {"rules": ["emailFormat"]})
        assert registry.get_field("email").rules == ["emailFormat"]
        assert list(registry.get_fields()) == ["email"]

    def test_auto_binds_triggers(self, form, registry):
        registry.add_field("email", {"auto": True})
        assert ("email", "blur") in form.bindings
        assert ("email", "click") in form.bindings
        assert ("email", "focus") in form.bindings

    def test_not_auto_binds_nothing(self, form, registry):
        registry.add_field("email")
        assert form.bindings == {}

    def test_readd_unbinds_previous_triggers(self, form, registry):
        registry.add_field("email", {"auto": True})
        registry.add_field("email", {"auto": True, "validateBind": "change"})
        assert ("email", "blur") not in form.bindings
        assert len(form.bindings[("email", "change")]) == 1

    def test_add_fields(self, registry):
        registry.add_fields(
            {
                "email": {"rules": ["required", "emailFormat"]},
                "name": {"rules": ["required"]},
            }
        )
        assert list(registry.get_fields()) == ["email", "name"]

    def test_add_fields_rejects_all_on_unknown_rule(self, form, registry):
        with pytest.raises(RuleNotFoundError):
            registry.add_fields(
                {"name": {"rules": ["required"]}, "email": {"rules": ["ghost"]}}
            )
        assert registry.get_fields() == {}
        assert "error_name" not in form.places

    def test_add_fields_rejected_keeps_caller_placement(self, form):
        registry = make_registry(form, {"messagesPlace": "shared"})
        shared = form.place("shared")
        with pytest.raises(RuleNotFoundError):
            registry.add_fields(
                {"a": {"messagePlace": "shared"}, "b": {"rules": ["ghost"]}}
            )
        assert form.places.get("shared") is shared

    def test_seed_fields_registered_at_construction(self, form):
        registry = make_registry(form, {"fields": {"name": {"rules": ["required"]}}})
        assert registry.get_field("name").rules == ["required"]
        assert isinstance(registry.get_field("name").message_place, MessagePlace)


class TestRemoveField:
    def test_removes_descriptor_and_place(self, form, registry):
        registry.add_field("email", {"rules": ["required"]})
        registry.remove_field("email")
        assert registry.get_field("email") is None
        assert "error_email" not in form.places

    def test_keeps_caller_supplied_place(self, form, registry):
        shared = form.place("#errors")
        registry.add_field("email", {"messagePlace": "#errors"})
        registry.remove_field("email")
        assert form.places.get("#errors") is shared

    def test_readd_keeps_caller_supplied_place(self, form, registry):
        shared = form.place("#errors")
        registry.add_field("email", {"messagePlace": "#errors"})
        registry.add_field("email", {"rules": ["required"]})
        assert form.places.get("#errors") is shared
        assert "error_email" in form.places

    def test_unbinds_triggers(self, form, registry):
        registry.add_field("email", {"auto": True})
        registry.remove_field("email")
        assert form.bindings == {}
        assert form.trigger("email", "blur") == 0

    def test_unknown_field_is_noop(self, registry):
        assert registry.remove_field("ghost") is registry


class TestFieldAccessors:
    def test_get_field_unknown_is_none(self, registry):
        assert registry.get_field("ghost") is None

    def test_get_fields_restricted(self, registry):
        registry.add_field("email")
        fields = registry.get_fields(["email", "ghost"])
        assert fields["email"].name == "email"
        assert fields["ghost"] is None

    def test_get_messages(self, registry):
        registry.add_field("email", {"messages": {"required": "Email please"}})
        assert registry.get_messages("email") == {"required": "Email please"}
        assert registry.get_messages("ghost") is None

    def test_set_messages_merges(self, form, registry):
        registry.add_field("email", {"messages": {"required": "Email please"}})
        assert registry.set_messages("email", {"emailFormat": "Bad email"}) is registry
        assert registry.get_messages("email") == {
            "required": "Email please",
            "emailFormat": "Bad email",
        }
        assert form.data["signup"]["fields"]["email"].messages["emailFormat"] == "Bad email"

    def test_add_rules_appends_and_deduplicates(self, registry):
        registry.add_field("email", {"rules": ["required"]})
        registry.add_rules("email", ["emailFormat", "required"])
        registry.add_rules("email", "emailFormat")
        assert registry.get_field("email").rules == ["required", "emailFormat"]

    def test_add_rules_unknown_rule_raises(self, registry):
        registry.add_field("email")
        with pytest.raises(RuleNotFoundError):
            registry.add_rules("email", "nope")

    def test_remove_rules(self, registry):
        registry.add_field("email", {"rules": ["required", "emailFormat"]})
        registry.remove_rules("email", "required")
        assert registry.get_field("email").rules == ["emailFormat"]
        registry.remove_rules("email", ["emailFormat", "absent"])
        assert registry.get_field("email").rules == []

    def test_get_rules_resolves_in_order(self, registry):
        registry.add_field("email", {"rules": ["emailFormat", "required"]})
        rules = registry.get_rules("email")
        assert list(rules) == ["emailFormat", "required"]
        assert rules["emailFormat"].message == "Not an email"
        assert registry.get_rules("ghost") is None


# =============================================================================
# Validation tests
# =============================================================================


class TestValidate:
    def test_required_empty_fails_with_required_message(self, form, registry):
        registry.add_field("email", {"rules": ["required", "emailFormat"]})
        result = registry.validate("email")

        assert not result
        assert result.status == FieldStatus.INVALID
        assert result.rule == "required"
        place = registry.get_field("email").message_place
        assert form.messages(place) == [REQUIRED_MESSAGE]
        assert place.visible is True

    def test_required_override_message(self, form, registry):
        registry.add_field(
            "email",
            {"rules": ["required"], "messages": {"required": "Email please"}},
        )
        result = registry.validate("email")
        assert result.message == "Email please"

    def test_second_rule_fails(self, form, registry):
        form.set_value("email", "not-an-email")
        registry.add_field("email", {"rules": ["required", "emailFormat"]})
        result = registry.validate("email")

        assert result.rule == "emailFormat"
        assert form.messages(registry.get_field("email").message_place) == ["Not an email"]

    def test_empty_not_required_is_skipped(self, form, registry):
        registry.add_field("email", {"rules": ["emailFormat"]})
        result = registry.validate("email")

        assert result
        assert result.status == FieldStatus.SKIPPED
        assert form.messages(registry.get_field("email").message_place) == []

    def test_non_empty_not_required_is_evaluated(self, form, registry):
        form.set_value("email", "nope")
        registry.add_field("email", {"rules": ["emailFormat"]})
        assert registry.validate("email").status == FieldStatus.INVALID

    def test_all_rules_pass(self, form, registry):
        form.set_value("email", "ann@example.com")
        registry.add_field("email", {"rules": ["required", "emailFormat"]})
        result = registry.validate("email")
        assert result.status == FieldStatus.VALID
        assert result.message is None

    def test_rules_run_in_attachment_order_and_short_circuit(self, form, registry):
        first = CountingRule(True)
        failing = CountingRule(False)
        after = CountingRule(True)
        registry.rules.set_rules(
            {
                "first": Rule(check=first, message="first"),
                "failing": Rule(check=failing, message="failing"),
                "after": Rule(check=after, message="after"),
            }
        )
        registry.add_field("name", {"rules": ["first", "failing", "after"]})

        result = registry.validate("name")

        assert result.rule == "failing"
        assert (first.calls, failing.calls, after.calls) == (1, 1, 0)

    def test_missing_element_is_not_found(self, form, registry):
        registry.add_field("phone", {"rules": ["required"]})
        result = registry.validate("phone")

        assert result.status == FieldStatus.NOT_FOUND
        assert not result

    def test_missing_element_logs_warning(self, registry, caplog):
        registry.add_field("phone", {"rules": ["required"]})
        with caplog.at_level("WARNING"):
            registry.validate("phone")
        assert "no bound element" in caplog.text

    def test_unregistered_field_with_element(self, registry):
        assert registry.validate("name").status == FieldStatus.VALID
        assert registry.validate("email").status == FieldStatus.SKIPPED

    def test_rule_removed_after_registration_raises(self, form, registry):
        registry.add_field("email", {"rules": ["emailFormat"]})
        form.set_value("email", "x")
        rules = form.data["signup"]["rules"]
        del rules["emailFormat"]

        with pytest.raises(RuleNotFoundError):
            registry.validate("email")

    def test_explicit_message_place(self, form, registry):
        registry.add_field("email", {"rules": ["required"]})
        registry.validate("email", "#summary")
        assert form.messages("#summary") == [REQUIRED_MESSAGE]
        assert form.messages(registry.get_field("email").message_place) == []

    def test_message_interpolation(self, form, registry):
        registry.rules.set_rule(
            "short", Rule(check=lambda v, c: False, message="{field} '{value}' is under {min}", params={"min": 3})
        )
        form.set_value("name", "Al")
        registry.add_field("name", {"rules": ["short"], "label": "Your name"})

        assert registry.validate("name").message == "Your name 'Al' is under 3"

    def test_predicate_receives_context(self, form, registry):
        seen = []

        def check(value, ctx):
            seen.append((value, ctx.field_name, ctx.element, ctx.surface))
            return True

        registry.rules.set_rule("spy", Rule(check=check))
        registry.add_field("name", {"rules": ["spy"]})
        registry.validate("name")

        assert seen == [("Ann", "name", form.get_field_element("name"), form)]


class TestAutoValidate:
    def test_interaction_validates_field(self, form, registry):
        registry.add_field("email", {"rules": ["required"], "auto": True})
        form.trigger("email", "blur")
        assert form.messages(registry.get_field("email").message_place) == [REQUIRED_MESSAGE]

    def test_interaction_clears_previous_messages(self, form, registry):
        registry.add_field("email", {"rules": ["required"], "auto": True})
        form.trigger("email", "blur")
        form.trigger("email", "blur")
        assert form.messages(registry.get_field("email").message_place) == [REQUIRED_MESSAGE]

    def test_success_callback_on_valid(self, form, registry):
        success = MagicMock()
        form.set_value("email", "ann@example.com")
        registry.add_field(
            "email", {"rules": ["required", "emailFormat"], "auto": True, "success": success}
        )
        form.trigger("email", "blur")

        success.assert_called_once()
        ctx = success.call_args.args[0]
        assert ctx.field_name == "email"
        assert ctx.surface is form

    def test_success_not_called_on_failure(self, form, registry):
        success = MagicMock()
        registry.add_field("email", {"rules": ["required"], "auto": True, "success": success})
        form.trigger("email", "blur")
        success.assert_not_called()

    def test_reset_trigger_clears_and_hides(self, form, registry):
        registry.add_field("email", {"rules": ["required"], "auto": True})
        form.trigger("email", "blur")
        form.trigger("email", "focus")

        place = registry.get_field("email").message_place
        assert form.messages(place) == []
        assert place.visible is False
