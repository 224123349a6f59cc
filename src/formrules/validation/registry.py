"""Rule factory registry for formrules.

Maps rule type names (as used in form definitions) to factories that
build Rule instances from a RuleDefinition.
"""

from collections.abc import Callable

from formrules.validation.errors import UnknownRuleTypeError
from formrules.validation.types import Rule, RuleDefinition

RuleFactory = Callable[[RuleDefinition], Rule]


class RuleFactoryRegistry:
    """Registry for rule types.

    Rule types must be registered before a definition can refer to them.
    Canned types are registered by register_canned_rules(); applications
    add their own at startup.

    Example:
        RuleFactoryRegistry.register("postcode", make_postcode_rule)

        rule = RuleFactoryRegistry.create(RuleDefinition(type="postcode"))
    """

    _factories: dict[str, RuleFactory] = {}

    @classmethod
    def register(cls, name: str, factory: RuleFactory) -> None:
        """Register a factory for a rule type.

        Idempotent - re-registering the same name is a no-op.

        Args:
            name: Rule type name (e.g., "email", "myapp.postcode")
            factory: Function that takes a RuleDefinition and returns a Rule
        """
        if name in cls._factories:
            return
        cls._factories[name] = factory

    @classmethod
    def create(cls, definition: RuleDefinition) -> Rule:
        """Build a rule from its definition.

        Raises:
            UnknownRuleTypeError: If the definition's type is not registered
        """
        factory = cls._factories.get(definition.type)
        if factory is None:
            raise UnknownRuleTypeError(definition.type, cls.list_registered())
        return factory(definition)

    @classmethod
    def is_registered(cls, name: str) -> bool:
        return name in cls._factories

    @classmethod
    def list_registered(cls) -> list[str]:
        return sorted(cls._factories.keys())

    @classmethod
    def clear(cls) -> None:
        """Clear all registrations. Primarily for testing."""
        cls._factories.clear()
