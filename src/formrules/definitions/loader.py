"""Load form definitions from YAML files."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from formrules.definitions.schema import validate_definition
from formrules.validation.errors import DefinitionError
from formrules.validation.registry import RuleFactoryRegistry
from formrules.validation.types import Rule, RuleDefinition

logger = logging.getLogger(__name__)


@dataclass
class FormDefinition:
    """A parsed form definition.

    Attributes:
        settings: Global options in their camelCase option names
        rules: Rule name -> declarative rule definition
        fields: Field name -> field options
        source: File the definition was loaded from, if any
    """

    settings: dict[str, Any] = field(default_factory=dict)
    rules: dict[str, RuleDefinition] = field(default_factory=dict)
    fields: dict[str, dict[str, Any]] = field(default_factory=dict)
    source: Path | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any], source: Path | None = None) -> "FormDefinition":
        """Create a FormDefinition from a parsed YAML/JSON document.

        Raises:
            DefinitionError: If the document does not match the schema
        """
        issues = validate_definition(data, source or Path("<definition>"))
        if issues:
            details = "; ".join(str(issue) for issue in issues)
            raise DefinitionError(f"Invalid form definition: {details}")

        return cls(
            settings=dict(data.get("settings") or {}),
            rules={
                name: RuleDefinition.from_dict(rule_data)
                for name, rule_data in (data.get("rules") or {}).items()
            },
            fields={
                name: dict(field_data or {})
                for name, field_data in (data.get("fields") or {}).items()
            },
            source=source,
        )

    def build_rules(self) -> dict[str, Rule]:
        """Resolve every rule definition through RuleFactoryRegistry.

        Raises:
            UnknownRuleTypeError: If a rule names an unregistered type
        """
        return {
            name: RuleFactoryRegistry.create(definition)
            for name, definition in self.rules.items()
        }

    def to_options(self) -> dict[str, Any]:
        """Options suitable for attach()."""
        options = dict(self.settings)
        options["rules"] = self.build_rules()
        options["fields"] = {name: dict(opts) for name, opts in self.fields.items()}
        return options


def load_form_definition(path: Path) -> FormDefinition:
    """Load a form definition from a YAML (or JSON) file.

    Raises:
        DefinitionError: If the file cannot be read or parsed
    """
    try:
        with path.open() as fh:
            data = yaml.safe_load(fh)
    except OSError as e:
        raise DefinitionError(f"Cannot read form definition {path}: {e}") from e
    except yaml.YAMLError as e:
        raise DefinitionError(f"YAML parse error in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise DefinitionError(f"Form definition {path} must be a mapping")

    definition = FormDefinition.from_dict(data, source=path)
    logger.debug(
        "Loaded %d rule(s) and %d field(s) from %s",
        len(definition.rules),
        len(definition.fields),
        path,
    )
    return definition


def load_record(path: Path) -> dict[str, Any]:
    """Load a record of field values from a YAML (or JSON) file."""
    try:
        with path.open() as fh:
            data = yaml.safe_load(fh)
    except OSError as e:
        raise DefinitionError(f"Cannot read record {path}: {e}") from e
    except yaml.YAMLError as e:
        raise DefinitionError(f"YAML parse error in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise DefinitionError(f"Record {path} must be a mapping of field values")
    return data
