"""YAML form definitions.

A definition declares global settings, rules (by canned type) and fields:

    settings:
      stopOnError: true
    rules:
      emailFormat:
        type: email
    fields:
      email:
        rules: [required, emailFormat]
        messages:
          required: "Please enter your email"
"""

from formrules.definitions.loader import FormDefinition, load_form_definition, load_record
from formrules.definitions.schema import (
    ValidationIssue,
    validate_definition,
    validate_definition_file,
)

__all__ = [
    "FormDefinition",
    "ValidationIssue",
    "load_form_definition",
    "load_record",
    "validate_definition",
    "validate_definition_file",
]
