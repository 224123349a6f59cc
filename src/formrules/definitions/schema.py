"""
definitions/schema.py — JSON Schema validation for form definition files.

Usage:
    from formrules.definitions.schema import validate_definition_file

    issues = validate_definition_file(Path("forms/signup.yaml"))
    for issue in issues:
        print(issue)
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError

logger = logging.getLogger(__name__)

_SCHEMA_PATH = Path(__file__).resolve().parent.parent / "schemas" / "form.schema.json"


@dataclass
class ValidationIssue:
    """A single finding for a form definition file."""

    file: Path
    message: str
    path: str = ""          # location within the document, e.g. "fields/email/rules"
    severity: str = "error" # "error" | "warning"

    def __str__(self) -> str:
        loc = f" at {self.path}" if self.path else ""
        return f"[{self.severity.upper()}] {self.file}{loc}: {self.message}"


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


@lru_cache(maxsize=1)
def _load_schema() -> dict[str, Any]:
    with _SCHEMA_PATH.open() as fh:
        return json.load(fh)


def _json_path(error: ValidationError) -> str:
    """Convert a jsonschema ValidationError path to a readable string."""
    parts = []
    for p in error.absolute_path:
        if isinstance(p, int):
            parts.append(f"[{p}]")
        else:
            parts.append(str(p))
    return "/".join(parts).replace("/[", "[")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def validate_definition(doc: Any, file: Path) -> list[ValidationIssue]:
    """Validate an already parsed definition document against the schema."""
    validator = Draft202012Validator(_load_schema())
    return [
        ValidationIssue(file=file, message=error.message, path=_json_path(error))
        for error in sorted(validator.iter_errors(doc), key=_json_path)
    ]


def validate_definition_file(path: Path) -> list[ValidationIssue]:
    """
    Validate a YAML (or JSON) form definition file against the schema.

    Returns:
        A list of :class:`ValidationIssue` objects (empty on success).
    """
    try:
        with path.open() as fh:
            raw = yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        return [ValidationIssue(file=path, message=f"YAML parse error: {exc}")]

    if raw is None:
        return [
            ValidationIssue(file=path, message="File is empty or contains only whitespace")
        ]

    issues = validate_definition(raw, path)
    if issues:
        logger.debug("%d schema issue(s) in %s", len(issues), path)
    return issues
