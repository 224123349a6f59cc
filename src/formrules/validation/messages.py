"""Failure message interpolation."""

import re
from collections.abc import Mapping
from typing import Any


class MessageInterpolator:
    """Interpolates field details into failure messages.

    Supports:
    - {field} or {field:label} - The field's display label
    - {field:name} - The raw field name
    - {value} - The field's current value
    - {paramName} - Any parameter of the failing rule

    Placeholders with no matching source are left as written.
    """

    PATTERN = re.compile(r"\{(?P<key>\w+)(?::(?P<modifier>label|name))?\}")

    def __init__(self, field_labels: Mapping[str, str] | None = None):
        self.field_labels = dict(field_labels or {})

    def interpolate(
        self,
        template: str,
        field_name: str,
        value: Any = None,
        params: Mapping[str, Any] | None = None,
        label: str | None = None,
    ) -> str:
        params = params or {}

        def replace(match: re.Match) -> str:
            key = match.group("key")
            modifier = match.group("modifier")

            if key == "field":
                if modifier == "name":
                    return field_name
                return label or self._get_label(field_name)
            if key == "value":
                return self._format_value(value)
            if key in params:
                return self._format_value(params[key])
            return match.group(0)

        return self.PATTERN.sub(replace, template)

    def _get_label(self, field_name: str) -> str:
        if field_name in self.field_labels:
            return self.field_labels[field_name]
        return self._to_title_case(field_name)

    def _format_value(self, value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, bool):
            return "Yes" if value else "No"
        if isinstance(value, (list, tuple)):
            return ", ".join(str(v) for v in value)
        return str(value)

    def _to_title_case(self, name: str) -> str:
        """Convert camelCase or snake_case to Title Case."""
        result = re.sub(r"([A-Z])", r" \1", name).replace("_", " ")
        return " ".join(result.split()).title()
