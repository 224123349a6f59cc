"""Container-scoped option store.

The OptionStore is the single source of truth for one container's
configuration. It reloads the option set from the surface before every
read and writes it back after every change, so every component holding
the same container observes the same options.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from formrules.surface.protocol import FormSurface


def _default_success(surface: Any = None) -> bool:
    return True


def default_options() -> dict[str, Any]:
    """Global option defaults. Built fresh for every container."""
    return {
        "messagesPlace": "",
        "stopOnError": False,
        "fieldBind": "keyup keydown keypress",
        "success": _default_success,
        "rules": {},
        "errorTime": 5000,
        "fields": {},
        "errorPlacePrefix": "error_",
        "errorCSS": {"color": "red"},
        "errorEffect": "fade",
    }


class OptionStore:
    """Reads and writes the option set persisted on a form surface.

    Missing option names read as None rather than raising.
    """

    def __init__(self, surface: FormSurface, options: Mapping[str, Any] | None = None):
        self.surface = surface
        self.container_id = surface.container_id
        self._options: dict[str, Any] = default_options()
        self._options.update(options or {})
        self._save()

    def _load(self) -> dict[str, Any]:
        loaded = self.surface.load_options(self.container_id)
        if loaded is not None:
            self._options = loaded
        return self._options

    def _save(self) -> None:
        self.surface.save_options(self.container_id, self._options)

    def get(self, name: str) -> Any:
        return self._load().get(name)

    def set(self, name: str, value: Any) -> "OptionStore":
        options = self._load()
        options[name] = value
        self._save()
        return self

    def get_many(self, names: Iterable[str] | None = None) -> dict[str, Any]:
        """Return the named options, or every option when names is None."""
        options = self._load()
        if names is None:
            return dict(options)
        return {name: options.get(name) for name in names}

    def set_many(self, values: Mapping[str, Any]) -> "OptionStore":
        options = self._load()
        options.update(values)
        self._save()
        return self
