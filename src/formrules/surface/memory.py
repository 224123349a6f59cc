"""Headless, dict-backed FormSurface.

InMemoryForm keeps field values, message placements, interaction
bindings and the persisted option set in plain Python structures. The CLI
uses it to validate records loaded from files; tests use it to observe
exactly what the engine rendered.
"""

import logging
import uuid
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)


@dataclass
class FormElement:
    """A named input element holding a value."""

    name: str
    value: Any = None


@dataclass(eq=False)
class MessagePlace:
    """A rendering target for failure messages.

    Attributes:
        element_id: Identifier of the placement
        css: Style map requested when the placement was created
        parent: Placement this one was appended to, if any
        messages: Rendered message texts, in order
        visible: Whether the placement is currently shown
        effect: Last show/hide effect requested
    """

    element_id: str
    css: dict[str, Any] = field(default_factory=dict)
    parent: Any = None
    messages: list[str] = field(default_factory=list)
    visible: bool = False
    effect: str | None = None


class InMemoryForm:
    """A FormSurface whose state lives entirely in memory.

    Example:
        form = InMemoryForm({"email": "", "name": "Ann"})
        validator = attach(form, {"fields": {"email": {"rules": ["required"]}}})
        proceed = form.submit()
    """

    def __init__(
        self,
        values: Mapping[str, Any] | None = None,
        container_id: str | None = None,
    ):
        self.container_id = container_id or uuid.uuid4().hex
        self.elements: dict[str, FormElement] = {
            name: FormElement(name, value) for name, value in (values or {}).items()
        }
        self.places: dict[str, MessagePlace] = {}
        self.bindings: dict[tuple[str, str], list[Callable[[], Any]]] = {}
        self.submit_handlers: list[Callable[[], bool]] = []
        self.data: dict[str, dict[str, Any]] = {}

    # ------------------------------------------------------------------
    # Field values
    # ------------------------------------------------------------------

    def set_value(self, name: str, value: Any) -> None:
        if name in self.elements:
            self.elements[name].value = value
        else:
            self.elements[name] = FormElement(name, value)

    def remove_element(self, name: str) -> None:
        self.elements.pop(name, None)

    def get_field_value(self, field_name: str) -> Any:
        element = self.elements.get(field_name)
        return element.value if element else None

    def get_field_element(self, field_name: str) -> FormElement | None:
        return self.elements.get(field_name)

    # ------------------------------------------------------------------
    # Message placements
    # ------------------------------------------------------------------

    def place(self, handle: Any) -> MessagePlace:
        """Resolve a placement handle, creating named placements on demand."""
        if isinstance(handle, MessagePlace):
            return handle
        key = str(handle or "")
        if key not in self.places:
            self.places[key] = MessagePlace(element_id=key)
        return self.places[key]

    def create_message_place(
        self,
        field_name: str,
        *,
        element_id: str,
        css: dict[str, Any],
        parent: Any,
    ) -> MessagePlace:
        place = MessagePlace(
            element_id=element_id,
            css=dict(css or {}),
            parent=self.place(parent),
        )
        self.places[element_id] = place
        logger.debug("Created message place '%s' for field '%s'", element_id, field_name)
        return place

    def remove_message_place(self, handle: Any) -> None:
        place = self.place(handle)
        if self.places.get(place.element_id) is place:
            del self.places[place.element_id]

    def render_message(self, handle: Any, text: str) -> None:
        self.place(handle).messages.append(text)

    def clear_messages(self, handle: Any) -> None:
        self.place(handle).messages.clear()

    def show_messages(self, handle: Any, effect: str | None = None) -> None:
        place = self.place(handle)
        place.visible = True
        place.effect = effect

    def hide_messages(self, handle: Any, effect: str | None = None) -> None:
        place = self.place(handle)
        place.visible = False
        place.effect = effect

    def messages(self, handle: Any = "") -> list[str]:
        """Messages currently rendered in a placement."""
        return list(self.place(handle).messages)

    # ------------------------------------------------------------------
    # Interaction triggers
    # ------------------------------------------------------------------

    def bind_interaction(
        self,
        field_name: str,
        events: str,
        handler: Callable[[], Any],
    ) -> None:
        for event in events.split():
            self.bindings.setdefault((field_name, event), []).append(handler)

    def unbind_interaction(self, field_name: str, events: str) -> None:
        for event in events.split():
            self.bindings.pop((field_name, event), None)

    def trigger(self, field_name: str, event: str) -> int:
        """Simulate an interaction event on a field.

        Returns:
            Number of handlers invoked
        """
        handlers = list(self.bindings.get((field_name, event), []))
        for handler in handlers:
            handler()
        return len(handlers)

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    def on_submit(self, handler: Callable[[], bool]) -> None:
        self.submit_handlers.append(handler)

    def submit(self) -> bool:
        """Run the submit handlers; False from any of them blocks submission."""
        proceed = True
        for handler in self.submit_handlers:
            if not handler():
                proceed = False
        return proceed

    # ------------------------------------------------------------------
    # Persisted state
    # ------------------------------------------------------------------

    def load_options(self, container_id: str) -> dict[str, Any] | None:
        return self.data.get(container_id)

    def save_options(self, container_id: str, options: dict[str, Any]) -> None:
        self.data[container_id] = options
