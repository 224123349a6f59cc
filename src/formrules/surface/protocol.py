"""FormSurface Protocol: what the validation engine needs from a UI container.

The engine never touches markup or events directly. A surface allocates
message placements, wires interaction triggers, renders messages, reads
field values and persists the container's option set.
"""

from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class FormSurface(Protocol):
    """Interface every form container must implement.

    Placement handles and element handles are opaque to the engine; it
    only passes them back to the surface. Trigger strings such as
    ``"blur"`` or ``"click focus"`` are likewise never interpreted.
    """

    container_id: str

    def create_message_place(
        self,
        field_name: str,
        *,
        element_id: str,
        css: dict[str, Any],
        parent: Any,
    ) -> Any: ...

    def remove_message_place(self, handle: Any) -> None: ...

    def bind_interaction(
        self,
        field_name: str,
        events: str,
        handler: Callable[[], Any],
    ) -> None: ...

    def unbind_interaction(self, field_name: str, events: str) -> None: ...

    def render_message(self, handle: Any, text: str) -> None: ...

    def clear_messages(self, handle: Any) -> None: ...

    def show_messages(self, handle: Any, effect: str | None = None) -> None: ...

    def hide_messages(self, handle: Any, effect: str | None = None) -> None: ...

    def get_field_value(self, field_name: str) -> Any: ...

    def get_field_element(self, field_name: str) -> Any | None: ...

    def on_submit(self, handler: Callable[[], bool]) -> None: ...

    def load_options(self, container_id: str) -> dict[str, Any] | None: ...

    def save_options(self, container_id: str, options: dict[str, Any]) -> None: ...
