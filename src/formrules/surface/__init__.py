"""Form surfaces and timer schedulers.

The validation engine talks to its host container only through the
FormSurface protocol. InMemoryForm is the bundled headless surface.
"""

from formrules.surface.memory import FormElement, InMemoryForm, MessagePlace
from formrules.surface.protocol import FormSurface
from formrules.surface.scheduling import (
    AsyncioScheduler,
    ManualScheduler,
    Scheduler,
    ThreadingScheduler,
    default_scheduler,
)

__all__ = [
    "AsyncioScheduler",
    "FormElement",
    "FormSurface",
    "InMemoryForm",
    "ManualScheduler",
    "MessagePlace",
    "Scheduler",
    "ThreadingScheduler",
    "default_scheduler",
]
