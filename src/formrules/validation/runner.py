"""Whole-form validation pass run on submission.

Lifecycle of one submission attempt:
1. Cancel the previous attempt's pending message-clear timer
2. Reveal and clear the shared message area
3. Validate every registered field in registration order
   (stopping at the first failure when stopOnError is set)
4. Schedule the message-clear timer
5. Invoke the global success callback if everything passed
"""

import logging
from typing import Any

from formrules.surface.protocol import FormSurface
from formrules.surface.scheduling import Scheduler
from formrules.validation.fields import FieldRegistry
from formrules.validation.options import OptionStore
from formrules.validation.types import FieldStatus, SubmissionResult, SubmissionState

logger = logging.getLogger(__name__)


class ValidationRunner:
    """Runs the submission-time validation pass for one container.

    The pending clear timer is the only state carried between attempts;
    each new submission cancels it before scheduling its own.
    """

    def __init__(
        self,
        surface: FormSurface,
        options: OptionStore,
        fields: FieldRegistry,
        scheduler: Scheduler,
    ):
        self.surface = surface
        self.options = options
        self.fields = fields
        self.scheduler = scheduler
        self.state = SubmissionState.IDLE
        self._timer: Any = None

    def _clear_all(self, shared: Any, effect: str | None) -> None:
        self._timer = None
        self.surface.clear_messages(shared)
        self.surface.hide_messages(shared, effect)
        for descriptor in self.fields.get_fields().values():
            self.surface.clear_messages(descriptor.message_place)
            self.surface.hide_messages(descriptor.message_place)
        logger.debug("Cleared messages for container '%s'", self.surface.container_id)

    def cancel_timer(self) -> None:
        if self._timer is not None:
            self.scheduler.cancel(self._timer)
            self._timer = None

    def submit(self) -> SubmissionResult:
        """Validate every registered field and decide whether to submit."""
        self.cancel_timer()
        self.state = SubmissionState.IDLE

        settings = self.options.get_many(
            ["stopOnError", "success", "messagesPlace", "errorTime", "errorEffect"]
        )
        shared = settings["messagesPlace"]
        effect = settings["errorEffect"]

        self.surface.show_messages(shared, effect)
        self.surface.clear_messages(shared)

        fields = self.fields.get_fields()
        for descriptor in fields.values():
            self.surface.clear_messages(descriptor.message_place)

        self.state = SubmissionState.VALIDATING
        result = SubmissionResult(proceed=False, valid=True)

        for name in fields:
            field_result = self.fields.validate(name)
            result.results.append(field_result)

            if field_result.status == FieldStatus.NOT_FOUND:
                result.missing.append(name)
                continue

            result.valid = result.valid and field_result.valid
            if not field_result.valid and settings["stopOnError"]:
                result.stopped_early = True
                break

        error_time = settings["errorTime"] or 0
        self._timer = self.scheduler.schedule(
            error_time, lambda: self._clear_all(shared, effect)
        )

        if result.valid:
            self.state = SubmissionState.INVOKING_SUCCESS
            success = settings["success"]
            result.proceed = bool(success(self.surface)) if success else True
        else:
            self.state = SubmissionState.BLOCKED

        logger.debug(
            "Submission for container '%s': valid=%s proceed=%s",
            self.surface.container_id,
            result.valid,
            result.proceed,
        )
        return result

    def handle_submit(self) -> bool:
        """Submit handler registered with the surface."""
        return self.submit().proceed
