import asyncio
import logging
from enum import Enum
from typing import Callable, List, Optional

from .errors import GradePortalError, ValidationError
from .models import EvaluationResponse
from .notifications import NotificationCenter
from .renderer import render_report
from .validator import ensure_valid
from .view import ViewContext

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Evaluation completed successfully!"


class State(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


TRANSITIONS = {
    State.IDLE: {State.VALIDATING},
    State.VALIDATING: {State.IDLE, State.SUBMITTING},
    State.SUBMITTING: {State.SUCCEEDED, State.FAILED},
    State.SUCCEEDED: {State.IDLE},
    State.FAILED: {State.IDLE},
}


class IllegalTransition(RuntimeError):
    pass


class SubmissionController:
    """
    Drives one submission at a time:
    Idle -> Validating -> Submitting -> (Succeeded | Failed) -> Idle.
    """

    def __init__(self, view: ViewContext, client, notifications: NotificationCenter):
        self.view = view
        self.client = client
        self.notifications = notifications
        self.state = State.IDLE
        self.response: Optional[EvaluationResponse] = None
        self._listeners: List[Callable[[State, State], None]] = []

    def add_listener(self, callback: Callable[[State, State], None]):
        self._listeners.append(callback)

    def _transition(self, new_state: State):
        if new_state not in TRANSITIONS[self.state]:
            raise IllegalTransition(f"{self.state.value} -> {new_state.value}")
        old, self.state = self.state, new_state
        logger.debug(f"Submission state {old.value} -> {new_state.value}")
        for callback in self._listeners:
            callback(old, new_state)

    # ================= LOADING STATE =================

    def show_loading(self):
        self.view.loading_visible = True
        self.view.submit_enabled = False
        self.view.results_visible = False

    def hide_loading(self):
        self.view.loading_visible = False
        self.view.submit_enabled = True

    # ================= SUBMIT =================

    async def submit(self) -> Optional[EvaluationResponse]:
        """Handle a submit action. Returns the response on success, else None."""
        if self.state is not State.IDLE:
            logger.warning(f"Submit ignored while {self.state.value}")
            return None

        self._transition(State.VALIDATING)
        selection = self.view.selection()
        try:
            ensure_valid(selection)
        except ValidationError as e:
            self.notifications.error(e.message)
            self._transition(State.IDLE)
            return None

        self._transition(State.SUBMITTING)
        self.notifications.clear()
        self.show_loading()
        # A new submission discards the previous report
        self.view.report = None
        self.response = None

        try:
            response = await asyncio.to_thread(
                self.client.submit,
                selection,
                self.view.use_openai,
                self.view.use_vision,
                dict(self.view.form_fields),
            )
            report = render_report(response, self.client.base_url)
        except GradePortalError as e:
            logger.error(f"Evaluation error: {e.message}")
            self._fail(e.message)
        except Exception as e:
            logger.exception("Evaluation error while rendering results")
            self._fail(str(e) or e.__class__.__name__)
        else:
            self._transition(State.SUCCEEDED)
            self.view.report = report
            self.view.results_visible = True
            self.response = response
            self.notifications.success(SUCCESS_MESSAGE)
            logger.info(f"Rendered results for {len(response.results)} student(s)")
        finally:
            self.hide_loading()
            if self.state is State.SUBMITTING:
                # Left without an outcome, e.g. the task was cancelled
                self._transition(State.FAILED)
            self._transition(State.IDLE)

        return self.response

    def _fail(self, message: str):
        self._transition(State.FAILED)
        self.notifications.error(f"Error: {message}")
