"""
Module: framing.session

Purpose:
    Explicit per-upload session state. One FrameSession holds everything a
    single upload-to-download flow owns, and moves through a small state
    machine whose legal transitions are listed in TRANSITIONS.

Key Classes:
    - SessionState: Flow states
    - FrameSession: Session data, state and cancellation flag
    - InvalidTransitionError: Illegal state change

Dependencies:
    - threading (std): Cancellation event

Used By:
    - framing.controller: Owns the current session
    - gui.main_window: Reacts to state changes
"""

from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Optional

from PIL import Image

from photo_framer.core.models import CropSpec, SourceImage

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """Where the user is in the upload → crop → preview → download flow."""
    IDLE = "idle"
    UPLOADED = "uploaded"
    CROPPING = "cropping"
    RENDERING = "rendering"
    PREVIEWED = "previewed"
    EXPORTING = "exporting"
    ERROR = "error"


TRANSITIONS: Dict[SessionState, FrozenSet[SessionState]] = {
    SessionState.IDLE: frozenset({SessionState.UPLOADED, SessionState.ERROR}),
    SessionState.UPLOADED: frozenset({SessionState.CROPPING, SessionState.ERROR}),
    SessionState.CROPPING: frozenset({SessionState.RENDERING, SessionState.ERROR}),
    SessionState.RENDERING: frozenset({SessionState.PREVIEWED, SessionState.ERROR}),
    SessionState.PREVIEWED: frozenset({SessionState.CROPPING, SessionState.EXPORTING}),
    SessionState.EXPORTING: frozenset({SessionState.PREVIEWED, SessionState.ERROR}),
    # Acknowledging an error resumes the step that failed
    SessionState.ERROR: frozenset({
        SessionState.IDLE,
        SessionState.UPLOADED,
        SessionState.CROPPING,
        SessionState.PREVIEWED,
    }),
}

# Where control returns after a failure in each state
_RESUME_AFTER_FAILURE: Dict[SessionState, SessionState] = {
    SessionState.IDLE: SessionState.IDLE,
    SessionState.UPLOADED: SessionState.UPLOADED,
    SessionState.CROPPING: SessionState.CROPPING,
    SessionState.RENDERING: SessionState.CROPPING,
    SessionState.EXPORTING: SessionState.PREVIEWED,
}

_session_ids = itertools.count(1)


class InvalidTransitionError(Exception):
    """State change not allowed from the current state."""
    pass


def can_transition(current: SessionState, target: SessionState) -> bool:
    return target in TRANSITIONS[current]


@dataclass(eq=False)
class FrameSession:
    """
    State of one upload-to-download flow.

    A new session (with a new id) is created for every upload and for
    "start over"; async work captures the id it was started for and must
    not commit into any other session.

    Attributes:
        session_id: Unique, increasing id
        state: Current SessionState
        source: Uploaded photo (None until decoded)
        crop: Crop confirmed for the current preview
        preview: Preview composite
        error: Message of the last failure (while in ERROR)
    """

    session_id: int = field(default_factory=lambda: next(_session_ids))
    state: SessionState = SessionState.IDLE
    source: Optional[SourceImage] = None
    crop: Optional[CropSpec] = None
    preview: Optional[Image.Image] = field(default=None, repr=False)
    error: Optional[str] = None
    _resume_state: Optional[SessionState] = field(default=None, repr=False)
    _cancel_event: threading.Event = field(default_factory=threading.Event, repr=False)

    def transition(self, target: SessionState) -> None:
        """
        Move to a new state.

        Raises:
            InvalidTransitionError: If TRANSITIONS does not allow it
        """
        if not can_transition(self.state, target):
            raise InvalidTransitionError(
                f"Session {self.session_id}: cannot go from {self.state.value} to {target.value}"
            )
        logger.debug(f"Session {self.session_id}: {self.state.value} -> {target.value}")
        self.state = target

    def fail(self, message: str) -> None:
        """
        Record a failure and enter ERROR.

        The state to resume after acknowledgement is the step the user
        started the failed operation from; prior data is left intact.
        """
        if self.state is SessionState.ERROR:
            self.error = message
            return
        resume = _RESUME_AFTER_FAILURE.get(self.state)
        if resume is None:
            raise InvalidTransitionError(
                f"Session {self.session_id}: nothing can fail in state {self.state.value}"
            )
        self._resume_state = resume
        self.error = message
        self.transition(SessionState.ERROR)
        logger.debug(f"Session {self.session_id} failed: {message}")

    def acknowledge_error(self) -> SessionState:
        """
        Leave ERROR and return to the step that failed.

        Returns:
            The state resumed

        Raises:
            InvalidTransitionError: If not in ERROR
        """
        if self.state is not SessionState.ERROR:
            raise InvalidTransitionError(
                f"Session {self.session_id}: no error to acknowledge"
            )
        resume = self._resume_state or SessionState.IDLE
        self.transition(resume)
        self.error = None
        self._resume_state = None
        return resume

    def cancel(self) -> None:
        """Flag in-flight work for this session as stale."""
        self._cancel_event.set()

    @property
    def cancelled(self) -> bool:
        return self._cancel_event.is_set()

    @property
    def resume_state(self) -> Optional[SessionState]:
        return self._resume_state
