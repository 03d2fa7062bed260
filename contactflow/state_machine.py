"""Per-form submit state machine.

Each submit event walks a form's machine through
Idle -> Validating -> Locked -> Submitting -> Settling -> Idle, or falls back
from Validating to Idle when the input is spam or invalid.

The state machine:
- Enforces valid transitions between states
- Emits a ``state.changed`` event for every transition
- Records pipeline decisions as typed events in the same stream

Usage:
    >>> from contactflow.state_machine import PipelineStateMachine
    >>> from contactflow.types import PipelineState
    >>> sm = PipelineStateMachine(form_id="contact")
    >>> sm.state
    <PipelineState.IDLE: 'idle'>
    >>> sm.transition_to(PipelineState.VALIDATING)
    >>> sm.state
    <PipelineState.VALIDATING: 'validating'>
    >>> len(sm.get_events())
    1
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Set
import uuid

from contactflow.events import EventEmitter, PipelineEvent
from contactflow.types import EventType, PipelineState


class InvalidStateTransitionError(Exception):
    """Raised when attempting an invalid state transition.

    Attributes:
        current_state: The current state before the attempted transition
        target_state: The target state that was attempted
    """

    def __init__(self, current_state: PipelineState, target_state: PipelineState, message: str):
        self.current_state = current_state
        self.target_state = target_state
        super().__init__(message)


# Maps each state to the set of states it can transition to
VALID_TRANSITIONS: Dict[PipelineState, Set[PipelineState]] = {
    PipelineState.IDLE: {
        PipelineState.VALIDATING,
    },
    PipelineState.VALIDATING: {
        PipelineState.LOCKED,
        PipelineState.IDLE,
    },
    PipelineState.LOCKED: {
        PipelineState.SUBMITTING,
    },
    PipelineState.SUBMITTING: {
        PipelineState.SETTLING,
    },
    PipelineState.SETTLING: {
        PipelineState.IDLE,
    },
}


@dataclass
class PipelineStateMachine:
    """State machine for one form's submit attempts.

    Attributes:
        form_id: Identifier of the form this machine belongs to
        state: Current pipeline state
        emitter: Optional emitter every recorded event is forwarded to

    Examples:
        >>> sm = PipelineStateMachine(form_id="contact")
        >>> sm.can_transition_to(PipelineState.VALIDATING)
        True
        >>> sm.can_transition_to(PipelineState.SUBMITTING)
        False
    """

    form_id: str
    state: PipelineState = PipelineState.IDLE
    emitter: Optional[EventEmitter] = field(default=None, repr=False)
    _events: List[PipelineEvent] = field(default_factory=list, init=False, repr=False)

    @property
    def is_idle(self) -> bool:
        return self.state is PipelineState.IDLE

    def can_transition_to(self, target_state: PipelineState) -> bool:
        """Check if transition to target state is valid."""
        return target_state in VALID_TRANSITIONS.get(self.state, set())

    def transition_to(self, target_state: PipelineState) -> None:
        """Move to ``target_state`` and emit a ``state.changed`` event.

        Raises:
            InvalidStateTransitionError: If the transition is not allowed
        """
        if not self.can_transition_to(target_state):
            raise InvalidStateTransitionError(
                current_state=self.state,
                target_state=target_state,
                message=(
                    f"Invalid state transition: cannot transition from "
                    f"'{self.state.value}' to '{target_state.value}'. "
                    f"Valid transitions from '{self.state.value}' are: "
                    f"{', '.join(sorted(s.value for s in VALID_TRANSITIONS[self.state]))}"
                ),
            )

        old_state = self.state
        self.state = target_state
        self.record(
            EventType.STATE_CHANGED,
            {"from_state": old_state.value, "to_state": target_state.value},
        )

    def reset(self) -> None:
        """Force the machine back to Idle after an unexpected failure."""
        if self.state is PipelineState.IDLE:
            return
        old_state = self.state
        self.state = PipelineState.IDLE
        self.record(
            EventType.STATE_CHANGED,
            {"from_state": old_state.value, "to_state": self.state.value, "reset": True},
        )

    def record(self, event_type: EventType, payload: Optional[Dict[str, Any]] = None) -> PipelineEvent:
        """Append an event stamped with the current state and forward it."""
        event = PipelineEvent(
            event_id=f"evt_{uuid.uuid4().hex[:16]}",
            type=event_type,
            form_id=self.form_id,
            ts=datetime.now(timezone.utc),
            state=self.state,
            payload=payload,
        )
        self._events.append(event)
        if self.emitter is not None:
            self.emitter.emit(event)
        return event

    def get_events(self) -> List[PipelineEvent]:
        """Get all events recorded by this machine, oldest first."""
        return list(self._events)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the machine's position.

        Examples:
            >>> PipelineStateMachine(form_id="contact").to_dict()
            {'formId': 'contact', 'state': 'idle'}
        """
        return {
            "formId": self.form_id,
            "state": self.state.value,
        }


__all__ = [
    "PipelineStateMachine",
    "InvalidStateTransitionError",
    "VALID_TRANSITIONS",
]
