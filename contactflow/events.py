"""Event system for the contactflow submission pipeline.

This module provides the audit event record and the emitter used to observe
the pipeline. Every state change and every significant decision (duplicate
dropped, spam rejected, validation failed, request sent, outcome settled)
emits a typed PipelineEvent.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional
import json
import logging

from .types import EventType, PipelineState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineEvent:
    """A single event in a form's submission lifecycle.

    Attributes:
        event_id: Unique event identifier (e.g., "evt_01H8...")
        type: Event type from EventType enum
        form_id: ID of the form this event relates to
        ts: UTC timestamp when the event occurred
        state: Pipeline state after this event
        payload: Optional event-specific data (e.g., invalid fields, outcome)

    Examples:
        >>> from datetime import datetime, timezone
        >>> event = PipelineEvent(
        ...     event_id="evt_001",
        ...     type=EventType.SUBMIT_RECEIVED,
        ...     form_id="contact",
        ...     ts=datetime.now(timezone.utc),
        ...     state=PipelineState.VALIDATING,
        ... )
    """
    event_id: str
    type: EventType
    form_id: str
    ts: datetime
    state: PipelineState
    payload: Optional[Dict[str, Any]] = None

    def __post_init__(self):
        """Validate and normalize fields."""
        if isinstance(self.state, str):
            object.__setattr__(self, "state", PipelineState(self.state))
        if isinstance(self.type, str):
            object.__setattr__(self, "type", EventType(self.type))

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization.

        Timestamp is formatted as ISO 8601 string.
        """
        result: Dict[str, Any] = {
            "eventId": self.event_id,
            "type": self.type.value,
            "formId": self.form_id,
            "ts": self.ts.isoformat(),
            "state": self.state.value,
        }
        if self.payload is not None:
            result["payload"] = self.payload
        return result

    def to_jsonl(self) -> str:
        """Convert event to a single-line JSON string."""
        return json.dumps(self.to_dict(), separators=(',', ':'))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PipelineEvent":
        """Create PipelineEvent from dictionary (camelCase keys)."""
        ts = datetime.fromisoformat(data["ts"].replace('Z', '+00:00'))
        return cls(
            event_id=data["eventId"],
            type=EventType(data["type"]),
            form_id=data["formId"],
            ts=ts,
            state=PipelineState(data["state"]),
            payload=data.get("payload"),
        )


EventListener = Callable[[PipelineEvent], None]
"""Type alias for event listener callbacks.

Listeners are called synchronously on the event loop when events are emitted
and should return quickly.
"""


class EventEmitter:
    """Dispatches pipeline events to subscribed listeners.

    Features:
    - Type-specific subscriptions
    - Wildcard subscriptions (all events)
    - Synchronous dispatch in registration order
    - Error isolation (a failing listener is logged and skipped)

    Examples:
        >>> emitter = EventEmitter()
        >>> seen = []
        >>> emitter.on(EventType.SPAM_REJECTED, seen.append)
        >>> emitter.listener_count()
        1
    """

    def __init__(self):
        """Initialize event emitter with empty listener registries."""
        self._listeners: Dict[EventType, List[EventListener]] = {}
        self._any_listeners: List[EventListener] = []

    def on(self, event_type: EventType, listener: EventListener) -> None:
        """Subscribe to a specific event type."""
        if event_type not in self._listeners:
            self._listeners[event_type] = []
        self._listeners[event_type].append(listener)

    def on_any(self, listener: EventListener) -> None:
        """Subscribe to all event types."""
        self._any_listeners.append(listener)

    def off(self, event_type: EventType, listener: EventListener) -> None:
        """Unsubscribe from a specific event type; unknown listeners are ignored."""
        if event_type in self._listeners and listener in self._listeners[event_type]:
            self._listeners[event_type].remove(listener)

    def off_any(self, listener: EventListener) -> None:
        """Unsubscribe a wildcard listener; unknown listeners are ignored."""
        if listener in self._any_listeners:
            self._any_listeners.remove(listener)

    def emit(self, event: PipelineEvent) -> None:
        """Dispatch an event to type-specific listeners, then wildcard listeners.

        A listener that raises is logged and does not prevent the remaining
        listeners from running.
        """
        listeners = list(self._listeners.get(event.type, [])) + list(self._any_listeners)
        for listener in listeners:
            try:
                listener(event)
            except Exception:
                logger.exception(
                    "Event listener %r failed for %s", listener, event.type.value
                )

    def clear(self) -> None:
        """Remove all event listeners."""
        self._listeners.clear()
        self._any_listeners.clear()

    def listener_count(self, event_type: Optional[EventType] = None) -> int:
        """Count listeners for ``event_type``, or all listeners when None."""
        if event_type is not None:
            return len(self._listeners.get(event_type, []))
        total = len(self._any_listeners)
        for listeners in self._listeners.values():
            total += len(listeners)
        return total


__all__ = [
    "PipelineEvent",
    "EventListener",
    "EventEmitter",
]
