"""Core type definitions for the contactflow submission pipeline.

This module defines the fundamental types used throughout contactflow:
- FieldType: Semantic kind of a form control (text, email, tel, checkbox, ...)
- FieldRole: Closed set of validation roles a field can play
- Severity: Notification severity levels
- PipelineState: States of the per-submit pipeline state machine
- EventType: Audit event types emitted by the pipeline
- OutcomeKind: Tags for the result of a remote submission

These types form the contract between the document model, the validator and
the submission pipeline.
"""

from enum import Enum


class FieldType(str, Enum):
    """Semantic kind of a form control, as given by its ``type`` attribute.

    ``TEXTAREA`` and ``SELECT`` stand in for controls whose kind comes from the
    element tag rather than a ``type`` attribute.
    """
    TEXT = "text"
    EMAIL = "email"
    TEL = "tel"
    CHECKBOX = "checkbox"
    TEXTAREA = "textarea"
    SELECT = "select"
    HIDDEN = "hidden"


class FieldRole(str, Enum):
    """Validation role of a field.

    Every field maps to exactly one role (see ``validation.classify``).
    Adding a rule means adding a role and an entry in the rule table.
    """
    EMAIL = "email"
    PERSONAL_NAME = "personal_name"
    PHONE = "phone"
    MESSAGE = "message"
    GENERIC = "generic"


class Severity(str, Enum):
    """Notification severity; the value doubles as the alert CSS suffix."""
    INFO = "info"
    SUCCESS = "success"
    DANGER = "danger"


class PipelineState(str, Enum):
    """States of a single submit attempt.

    Idle -> Validating -> Locked -> Submitting -> Settling -> Idle.
    Validating may fall straight back to Idle (spam or invalid input).
    """
    IDLE = "idle"
    VALIDATING = "validating"
    LOCKED = "locked"
    SUBMITTING = "submitting"
    SETTLING = "settling"


class EventType(str, Enum):
    """Audit event types for the pipeline event stream."""
    SUBMIT_RECEIVED = "submit.received"
    SUBMIT_DUPLICATE = "submit.duplicate"
    SPAM_REJECTED = "spam.rejected"
    VALIDATION_FAILED = "validation.failed"
    VALIDATION_PASSED = "validation.passed"
    SUBMISSION_SENT = "submission.sent"
    SUBMISSION_SUCCEEDED = "submission.succeeded"
    SUBMISSION_REJECTED = "submission.rejected"
    SUBMISSION_FAILED = "submission.failed"
    STATE_CHANGED = "state.changed"


class OutcomeKind(str, Enum):
    """Tag of a settled remote submission."""
    SUCCESS = "success"
    BUSINESS_FAILURE = "business_failure"
    NETWORK_FAILURE = "network_failure"


__all__ = [
    "FieldType",
    "FieldRole",
    "Severity",
    "PipelineState",
    "EventType",
    "OutcomeKind",
]
