"""Structured error and outcome types for contactflow.

Errors fall into five groups:
- FieldError: a per-field validation failure, recovered locally by the form UI
- SpamRejection: the honeypot field was filled in; dropped silently
- DuplicateSubmission: a submit arrived while the form was already submitting
- NetworkFailure: the request itself failed; surfaced as a notification
- BusinessFailure: the endpoint answered but declined; surfaced with its message

SpamRejection and DuplicateSubmission are exceptions used for control flow
inside the pipeline and never escape the submit handler. The three submission
outcomes are plain values returned by the transport.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from contactflow.types import FieldRole, OutcomeKind


@dataclass(frozen=True)
class FieldError:
    """Per-field validation error details.

    Attributes:
        name: Name attribute of the offending field
        role: Validation role the field was checked under
        message: Human-readable error shown next to the field
        received: Optional - the trimmed value that failed

    Examples:
        >>> err = FieldError(
        ...     name="email",
        ...     role=FieldRole.EMAIL,
        ...     message="Please enter a valid email address.",
        ...     received="not-an-email"
        ... )
        >>> err.name
        'email'
    """
    name: str
    role: FieldRole
    message: str
    received: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        result: Dict[str, Any] = {
            "name": self.name,
            "role": self.role.value if isinstance(self.role, FieldRole) else self.role,
            "message": self.message,
        }
        if self.received is not None:
            result["received"] = self.received
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FieldError":
        """Create FieldError from dict."""
        role = data["role"]
        if isinstance(role, str):
            role = FieldRole(role)
        return cls(
            name=data["name"],
            role=role,
            message=data["message"],
            received=data.get("received"),
        )


@dataclass(frozen=True)
class Success:
    """The endpoint accepted the submission."""
    message: Optional[str] = None

    kind = OutcomeKind.SUCCESS

    @property
    def ok(self) -> bool:
        return True

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        result: Dict[str, Any] = {"kind": self.kind.value}
        if self.message is not None:
            result["message"] = self.message
        return result


@dataclass(frozen=True)
class BusinessFailure:
    """The endpoint answered with a well-formed rejection.

    Attributes:
        message: Text to show the user (server-provided or the generic fallback)
    """
    message: str

    kind = OutcomeKind.BUSINESS_FAILURE

    @property
    def ok(self) -> bool:
        return False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        return {"kind": self.kind.value, "message": self.message}


@dataclass(frozen=True)
class NetworkFailure:
    """The request could not be completed or its body could not be read.

    Attributes:
        reason: Diagnostic text for logs; never shown to the user
    """
    reason: str = ""

    kind = OutcomeKind.NETWORK_FAILURE

    @property
    def ok(self) -> bool:
        return False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        return {"kind": self.kind.value, "reason": self.reason}


SubmissionOutcome = Union[Success, BusinessFailure, NetworkFailure]


def outcome_from_dict(data: Dict[str, Any]) -> SubmissionOutcome:
    """Rebuild a submission outcome from its ``to_dict`` form.

    Raises:
        ValueError: If ``kind`` is not a known outcome tag
    """
    kind = OutcomeKind(data["kind"])
    if kind is OutcomeKind.SUCCESS:
        return Success(message=data.get("message"))
    if kind is OutcomeKind.BUSINESS_FAILURE:
        return BusinessFailure(message=data["message"])
    return NetworkFailure(reason=data.get("reason", ""))


class SubmissionAborted(Exception):
    """Base class for submit attempts that end silently.

    Attributes:
        form_id: Identifier of the form whose submit was dropped
    """

    def __init__(self, form_id: str, message: str):
        self.form_id = form_id
        super().__init__(message)


class SpamRejection(SubmissionAborted):
    """Raised when the honeypot field carries a value."""


class DuplicateSubmission(SubmissionAborted):
    """Raised when a submit arrives while the same form is mid-submission."""


__all__ = [
    "FieldError",
    "Success",
    "BusinessFailure",
    "NetworkFailure",
    "SubmissionOutcome",
    "outcome_from_dict",
    "SubmissionAborted",
    "SpamRejection",
    "DuplicateSubmission",
]
