"""Field validation engine for contact forms.

This module provides a FieldValidator that checks individual form fields
against a fixed table of rules and reflects the verdict in the field's UI
state (the ``is-invalid`` class and the feedback element next to the field).

Each field is classified into exactly one FieldRole and each role owns at most
one shape rule, so a rule can be added or tested without touching the others.
The required check runs before any shape rule, and a required checkbox must be
checked regardless of what the other rules said.
"""

import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, NamedTuple, Optional

from contactflow.config import MessageTable
from contactflow.document import FormField
from contactflow.errors import FieldError
from contactflow.types import FieldRole, FieldType

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
# [^\W\d_] is "any Unicode letter"
NAME_PATTERN = re.compile(r"^(?:[^\W\d_]|[\s'-]){2,50}$")
PHONE_PATTERN = re.compile(r"^[\d\s+\-()]{10,20}$")
DEFAULT_MESSAGE_MIN_LENGTH = 10

NAME_FIELDS = frozenset({"firstName", "lastName"})


class FieldVerdict(NamedTuple):
    """Outcome of validating a single field.

    Unpacks as ``(is_valid, message)``; ``message`` is empty when valid.
    """
    is_valid: bool
    message: str = ""


@dataclass(frozen=True)
class ValidationRule:
    """A shape rule for one field role.

    Attributes:
        role: The role this rule applies to
        message: Error shown when the predicate fails
        predicate: Test over the trimmed, non-empty value
    """
    role: FieldRole
    message: str
    predicate: Callable[[str], bool]

    def check(self, value: str) -> bool:
        return bool(self.predicate(value))


def _matches(pattern: "re.Pattern[str]") -> Callable[[str], bool]:
    return lambda value: pattern.match(value) is not None


def build_rules(
    messages: MessageTable,
    message_min_length: int = DEFAULT_MESSAGE_MIN_LENGTH,
) -> Dict[FieldRole, ValidationRule]:
    """Build the role -> rule table. GENERIC has no entry."""
    return {
        FieldRole.EMAIL: ValidationRule(
            role=FieldRole.EMAIL,
            message=messages.invalid_email,
            predicate=_matches(EMAIL_PATTERN),
        ),
        FieldRole.PERSONAL_NAME: ValidationRule(
            role=FieldRole.PERSONAL_NAME,
            message=messages.invalid_name,
            predicate=_matches(NAME_PATTERN),
        ),
        FieldRole.PHONE: ValidationRule(
            role=FieldRole.PHONE,
            message=messages.invalid_phone,
            predicate=_matches(PHONE_PATTERN),
        ),
        FieldRole.MESSAGE: ValidationRule(
            role=FieldRole.MESSAGE,
            message=messages.message_too_short.format(min_length=message_min_length),
            predicate=lambda value: len(value) >= message_min_length,
        ),
    }


def classify(form_field: FormField) -> FieldRole:
    """Map a field to its validation role; the first match wins.

    Examples:
        >>> classify(FormField(name="contact", type=FieldType.EMAIL))
        <FieldRole.EMAIL: 'email'>
        >>> classify(FormField(name="lastName"))
        <FieldRole.PERSONAL_NAME: 'personal_name'>
        >>> classify(FormField(name="company"))
        <FieldRole.GENERIC: 'generic'>
    """
    if form_field.type is FieldType.EMAIL or form_field.name == "email":
        return FieldRole.EMAIL
    if form_field.name in NAME_FIELDS:
        return FieldRole.PERSONAL_NAME
    if form_field.type is FieldType.TEL or form_field.name == "phone":
        return FieldRole.PHONE
    if form_field.tag == "textarea" or form_field.name == "message":
        return FieldRole.MESSAGE
    return FieldRole.GENERIC


@dataclass(frozen=True)
class ValidationResult:
    """Result of validating every user-facing field of a form.

    Attributes:
        is_valid: Whether all fields passed
        errors: One FieldError per failing field, in document order
    """
    is_valid: bool
    errors: List[FieldError]

    @property
    def invalid_fields(self) -> List[str]:
        return [e.name for e in self.errors]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        return {
            "isValid": self.is_valid,
            "errors": [e.to_dict() for e in self.errors],
        }


class FieldValidator:
    """Validates fields and keeps their UI state in sync.

    Examples:
        >>> validator = FieldValidator()
        >>> field = FormField(name="email", type=FieldType.EMAIL, value="not-an-email")
        >>> validator.validate(field)
        FieldVerdict(is_valid=False, message='Please enter a valid email address.')
        >>> field.is_invalid
        True
    """

    def __init__(
        self,
        messages: Optional[MessageTable] = None,
        message_min_length: int = DEFAULT_MESSAGE_MIN_LENGTH,
    ) -> None:
        self.messages = messages or MessageTable()
        self.rules = build_rules(self.messages, message_min_length)

    def check(self, form_field: FormField) -> FieldVerdict:
        """Compute the verdict for a field without touching its UI state."""
        value = form_field.trimmed_value
        verdict = FieldVerdict(True)

        if form_field.required and not value:
            verdict = FieldVerdict(False, self.messages.required)
        elif value:
            rule = self.rules.get(classify(form_field))
            if rule is not None and not rule.check(value):
                verdict = FieldVerdict(False, rule.message)

        if (
            form_field.type is FieldType.CHECKBOX
            and form_field.required
            and not form_field.checked
        ):
            verdict = FieldVerdict(False, self.messages.must_agree)

        return verdict

    def validate(self, form_field: FormField) -> FieldVerdict:
        """Validate a field and update its CSS state and feedback text."""
        verdict = self.check(form_field)
        if verdict.is_valid:
            form_field.mark_valid()
        else:
            form_field.mark_invalid(verdict.message)
        return verdict

    def validate_form(self, fields: Iterable[FormField]) -> ValidationResult:
        """Validate every field; all of them are visited even after a failure."""
        errors: List[FieldError] = []
        for form_field in fields:
            verdict = self.validate(form_field)
            if not verdict.is_valid:
                errors.append(
                    FieldError(
                        name=form_field.name,
                        role=classify(form_field),
                        message=verdict.message,
                        received=form_field.trimmed_value,
                    )
                )
        return ValidationResult(is_valid=not errors, errors=errors)


__all__ = [
    "EMAIL_PATTERN",
    "NAME_PATTERN",
    "PHONE_PATTERN",
    "FieldVerdict",
    "ValidationRule",
    "ValidationResult",
    "FieldValidator",
    "build_rules",
    "classify",
]
