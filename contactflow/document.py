"""Headless document model for contact forms.

The pipeline never talks to a browser. Instead it reads and mutates these small
objects, which carry exactly the state the page script would touch: field
values, CSS classes, the feedback element next to each field and the submit
button's label and disabled flag.
"""

import secrets
import string
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Set

from contactflow.types import FieldType

INVALID_CLASS = "is-invalid"
WAS_VALIDATED_CLASS = "was-validated"

_ID_ALPHABET = string.ascii_lowercase + string.digits


@dataclass
class FeedbackElement:
    """The ``invalid-feedback`` element rendered after a field."""
    text: str = ""
    css_class: str = "invalid-feedback"


@dataclass
class FormField:
    """A named form control.

    Attributes:
        name: Name attribute; identifies the validation rule
        type: Semantic kind of the control
        value: Current raw string content
        required: Whether the control carries the ``required`` attribute
        checked: Checked state, only meaningful for checkboxes
        tag: Element tag (``input``, ``textarea`` or ``select``)
        classes: CSS classes currently applied
        feedback: Feedback element, created on first validation

    Examples:
        >>> f = FormField(name="email", type=FieldType.EMAIL, value=" a@b.co ")
        >>> f.trimmed_value
        'a@b.co'
        >>> f.is_invalid
        False
    """
    name: str
    type: FieldType = FieldType.TEXT
    value: str = ""
    required: bool = False
    checked: bool = False
    tag: str = "input"
    classes: Set[str] = field(default_factory=set)
    feedback: Optional[FeedbackElement] = None

    def __post_init__(self):
        if isinstance(self.type, str):
            self.type = FieldType(self.type)
        # Textareas and selects have no type attribute of their own.
        if self.type is FieldType.TEXTAREA:
            self.tag = "textarea"
        elif self.type is FieldType.SELECT:
            self.tag = "select"
        elif self.type is FieldType.CHECKBOX and not self.value:
            self.value = "on"

    @property
    def trimmed_value(self) -> str:
        return self.value.strip()

    @property
    def is_invalid(self) -> bool:
        return INVALID_CLASS in self.classes

    def ensure_feedback(self) -> FeedbackElement:
        """Return the feedback element, creating it on first use."""
        if self.feedback is None:
            self.feedback = FeedbackElement()
        return self.feedback

    def mark_valid(self) -> None:
        self.classes.discard(INVALID_CLASS)
        self.ensure_feedback().text = ""

    def mark_invalid(self, message: str) -> None:
        self.classes.add(INVALID_CLASS)
        self.ensure_feedback().text = message


@dataclass
class SubmitControl:
    """The form's ``button[type=submit]``."""
    label: str = "Send"
    disabled: bool = False
    _original_label: Optional[str] = field(default=None, init=False, repr=False)

    @property
    def locked(self) -> bool:
        return self._original_label is not None

    def lock(self, loading_label: str) -> None:
        """Disable the button and swap in the loading label."""
        if self._original_label is None:
            self._original_label = self.label
        self.disabled = True
        self.label = loading_label

    def unlock(self) -> None:
        """Re-enable the button and restore the label it had before ``lock``."""
        if self._original_label is not None:
            self.label = self._original_label
            self._original_label = None
        self.disabled = False


def generate_form_id() -> str:
    """Generate an identifier for a form that has none, e.g. ``form-k3j9x0a2b``."""
    return "form-" + "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))


@dataclass
class Form:
    """A form and its controls, in document order.

    Examples:
        >>> form = Form(fields=[FormField(name="email", value="a@b.co")])
        >>> form.serialize()
        {'email': 'a@b.co'}
    """
    fields: List[FormField] = field(default_factory=list)
    form_id: Optional[str] = None
    submit_control: Optional[SubmitControl] = field(default_factory=SubmitControl)
    classes: Set[str] = field(default_factory=set)

    def __iter__(self) -> Iterator[FormField]:
        return iter(self.fields)

    def ensure_id(self) -> str:
        if not self.form_id:
            self.form_id = generate_form_id()
        return self.form_id

    def get(self, name: str) -> Optional[FormField]:
        """Return the last field with ``name``, or None."""
        found = None
        for f in self.fields:
            if f.name == name:
                found = f
        return found

    def install_honeypot(self, name: str) -> FormField:
        """Append the hidden spam-trap field unless it is already present."""
        existing = self.get(name)
        if existing is not None:
            return existing
        trap = FormField(name=name, type=FieldType.TEXT)
        self.fields.append(trap)
        return trap

    def user_fields(self, honeypot_name: str) -> List[FormField]:
        """All fields except the honeypot."""
        return [f for f in self.fields if f.name != honeypot_name]

    def serialize(self, honeypot_name: Optional[str] = None) -> Dict[str, str]:
        """Flatten the form into name -> value, the way form encoding does.

        Unnamed controls and unchecked checkboxes are skipped. When a name
        repeats, the last value wins.
        """
        data: Dict[str, str] = {}
        for f in self.fields:
            if not f.name or f.name == honeypot_name:
                continue
            if f.type is FieldType.CHECKBOX and not f.checked:
                continue
            data[f.name] = f.value
        return data


__all__ = [
    "INVALID_CLASS",
    "WAS_VALIDATED_CLASS",
    "FeedbackElement",
    "FormField",
    "SubmitControl",
    "Form",
    "generate_form_id",
]
