"""Unit tests for the headless document model."""

import re

from contactflow.document import (
    Form,
    FormField,
    SubmitControl,
    generate_form_id,
)
from contactflow.types import FieldType


class TestFormField:
    """Field normalization and UI state."""

    def test_string_type_is_coerced(self):
        assert FormField(name="email", type="email").type is FieldType.EMAIL

    def test_textarea_and_select_set_tag(self):
        assert FormField(name="message", type=FieldType.TEXTAREA).tag == "textarea"
        assert FormField(name="topic", type=FieldType.SELECT).tag == "select"
        assert FormField(name="company").tag == "input"

    def test_checkbox_defaults_to_on(self):
        assert FormField(name="gdpr", type=FieldType.CHECKBOX).value == "on"
        assert FormField(name="plan", type=FieldType.CHECKBOX, value="pro").value == "pro"

    def test_feedback_created_once(self):
        field = FormField(name="email")
        feedback = field.ensure_feedback()
        assert field.ensure_feedback() is feedback

    def test_mark_invalid_and_valid(self):
        field = FormField(name="email")
        field.mark_invalid("Bad")
        assert field.is_invalid
        assert field.feedback.text == "Bad"
        field.mark_valid()
        assert not field.is_invalid
        assert field.feedback.text == ""


class TestSubmitControl:
    """Locking swaps the label and disables the button."""

    def test_lock_and_unlock(self):
        control = SubmitControl(label="Send message")
        control.lock("Sending...")
        assert control.disabled is True
        assert control.label == "Sending..."
        assert control.locked

        control.unlock()
        assert control.disabled is False
        assert control.label == "Send message"
        assert not control.locked

    def test_double_lock_keeps_original_label(self):
        control = SubmitControl(label="Send")
        control.lock("Sending...")
        control.lock("Sending...")
        control.unlock()
        assert control.label == "Send"

    def test_unlock_without_lock(self):
        control = SubmitControl(label="Send", disabled=True)
        control.unlock()
        assert control.label == "Send"
        assert control.disabled is False


class TestForm:
    """Ids, honeypot and serialization."""

    def test_generated_id_shape(self):
        assert re.fullmatch(r"form-[a-z0-9]{9}", generate_form_id())

    def test_ensure_id_keeps_existing(self):
        form = Form(form_id="contact")
        assert form.ensure_id() == "contact"

    def test_ensure_id_generates_once(self):
        form = Form()
        form_id = form.ensure_id()
        assert form_id.startswith("form-")
        assert form.ensure_id() == form_id

    def test_install_honeypot_once(self):
        form = Form(fields=[FormField(name="email")])
        trap = form.install_honeypot("website")
        assert form.install_honeypot("website") is trap
        assert [f.name for f in form.fields] == ["email", "website"]
        assert form.user_fields("website") == [form.fields[0]]

    def test_serialize_excludes_honeypot(self):
        form = Form(fields=[FormField(name="email", value="a@b.co"), FormField(name="website", value="x")])
        assert form.serialize("website") == {"email": "a@b.co"}

    def test_serialize_last_value_wins(self):
        form = Form(
            fields=[
                FormField(name="topic", value="web"),
                FormField(name="topic", value="seo"),
            ]
        )
        assert form.serialize() == {"topic": "seo"}
        assert form.get("topic").value == "seo"

    def test_serialize_skips_unchecked_and_unnamed(self):
        form = Form(
            fields=[
                FormField(name="gdpr", type=FieldType.CHECKBOX, checked=True),
                FormField(name="newsletter", type=FieldType.CHECKBOX),
                FormField(name="", value="ignored"),
            ]
        )
        assert form.serialize() == {"gdpr": "on"}

    def test_serialize_keeps_raw_value(self):
        form = Form(fields=[FormField(name="message", value="  hello  ")])
        assert form.serialize() == {"message": "  hello  "}
