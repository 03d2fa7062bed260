"""Form submission pipeline for contactflow.

This module provides the SubmissionPipeline that ties the validator, the
submission tracker, the notification presenter and the HTTP transport together
into the submit handler of a contact form.

A submit runs as one asyncio task and walks the form's state machine:

1. Idle -> Validating. A second submit on a form that is already submitting is
   dropped silently.
2. A filled-in honeypot field drops the submit silently (logged only).
3. Every user-facing field is validated. Invalid input marks the form
   ``was-validated``, shows a danger notification and returns to Idle without
   touching the network.
4. Locked: the submit button is disabled and shows a loading label.
5. Submitting: one POST of the serialized form as JSON.
6. Settling: the outcome is turned into a notification; success also schedules
   the redirect to the thank-you page.
7. The button is restored and the form released on every exit path.

Usage:
    >>> from contactflow.pipeline import SubmissionPipeline
    >>> from contactflow.document import Form, FormField
    >>> pipeline = SubmissionPipeline()
    >>> form = Form(form_id="contact", fields=[FormField(name="email", required=True)])
    >>> binding = pipeline.attach(form)
    >>> [f.name for f in form.fields]
    ['email', 'website']
"""

import asyncio
import functools
import logging
from dataclasses import dataclass, field
from typing import Dict, Optional, Set

import httpx
from typing_extensions import assert_never

from contactflow.config import MessageTable, PipelineSettings
from contactflow.debounce import Debounced, debounce
from contactflow.document import WAS_VALIDATED_CLASS, Form, FormField
from contactflow.errors import (
    BusinessFailure,
    DuplicateSubmission,
    NetworkFailure,
    SpamRejection,
    SubmissionAborted,
    SubmissionOutcome,
    Success,
)
from contactflow.events import EventEmitter
from contactflow.log import configure_logging, current_form_id
from contactflow.navigation import Navigator
from contactflow.notifications import NotificationPresenter
from contactflow.state_machine import PipelineStateMachine
from contactflow.tracker import SubmissionStateTracker
from contactflow.transport import SubmissionClient
from contactflow.types import EventType, PipelineState, Severity
from contactflow.validation import FieldValidator, FieldVerdict

logger = logging.getLogger(__name__)


@dataclass
class PipelineContext:
    """Everything a page session's pipeline shares across forms.

    Attributes:
        settings: Endpoint, timing and form settings
        messages: Fixed user-facing strings
        tracker: Forms currently mid-submission
        presenter: Notification region of the page
        validator: Field validator built from ``settings`` and ``messages``
        client: Transport for the submission endpoint
        navigator: Redirect target
        emitter: Audit event stream
    """
    settings: PipelineSettings
    messages: MessageTable
    tracker: SubmissionStateTracker
    presenter: NotificationPresenter
    validator: FieldValidator
    client: SubmissionClient
    navigator: Navigator
    emitter: EventEmitter = field(default_factory=EventEmitter)

    @classmethod
    def create(
        cls,
        settings: Optional[PipelineSettings] = None,
        messages: Optional[MessageTable] = None,
        navigator: Optional[Navigator] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        configure_logs: bool = False,
    ) -> "PipelineContext":
        """Build a context with defaults for anything not supplied.

        With ``configure_logs`` the ``contactflow`` logger is set up at
        ``settings.log_level``; leave it off when the host application owns
        logging configuration.
        """
        settings = settings or PipelineSettings()
        messages = messages or MessageTable()
        if configure_logs:
            configure_logging(settings.log_level)
        return cls(
            settings=settings,
            messages=messages,
            tracker=SubmissionStateTracker(),
            presenter=NotificationPresenter(
                lifetime_ms=settings.notification_lifetime_ms,
                fade_ms=settings.notification_fade_ms,
            ),
            validator=FieldValidator(messages, settings.message_min_length),
            client=SubmissionClient.from_endpoint(
                settings.base_url,
                settings.endpoint,
                fallback_message=messages.send_failed,
                timeout=settings.request_timeout,
                transport=transport,
            ),
            navigator=navigator or Navigator(),
        )


class FormBinding:
    """Event handlers wired to one form.

    ``on_blur`` validates immediately; ``on_input`` re-validates after a quiet
    period, and only while the field is currently marked invalid.
    """

    def __init__(self, pipeline: "SubmissionPipeline", form: Form) -> None:
        self.pipeline = pipeline
        self.form = form
        settings = pipeline.context.settings
        self.form_id = form.ensure_id()
        self.honeypot = form.install_honeypot(settings.honeypot_name)
        self._revalidators: Dict[int, Debounced] = {}

    @property
    def validator(self) -> FieldValidator:
        return self.pipeline.context.validator

    def on_blur(self, form_field: FormField) -> Optional[FieldVerdict]:
        if form_field is self.honeypot:
            return None
        return self.validator.validate(form_field)

    def on_input(self, form_field: FormField) -> None:
        if form_field is self.honeypot:
            return
        revalidate = self._revalidators.get(id(form_field))
        if revalidate is None:
            revalidate = debounce(
                functools.partial(self._revalidate, form_field),
                self.pipeline.context.settings.input_debounce_ms,
            )
            self._revalidators[id(form_field)] = revalidate
        revalidate()

    def _revalidate(self, form_field: FormField) -> None:
        if form_field.is_invalid:
            self.validator.validate(form_field)

    async def submit(self) -> Optional[SubmissionOutcome]:
        return await self.pipeline.handle_submit(self.form)

    def close(self) -> None:
        """Cancel pending input re-validation."""
        for revalidate in self._revalidators.values():
            revalidate.cancel()


class SubmissionPipeline:
    """Submit handler shared by every form of a page session.

    Attributes:
        context: Shared collaborators and settings
    """

    def __init__(self, context: Optional[PipelineContext] = None) -> None:
        self.context = context or PipelineContext.create()
        self._machines: Dict[str, PipelineStateMachine] = {}
        self._redirects: Set[asyncio.TimerHandle] = set()

    def attach(self, form: Form) -> FormBinding:
        """Prepare a form: assign its id, add the honeypot and return its handlers."""
        binding = FormBinding(self, form)
        self.machine_for(binding.form_id)
        return binding

    def machine_for(self, form_id: str) -> PipelineStateMachine:
        machine = self._machines.get(form_id)
        if machine is None:
            machine = PipelineStateMachine(form_id=form_id, emitter=self.context.emitter)
            self._machines[form_id] = machine
        return machine

    async def handle_submit(self, form: Form) -> Optional[SubmissionOutcome]:
        """Run one submit attempt for ``form``.

        Returns:
            The settled outcome, or None when nothing was sent (duplicate,
            spam, invalid input or an unexpected error). Never raises.
        """
        form_id = form.ensure_id()
        token = current_form_id.set(form_id)
        try:
            return await self._run(form, form_id)
        except DuplicateSubmission:
            logger.debug("Ignoring duplicate submit for form %s", form_id)
            return None
        except SubmissionAborted as exc:
            logger.info("Submit for form %s dropped: %s", form_id, exc)
            return None
        except Exception:
            logger.exception("Unexpected error while submitting form %s", form_id)
            self.context.presenter.show(self.context.messages.connection_error, Severity.DANGER)
            return None
        finally:
            current_form_id.reset(token)

    async def _run(self, form: Form, form_id: str) -> Optional[SubmissionOutcome]:
        ctx = self.context
        honeypot_name = ctx.settings.honeypot_name
        machine = self.machine_for(form_id)

        if not ctx.tracker.try_begin(form_id):
            machine.record(EventType.SUBMIT_DUPLICATE)
            raise DuplicateSubmission(form_id, "form is already submitting")

        try:
            machine.transition_to(PipelineState.VALIDATING)
            machine.record(EventType.SUBMIT_RECEIVED)

            honeypot = form.get(honeypot_name)
            if honeypot is not None and honeypot.value:
                logger.warning("Spam detected on form %s", form_id)
                machine.record(EventType.SPAM_REJECTED)
                machine.transition_to(PipelineState.IDLE)
                raise SpamRejection(form_id, "honeypot field was filled in")

            result = ctx.validator.validate_form(form.user_fields(honeypot_name))
            if not result.is_valid:
                form.classes.add(WAS_VALIDATED_CLASS)
                machine.record(
                    EventType.VALIDATION_FAILED,
                    {"invalidFields": result.invalid_fields},
                )
                machine.transition_to(PipelineState.IDLE)
                ctx.presenter.show(ctx.messages.form_has_errors, Severity.DANGER)
                return None

            machine.record(EventType.VALIDATION_PASSED)
            machine.transition_to(PipelineState.LOCKED)
            control = form.submit_control
            if control is not None:
                control.lock(ctx.messages.sending)
            try:
                payload = form.serialize(honeypot_name)
                machine.transition_to(PipelineState.SUBMITTING)
                machine.record(EventType.SUBMISSION_SENT, {"fields": sorted(payload)})
                outcome = await ctx.client.submit(payload)
                machine.transition_to(PipelineState.SETTLING)
                self._settle(machine, outcome)
                machine.transition_to(PipelineState.IDLE)
                return outcome
            finally:
                if control is not None:
                    control.unlock()
        finally:
            ctx.tracker.end(form_id)
            machine.reset()

    def _settle(self, machine: PipelineStateMachine, outcome: SubmissionOutcome) -> None:
        ctx = self.context
        if isinstance(outcome, Success):
            machine.record(EventType.SUBMISSION_SUCCEEDED)
            ctx.presenter.show(ctx.messages.sent, Severity.SUCCESS)
            self._schedule_redirect()
        elif isinstance(outcome, BusinessFailure):
            machine.record(EventType.SUBMISSION_REJECTED, {"message": outcome.message})
            ctx.presenter.show(outcome.message, Severity.DANGER)
        elif isinstance(outcome, NetworkFailure):
            machine.record(EventType.SUBMISSION_FAILED, {"reason": outcome.reason})
            ctx.presenter.show(ctx.messages.connection_error, Severity.DANGER)
        else:
            assert_never(outcome)

    def _schedule_redirect(self) -> None:
        settings = self.context.settings
        loop = asyncio.get_running_loop()

        def redirect() -> None:
            self._redirects.discard(handle)
            self.context.navigator.navigate(settings.redirect_url)

        handle = loop.call_later(settings.redirect_delay_ms / 1000, redirect)
        self._redirects.add(handle)

    def close(self) -> None:
        """Cancel pending redirects and notification timers (page teardown)."""
        for handle in self._redirects:
            handle.cancel()
        self._redirects.clear()
        self.context.presenter.close()


__all__ = [
    "PipelineContext",
    "FormBinding",
    "SubmissionPipeline",
]
