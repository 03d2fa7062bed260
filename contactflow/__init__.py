"""contactflow: contact-form validation and submission pipeline.

contactflow provides:
- Field-level validation with a fixed rule per field role
- A per-form submit state machine that drops duplicate submits
- Honeypot spam filtering
- Asynchronous JSON submission with Success / BusinessFailure / NetworkFailure outcomes
- Auto-dismissing notifications and a redirect after a successful send

The page is modelled by small in-memory objects (forms, fields, the submit
button, the notification region), so the pipeline runs on any asyncio loop.

Basic usage:
    >>> from contactflow import Form, FormField, SubmissionPipeline
    >>> pipeline = SubmissionPipeline()
    >>> form = Form(form_id="contact", fields=[FormField(name="email", type="email")])
    >>> binding = pipeline.attach(form)
    >>> binding.form_id
    'contact'
"""

__version__ = "0.1.0"
__author__ = "contactflow Team"

# Version info
VERSION = (0, 1, 0)

# Core exports
from contactflow.document import Form, FormField, SubmitControl
from contactflow.pipeline import PipelineContext, SubmissionPipeline

# Package metadata
__all__ = [
    "__version__",
    "VERSION",
    "Form",
    "FormField",
    "SubmitControl",
    "PipelineContext",
    "SubmissionPipeline",
]
