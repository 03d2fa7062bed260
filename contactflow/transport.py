"""HTTP transport for form submissions.

A single POST of the JSON-encoded payload is issued per submission; there are
no retries. The reply is folded into one of three outcomes:

- the request raised or the body is not JSON -> NetworkFailure
- the body is a JSON object with a truthy ``success`` -> Success
- anything else -> BusinessFailure, carrying the server's ``message`` when it
  sent one and a generic fallback otherwise
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from jsonschema import Draft7Validator

from contactflow.errors import BusinessFailure, NetworkFailure, SubmissionOutcome, Success

logger = logging.getLogger(__name__)

RESPONSE_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "success": {},
        "message": {},
    },
}

MESSAGE_SCHEMA: dict[str, Any] = {"type": "string", "minLength": 1}

_response_validator = Draft7Validator(RESPONSE_SCHEMA)
_message_validator = Draft7Validator(MESSAGE_SCHEMA)


def interpret_response(body: Any, fallback_message: str) -> SubmissionOutcome:
    """Map a decoded response body onto a submission outcome.

    Only a JSON object counts as a reply; ``success`` alone decides the
    outcome. ``message`` is used when it is a non-empty string.

    Examples:
        >>> interpret_response({"success": True}, "failed")
        Success(message=None)
        >>> interpret_response({"success": True, "message": 201}, "failed")
        Success(message=None)
        >>> interpret_response({"success": False, "message": "Mailbox full"}, "failed")
        BusinessFailure(message='Mailbox full')
        >>> interpret_response(["unexpected"], "failed")
        BusinessFailure(message='failed')
    """
    if not _response_validator.is_valid(body):
        logger.warning("Unexpected response shape from submission endpoint")
        return BusinessFailure(message=fallback_message)

    message = body.get("message")
    if not _message_validator.is_valid(message):
        message = None
    if body.get("success"):
        return Success(message=message)
    return BusinessFailure(message=message or fallback_message)


class SubmissionClient:
    """Posts form payloads to the submission endpoint."""

    def __init__(
        self,
        url: str | httpx.URL,
        fallback_message: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.url = httpx.URL(url)
        self.fallback_message = fallback_message
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_endpoint(
        cls,
        base_url: str,
        endpoint: str,
        fallback_message: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "SubmissionClient":
        """Build a client for ``endpoint`` resolved against ``base_url``."""
        return cls(
            httpx.URL(base_url).join(endpoint),
            fallback_message=fallback_message,
            timeout=timeout,
            transport=transport,
        )

    async def submit(self, payload: dict[str, str]) -> SubmissionOutcome:
        """POST ``payload`` as JSON and return the settled outcome. Never raises."""
        headers = {"Content-Type": "application/json"}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.url, json=payload, headers=headers)
                body = response.json()
        except httpx.HTTPError as exc:
            logger.warning("Submission request to %s failed: %s", self.url, exc)
            return NetworkFailure(reason=str(exc) or exc.__class__.__name__)
        except ValueError as exc:
            logger.warning("Submission endpoint returned a non-JSON body: %s", exc)
            return NetworkFailure(reason="response body is not valid JSON")

        return interpret_response(body, self.fallback_message)


__all__ = [
    "MESSAGE_SCHEMA",
    "RESPONSE_SCHEMA",
    "SubmissionClient",
    "interpret_response",
]
