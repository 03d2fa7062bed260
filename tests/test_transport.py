"""Tests for the submission transport and response interpretation."""

import json
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from contactflow.errors import BusinessFailure, NetworkFailure, Success
from contactflow.transport import SubmissionClient, interpret_response

FALLBACK = "Something went wrong while sending. Please try again."


def make_client(handler):
    return SubmissionClient.from_endpoint(
        "http://site.test",
        "process.php",
        fallback_message=FALLBACK,
        transport=httpx.MockTransport(handler),
    )


class TestInterpretResponse:
    """Mapping of decoded bodies onto outcomes."""

    def test_success(self):
        assert interpret_response({"success": True}, FALLBACK) == Success()

    def test_success_keeps_message(self):
        assert interpret_response({"success": 1, "message": "Thanks"}, FALLBACK) == Success("Thanks")

    def test_business_failure_uses_server_message(self):
        outcome = interpret_response({"success": False, "message": "Mailbox full"}, FALLBACK)
        assert outcome == BusinessFailure("Mailbox full")

    @pytest.mark.parametrize(
        "body",
        [
            {"success": False},
            {"success": False, "message": ""},
            {"success": False, "message": None},
            {},
            {"message": ""},
        ],
    )
    def test_business_failure_falls_back(self, body):
        assert interpret_response(body, FALLBACK) == BusinessFailure(FALLBACK)

    @pytest.mark.parametrize(
        "body",
        [[1, 2], "ok", 42, None],
    )
    def test_unexpected_shape_is_business_failure(self, body):
        assert interpret_response(body, FALLBACK) == BusinessFailure(FALLBACK)

    @pytest.mark.parametrize("message", [201, ["queued"], {"id": 5}, ""])
    def test_success_ignores_non_string_message(self, message):
        """Should honour a truthy success even when message is not text."""
        outcome = interpret_response({"success": True, "message": message}, FALLBACK)
        assert outcome == Success()

    @pytest.mark.parametrize("message", [7, ["full"], {"code": 3}])
    def test_failure_with_non_string_message_falls_back(self, message):
        outcome = interpret_response({"success": False, "message": message}, FALLBACK)
        assert outcome == BusinessFailure(FALLBACK)


class TestSubmissionClient:
    """Requests go out once, as JSON."""

    def test_url_resolves_against_base(self):
        client = make_client(lambda request: httpx.Response(200, json={}))
        assert str(client.url) == "http://site.test/process.php"

    @pytest.mark.asyncio
    async def test_posts_json_payload(self):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json={"success": True})

        outcome = await make_client(handler).submit({"email": "a@b.co", "message": "Hello there"})

        assert outcome == Success()
        assert len(requests) == 1
        request = requests[0]
        assert request.method == "POST"
        assert request.headers["Content-Type"] == "application/json"
        assert json.loads(request.content) == {"email": "a@b.co", "message": "Hello there"}

    @pytest.mark.asyncio
    async def test_business_failure(self):
        client = make_client(
            lambda request: httpx.Response(200, json={"success": False, "message": "Mailbox full"})
        )
        assert await client.submit({}) == BusinessFailure("Mailbox full")

    @pytest.mark.asyncio
    async def test_error_status_with_json_body_is_interpreted(self):
        client = make_client(
            lambda request: httpx.Response(500, json={"success": False, "message": "Try later"})
        )
        assert await client.submit({}) == BusinessFailure("Try later")

    @pytest.mark.asyncio
    async def test_connection_error_is_network_failure(self):
        def handler(request):
            raise httpx.ConnectError("Connection refused", request=request)

        outcome = await make_client(handler).submit({})

        assert isinstance(outcome, NetworkFailure)
        assert "Connection refused" in outcome.reason

    @pytest.mark.asyncio
    async def test_timeout_is_network_failure(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        assert isinstance(await make_client(handler).submit({}), NetworkFailure)

    @pytest.mark.asyncio
    async def test_non_json_body_is_network_failure(self):
        client = make_client(lambda request: httpx.Response(200, text="<html>oops</html>"))
        outcome = await client.submit({})
        assert outcome == NetworkFailure("response body is not valid JSON")

    @pytest.mark.asyncio
    async def test_uses_async_client_context(self):
        """Client is opened per request and closed afterwards."""
        response = httpx.Response(200, json={"success": True})
        mock_client = AsyncMock()
        mock_client.post.return_value = response
        mock_client.__aenter__ = AsyncMock(return_value=mock_client)
        mock_client.__aexit__ = AsyncMock(return_value=False)

        with patch("contactflow.transport.httpx.AsyncClient", return_value=mock_client):
            client = SubmissionClient("http://site.test/process.php", fallback_message=FALLBACK)
            outcome = await client.submit({"email": "a@b.co"})

        assert outcome == Success()
        mock_client.post.assert_awaited_once()
        mock_client.__aexit__.assert_awaited_once()
