"""
Tests for the quote-intake client: success, HTTP errors and transport failures.
"""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import requests

from medquote.automation.quote_client import _redact_url, send_quote_request

ENDPOINT = "https://forms.example.test/ajax/quotes"
PAYLOAD = {
    "name": "Ada",
    "email": "ada@example.com",
    "phone": "555-0100",
    "message": "",
    "_subject": "New Medicine Request",
    "_template": "table",
    "request": "A - 2 units\nB - 1 units",
}


def _response(status: int, body: dict | None = None) -> MagicMock:
    r = MagicMock()
    r.status_code = status
    r.content = b"{}" if body is not None else b""
    r.json.return_value = body or {}
    r.raise_for_status = MagicMock()
    return r


@patch("medquote.automation.quote_client.requests.post")
def test_success_posts_json_body(mock_post: MagicMock) -> None:
    mock_post.return_value = _response(200, {"success": "true", "message": "The form was submitted successfully."})
    out = send_quote_request(PAYLOAD, endpoint=ENDPOINT, timeout=5)

    assert out["success"] is True
    assert out["status_code"] == 200
    assert out["message"] == "The form was submitted successfully."
    mock_post.assert_called_once()
    args, kwargs = mock_post.call_args
    assert args[0] == ENDPOINT
    assert kwargs["json"] == PAYLOAD
    assert kwargs["headers"]["Accept"] == "application/json"
    assert kwargs["timeout"] == 5


@patch("medquote.automation.quote_client.requests.post")
def test_empty_body_is_still_success(mock_post: MagicMock) -> None:
    mock_post.return_value = _response(204)
    out = send_quote_request(PAYLOAD, endpoint=ENDPOINT)
    assert out["success"] is True


@patch("medquote.automation.quote_client.requests.post")
def test_http_error_is_failure(mock_post: MagicMock) -> None:
    r = _response(500, {})
    r.raise_for_status.side_effect = requests.exceptions.HTTPError("500 Server Error", response=r)
    mock_post.return_value = r
    out = send_quote_request(PAYLOAD, endpoint=ENDPOINT)

    assert out["success"] is False
    assert out["error_type"] == "HTTPError"
    assert out["status_code"] == 500


@patch("medquote.automation.quote_client.requests.post")
def test_non_2xx_without_http_error_is_failure(mock_post: MagicMock) -> None:
    mock_post.return_value = _response(302, {})
    out = send_quote_request(PAYLOAD, endpoint=ENDPOINT)
    assert out["success"] is False
    assert out["status_code"] == 302


@patch("medquote.automation.quote_client.requests.post")
def test_connection_error_is_failure(mock_post: MagicMock) -> None:
    mock_post.side_effect = requests.exceptions.ConnectionError("refused")
    out = send_quote_request(PAYLOAD, endpoint=ENDPOINT)
    assert out["success"] is False
    assert out["error_type"] == "ConnectionError"
    assert "Connection failed" in out["error"]


@patch("medquote.automation.quote_client.requests.post")
def test_timeout_is_failure(mock_post: MagicMock) -> None:
    mock_post.side_effect = requests.exceptions.Timeout("slow")
    out = send_quote_request(PAYLOAD, endpoint=ENDPOINT, timeout=3)
    assert out["success"] is False
    assert out["error_type"] == "Timeout"
    assert "3 seconds" in out["error"]


@patch("medquote.automation.quote_client.requests.post")
def test_blank_endpoint_makes_no_request(mock_post: MagicMock) -> None:
    out = send_quote_request(PAYLOAD, endpoint="   ")
    assert out["success"] is False
    assert out["error_type"] == "ConfigurationError"
    mock_post.assert_not_called()


def test_redact_url_masks_recipient_and_tokens() -> None:
    assert _redact_url("https://formsubmit.co/ajax/quotes@example.com") == "https://formsubmit.co/ajax/q***@example.com"
    assert _redact_url("https://hooks.example.test/q?token=abc") == "https://hooks.example.test/q?REDACTED=1"
    assert _redact_url("https://hooks.example.test/q?page=2") == "https://hooks.example.test/q?page=2"
