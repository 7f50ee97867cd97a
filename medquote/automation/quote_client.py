"""
Quote-intake client: POSTs a quote request to the form endpoint.
"""

from __future__ import annotations

from typing import Any

import requests

from medquote.utils.config import quote_endpoint, quote_timeout_seconds
from medquote.utils.logger import get_logger, mask_emails

logger = get_logger()

_MAX_DEBUG_BODY_CHARS = 2000


def _redact_url(url: str) -> str:
    """
    URL safe for logs and user-facing errors. FormSubmit endpoints carry the
    recipient inbox in the path, and query tokens are dropped entirely.
    """
    if not url:
        return url
    base, sep, query = url.partition("?")
    base = mask_emails(base)
    if sep and any(m in query.lower() for m in ("token=", "api_key=", "apikey=")):
        return base + "?REDACTED=1"
    return base + sep + query


def send_quote_request(
    payload: dict[str, Any],
    endpoint: str | None = None,
    timeout: float | None = None,
) -> dict[str, Any]:
    """
    Send a quote request to the intake endpoint.

    Args:
        payload: JSON body (name, email, phone, message, _subject, _template, request).
        endpoint: Override for the configured QUOTE_ENDPOINT.
        timeout: Request timeout in seconds; defaults to QUOTE_TIMEOUT_SECONDS.

    Returns:
        Dict with "success" (bool), "message" (str), "status_code", and "error" /
        "error_type" on failure. Never raises for transport problems.

    Example:
        >>> result = send_quote_request({"name": "Ada", "request": "A - 1 units"})
        >>> result["success"]
        True
    """
    url = (endpoint or quote_endpoint()).strip()
    timeout = timeout if timeout is not None else quote_timeout_seconds()
    if not url:
        return {
            "success": False,
            "message": "Quote endpoint not configured",
            "error": "QUOTE_ENDPOINT is empty. Set it in .env to enable quote requests.",
            "error_type": "ConfigurationError",
            "status_code": None,
        }

    try:
        logger.info("Sending quote request to %s", _redact_url(url))
        logger.debug("Payload keys: %s", list(payload.keys()))
        response = requests.post(
            url,
            json=payload,
            headers={"Content-Type": "application/json", "Accept": "application/json"},
            timeout=timeout,
        )
        status_code = getattr(response, "status_code", None)
        logger.info("Quote endpoint responded with status: %s", status_code)
        response.raise_for_status()
        if not (status_code and 200 <= status_code < 300):
            # raise_for_status lets 1xx/3xx through; only 2xx counts as accepted.
            return {
                "success": False,
                "message": f"Quote endpoint returned status {status_code}",
                "error": f"Unexpected status {status_code}",
                "error_type": "UnexpectedStatus",
                "status_code": status_code,
            }

        parsed: dict[str, Any] = {}
        if response.content:
            try:
                body = response.json()
                parsed = body if isinstance(body, dict) else {"raw": body}
            except ValueError:
                text = response.text or ""
                parsed = {"raw": text[:_MAX_DEBUG_BODY_CHARS]}
        return {
            "success": True,
            "message": parsed.get("message") or "Quote request sent",
            "status_code": status_code,
            "response": parsed,
        }
    except requests.exceptions.RequestException as e:
        error_type = type(e).__name__
        error_msg = str(e)
        logger.exception("Quote request failed: %s (%s)", error_msg, error_type)

        if isinstance(e, requests.exceptions.ConnectionError):
            detailed_error = f"Connection failed: could not reach {_redact_url(url)}."
        elif isinstance(e, requests.exceptions.Timeout):
            detailed_error = f"Request timed out after {timeout:g} seconds."
        elif isinstance(e, requests.exceptions.HTTPError):
            detailed_error = f"HTTP error: {error_msg}"
        else:
            detailed_error = f"{error_type}: {error_msg}"

        response = getattr(e, "response", None)
        return {
            "success": False,
            "message": f"Failed to send quote request: {detailed_error}",
            "error": detailed_error,
            "error_type": error_type,
            "status_code": getattr(response, "status_code", None),
        }
    except Exception as e:
        logger.exception("Unexpected error sending quote request: %s", e)
        return {
            "success": False,
            "message": f"Unexpected error: {str(e)}",
            "error": str(e),
            "error_type": type(e).__name__,
            "status_code": None,
        }
