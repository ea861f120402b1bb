"""Map transport outcomes to the uniform response envelopes.

Three envelope shapes come out of the plain-HTTP strategies:

info::

    {"url", "content_type", "content_length", "http_code"}

raw::

    {"content", "contentType", "contentLength"}

contents::

    {"contents", "status": {"url", "content_type", "content_length", "http_code"}}

An HTTP-level failure (4xx/5xx) for the raw and contents strategies is
rendered as a contents envelope built from the failure response, so it is
structurally identical to a successful contents envelope.  A connection
failure yields ``{"contents": None, "status": {"url", "error"}}``.  Byte
lengths are always measured on the body actually received, never taken from
a header.
"""

from __future__ import annotations

from typing import Any

from page_retrieval.core.exceptions import HttpStatusError
from page_retrieval.retrieval.config import UNKNOWN_CONTENT_LENGTH
from page_retrieval.retrieval.models import CapturedResponse, TransportOutcome


def _declared_length(response: CapturedResponse) -> int:
    """Integer ``content-length`` header, or ``-1`` if absent, zero or invalid."""
    try:
        length = int(response.headers.get("content-length", ""))
    except ValueError:
        return UNKNOWN_CONTENT_LENGTH
    return length or UNKNOWN_CONTENT_LENGTH


def _status(url: str, response: CapturedResponse) -> dict[str, Any]:
    return {
        "url": url,
        "content_type": response.content_type,
        "content_length": response.content_length,
        "http_code": response.status_code,
    }


def contents_from_response(url: str, response: CapturedResponse) -> dict[str, Any]:
    """Contents envelope for a response that was obtained (success or HTTP error)."""
    return {
        "contents": response.text,
        "status": _status(url, response),
    }


def connection_error_envelope(url: str, error: Exception) -> dict[str, Any]:
    """Envelope for a failure where no response exists."""
    return {
        "contents": None,
        "status": {"url": url, "error": str(error)},
    }


def error_envelope(url: str, outcome: TransportOutcome) -> dict[str, Any]:
    """Contents-shaped envelope for any failed outcome."""
    error = outcome.error
    if isinstance(error, HttpStatusError):
        return contents_from_response(error.response.url, error.response)
    return connection_error_envelope(url, error)


# ---------------------------------------------------------------------------
# Per-strategy normalizers
# ---------------------------------------------------------------------------


def info_envelope(url: str, outcome: TransportOutcome) -> dict[str, Any]:
    """Status metadata for a ``HEAD`` probe.

    Never carries a body: an HTTP-level failure reports the failure status in
    the same four fields, and a connection failure sets ``http_code`` to
    ``None`` and adds ``error``.
    """
    if outcome.ok:
        response = outcome.response
    elif isinstance(outcome.error, HttpStatusError):
        response = outcome.error.response
    else:
        return {
            "url": url,
            "content_type": None,
            "content_length": UNKNOWN_CONTENT_LENGTH,
            "http_code": None,
            "error": str(outcome.error),
        }
    return {
        "url": url,
        "content_type": response.content_type,
        "content_length": _declared_length(response),
        "http_code": response.status_code,
    }


def raw_envelope(url: str, outcome: TransportOutcome) -> dict[str, Any]:
    """Undecoded bytes with their content type and measured length."""
    if not outcome.ok:
        return error_envelope(url, outcome)
    response = outcome.response
    return {
        "content": response.content,
        "contentType": response.content_type,
        "contentLength": response.content_length,
    }


def contents_envelope(url: str, outcome: TransportOutcome) -> dict[str, Any]:
    """Decoded body text wrapped with its status block."""
    if not outcome.ok:
        return error_envelope(url, outcome)
    return contents_from_response(url, outcome.response)
