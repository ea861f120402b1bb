"""Exception hierarchy for the page retrieval service.

All custom exceptions subclass ``PageRetrievalError``, enabling consistent
error handling and structured logging across the retrieval strategies.

Hierarchy::

    PageRetrievalError
    ├── TransportError
    │   ├── TransportConnectionError   (no response was obtained)
    │   └── HttpStatusError            (response obtained, non-2xx status)
    └── RenderFailure                  (browser navigation / automation failure)

Transport errors are never raised past the HTTP fetcher: they are carried
inside a :class:`~page_retrieval.retrieval.models.TransportOutcome` and turned
into envelopes by :mod:`page_retrieval.retrieval.normalizer`.
``RenderFailure`` is raised by the render session and caught by the
dispatcher.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from page_retrieval.retrieval.models import CapturedResponse


class PageRetrievalError(Exception):
    """Base class for all page retrieval exceptions."""


# ---------------------------------------------------------------------------
# Transport exceptions
# ---------------------------------------------------------------------------


class TransportError(PageRetrievalError):
    """Base class for failures of a single HTTP request.

    Args:
        message: Human-readable description of the failure.
        url: The URL that was requested.
    """

    def __init__(self, message: str, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class TransportConnectionError(TransportError):
    """Raised when no HTTP response could be obtained at all.

    Covers DNS resolution, TCP connect, TLS handshake, timeouts, redirect
    loops and malformed URLs.  There is no response to surface, so the
    normalizer produces an envelope with ``contents: None``.
    """


class HttpStatusError(TransportError):
    """Raised when the server answered with a non-2xx status code.

    The captured response (body, headers, status) is kept so that callers
    still see what the server returned.

    Args:
        response: The captured failure response.
    """

    def __init__(self, response: CapturedResponse) -> None:
        super().__init__(
            f"Response code {response.status_code}", url=response.url
        )
        self.response = response

    @property
    def status_code(self) -> int:
        return self.response.status_code


# ---------------------------------------------------------------------------
# Rendering exceptions
# ---------------------------------------------------------------------------


class RenderFailure(PageRetrievalError):
    """Raised when a headless-browser render could not produce a document.

    The render session has always released its browser before this
    propagates.

    Args:
        url: The URL that was being rendered.
        reason: Short description of what went wrong.
    """

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Rendering {url} failed: {reason}")
        self.url = url
        self.reason = reason
