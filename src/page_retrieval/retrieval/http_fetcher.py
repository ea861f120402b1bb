"""Async HTTP fetcher for the probe, raw and contents strategies.

Uses ``httpx`` for all HTTP requests.  Every request ends in a
:class:`~page_retrieval.retrieval.models.TransportOutcome`; no httpx
exception escapes :func:`fetch`.

- ``HEAD`` requests return status and headers only; no body is read.
- Other methods read the body with content decoding (gzip, br, deflate)
  applied, unless ``raw=True``, in which case the bytes are streamed
  exactly as they came off the wire.
- Non-2xx responses are fully read too and carried inside an
  :class:`~page_retrieval.core.exceptions.HttpStatusError`, so a 404 page
  still reaches the caller.
"""

from __future__ import annotations

import logging

import httpx

from page_retrieval.core.exceptions import HttpStatusError, TransportConnectionError
from page_retrieval.retrieval.models import CapturedResponse, TransportOutcome

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Response capture helpers
# ---------------------------------------------------------------------------


def _lowercase_headers(headers: httpx.Headers) -> dict[str, str]:
    """Flatten httpx headers into a plain dict keyed by lower-cased name.

    Repeated headers are joined with ``", "`` as httpx does for ``get()``.
    """
    flat: dict[str, str] = {}
    for name in headers.keys():
        flat[name.lower()] = headers.get(name, "")
    return flat


def _capture(response: httpx.Response, content: bytes) -> CapturedResponse:
    return CapturedResponse(
        url=str(response.url),
        status_code=response.status_code,
        headers=_lowercase_headers(response.headers),
        content=content,
        encoding=response.encoding or "utf-8",
    )


async def _send(
    client: httpx.AsyncClient,
    url: str,
    method: str,
    raw: bool,
) -> CapturedResponse:
    """Perform the request and read the body according to ``method``/``raw``.

    Raises:
        HttpStatusError: If the final response status is not 2xx.
        httpx.HTTPError: On any transport-level failure.
    """
    async with client.stream(method, url) as response:
        if method == "HEAD":
            content = b""
        elif raw:
            content = b"".join([chunk async for chunk in response.aiter_raw()])
        else:
            content = await response.aread()

    captured = _capture(response, content)
    if not response.is_success:
        raise HttpStatusError(captured)
    return captured


# ---------------------------------------------------------------------------
# Public fetch function
# ---------------------------------------------------------------------------


async def fetch(
    url: str,
    *,
    client: httpx.AsyncClient,
    method: str = "GET",
    raw: bool = False,
) -> TransportOutcome:
    """Fetch a single URL and capture the outcome.

    Args:
        url: Target URL.
        client: Shared :class:`httpx.AsyncClient` instance.  Redirect and
            timeout policy are taken from the client.
        method: HTTP method.  ``HEAD`` skips reading the body.
        raw: Return the body bytes without content decoding.

    Returns:
        A successful outcome with the captured response, or a failed outcome
        whose ``error`` is an :class:`HttpStatusError` (response available)
        or a :class:`TransportConnectionError` (no response).
    """
    method = method.upper()
    try:
        response = await _send(client, url, method, raw)
    except HttpStatusError as exc:
        logger.info("retrieval: HTTP %d for %s %s", exc.status_code, method, url)
        return TransportOutcome.failure(exc)
    except httpx.TimeoutException as exc:
        logger.warning("retrieval: timeout fetching %s: %s", url, exc)
        return TransportOutcome.failure(
            TransportConnectionError(f"timeout: {exc}", url=url)
        )
    except httpx.TooManyRedirects as exc:
        logger.warning("retrieval: too many redirects for %s", url)
        return TransportOutcome.failure(
            TransportConnectionError(f"too many redirects: {exc}", url=url)
        )
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        logger.warning("retrieval: request error for %s: %s", url, exc)
        return TransportOutcome.failure(
            TransportConnectionError(f"request error: {exc}", url=url)
        )

    logger.debug(
        "retrieval: %s %s -> %d (%d bytes, raw=%s)",
        method,
        url,
        response.status_code,
        response.content_length,
        raw,
    )
    return TransportOutcome.success(response)
