"""Lexical extraction of the embedded media configuration from rendered markup.

The rendered player page assigns its configuration in an inline script::

    config.media = {...};

    <next statement>

The payload is the text after the marker and the separating space, up to the
first blank line, minus the one character (the ``;``) right before it.  This
is a substring scan, not a JSON parser: nothing checks that the result is
balanced or parseable, and callers receive it as an opaque string.
"""

from __future__ import annotations

import logging

from page_retrieval.retrieval.config import (
    EMPTY_PAYLOAD,
    MEDIA_CONFIG_MARKER,
    MEDIA_CONFIG_OFFSET,
    MEDIA_CONFIG_TERMINATOR,
)

logger = logging.getLogger(__name__)


def find_media_config(document: str) -> str | None:
    """Return the embedded payload, or ``None`` when it cannot be located.

    ``None`` is returned when the document is empty, the marker is missing,
    or no terminator follows the marker.
    """
    if not document:
        return None

    start = document.find(MEDIA_CONFIG_MARKER)
    if start == -1:
        return None

    tail = document[start + MEDIA_CONFIG_OFFSET :]
    end = tail.find(MEDIA_CONFIG_TERMINATOR)
    if end == -1:
        logger.debug("retrieval: media config marker found but no terminator")
        return None

    return tail[: max(end - 1, 0)]


def extract_media_config(document: str) -> str:
    """Return the embedded payload, or the empty-object sentinel on a miss."""
    payload = find_media_config(document)
    if payload is None:
        return EMPTY_PAYLOAD
    return payload
