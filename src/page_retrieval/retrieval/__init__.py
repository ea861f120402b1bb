"""Retrieval dispatcher and its strategies.

Sub-modules:
- ``config``            - constants and tuning parameters
- ``models``            - request, outcome and envelope types
- ``http_fetcher``      - async httpx fetcher for the probe/raw/contents strategies
- ``normalizer``        - maps transport outcomes to response envelopes
- ``render_session``    - headless Chromium rendering with stealth and resource blocking
- ``payload_extractor`` - marker-based scan for the embedded media configuration
- ``cache``             - TTL cache of extracted payloads
- ``last_log``          - single-slot storage of the last rendered document
- ``dispatcher``        - ``PageRetriever`` entry point and request classification
"""

from __future__ import annotations

from page_retrieval.retrieval.dispatcher import (
    PageRetriever,
    classify,
    open_page_retriever,
)
from page_retrieval.retrieval.models import (
    RetrievalFormat,
    RetrievalRequest,
    RetrievalStrategy,
)

__all__ = [
    "PageRetriever",
    "RetrievalFormat",
    "RetrievalRequest",
    "RetrievalStrategy",
    "classify",
    "open_page_retriever",
]
