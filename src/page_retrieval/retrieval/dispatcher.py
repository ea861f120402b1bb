"""Retrieval dispatcher: classify a request and route it to a strategy.

Classification, evaluated in order:

1. ``format == info`` or ``method == HEAD`` -> probe (HEAD, metadata only)
2. ``format == raw``                        -> raw bytes
3. ``format in {vilos, viloslog}``          -> rendered payload
4. ``format == lastlog``                    -> last persisted document
5. anything else                            -> full contents

:meth:`PageRetriever.retrieve` never raises for transport or render
failures; every path ends in an envelope or a sentinel string.
"""

from __future__ import annotations

import logging
import uuid
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
import structlog

from page_retrieval.config.settings import Settings, get_settings
from page_retrieval.core.exceptions import RenderFailure
from page_retrieval.core.logging_config import retrieval_id_var
from page_retrieval.retrieval import normalizer
from page_retrieval.retrieval.cache import PayloadCache
from page_retrieval.retrieval.config import EMPTY_LAST_LOG, EMPTY_PAYLOAD
from page_retrieval.retrieval.http_fetcher import fetch
from page_retrieval.retrieval.last_log import LastLogStore
from page_retrieval.retrieval.models import (
    Envelope,
    RetrievalFormat,
    RetrievalRequest,
    RetrievalStrategy,
)
from page_retrieval.retrieval.payload_extractor import extract_media_config
from page_retrieval.retrieval.render_session import RenderSession

logger = logging.getLogger(__name__)


def classify(request: RetrievalRequest) -> RetrievalStrategy:
    """Pick the strategy for ``request``."""
    fmt = request.format
    if fmt is RetrievalFormat.INFO or request.method == "HEAD":
        return RetrievalStrategy.PROBE
    if fmt is RetrievalFormat.RAW:
        return RetrievalStrategy.RAW
    if fmt in (RetrievalFormat.VILOS, RetrievalFormat.VILOSLOG):
        return RetrievalStrategy.RENDERED_PAYLOAD
    if fmt is RetrievalFormat.LASTLOG:
        return RetrievalStrategy.LAST_LOG
    return RetrievalStrategy.CONTENTS


class PageRetriever:
    """Entry point that owns the collaborators of every strategy.

    Args:
        client: Shared HTTP client for the probe, raw and contents strategies.
        cache: Payload cache for the rendered-payload strategy.
        renderer: Headless-browser render session.
        last_log: Single-slot store read by the ``lastlog`` format.
    """

    def __init__(
        self,
        *,
        client: httpx.AsyncClient,
        cache: PayloadCache,
        renderer: RenderSession,
        last_log: LastLogStore,
    ) -> None:
        self.client = client
        self.cache = cache
        self.renderer = renderer
        self.last_log = last_log

    async def retrieve(self, request: RetrievalRequest) -> Envelope:
        """Retrieve ``request.url`` with the strategy its format selects."""
        strategy = classify(request)
        token = retrieval_id_var.set(uuid.uuid4().hex[:12])
        try:
            with structlog.contextvars.bound_contextvars(strategy=strategy.value):
                logger.info(
                    "retrieval: %s %s via %s", request.method, request.url, strategy.value
                )
                if strategy is RetrievalStrategy.PROBE:
                    return await self.probe(request.url)
                if strategy is RetrievalStrategy.RAW:
                    return await self.raw(request.url, request.method)
                if strategy is RetrievalStrategy.RENDERED_PAYLOAD:
                    return await self.rendered_payload(
                        request.url,
                        persist=request.format is RetrievalFormat.VILOSLOG,
                    )
                if strategy is RetrievalStrategy.LAST_LOG:
                    return await self.last_rendered_document()
                return await self.contents(request.url, request.method)
        finally:
            retrieval_id_var.reset(token)

    # ------------------------------------------------------------------
    # Strategies
    # ------------------------------------------------------------------

    async def probe(self, url: str) -> dict:
        outcome = await fetch(url, client=self.client, method="HEAD")
        return normalizer.info_envelope(url, outcome)

    async def raw(self, url: str, method: str = "GET") -> dict:
        outcome = await fetch(url, client=self.client, method=method, raw=True)
        return normalizer.raw_envelope(url, outcome)

    async def contents(self, url: str, method: str = "GET") -> dict:
        outcome = await fetch(url, client=self.client, method=method)
        return normalizer.contents_envelope(url, outcome)

    async def rendered_payload(self, url: str, *, persist: bool = False) -> str:
        """Embedded media configuration for ``url``.

        A cached value is returned unless ``persist`` is set; a persisting
        call always re-renders and refreshes the cache.  Only payloads that
        were actually found are cached; a persisting call that finds nothing
        evicts the superseded entry.
        """
        if not persist:
            cached = self.cache.get(url)
            if cached is not None:
                logger.debug("retrieval: payload cache hit for %s", url)
                return cached

        try:
            document = await self.renderer.render(url, persist=persist)
        except RenderFailure as exc:
            logger.warning("retrieval: substituting empty payload: %s", exc)
            if persist:
                self.cache.delete(url)
            return EMPTY_PAYLOAD

        payload = extract_media_config(document)
        if payload == EMPTY_PAYLOAD:
            logger.info("retrieval: no media config found in %s", url)
            if persist:
                self.cache.delete(url)
            return EMPTY_PAYLOAD

        self.cache.set(url, payload)
        return payload

    async def last_rendered_document(self) -> str:
        document = await self.last_log.read()
        if document is None:
            return EMPTY_LAST_LOG
        return document


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------


@asynccontextmanager
async def open_page_retriever(
    settings: Settings | None = None,
) -> AsyncIterator[PageRetriever]:
    """Build a :class:`PageRetriever` from settings and close its HTTP client on exit.

    Usage::

        async with open_page_retriever() as retriever:
            envelope = await retriever.retrieve(RetrievalRequest(url))
    """
    settings = settings or get_settings()
    last_log = LastLogStore(settings.last_log_path)
    cache = PayloadCache(
        ttl=settings.cache_ttl_seconds,
        check_period=settings.cache_check_period,
    )
    renderer = RenderSession(
        navigation_timeout=settings.navigation_timeout,
        max_concurrent=settings.max_concurrent_renders,
        headless=settings.headless,
        last_log=last_log,
    )
    async with httpx.AsyncClient(
        timeout=settings.request_timeout,
        follow_redirects=settings.follow_redirects,
    ) as client:
        yield PageRetriever(
            client=client,
            cache=cache,
            renderer=renderer,
            last_log=last_log,
        )
