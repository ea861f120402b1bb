"""Headless Chromium rendering via Playwright.

Each :meth:`RenderSession.render` call launches a brand-new browser, so no
cookies, storage or process are shared between calls.  The session applies:

- the stealth launch flags and spoofed user agent from
  :mod:`page_retrieval.retrieval.config`, plus ``playwright-stealth``
  evasions on the page;
- request interception that aborts media, font, image and stylesheet loads;
- a fixed 800x600 viewport.

Concurrent renders are bounded by an ``asyncio.Semaphore`` sized by
``max_concurrent``, and every render runs under ``navigation_timeout``.  The
browser is always closed in a ``finally`` block, including on timeout or
cancellation.

Install the Chromium binary once per environment::

    playwright install chromium
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable

from playwright.async_api import Route, async_playwright
from playwright_stealth import Stealth

from page_retrieval.core.exceptions import RenderFailure
from page_retrieval.retrieval.config import (
    BLOCKED_RESOURCE_TYPES,
    NAVIGATION_WAIT_UNTIL,
    SERIALIZE_DOCUMENT_JS,
    STEALTH_LAUNCH_ARGS,
    STEALTH_USER_AGENT,
    VIEWPORT,
)
from page_retrieval.retrieval.last_log import LastLogStore

logger = logging.getLogger(__name__)


async def _block_non_essential(route: Route) -> None:
    """Abort sub-resource loads that do not affect the serialized DOM."""
    if route.request.resource_type in BLOCKED_RESOURCE_TYPES:
        await route.abort()
    else:
        await route.continue_()


class RenderSession:
    """Render pages to their post-script DOM markup.

    Args:
        navigation_timeout: Seconds allowed for one render, launch included.
        max_concurrent: Browsers allowed to run at the same time.
        headless: Launch Chromium without a window.
        last_log: Store that receives the document when ``persist=True``.
        playwright_factory: Callable returning the Playwright async context
            manager.  Tests inject a fake.
        stealth: Object exposing ``apply_stealth_async(page)``.
    """

    def __init__(
        self,
        *,
        navigation_timeout: float = 30.0,
        max_concurrent: int = 2,
        headless: bool = True,
        last_log: LastLogStore | None = None,
        playwright_factory: Callable[[], Any] = async_playwright,
        stealth: Any | None = None,
    ) -> None:
        self.navigation_timeout = navigation_timeout
        self.headless = headless
        self.last_log = last_log
        self._playwright_factory = playwright_factory
        self._stealth = stealth if stealth is not None else Stealth()
        self._slots = asyncio.Semaphore(max_concurrent)

    async def render(self, url: str, *, persist: bool = False) -> str:
        """Navigate to ``url`` and return the root element's outer HTML.

        Args:
            url: Page to render.
            persist: Also write the document to :attr:`last_log`.  The write
                happens after the browser is closed and the pool slot released;
                a failed write is logged and the document is still returned.

        Raises:
            RenderFailure: If the browser could not launch, navigation failed,
                or the render exceeded ``navigation_timeout``.  The browser has
                been closed by the time this propagates.
        """
        async with self._slots:
            try:
                document = await asyncio.wait_for(
                    self._navigate(url), timeout=self.navigation_timeout
                )
            except asyncio.TimeoutError as exc:
                logger.warning(
                    "retrieval: render of %s timed out after %.1fs",
                    url,
                    self.navigation_timeout,
                )
                raise RenderFailure(
                    url, f"timed out after {self.navigation_timeout:.1f}s"
                ) from exc
            except Exception as exc:  # noqa: BLE001
                logger.warning("retrieval: render failed for %s: %s", url, exc)
                raise RenderFailure(url, str(exc)) from exc

        if persist and self.last_log is not None:
            await self._persist(document)
        return document

    async def _navigate(self, url: str) -> str:
        async with self._playwright_factory() as p:
            browser = await p.chromium.launch(
                headless=self.headless,
                args=list(STEALTH_LAUNCH_ARGS),
            )
            try:
                context = await browser.new_context(
                    user_agent=STEALTH_USER_AGENT,
                    viewport=VIEWPORT,
                    ignore_https_errors=True,
                )
                page = await context.new_page()
                await self._stealth.apply_stealth_async(page)
                await page.route("**/*", _block_non_essential)
                await page.goto(
                    url,
                    wait_until=NAVIGATION_WAIT_UNTIL,
                    timeout=self.navigation_timeout * 1000,
                )
                document = await page.evaluate(SERIALIZE_DOCUMENT_JS)
            finally:
                await browser.close()

        logger.debug("retrieval: rendered %s (%d chars)", url, len(document or ""))
        return document or ""

    async def _persist(self, document: str) -> None:
        try:
            await self.last_log.write(document)
        except (OSError, ValueError) as exc:
            logger.warning("retrieval: could not persist rendered document: %s", exc)
