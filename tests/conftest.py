"""Shared pytest fixtures for the page retrieval tests.

Fixture summary
---------------
payload_cache   - Fresh :class:`PayloadCache` with a controllable clock.
fake_clock      - The clock driving ``payload_cache``; call ``advance(s)``.
last_log        - :class:`LastLogStore` backed by a file in ``tmp_path``.
fake_browser    - Stand-in for Playwright; records launches and routes.
renderer        - :class:`RenderSession` wired to ``fake_browser``.
http_client     - ``httpx.AsyncClient`` that follows redirects (mock with respx).
retriever       - :class:`PageRetriever` assembled from the fixtures above.

No test launches a real browser or touches the network.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
import pytest_asyncio

from page_retrieval.retrieval.cache import PayloadCache
from page_retrieval.retrieval.dispatcher import PageRetriever
from page_retrieval.retrieval.last_log import LastLogStore
from page_retrieval.retrieval.render_session import RenderSession

# ---------------------------------------------------------------------------
# Clock
# ---------------------------------------------------------------------------


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# ---------------------------------------------------------------------------
# Playwright stand-ins
# ---------------------------------------------------------------------------


class FakeRoute:
    def __init__(self, resource_type: str) -> None:
        self.request = MagicMock(resource_type=resource_type)
        self.abort = AsyncMock()
        self.continue_ = AsyncMock()


class FakePage:
    def __init__(self, document: str, goto_error: BaseException | None = None) -> None:
        self.route_pattern: str | None = None
        self.route_handler: Any = None
        self.goto = AsyncMock(side_effect=goto_error)
        self.evaluate = AsyncMock(return_value=document)

    async def route(self, pattern: str, handler: Any) -> None:
        self.route_pattern = pattern
        self.route_handler = handler


class FakeBrowser:
    def __init__(self, page: FakePage) -> None:
        self.page = page
        self.context = MagicMock()
        self.context.new_page = AsyncMock(return_value=page)
        self.new_context = AsyncMock(return_value=self.context)
        self.close = AsyncMock()


class FakeBrowserEnvironment:
    """Replaces ``async_playwright``; every launch gets a fresh browser."""

    def __init__(self) -> None:
        self.document = "<html><body></body></html>"
        self.goto_error: BaseException | None = None
        self.browsers: list[FakeBrowser] = []
        self.launch_kwargs: list[dict[str, Any]] = []

    @property
    def launches(self) -> int:
        return len(self.browsers)

    @property
    def last_browser(self) -> FakeBrowser:
        return self.browsers[-1]

    async def _launch(self, **kwargs: Any) -> FakeBrowser:
        self.launch_kwargs.append(kwargs)
        browser = FakeBrowser(FakePage(self.document, self.goto_error))
        self.browsers.append(browser)
        return browser

    def factory(self) -> Any:
        env = self
        playwright = MagicMock()
        playwright.chromium.launch = AsyncMock(side_effect=env._launch)

        class _Manager:
            async def __aenter__(self) -> Any:
                return playwright

            async def __aexit__(self, *exc_info: Any) -> bool:
                return False

        return _Manager()


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def payload_cache(fake_clock: FakeClock) -> PayloadCache:
    return PayloadCache(ttl=36000, check_period=120, clock=fake_clock)


@pytest.fixture
def last_log(tmp_path) -> LastLogStore:
    return LastLogStore(tmp_path / "last.log")


@pytest.fixture
def fake_stealth() -> MagicMock:
    stealth = MagicMock()
    stealth.apply_stealth_async = AsyncMock()
    return stealth


@pytest.fixture
def fake_browser() -> FakeBrowserEnvironment:
    return FakeBrowserEnvironment()


@pytest.fixture
def renderer(
    fake_browser: FakeBrowserEnvironment,
    fake_stealth: MagicMock,
    last_log: LastLogStore,
) -> RenderSession:
    return RenderSession(
        navigation_timeout=5.0,
        max_concurrent=2,
        last_log=last_log,
        playwright_factory=fake_browser.factory,
        stealth=fake_stealth,
    )


@pytest_asyncio.fixture
async def http_client() -> AsyncGenerator[httpx.AsyncClient, None]:
    async with httpx.AsyncClient(follow_redirects=True, timeout=5.0) as client:
        yield client


@pytest.fixture
def retriever(
    http_client: httpx.AsyncClient,
    payload_cache: PayloadCache,
    renderer: RenderSession,
    last_log: LastLogStore,
) -> PageRetriever:
    return PageRetriever(
        client=http_client,
        cache=payload_cache,
        renderer=renderer,
        last_log=last_log,
    )
