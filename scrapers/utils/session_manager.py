"""
Sessions for fetching source pages.

stockanalysis.com serves plain HTML and is fetched with httpx.
valueinvesting.io and gurufocus.com render their tables with JavaScript and
are fetched through a headless Chromium driven by Playwright.
"""

import asyncio
import time
from typing import Optional

import httpx
from playwright.async_api import Browser, Playwright, async_playwright
from tenacity import (
    retry,
    retry_if_exception,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from config.settings import settings
from config.logging_config import get_logger

logger = get_logger(__name__)

PAGE_NOT_FOUND_TEXT = "Page Not Found"


class PageNotFoundError(RuntimeError):
    """The response is an error page rather than the expected content."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Invalid page content (likely a 404 page): {url} ({reason})")


def check_page_content(
    status_code: int,
    text: Optional[str],
    required_marker: Optional[str] = None,
) -> Optional[str]:
    """
    Return why a response is an error page, or None if it looks valid.

    A page is invalid when the status is >= 400, the body is empty, it shows
    the site's "Page Not Found" text, or it lacks the required marker.
    """
    if status_code >= 400:
        return f"status {status_code}"
    if not text:
        return "empty body"
    if PAGE_NOT_FOUND_TEXT in text:
        return "not found page"
    if required_marker and required_marker not in text:
        return f"missing {required_marker!r}"
    return None


def _is_server_error(exc: BaseException) -> bool:
    return isinstance(exc, httpx.HTTPStatusError) and exc.response.status_code >= 500


class StockAnalysisSession:
    """
    Rate-limited, retried HTTP session for HTML pages.

    Use as an async context manager:

        async with StockAnalysisSession() as session:
            html = await session.get_page(url)
    """

    def __init__(
        self,
        rate_limit: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the session.

        Args:
            rate_limit: Minimum seconds between requests. Defaults to settings value.
            transport: Optional httpx transport (tests pass a MockTransport)
        """
        self.rate_limit = settings.request_rate_limit if rate_limit is None else rate_limit
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self._last_request_time: float = 0

    async def __aenter__(self) -> "StockAnalysisSession":
        """Enter async context manager."""
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(settings.scrape_timeout),
            follow_redirects=True,
            transport=self._transport,
            headers={
                "User-Agent": settings.user_agent,
                "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
                "Accept-Language": "en-US,en;q=0.9",
            },
        )
        return self

    async def __aexit__(self, *args) -> None:
        """Exit async context manager."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def _throttle(self) -> None:
        """Enforce rate limit between requests."""
        elapsed = time.time() - self._last_request_time
        if elapsed < self.rate_limit:
            await asyncio.sleep(self.rate_limit - elapsed)
        self._last_request_time = time.time()

    @retry(
        stop=stop_after_attempt(settings.max_retries),
        wait=wait_exponential(multiplier=2, min=2, max=30),
        retry=retry_if_exception_type(httpx.TransportError),
        reraise=True,
    )
    async def _request(self, url: str) -> httpx.Response:
        if self._client is None:
            raise RuntimeError("Session not initialized. Use 'async with' context manager.")

        await self._throttle()
        return await self._client.get(url)

    @retry(
        stop=stop_after_attempt(settings.max_retries),
        wait=wait_exponential(multiplier=2, min=2, max=30),
        retry=retry_if_exception(_is_server_error),
        reraise=True,
    )
    async def get_page(self, url: str) -> str:
        """
        Fetch an HTML page, raising on HTTP error status.

        Args:
            url: Full URL to fetch

        Returns:
            HTML content
        """
        try:
            resp = await self._request(url)
            resp.raise_for_status()
            return resp.text
        except httpx.HTTPStatusError as e:
            logger.error(f"HTTP error fetching {url}: {e.response.status_code}")
            raise
        except httpx.TransportError as e:
            logger.error(f"Error fetching page {url}: {e}")
            raise

    async def get_page_safe(self, url: str, required_marker: Optional[str] = None) -> str:
        """
        Fetch an HTML page and verify it is not an error page.

        Error statuses are not retried: a missing symbol stays missing.

        Raises:
            PageNotFoundError: Error status, empty body, not-found page or missing marker
        """
        resp = await self._request(url)
        reason = check_page_content(resp.status_code, resp.text, required_marker)
        if reason:
            logger.warning(f"url error: {url} ({reason})")
            raise PageNotFoundError(url, reason)
        return resp.text


class BrowserSession:
    """
    Headless Chromium session for pages that render client-side.

        async with BrowserSession() as browser:
            html = await browser.get_page(url)
    """

    def __init__(self, headless: Optional[bool] = None, timeout_ms: Optional[int] = None):
        self.headless = settings.browser_headless if headless is None else headless
        self.timeout_ms = timeout_ms or settings.browser_timeout_ms
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None

    async def __aenter__(self) -> "BrowserSession":
        """Start Playwright and launch the browser."""
        self._playwright = await async_playwright().start()
        self._browser = await self._playwright.chromium.launch(
            headless=self.headless,
            args=["--no-sandbox", "--disable-setuid-sandbox"],
        )
        return self

    async def __aexit__(self, *args) -> None:
        """Clean up browser resources."""
        if self._browser:
            await self._browser.close()
            self._browser = None
        if self._playwright:
            await self._playwright.stop()
            self._playwright = None

    async def get_page(self, url: str) -> str:
        """
        Load a page, wait for network idle and return the rendered HTML.
        """
        if self._browser is None:
            raise RuntimeError("Browser not started. Use 'async with' context manager.")

        page = await self._browser.new_page(user_agent=settings.user_agent)
        try:
            await page.goto(url, wait_until="networkidle", timeout=self.timeout_ms)
            return await page.content()
        finally:
            await page.close()
