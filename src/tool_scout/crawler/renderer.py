"""
Headless browser page renderer built on Crawl4AI.
"""
from dataclasses import dataclass
from typing import Optional, Callable
import base64

from crawl4ai import AsyncWebCrawler, BrowserConfig, CrawlerRunConfig, CacheMode

from ..core.config import Settings, settings as default_settings
from ..core.exceptions import BrowserLaunchError, PageRenderError
from ..core.logging import logger
from .extractors import extract_title


@dataclass(frozen=True)
class RenderedPage:
    """A loaded page: the DOM as HTML plus navigation facts."""
    url: str
    final_url: str
    status_code: Optional[int]
    html: str
    title: str = ""
    screenshot: Optional[bytes] = None


class PageRenderer:
    """
    One headless browser for the lifetime of a request.

    Use as an async context manager: the browser is launched on entry and
    closed on exit. Each ``render`` call opens a fresh page that is released
    as soon as its HTML has been captured.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or default_settings
        self.browser_config = BrowserConfig(
            headless=self.settings.CRAWLER_HEADLESS,
            viewport_width=1200,
            viewport_height=800,
            user_agent=self.settings.CRAWLER_USER_AGENT,
            browser_type="chromium",
            extra_args=["--no-sandbox", "--disable-setuid-sandbox"],
            verbose=False,
        )
        self._crawler: Optional[AsyncWebCrawler] = None

    async def __aenter__(self):
        """Launch the browser."""
        try:
            self._crawler = AsyncWebCrawler(config=self.browser_config)
            await self._crawler.__aenter__()
        except Exception as e:
            logger.error(f"Browser launch failed: {e}")
            self._crawler = None
            raise BrowserLaunchError(str(e)) from e
        logger.debug("Headless browser started")
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Close the browser."""
        if self._crawler:
            await self._crawler.__aexit__(exc_type, exc_val, exc_tb)
            self._crawler = None
            logger.debug("Headless browser closed")

    async def render(
        self,
        url: str,
        timeout: Optional[float] = None,
        delay: float = 0.0,
        screenshot: bool = False,
    ) -> RenderedPage:
        """
        Load a URL and return its rendered DOM.

        Args:
            url: Page to open
            timeout: Navigation timeout in seconds
            delay: Extra wait after ``domcontentloaded`` for dynamic content
            screenshot: Capture a PNG screenshot of the viewport

        Returns:
            RenderedPage

        Raises:
            PageRenderError: navigation failed or produced no document
        """
        if self._crawler is None:
            raise PageRenderError(url, "browser is not started")

        timeout = timeout or self.settings.CRAWLER_PAGE_TIMEOUT
        run_config = CrawlerRunConfig(
            wait_until="domcontentloaded",
            page_timeout=int(timeout * 1000),
            delay_before_return_html=delay,
            cache_mode=CacheMode.BYPASS,
            screenshot=screenshot,
            verbose=self.settings.LOG_LEVEL == "DEBUG",
        )

        try:
            result = await self._crawler.arun(url=url, config=run_config)
        except Exception as e:
            raise PageRenderError(url, str(e)) from e

        if not result.success or not result.html:
            raise PageRenderError(
                url,
                result.error_message or "empty document",
                getattr(result, "status_code", None),
            )

        metadata = result.metadata or {}
        title = metadata.get("title") or extract_title(result.html)

        return RenderedPage(
            url=url,
            final_url=getattr(result, "redirected_url", None) or url,
            status_code=getattr(result, "status_code", None),
            html=result.html,
            title=title or "",
            screenshot=_decode_screenshot(result.screenshot) if screenshot else None,
        )


def _decode_screenshot(data) -> Optional[bytes]:
    """Crawl4AI hands screenshots back base64 encoded."""
    if not data:
        return None
    if isinstance(data, bytes):
        return data
    return base64.b64decode(data)


RendererFactory = Callable[[], PageRenderer]
