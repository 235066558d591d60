"""Unit tests for the Crawl4AI page renderer."""

import base64
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from tool_scout.core.exceptions import BrowserLaunchError, PageRenderError
from tool_scout.crawler.renderer import PageRenderer


def _result(**overrides):
    mock_result = MagicMock()
    mock_result.success = True
    mock_result.html = "<html><head><title>From HTML</title></head><body>Hi</body></html>"
    mock_result.metadata = {"title": "From metadata"}
    mock_result.redirected_url = "https://example.com/en"
    mock_result.status_code = 200
    mock_result.screenshot = base64.b64encode(b"png-bytes").decode()
    mock_result.error_message = None
    for key, value in overrides.items():
        setattr(mock_result, key, value)
    return mock_result


@pytest.mark.asyncio
async def test_render_success(settings):
    """Test rendering returns the DOM and navigation facts."""
    with patch("tool_scout.crawler.renderer.AsyncWebCrawler") as mock_crawler_class:
        mock_crawler = AsyncMock()
        mock_crawler_class.return_value = mock_crawler
        mock_crawler.arun.return_value = _result()

        async with PageRenderer(settings) as renderer:
            page = await renderer.render("https://example.com", timeout=20, delay=3, screenshot=True)

        assert page.final_url == "https://example.com/en"
        assert page.status_code == 200
        assert page.title == "From metadata"
        assert page.screenshot == b"png-bytes"

        config = mock_crawler.arun.call_args.kwargs["config"]
        assert config.page_timeout == 20000
        assert config.delay_before_return_html == 3
        assert config.wait_until == "domcontentloaded"
        mock_crawler.__aexit__.assert_awaited_once()


@pytest.mark.asyncio
async def test_title_falls_back_to_html(settings):
    with patch("tool_scout.crawler.renderer.AsyncWebCrawler") as mock_crawler_class:
        mock_crawler = AsyncMock()
        mock_crawler_class.return_value = mock_crawler
        mock_crawler.arun.return_value = _result(metadata=None, redirected_url=None)

        async with PageRenderer(settings) as renderer:
            page = await renderer.render("https://example.com")

        assert page.title == "From HTML"
        assert page.final_url == "https://example.com"
        assert page.screenshot is None


@pytest.mark.asyncio
async def test_failed_navigation_raises_page_error(settings):
    with patch("tool_scout.crawler.renderer.AsyncWebCrawler") as mock_crawler_class:
        mock_crawler = AsyncMock()
        mock_crawler_class.return_value = mock_crawler
        mock_crawler.arun.return_value = _result(
            success=False, html="", error_message="net::ERR_NAME_NOT_RESOLVED", status_code=None
        )

        async with PageRenderer(settings) as renderer:
            with pytest.raises(PageRenderError) as exc_info:
                await renderer.render("https://nope.invalid")

        assert exc_info.value.reason == "net::ERR_NAME_NOT_RESOLVED"
        assert exc_info.value.page_status is None


@pytest.mark.asyncio
async def test_crawler_exception_raises_page_error(settings):
    with patch("tool_scout.crawler.renderer.AsyncWebCrawler") as mock_crawler_class:
        mock_crawler = AsyncMock()
        mock_crawler_class.return_value = mock_crawler
        mock_crawler.arun.side_effect = Exception("Page.goto: Timeout 20000ms exceeded")

        async with PageRenderer(settings) as renderer:
            with pytest.raises(PageRenderError) as exc_info:
                await renderer.render("https://slow.example.com")

        assert "Timeout" in exc_info.value.reason


@pytest.mark.asyncio
async def test_browser_launch_failure(settings):
    with patch("tool_scout.crawler.renderer.AsyncWebCrawler") as mock_crawler_class:
        mock_crawler = AsyncMock()
        mock_crawler_class.return_value = mock_crawler
        mock_crawler.__aenter__.side_effect = RuntimeError("Executable doesn't exist")

        with pytest.raises(BrowserLaunchError):
            async with PageRenderer(settings):
                pass


@pytest.mark.asyncio
async def test_render_requires_started_browser(settings):
    with pytest.raises(PageRenderError):
        await PageRenderer(settings).render("https://example.com")
