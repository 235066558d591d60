"""
Homepage screenshots and social link discovery.
"""
from pathlib import Path
from typing import List, Optional, Tuple
import asyncio

from ..core.config import Settings, settings as default_settings
from ..core.exceptions import InvalidURLError, PageRenderError
from ..core.logging import logger
from ..crawler.extractors import harvest_links
from ..crawler.renderer import PageRenderer, RendererFactory
from ..crawler.social import SOCIAL_FIELDS, match_social_links
from ..models.requests import UrlRequest
from ..models.responses import ScreenshotBatchItem, ScreenshotBatchResponse, SocialCrawlResponse
from ..models.tool import ToolRecord
from ..utils.url_utils import is_valid_url, normalize_url, sanitize_filename, tool_name_from_url
from .store import ToolStore


HOMEPAGE_TIMEOUT = 30.0
HOMEPAGE_DELAY = 5.0


class SocialCrawler:
    """
    Screenshots a tool homepage and collects its social network links.

    Screenshots are PNG files named after the tool's domain, stored under
    ``SCREENSHOT_DIR`` and served from ``SCREENSHOT_PUBLIC_PREFIX``.
    """

    def __init__(
        self,
        renderer_factory: RendererFactory,
        store: ToolStore,
        settings: Optional[Settings] = None
    ):
        self.renderer_factory = renderer_factory
        self.store = store
        self.settings = settings or default_settings

    def screenshot_location(self, url: str) -> Tuple[Path, str]:
        """File path and public URL of the screenshot for ``url``."""
        filename = f"{sanitize_filename(tool_name_from_url(url))}.png"
        directory = Path(self.settings.SCREENSHOT_DIR)
        public_url = f"{self.settings.SCREENSHOT_PUBLIC_PREFIX.rstrip('/')}/{filename}"
        return directory / filename, public_url

    async def _screenshot(self, renderer: PageRenderer, url: str):
        """Render ``url`` with a screenshot and save it; returns the page and its public URL."""
        page = await renderer.render(url, timeout=HOMEPAGE_TIMEOUT, delay=HOMEPAGE_DELAY, screenshot=True)
        if not page.screenshot:
            return page, None

        path, public_url = self.screenshot_location(url)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(page.screenshot)
        logger.info(f"Screenshot saved to {path}")
        return page, public_url

    async def crawl(self, request: UrlRequest) -> SocialCrawlResponse:
        """
        Screenshot the homepage and match its social links.

        A page that fails to render yields an empty result rather than an
        error. With ``persist`` the social URLs, logo and affiliate fields
        found are written to the tool.
        """
        url = normalize_url(request.url)
        if not is_valid_url(url):
            raise InvalidURLError(request.url)

        _, public_url = self.screenshot_location(url)
        result = SocialCrawlResponse(final_url=url, image_url=public_url, screenshot_path=public_url)

        async with self.renderer_factory() as renderer:
            try:
                page, saved_url = await self._screenshot(renderer, url)
            except PageRenderError as e:
                logger.warning(f"Homepage of {url} could not be rendered: {e.reason}")
                return result

        result.final_url = page.final_url
        result.title = page.title
        result.screenshot_taken = saved_url is not None

        links = harvest_links(page.html, page.final_url)
        social, found, has_affiliate = match_social_links(links, url)
        result.social_links = social
        result.social_links_found = found
        result.has_affiliate_program = has_affiliate
        logger.info(f"{len(found)} social links found on {url}")

        if request.persist and request.tool_key:
            fields = {
                column: social[name]
                for name, column in SOCIAL_FIELDS.items()
                if social.get(name)
            }
            if result.screenshot_taken:
                fields["logo_url"] = saved_url
            if has_affiliate:
                fields["has_affiliate_program"] = True
                fields["affiliate_url"] = social["affiliate"]
            self.store.update_by_key(request.tool_id, request.slug, **fields)

        return result

    async def _capture_tool(self, renderer: PageRenderer, tool: ToolRecord) -> ScreenshotBatchItem:
        if not tool.website_url:
            return ScreenshotBatchItem(id=tool.id, success=False, error="URL manquante")

        try:
            _, public_url = await self._screenshot(renderer, normalize_url(tool.website_url))
        except PageRenderError as e:
            logger.warning(f"Screenshot of {tool.name} failed: {e.reason}")
            return ScreenshotBatchItem(id=tool.id, success=False, error=e.reason)

        if public_url is None:
            return ScreenshotBatchItem(id=tool.id, success=False, error="Capture d'écran vide")

        self.store.update_tool(tool.id, logo_url=public_url)
        return ScreenshotBatchItem(id=tool.id, success=True, image_url=public_url)

    async def capture_batch(self, tool_ids: List[str]) -> ScreenshotBatchResponse:
        """
        Refresh the screenshots of many tools.

        Tools are processed in fixed-size batches; the tools of one batch are
        captured concurrently, and the crawler pauses between batches.
        """
        tools = self.store.list_by_ids(tool_ids)
        size = max(1, self.settings.SCREENSHOT_BATCH_SIZE)
        results: List[ScreenshotBatchItem] = []

        async with self.renderer_factory() as renderer:
            for start in range(0, len(tools), size):
                batch = tools[start:start + size]
                logger.info(f"Screenshot batch {start // size + 1}: {', '.join(tool.name for tool in batch)}")
                results.extend(await asyncio.gather(*[self._capture_tool(renderer, tool) for tool in batch]))
                if start + size < len(tools):
                    await asyncio.sleep(self.settings.SCREENSHOT_BATCH_DELAY)

        succeeded = sum(1 for item in results if item.success)
        logger.info(f"Screenshot batch finished: {succeeded}/{len(results)} captured")
        return ScreenshotBatchResponse(success=True, processed=len(results), results=results)
