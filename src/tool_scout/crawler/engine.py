"""
Breadth-first crawl engine shared by all site crawlers.
"""
from typing import Optional

from ..core.config import Settings, settings as default_settings
from ..core.exceptions import PageRenderError
from ..core.logging import logger
from ..models.crawl import CrawlAccumulator, CrawlTarget, PageResult
from .frontier import LinkFrontier
from .renderer import PageRenderer
from .strategies import CrawlStrategy


class CrawlEngine:
    """
    Visits a site page by page and folds each page into an accumulator.

    The engine owns the control flow (frontier, error handling, counters,
    truncation); everything endpoint specific comes from the strategy:
    render options, which text to extract, whether a page counts, which
    links to follow and which of them jump the queue.
    """

    def __init__(
        self,
        renderer: PageRenderer,
        strategy: CrawlStrategy,
        settings: Optional[Settings] = None
    ):
        self.renderer = renderer
        self.strategy = strategy
        self.settings = settings or default_settings

    async def run(self, target: CrawlTarget) -> CrawlAccumulator:
        """
        Crawl from ``target.seed_url`` within the target's bounds.

        Pages are visited strictly one after the other. Pages that fail to
        render are logged and skipped; they still count as processed.

        Args:
            target: Seed URL and crawl bounds

        Returns:
            CrawlAccumulator with the content truncated to the configured cap
        """
        frontier = LinkFrontier(target)
        accumulator = CrawlAccumulator(final_url=target.seed_url)

        logger.info(
            f"Crawling {target.seed_url} with {self.strategy.name} "
            f"(max_depth={target.max_depth}, max_pages={target.max_pages})"
        )

        while True:
            entry = frontier.pop()
            if entry is None:
                break

            logger.debug(f"Exploring {entry.url} (depth {entry.depth}/{target.max_depth})")
            try:
                page = await self.renderer.render(entry.url, **self.strategy.render_options(entry.depth))
            except PageRenderError as e:
                logger.warning(f"Skipping {entry.url}: {e.reason}")
                continue

            try:
                if entry.depth == 0:
                    accumulator.final_url = page.final_url
                    accumulator.title = page.title
                    frontier.record_final_url(page.final_url)

                text = self.strategy.extract_text(page, entry.depth)
                included = self.strategy.include_page(page, entry.depth)

                links = []
                if entry.depth < target.max_depth:
                    links = self.strategy.discover_links(page, entry.depth)
                    for link in links:
                        frontier.push(link.url, entry.depth + 1, priority=self.strategy.is_priority(link))

                result = PageResult(
                    url=entry.url,
                    final_url=page.final_url,
                    depth=entry.depth,
                    title=page.title,
                    text_content=text,
                    included=included,
                    discovered_links=links,
                )
                accumulator.add_page(result, header=self.strategy.section_header(result))
            except Exception as e:
                logger.error(f"Error processing {entry.url}: {str(e)}")

        accumulator.pages_discovered = frontier.pages_discovered
        accumulator.pages_processed = frontier.pages_processed
        self.strategy.finalize(accumulator)

        if accumulator.truncate(self.settings.CRAWLER_CONTENT_CAP):
            logger.info(f"Content truncated to {self.settings.CRAWLER_CONTENT_CAP} characters")

        logger.info(
            f"Crawl of {target.seed_url} finished: {accumulator.pages_discovered} discovered, "
            f"{accumulator.pages_processed} processed"
        )
        return accumulator
