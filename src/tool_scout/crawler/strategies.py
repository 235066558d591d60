"""
Extraction and link-priority strategies plugged into the crawl engine.
"""
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

from ..core.logging import logger
from ..models.crawl import CrawlAccumulator, Link, PageResult
from .extractors import (
    extract_footer_links,
    extract_main_content,
    extract_noise_free_text,
    extract_visible_text,
    harvest_links,
)
from .renderer import RenderedPage


PRICING_KEYWORDS = [
    "pricing", "price", "prices",
    "tarif", "tarifs", "tarification", "prix",
    "abonnement", "abonnements",
    "subscribe", "subscription", "subscriptions",
    "plan", "plans",
    "buy", "purchase", "acheter",
    "signup", "sign-up", "register", "inscription",
    "offer", "offers", "offre", "offres",
]

MEDIA_SUFFIXES = (".jpg", ".png", ".pdf")


def is_pricing_related(value: Optional[str]) -> bool:
    """True when ``value`` (a URL, title or anchor text) mentions a pricing keyword."""
    if not value:
        return False
    lowered = value.lower()
    return any(keyword in lowered for keyword in PRICING_KEYWORDS)


class CrawlStrategy:
    """
    Default behaviour: visible text of every page, links in document order.

    Subclasses override the hooks they need.
    """

    name = "visible-text"
    header = "PAGE"

    def __init__(self, timeout: Optional[float] = None, delay: float = 0.0):
        self.timeout = timeout
        self.delay = delay

    def render_options(self, depth: int) -> Dict[str, Any]:
        return {"timeout": self.timeout, "delay": self.delay}

    def extract_text(self, page: RenderedPage, depth: int) -> str:
        return extract_visible_text(page.html)

    def include_page(self, page: RenderedPage, depth: int) -> bool:
        return True

    def section_header(self, result: PageResult) -> str:
        return self.header

    def discover_links(self, page: RenderedPage, depth: int) -> List[Link]:
        return harvest_links(page.html, page.url)

    def is_priority(self, link: Link) -> bool:
        return False

    def finalize(self, accumulator: CrawlAccumulator) -> None:
        """Last chance to rewrite the accumulator before truncation."""


class VisibleTextStrategy(CrawlStrategy):
    """Full visible text of each page, for the content crawler."""


class MainContentStrategy(CrawlStrategy):
    """Main-content blocks only, for the detailed description crawler."""

    name = "main-content"
    header = "Page"

    def extract_text(self, page: RenderedPage, depth: int) -> str:
        return extract_main_content(page.html)


class PricingStrategy(CrawlStrategy):
    """
    Collects pricing pages.

    Links mentioning a pricing keyword in their URL or anchor text are
    explored first. Only pages whose URL or title is pricing related add
    text; when none is found the homepage text is used instead.
    """

    name = "pricing"
    header = "PAGE DE TARIFICATION"
    fallback_header = "PAGE D'ACCUEIL (FALLBACK)"

    def include_page(self, page: RenderedPage, depth: int) -> bool:
        return is_pricing_related(page.url) or is_pricing_related(page.title)

    def is_priority(self, link: Link) -> bool:
        return is_pricing_related(link.url) or is_pricing_related(link.text)

    def finalize(self, accumulator: CrawlAccumulator) -> None:
        if any(page.included for page in accumulator.pages):
            return

        logger.info("No pricing page found, using the homepage as fallback")
        homepage = next((page for page in accumulator.pages if page.depth == 0), None)
        if homepage is None:
            return
        accumulator.content = f"\n--- {self.fallback_header}: {homepage.url} ---\n" + homepage.text_content
        accumulator.content_length = len(homepage.text_content)


class AffiliateFooterStrategy(CrawlStrategy):
    """
    Homepage footer links, each visited once, for affiliate detection.

    The homepage itself contributes no text. Its footer links are filtered
    to same-site sub pages (no anchors, no media files) and capped; each
    child page contributes its noise-free text under a ``TITRE``/``CONTENU``
    layout.
    """

    name = "affiliate-footer"
    header = "LIEN"
    seed_timeout = 30.0
    seed_delay = 5.0
    link_timeout = 20.0
    link_delay = 3.0
    text_limit = 10_000

    def __init__(self, max_links: int = 10):
        super().__init__(timeout=self.seed_timeout, delay=self.seed_delay)
        self.max_links = max_links
        self.anchor_texts: Dict[str, str] = {}

    def render_options(self, depth: int) -> Dict[str, Any]:
        if depth == 0:
            return {"timeout": self.seed_timeout, "delay": self.seed_delay}
        return {"timeout": self.link_timeout, "delay": self.link_delay}

    def extract_text(self, page: RenderedPage, depth: int) -> str:
        if depth == 0:
            return ""
        content = extract_noise_free_text(page.html, limit=self.text_limit)
        return f"TITRE: {page.title}\n\nCONTENU:\n{content}"

    def include_page(self, page: RenderedPage, depth: int) -> bool:
        return depth > 0

    def discover_links(self, page: RenderedPage, depth: int) -> List[Link]:
        site_hosts = {urlparse(page.url).hostname, urlparse(page.final_url).hostname}
        selected: List[Link] = []
        for link in extract_footer_links(page.html, page.url):
            if len(selected) >= self.max_links:
                break
            parsed = urlparse(link.url)
            if parsed.hostname not in site_hosts or parsed.path in ("", "/"):
                continue
            if "#" in link.url or link.url.lower().endswith(MEDIA_SUFFIXES):
                continue
            if link.url in self.anchor_texts:
                continue
            self.anchor_texts[link.url] = link.text
            selected.append(link)
        logger.info(f"{len(selected)} footer links selected for affiliate analysis")
        return selected

    def analyzed_links(self, accumulator: CrawlAccumulator) -> List[Dict[str, str]]:
        """Visited footer links with their anchor text and page content."""
        return [
            {
                "url": page.url,
                "text": self.anchor_texts.get(page.url, ""),
                "content": page.text_content,
            }
            for page in accumulator.pages
            if page.included
        ]
