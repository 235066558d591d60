"""DOM extraction heuristics over rendered HTML."""
from typing import List, Optional
import re
from bs4 import BeautifulSoup, Tag

from ..models.crawl import Link
from ..utils.url_utils import resolve_link


FOOTER_SELECTORS = [
    "footer",
    ".footer",
    "#footer",
    '[data-testid="footer"]',
    ".site-footer",
    ".page-footer",
    ".main-footer",
    ".global-footer",
    ".base-footer",
    "body > div:last-child",
    "body > section:last-child",
    "body > div:nth-last-child(2)",
]

MAIN_CONTENT_SELECTORS = [
    "main",
    "article",
    '[role="main"]',
    ".content",
    "#content",
    ".main-content",
    "#main-content",
    ".page-content",
    "#main",
]

# Fraction of the document (in element order) treated as the bottom region
BOTTOM_REGION = 0.7

CHROME_KEYWORDS = ("header", "footer", "nav", "menu", "cookie", "banner")
CHROME_TAGS = ("header", "footer", "nav", "aside")
HIDDEN_STYLE = re.compile(r"display\s*:\s*none|visibility\s*:\s*hidden|opacity\s*:\s*0(?:\.0+)?\s*(?:;|$)", re.I)

NOISE_TAGS = [
    "script", "style", "noscript", "iframe", "img", "svg", "canvas",
    "video", "audio", "button", "input", "select", "textarea",
]

BLOCK_TAGS = ["p", "li", "h1", "h2", "h3", "h4", "h5", "h6", "blockquote", "td", "dd", "section", "div"]

MIN_BLOCK_LENGTH = 50


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html or "", "html.parser")


def _collapse(text: str) -> str:
    """Collapse runs of spaces and blank lines."""
    text = re.sub(r"[ \t\r\f\v]+", " ", text)
    text = re.sub(r"\n\s*\n+", "\n", text)
    return text.strip()


def extract_title(html: str) -> str:
    """Text of the ``<title>`` element, or an empty string."""
    title = _soup(html).find("title")
    return title.get_text(strip=True) if title else ""


def extract_visible_text(html: str) -> str:
    """
    Visible text of the page body.

    Scripts, styles, templates and elements hidden with the ``hidden``
    attribute or an inline ``display:none``/``visibility:hidden`` style are
    removed before the text is read.
    """
    soup = _soup(html)
    for element in soup(["script", "style", "noscript", "template", "head"]):
        element.decompose()
    for element in soup.find_all(_is_hidden):
        # Already gone with a hidden ancestor
        if getattr(element, "decomposed", False):
            continue
        element.decompose()

    root = soup.body or soup
    return _collapse(root.get_text(separator="\n"))


def _has_own_text(tag: Tag) -> bool:
    return any(text.strip() for text in tag.find_all(string=True, recursive=False))


def _is_hidden(tag: Tag) -> bool:
    if tag.has_attr("hidden") or tag.get("aria-hidden") == "true":
        return True
    style = tag.get("style")
    return bool(style and HIDDEN_STYLE.search(style))


def extract_noise_free_text(html: str, limit: int = 10_000) -> str:
    """Body text with media, forms and scripts removed, on a single line, capped at ``limit``."""
    soup = _soup(html)
    for element in soup(NOISE_TAGS):
        element.decompose()

    root = soup.body or soup
    text = re.sub(r"\s+", " ", root.get_text(separator=" ")).strip()
    return text[:limit]


def _looks_like_chrome(tag: Tag) -> bool:
    """Header, footer or navigation by tag name, role, class or id."""
    if tag.name in CHROME_TAGS:
        return True
    if tag.get("role") in ("navigation", "banner", "contentinfo"):
        return True
    markers = " ".join(tag.get("class") or []) + " " + (tag.get("id") or "")
    markers = markers.lower()
    return any(keyword in markers for keyword in CHROME_KEYWORDS)


def _inside_chrome(tag: Tag) -> bool:
    if _looks_like_chrome(tag):
        return True
    return any(_looks_like_chrome(parent) for parent in tag.parents if isinstance(parent, Tag))


def extract_main_content(html: str) -> str:
    """
    Main content of a page.

    Tries semantic and conventional content containers first. Otherwise it
    keeps every block longer than 50 characters that is not part of a
    header, footer or navigation region, and finally falls back to the
    whole body text.
    """
    soup = _soup(html)
    for element in soup(["script", "style", "noscript", "template"]):
        element.decompose()

    for selector in MAIN_CONTENT_SELECTORS:
        container = soup.select_one(selector)
        if container is not None:
            text = _collapse(container.get_text(separator="\n"))
            if text:
                return text

    blocks: List[str] = []
    seen = set()
    for element in soup.find_all(BLOCK_TAGS):
        if _inside_chrome(element):
            continue
        # Containers are only read when they hold text directly; their children are visited anyway
        if element.name in ("div", "section") and not _has_own_text(element):
            continue
        text = _collapse(element.get_text(separator=" "))
        if len(text) > MIN_BLOCK_LENGTH and text not in seen:
            seen.add(text)
            blocks.append(text)

    if blocks:
        return "\n".join(blocks)

    root = soup.body or soup
    return _collapse(root.get_text(separator="\n"))


def harvest_links(html: str, base_url: str) -> List[Link]:
    """Every ``<a href>`` on the page as absolute URLs, in document order."""
    return _links_in(_soup(html), base_url)


def _links_in(root, base_url: str) -> List[Link]:
    links: List[Link] = []
    for anchor in root.find_all("a", href=True):
        url = resolve_link(base_url, anchor.get("href"))
        if url:
            links.append(Link(url=url, text=anchor.get_text(" ", strip=True)))
    return links


def find_footer(soup: BeautifulSoup) -> Optional[Tag]:
    """First element matching a footer selector, in selector priority order."""
    for selector in FOOTER_SELECTORS:
        element = soup.select_one(selector)
        if element is not None:
            return element
    return None


def extract_footer_links(html: str, base_url: str) -> List[Link]:
    """
    Links found in the footer region of a page.

    Falls back to links located in the bottom 30 % of the document, then to
    every link on the page.
    """
    soup = _soup(html)
    footer = find_footer(soup)
    if footer is not None:
        links = _links_in(footer, base_url)
        if links:
            return links

    body = soup.body or soup
    elements = body.find_all(True)
    if elements:
        cutoff = int(len(elements) * BOTTOM_REGION)
        bottom_anchors = [el for el in elements[cutoff:] if el.name == "a" and el.has_attr("href")]
        links = []
        for anchor in bottom_anchors:
            url = resolve_link(base_url, anchor.get("href"))
            if url:
                links.append(Link(url=url, text=anchor.get_text(" ", strip=True)))
        if links:
            return links

    return _links_in(soup, base_url)
