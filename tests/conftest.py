"""Pytest fixtures for Tool Scout tests."""

import shutil
import socket
import tempfile
from pathlib import Path
from typing import Dict, Generator, List, Optional

import pytest

from tool_scout.core.config import Settings
from tool_scout.core.exceptions import PageRenderError
from tool_scout.crawler.extractors import extract_title
from tool_scout.crawler.renderer import RenderedPage
from tool_scout.services.store import ToolStore


class FakeRenderer:
    """Serves fixture HTML by URL in place of the headless browser."""

    def __init__(
        self,
        pages: Optional[Dict[str, str]] = None,
        status_codes: Optional[Dict[str, int]] = None,
        errors: Optional[Dict[str, PageRenderError]] = None,
        redirects: Optional[Dict[str, str]] = None,
        screenshot: Optional[bytes] = None,
    ):
        self.pages = pages or {}
        self.status_codes = status_codes or {}
        self.errors = errors or {}
        self.redirects = redirects or {}
        self.screenshot = screenshot
        self.calls: List[Dict] = []
        self.entered = 0
        self.closed = 0

    async def __aenter__(self):
        self.entered += 1
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        self.closed += 1

    @property
    def rendered_urls(self) -> List[str]:
        return [call["url"] for call in self.calls]

    async def render(self, url, timeout=None, delay=0.0, screenshot=False):
        self.calls.append({"url": url, "timeout": timeout, "delay": delay, "screenshot": screenshot})
        if url in self.errors:
            raise self.errors[url]
        if url not in self.pages:
            raise PageRenderError(url, "net::ERR_ABORTED")

        html = self.pages[url]
        return RenderedPage(
            url=url,
            final_url=self.redirects.get(url, url),
            status_code=self.status_codes.get(url, 200),
            html=html,
            title=extract_title(html),
            screenshot=self.screenshot if screenshot else None,
        )


class FakeLLM:
    """Returns canned answers in order and records the prompts it was sent."""

    def __init__(self, *answers: Optional[str]):
        self.answers = list(answers)
        self.prompts: List[str] = []
        self.calls: List[Dict] = []

    async def generate(self, prompt, temperature=0.2, max_output_tokens=4096, model=None):
        self.prompts.append(prompt)
        self.calls.append({"temperature": temperature, "max_output_tokens": max_output_tokens})
        if not self.answers:
            return None
        return self.answers.pop(0)


async def resolvable(host: str):
    return [(2, 1, 6, "", ("93.184.216.34", 0))]


async def unresolvable(host: str):
    raise socket.gaierror(f"Name or service not known: {host}")


def page(title: str = "", body: str = "") -> str:
    """Minimal HTML document."""
    return f"<html><head><title>{title}</title></head><body>{body}</body></html>"


@pytest.fixture(scope="function")
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    temp_path = Path(tempfile.mkdtemp(prefix="tool_scout_test_"))
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture(scope="function")
def settings(temp_dir: Path) -> Settings:
    """Settings pointing every path at the temp directory."""
    return Settings(
        DATABASE_PATH=str(temp_dir / "tools.db"),
        SCREENSHOT_DIR=str(temp_dir / "screenshots"),
        LOG_DIR=str(temp_dir / "logs"),
        API_KEY_SECRET="test-key",
        GEMINI_API_KEY="test-gemini-key",
        SCREENSHOT_BATCH_DELAY=0.0,
        DNS_TIMEOUT=0.5,
    )


@pytest.fixture(scope="function")
def store(settings: Settings) -> ToolStore:
    """Tool store backed by a temp SQLite file."""
    return ToolStore(settings.DATABASE_PATH)


@pytest.fixture(scope="function")
def site_pages() -> Dict[str, str]:
    """Small site: homepage, three internal pages, one external link."""
    return {
        "https://example.com": page(
            "Example AI",
            '<main><h1>Example AI</h1><p>Generate videos from text prompts.</p>'
            '<a href="/features">Features</a>'
            '<a href="/pricing">Pricing</a>'
            '<a href="/about">About</a>'
            '<a href="https://other.com/blog">Elsewhere</a></main>',
        ),
        "https://example.com/features": page(
            "Features", '<main><p>Lip sync and avatars.</p><a href="/about">About</a></main>'
        ),
        "https://example.com/pricing": page(
            "Pricing", "<main><p>Free plan, Pro at 20 euros per month.</p></main>"
        ),
        "https://example.com/about": page("About", "<main><p>Built in Paris.</p></main>"),
    }
