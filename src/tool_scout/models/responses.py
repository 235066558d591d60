"""API response schemas."""
from typing import Any, Dict, List, Optional
from pydantic import Field

from .crawl import CamelModel


class CrawlResponse(CamelModel):
    """Common shape returned by the site crawlers."""
    final_url: str
    title: str = ""
    content: str = ""
    pages_discovered: int = 0
    pages_processed: int = 0
    content_length: int = 0
    gemini_analysis: Optional[Dict[str, Any]] = None


class ContentCrawlResponse(CrawlResponse):
    image_url: Optional[str] = None
    social_links: List[str] = Field(default_factory=list)


class PricingCrawlResponse(CrawlResponse):
    pricing_pages_found: int = 0


class ToolStatusResult(CamelModel):
    """HTTP status of one tool website after probing."""
    id: str
    name: str = ""
    original_url: str = ""
    final_url: str = ""
    http_code: int = 0
    http_chain: str = ""
    error: Optional[str] = None


class ToolStatusResponse(CamelModel):
    success: bool
    results: List[ToolStatusResult] = Field(default_factory=list)


class SocialCrawlResponse(CamelModel):
    """Screenshot and social links found on a homepage."""
    final_url: str
    title: str = ""
    social_links: Dict[str, Optional[str]] = Field(default_factory=dict)
    social_links_found: List[str] = Field(default_factory=list)
    image_url: Optional[str] = None
    screenshot_path: Optional[str] = None
    screenshot_taken: bool = False
    has_affiliate_program: bool = False


class ScreenshotBatchItem(CamelModel):
    id: str
    success: bool
    image_url: Optional[str] = None
    error: Optional[str] = None


class ScreenshotBatchResponse(CamelModel):
    success: bool
    processed: int
    results: List[ScreenshotBatchItem] = Field(default_factory=list)


class MetadataAnalysisResponse(CamelModel):
    url: str
    title: str
    analysis: Dict[str, Any]
