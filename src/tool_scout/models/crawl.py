"""Data models for crawl targets, pages and accumulated results."""
from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys, as the admin UI expects."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CrawlTarget(BaseModel):
    """Bounds for one crawl, created per request."""
    seed_url: str = Field(..., description="Normalized starting URL")
    max_depth: int = Field(default=2, ge=0, description="Maximum link depth to follow")
    max_pages: int = Field(default=20, gt=0, description="Maximum pages to process")

    @field_validator("seed_url")
    @classmethod
    def _seed_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("seed_url must not be blank")
        return value


class QueueEntry(BaseModel):
    """A URL waiting in the frontier together with its link depth."""
    model_config = ConfigDict(frozen=True)

    url: str
    depth: int = Field(..., ge=0)


class Link(BaseModel):
    """An absolute link and its anchor text."""
    model_config = ConfigDict(frozen=True)

    url: str
    text: str = ""


class PageResult(BaseModel):
    """What one visited page contributed to a crawl."""
    model_config = ConfigDict(frozen=True)

    url: str
    final_url: str
    depth: int
    title: str = ""
    text_content: str = ""
    included: bool = Field(default=True, description="Whether the text went into the accumulated content")
    discovered_links: List[Link] = Field(default_factory=list)


class CrawlAccumulator(CamelModel):
    """Running totals of a crawl, folded page by page."""
    final_url: str
    title: str = ""
    content: str = ""
    pages_discovered: int = 1
    pages_processed: int = 0
    content_length: int = 0
    pages: List[PageResult] = Field(default_factory=list, exclude=True)

    def add_page(self, page: PageResult, header: Optional[str] = None) -> None:
        """Fold a page into the accumulator; only included pages add text."""
        self.pages.append(page)
        if not page.included:
            return
        self.content += f"\n--- {header or 'PAGE'}: {page.url} ---\n"
        self.content += page.text_content + "\n\n"
        self.content_length += len(page.text_content)

    def truncate(self, limit: int) -> bool:
        """Cap the content length; returns True when something was cut."""
        if len(self.content) <= limit:
            return False
        self.content = self.content[:limit]
        return True
