"""API request schemas."""
from typing import Any, Dict, List, Optional
from pydantic import Field, field_validator

from .crawl import CamelModel


class ToolKeyMixin(CamelModel):
    """Optional reference to the tool a crawl result belongs to."""
    tool_id: Optional[str] = Field(default=None, description="Tool id to update")
    slug: Optional[str] = Field(default=None, description="Tool slug to update")

    @property
    def tool_key(self) -> Optional[str]:
        return self.tool_id or self.slug


class UrlRequest(ToolKeyMixin):
    """Request carrying a single URL, scheme optional."""
    url: str = Field(..., description="Website URL, https:// is assumed when missing")
    persist: bool = Field(default=False, description="Write results back to the tool")

    @field_validator("url")
    @classmethod
    def _url_not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("URL is required")
        return value.strip()


class ContentCrawlRequest(UrlRequest):
    """Content crawl; social links and image found earlier are passed through."""
    image_url: Optional[str] = None
    social_links: List[str] = Field(default_factory=list)


class ValidateUrlRequest(UrlRequest):
    """URL validation; the tool is always updated when a key is given."""


class ToolIdsRequest(CamelModel):
    """Batch request over catalog tools."""
    tool_ids: List[str] = Field(..., min_length=1, max_length=500)


class MetadataAnalysisRequest(CamelModel):
    """Crawl data from a previous content crawl, sent for metadata analysis."""
    content: str = Field(..., min_length=1)
    title: str = ""
    url: str = ""
    social_links: List[str] = Field(default_factory=list)
    affiliate_links: List[Any] = Field(default_factory=list)


class ToolCreateRequest(CamelModel):
    """Fields accepted when creating a tool."""
    name: str = Field(..., min_length=1)
    slug: str = Field(..., min_length=1)
    website_url: Optional[str] = None
    description: str = ""
    pricing_type: str = "FREEMIUM"
    is_active: bool = True
    tags: List[str] = Field(default_factory=list)
    features: List[str] = Field(default_factory=list)
    categories: List[str] = Field(default_factory=list)
    user_types: List[str] = Field(default_factory=list)


class ToolUpdateRequest(CamelModel):
    """Partial tool update; only fields present in the body are written."""
    name: Optional[str] = None
    slug: Optional[str] = None
    website_url: Optional[str] = None
    description: Optional[str] = None
    detailed_description: Optional[str] = None
    logo_url: Optional[str] = None
    pricing_type: Optional[str] = None
    pricing_details: Optional[str] = None
    is_active: Optional[bool] = None
    http_code: Optional[int] = None
    http_chain: Optional[str] = None
    twitter_url: Optional[str] = None
    instagram_url: Optional[str] = None
    facebook_url: Optional[str] = None
    linkedin_url: Optional[str] = None
    github_url: Optional[str] = None
    youtube_url: Optional[str] = None
    app_store_url: Optional[str] = None
    play_store_url: Optional[str] = None
    affiliate_url: Optional[str] = None
    has_affiliate_program: Optional[bool] = None
    tags: Optional[List[str]] = None
    features: Optional[List[str]] = None
    categories: Optional[List[str]] = None
    user_types: Optional[List[str]] = None

    @field_validator("name", "slug", "description", "pricing_type", "is_active", "has_affiliate_program")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not null")
        return value

    def field_updates(self) -> Dict[str, Any]:
        """Scalar columns explicitly set in the request body."""
        data = self.model_dump(exclude_unset=True)
        for label in ("tags", "features", "categories", "user_types"):
            data.pop(label, None)
        return data

    def label_updates(self) -> Dict[str, List[str]]:
        """Label sets explicitly set in the request body."""
        data = self.model_dump(exclude_unset=True)
        return {
            label: data[label]
            for label in ("tags", "features", "categories", "user_types")
            if data.get(label) is not None
        }
