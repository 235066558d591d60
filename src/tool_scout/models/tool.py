"""Catalog tool record as stored by the tool store."""
from datetime import datetime
from typing import List, Optional
from pydantic import Field

from .crawl import CamelModel


LABEL_KINDS = ("tags", "features", "categories", "user_types")


class ToolRecord(CamelModel):
    """A catalog entry; crawlers update its URL, status and enrichment fields."""
    id: str
    name: str
    slug: str
    website_url: Optional[str] = None
    http_code: Optional[int] = None
    http_chain: Optional[str] = None
    is_active: bool = True
    pricing_type: str = "FREEMIUM"
    pricing_details: Optional[str] = None
    description: str = ""
    detailed_description: Optional[str] = None
    logo_url: Optional[str] = None
    twitter_url: Optional[str] = None
    instagram_url: Optional[str] = None
    facebook_url: Optional[str] = None
    linkedin_url: Optional[str] = None
    github_url: Optional[str] = None
    youtube_url: Optional[str] = None
    app_store_url: Optional[str] = None
    play_store_url: Optional[str] = None
    has_affiliate_program: bool = False
    affiliate_url: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    features: List[str] = Field(default_factory=list)
    categories: List[str] = Field(default_factory=list)
    user_types: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
