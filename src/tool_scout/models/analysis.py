"""Models for decoded generative-API answers."""
from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from .crawl import CamelModel


class DecodedKind(str, Enum):
    """Whether an answer could be decoded into a JSON object."""
    STRUCTURED = "structured"
    RAW = "raw"


class DecodedResponse(BaseModel):
    """
    Result of best-effort decoding of a free-text model answer.

    ``structured`` carries the parsed JSON object in ``data``; ``raw`` means
    the answer was present but no decoder could turn it into an object.
    """
    kind: DecodedKind
    data: Optional[Dict[str, Any]] = None
    raw_text: str = ""
    strategy: Optional[str] = Field(default=None, description="Name of the decoder that succeeded")

    @property
    def is_structured(self) -> bool:
        return self.kind == DecodedKind.STRUCTURED

    def or_default(self, default: Dict[str, Any]) -> Dict[str, Any]:
        """The decoded object, or a copy of ``default`` for raw answers."""
        if self.is_structured and self.data is not None:
            return self.data
        return dict(default)


class PricingType(str, Enum):
    """Pricing models known to the catalog."""
    FREE = "FREE"
    FREEMIUM = "FREEMIUM"
    PAID = "PAID"


class ContentAnalysis(CamelModel):
    """Tool form fields proposed from a full-site content crawl."""
    kind: DecodedKind
    fields: Dict[str, Any] = Field(default_factory=dict)
    raw_response: str = ""


class PricingAnalysis(CamelModel):
    """HTML pricing review plus the inferred pricing model."""
    raw_response: str
    pricing_details: str
    pricing_type: PricingType


class DescriptionAnalysis(CamelModel):
    """Generated SEO description of a tool."""
    detailed_description: str = ""
    raw_response: str = ""
    error: Optional[str] = None


class AffiliateAnalysis(CamelModel):
    """Most probable affiliate program page among the footer links."""
    most_probable_affiliate_url: Optional[str] = None
    all_analyzed_links: List[Dict[str, str]] = Field(default_factory=list)
    confidence: float = 0
    explanation: str = ""


class PricingInfo(CamelModel):
    has_free_version: bool = True
    pricing_details: str = ""


class ToolMetadata(CamelModel):
    """Full form of tool metadata produced by the metadata analyzer."""
    name: str = ""
    description: str = ""
    summary: str = ""
    seo_title: str = ""
    seo_description: str = ""
    pros: List[str] = Field(default_factory=list)
    cons: List[str] = Field(default_factory=list)
    has_affiliate_program: bool = False
    affiliate_details: Optional[str] = None
    affiliate_url: Optional[str] = None
    pricing: Optional[PricingInfo] = None
    features: List[str] = Field(default_factory=list)
    summarized_description: str = ""
    categories: List[str] = Field(default_factory=list)
    recommended_user_types: List[str] = Field(default_factory=list)
