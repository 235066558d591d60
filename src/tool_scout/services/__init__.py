"""Tool Scout services."""

from .store import ToolStore
from .enrichment import EnrichmentService
from .url_validator import UrlValidator
from .status import StatusCrawler
from .social import SocialCrawler
from .metadata import MetadataAnalyzer

__all__ = [
    "ToolStore",
    "EnrichmentService",
    "UrlValidator",
    "StatusCrawler",
    "SocialCrawler",
    "MetadataAnalyzer",
]
