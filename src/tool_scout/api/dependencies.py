"""FastAPI dependencies wiring settings, store, browser and Gemini into services."""
from functools import lru_cache

from fastapi import Depends

from ..analysis.gemini import GeminiClient
from ..core.config import Settings, get_settings
from ..crawler.prober import RedirectProber
from ..crawler.renderer import PageRenderer, RendererFactory
from ..services.enrichment import EnrichmentService
from ..services.metadata import MetadataAnalyzer
from ..services.social import SocialCrawler
from ..services.status import StatusCrawler
from ..services.store import ToolStore
from ..services.url_validator import UrlValidator


@lru_cache
def _store_for(db_path: str) -> ToolStore:
    return ToolStore(db_path)


def get_tool_store(settings: Settings = Depends(get_settings)) -> ToolStore:
    """One store per database path for the whole process."""
    return _store_for(settings.DATABASE_PATH)


def get_renderer_factory(settings: Settings = Depends(get_settings)) -> RendererFactory:
    """Factory opening a new headless browser per crawl."""
    return lambda: PageRenderer(settings)


def get_llm_client(settings: Settings = Depends(get_settings)) -> GeminiClient:
    return GeminiClient(settings)


def get_prober(settings: Settings = Depends(get_settings)) -> RedirectProber:
    return RedirectProber(settings)


def get_enrichment_service(
    renderer_factory: RendererFactory = Depends(get_renderer_factory),
    llm: GeminiClient = Depends(get_llm_client),
    store: ToolStore = Depends(get_tool_store),
    settings: Settings = Depends(get_settings),
) -> EnrichmentService:
    return EnrichmentService(renderer_factory, llm, store, settings)


def get_url_validator(
    renderer_factory: RendererFactory = Depends(get_renderer_factory),
    prober: RedirectProber = Depends(get_prober),
    store: ToolStore = Depends(get_tool_store),
    settings: Settings = Depends(get_settings),
) -> UrlValidator:
    return UrlValidator(renderer_factory, prober, store, settings)


def get_status_crawler(
    prober: RedirectProber = Depends(get_prober),
    store: ToolStore = Depends(get_tool_store),
) -> StatusCrawler:
    return StatusCrawler(prober, store)


def get_social_crawler(
    renderer_factory: RendererFactory = Depends(get_renderer_factory),
    store: ToolStore = Depends(get_tool_store),
    settings: Settings = Depends(get_settings),
) -> SocialCrawler:
    return SocialCrawler(renderer_factory, store, settings)


def get_metadata_analyzer(llm: GeminiClient = Depends(get_llm_client)) -> MetadataAnalyzer:
    return MetadataAnalyzer(llm)
