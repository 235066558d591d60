"""
Admin routes running the crawlers and analyzers.
"""
from fastapi import APIRouter, Depends, status

from ...core.logging import logger
from ...core.security import verify_api_key
from ...models.requests import (
    ContentCrawlRequest,
    MetadataAnalysisRequest,
    ToolIdsRequest,
    UrlRequest,
    ValidateUrlRequest,
)
from ...models.responses import (
    ContentCrawlResponse,
    CrawlResponse,
    MetadataAnalysisResponse,
    PricingCrawlResponse,
    ScreenshotBatchResponse,
    SocialCrawlResponse,
    ToolStatusResponse,
)
from ...models.validation import ValidationResult
from ...services.enrichment import EnrichmentService
from ...services.metadata import MetadataAnalyzer
from ...services.social import SocialCrawler
from ...services.status import StatusCrawler
from ...services.url_validator import UrlValidator
from ..dependencies import (
    get_enrichment_service,
    get_metadata_analyzer,
    get_social_crawler,
    get_status_crawler,
    get_url_validator,
)


router = APIRouter(dependencies=[Depends(verify_api_key)])


@router.post(
    "/crawl",
    response_model=ToolStatusResponse,
    status_code=status.HTTP_200_OK,
    summary="Check the HTTP status of tool websites"
)
async def crawl_tool_status(
    request: ToolIdsRequest,
    crawler: StatusCrawler = Depends(get_status_crawler)
) -> ToolStatusResponse:
    """
    Probe each tool's website (DNS, then redirects) and store the result.

    - **toolIds**: Tools to check

    Every tool gets its `httpCode` and `httpChain` updated.
    """
    return await crawler.check_tools(request.tool_ids)


@router.post(
    "/url-validator",
    response_model=ValidationResult,
    summary="Validate a URL with a headless browser"
)
async def validate_url(
    request: ValidateUrlRequest,
    validator: UrlValidator = Depends(get_url_validator)
) -> ValidationResult:
    """
    Visit a URL and classify the outcome.

    When `toolId` or `slug` is given the tool's HTTP code, chain, website
    and active flag are updated.
    """
    return await validator.validate(request.url, request.tool_id, request.slug)


@router.post(
    "/content-crawler",
    response_model=ContentCrawlResponse,
    summary="Crawl a site and propose tool form fields"
)
async def content_crawler(
    request: ContentCrawlRequest,
    service: EnrichmentService = Depends(get_enrichment_service)
) -> ContentCrawlResponse:
    """Crawl up to 20 pages, two levels deep, and analyze the visible text with Gemini."""
    return await service.crawl_content(request)


@router.post(
    "/pricing-crawler",
    response_model=PricingCrawlResponse,
    summary="Find pricing pages and review the offers"
)
async def pricing_crawler(
    request: UrlRequest,
    service: EnrichmentService = Depends(get_enrichment_service)
) -> PricingCrawlResponse:
    """
    Explore pricing-related links first and generate an HTML pricing review.

    With `persist` the tool's `pricingType` and `pricingDetails` are updated.
    """
    return await service.crawl_pricing(request)


@router.post(
    "/detailed-description-crawler",
    response_model=CrawlResponse,
    summary="Generate a detailed description from the main content"
)
async def detailed_description_crawler(
    request: UrlRequest,
    service: EnrichmentService = Depends(get_enrichment_service)
) -> CrawlResponse:
    return await service.crawl_description(request)


@router.post(
    "/affiliate-crawler",
    response_model=CrawlResponse,
    summary="Find the affiliate program page among the footer links"
)
async def affiliate_crawler(
    request: UrlRequest,
    service: EnrichmentService = Depends(get_enrichment_service)
) -> CrawlResponse:
    return await service.crawl_affiliate(request)


@router.post(
    "/gemini-crawler",
    response_model=MetadataAnalysisResponse,
    summary="Analyze crawled content into tool metadata"
)
async def gemini_crawler(
    request: MetadataAnalysisRequest,
    analyzer: MetadataAnalyzer = Depends(get_metadata_analyzer)
) -> MetadataAnalysisResponse:
    """
    Turn the output of a content crawl into the full metadata form.

    Answers that cannot be decoded fall back to a default analysis; no
    answer at all is a 502.
    """
    return await analyzer.analyze(request)


@router.post(
    "/crawler",
    response_model=SocialCrawlResponse,
    summary="Screenshot a homepage and collect social links"
)
async def social_crawler(
    request: UrlRequest,
    crawler: SocialCrawler = Depends(get_social_crawler)
) -> SocialCrawlResponse:
    return await crawler.crawl(request)


@router.post(
    "/screenshots/batch",
    response_model=ScreenshotBatchResponse,
    summary="Refresh tool screenshots in batches"
)
async def screenshot_batch(
    request: ToolIdsRequest,
    crawler: SocialCrawler = Depends(get_social_crawler)
) -> ScreenshotBatchResponse:
    logger.info(f"Screenshot refresh requested for {len(request.tool_ids)} tools")
    return await crawler.capture_batch(request.tool_ids)
