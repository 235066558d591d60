"""
Site crawlers that feed page text to Gemini to enrich tool records.
"""
from typing import Any, Dict, Optional

from ..analysis.decoding import decode_json_object, strip_html_answer
from ..analysis.gemini import GeminiClient
from ..analysis.pricing import infer_pricing_type
from ..analysis import prompts
from ..core.config import Settings, settings as default_settings
from ..core.exceptions import InvalidURLError
from ..core.logging import logger
from ..crawler.engine import CrawlEngine
from ..crawler.renderer import RendererFactory
from ..crawler.strategies import (
    AffiliateFooterStrategy,
    CrawlStrategy,
    MainContentStrategy,
    PricingStrategy,
    VisibleTextStrategy,
)
from ..models.analysis import (
    AffiliateAnalysis,
    ContentAnalysis,
    DescriptionAnalysis,
    PricingAnalysis,
)
from ..models.crawl import CrawlAccumulator, CrawlTarget
from ..models.requests import ContentCrawlRequest, UrlRequest
from ..models.responses import ContentCrawlResponse, CrawlResponse, PricingCrawlResponse
from ..utils.url_utils import is_valid_url, normalize_url
from .store import ToolStore


AFFILIATE_DEFAULT = {
    "mostProbableAffiliateUrl": None,
    "confidence": 0,
    "explanation": "Format de réponse non reconnu",
}


def build_target(url: str, max_depth: int, max_pages: int) -> CrawlTarget:
    """Normalize a user supplied URL into crawl bounds."""
    seed = normalize_url(url)
    if not is_valid_url(seed):
        raise InvalidURLError(url)
    return CrawlTarget(seed_url=seed, max_depth=max_depth, max_pages=max_pages)


def _summary(accumulator: CrawlAccumulator) -> Dict[str, Any]:
    return accumulator.model_dump(exclude={"pages"})


def _confidence(value: Any) -> float:
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0.0


class EnrichmentService:
    """
    Content, pricing, description and affiliate crawlers.

    Each crawl opens one browser, runs the shared crawl engine with an
    endpoint specific strategy, then asks Gemini for an analysis. A missing
    analysis never fails the request; the crawl result is returned with
    ``geminiAnalysis`` set to null.
    """

    def __init__(
        self,
        renderer_factory: RendererFactory,
        llm: GeminiClient,
        store: ToolStore,
        settings: Optional[Settings] = None
    ):
        self.renderer_factory = renderer_factory
        self.llm = llm
        self.store = store
        self.settings = settings or default_settings

    async def _crawl(self, target: CrawlTarget, strategy: CrawlStrategy) -> CrawlAccumulator:
        async with self.renderer_factory() as renderer:
            engine = CrawlEngine(renderer, strategy, self.settings)
            return await engine.run(target)

    def _persist(self, request: UrlRequest, **fields: Any) -> None:
        if not request.persist or not request.tool_key:
            return
        self.store.update_by_key(request.tool_id, request.slug, **fields)

    async def crawl_content(self, request: ContentCrawlRequest) -> ContentCrawlResponse:
        """
        Crawl a site's visible text and have Gemini propose the tool form fields.

        Args:
            request: Seed URL plus social links and image found earlier

        Returns:
            ContentCrawlResponse; ``geminiAnalysis`` holds a ContentAnalysis
        """
        target = build_target(
            request.url,
            self.settings.CRAWLER_DEFAULT_DEPTH,
            self.settings.CRAWLER_CONTENT_MAX_PAGES,
        )
        strategy = VisibleTextStrategy(timeout=self.settings.CRAWLER_PAGE_TIMEOUT)
        accumulator = await self._crawl(target, strategy)

        answer = await self.llm.generate(
            prompts.content_prompt(accumulator.final_url, accumulator.title, accumulator.content, request.social_links),
            temperature=0.2,
            max_output_tokens=4096,
        )

        analysis = None
        if answer is not None:
            decoded = decode_json_object(answer)
            analysis = ContentAnalysis(
                kind=decoded.kind,
                fields=decoded.data or {},
                raw_response=answer,
            ).model_dump(by_alias=True, mode="json")
        else:
            logger.warning(f"No content analysis for {target.seed_url}")

        return ContentCrawlResponse(
            **_summary(accumulator),
            gemini_analysis=analysis,
            image_url=request.image_url,
            social_links=request.social_links,
        )

    async def crawl_pricing(self, request: UrlRequest) -> PricingCrawlResponse:
        """
        Crawl pricing pages first and have Gemini review the offers in HTML.

        When ``persist`` is set the inferred pricing type and the HTML review
        are written to the tool.
        """
        target = build_target(
            request.url,
            self.settings.CRAWLER_DEFAULT_DEPTH,
            self.settings.CRAWLER_CONTENT_MAX_PAGES,
        )
        strategy = PricingStrategy(timeout=self.settings.CRAWLER_PAGE_TIMEOUT)
        accumulator = await self._crawl(target, strategy)
        pricing_pages = sum(1 for page in accumulator.pages if page.included)
        logger.info(f"{pricing_pages} pricing pages found on {target.seed_url}")

        answer = await self.llm.generate(
            prompts.pricing_prompt(accumulator.final_url, accumulator.content),
            temperature=0.3,
            max_output_tokens=4096,
        )

        analysis = None
        if answer is not None:
            pricing = PricingAnalysis(
                raw_response=answer,
                pricing_details=strip_html_answer(answer),
                pricing_type=infer_pricing_type(answer),
            )
            self._persist(
                request,
                pricing_type=pricing.pricing_type.value,
                pricing_details=pricing.pricing_details,
            )
            analysis = pricing.model_dump(by_alias=True, mode="json")

        return PricingCrawlResponse(
            **_summary(accumulator),
            gemini_analysis=analysis,
            pricing_pages_found=pricing_pages,
        )

    async def crawl_description(self, request: UrlRequest) -> CrawlResponse:
        """Crawl main content blocks and generate an SEO description in HTML."""
        target = build_target(
            request.url,
            self.settings.CRAWLER_DEFAULT_DEPTH,
            self.settings.CRAWLER_DESCRIPTION_MAX_PAGES,
        )
        strategy = MainContentStrategy(timeout=self.settings.CRAWLER_PAGE_TIMEOUT)
        accumulator = await self._crawl(target, strategy)

        answer = await self.llm.generate(
            prompts.description_prompt(target.seed_url, accumulator.content),
            temperature=0.2,
            max_output_tokens=1024,
        )

        if answer is None:
            description = DescriptionAnalysis(error="Réponse invalide de l'API Gemini")
        else:
            description = DescriptionAnalysis(
                detailed_description=strip_html_answer(answer),
                raw_response=answer,
            )
            self._persist(request, detailed_description=description.detailed_description)

        return CrawlResponse(
            **_summary(accumulator),
            gemini_analysis=description.model_dump(by_alias=True, mode="json"),
        )

    async def crawl_affiliate(self, request: UrlRequest) -> CrawlResponse:
        """
        Visit the homepage footer links and ask Gemini which one is an affiliate program.

        Without any analyzable footer link no model call is made and the
        analysis reports no URL with zero confidence.
        """
        max_links = self.settings.CRAWLER_AFFILIATE_MAX_LINKS
        target = build_target(request.url, max_depth=1, max_pages=max_links + 1)
        strategy = AffiliateFooterStrategy(max_links=max_links)
        accumulator = await self._crawl(target, strategy)

        links = strategy.analyzed_links(accumulator)
        analyzed = [{"url": link["url"], "text": link["text"]} for link in links]

        if not links:
            logger.info(f"No footer link to analyze on {target.seed_url}")
            affiliate = AffiliateAnalysis(explanation="Aucun lien de pied de page analysable")
            return CrawlResponse(
                **_summary(accumulator),
                gemini_analysis=affiliate.model_dump(by_alias=True, mode="json"),
            )

        answer = await self.llm.generate(
            prompts.affiliate_prompt(target.seed_url, links),
            temperature=0.2,
            max_output_tokens=1024,
        )

        analysis = None
        if answer is not None:
            data = decode_json_object(answer).or_default(AFFILIATE_DEFAULT)
            affiliate = AffiliateAnalysis(
                most_probable_affiliate_url=data.get("mostProbableAffiliateUrl") or None,
                all_analyzed_links=analyzed,
                confidence=_confidence(data.get("confidence")),
                explanation=str(data.get("explanation") or ""),
            )
            if affiliate.most_probable_affiliate_url:
                self._persist(
                    request,
                    has_affiliate_program=True,
                    affiliate_url=affiliate.most_probable_affiliate_url,
                )
            analysis = affiliate.model_dump(by_alias=True, mode="json")

        return CrawlResponse(**_summary(accumulator), gemini_analysis=analysis)
