"""Tool metadata analysis from previously crawled content."""
from typing import Any

from pydantic import ValidationError

from ..analysis.decoding import decode_json_object
from ..analysis.gemini import GeminiClient
from ..analysis.prompts import metadata_prompt
from ..core.exceptions import AnalysisUnavailableError
from ..core.logging import logger
from ..models.analysis import PricingInfo, ToolMetadata
from ..models.requests import MetadataAnalysisRequest
from ..models.responses import MetadataAnalysisResponse


def default_metadata(url: str, title: str) -> ToolMetadata:
    """Fallback analysis used when the model answer cannot be decoded."""
    return ToolMetadata(
        name=title or "",
        description=f"Cet outil est disponible sur {url}",
        summary=f"Outil disponible sur {url}",
        seo_title=title or "",
        seo_description=f"Découvrez cet outil sur {url}",
        pros=["Outil accessible en ligne"],
        cons=["Information limitée disponible"],
        has_affiliate_program=False,
        pricing=PricingInfo(
            has_free_version=True,
            pricing_details="Information sur les prix non disponible",
        ),
    )


class MetadataAnalyzer:
    """Turns crawled content into the full tool metadata form with Gemini."""

    def __init__(self, llm: GeminiClient):
        self.llm = llm

    async def analyze(self, request: MetadataAnalysisRequest) -> MetadataAnalysisResponse:
        """
        Analyze crawled content.

        Raises:
            AnalysisUnavailableError: Gemini gave no answer at all
        """
        answer = await self.llm.generate(
            metadata_prompt(
                request.url,
                request.title,
                request.content,
                request.social_links,
                request.affiliate_links,
            ),
            temperature=0.2,
            max_output_tokens=4096,
        )
        if answer is None:
            raise AnalysisUnavailableError()

        metadata = self._parse(answer, request)
        return MetadataAnalysisResponse(
            url=request.url,
            title=request.title,
            analysis=metadata.model_dump(by_alias=True, mode="json"),
        )

    @staticmethod
    def _parse(answer: str, request: MetadataAnalysisRequest) -> ToolMetadata:
        decoded = decode_json_object(answer)
        payload: Any = (decoded.data or {}).get("analysis") if decoded.is_structured else None
        if not isinstance(payload, dict):
            logger.warning(f"No analysis object in Gemini answer for {request.url}, using defaults")
            return default_metadata(request.url, request.title)

        try:
            return ToolMetadata.model_validate(payload)
        except ValidationError as e:
            logger.warning(f"Gemini analysis for {request.url} did not validate: {e.error_count()} errors")
            return default_metadata(request.url, request.title)
