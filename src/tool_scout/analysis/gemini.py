"""
Client for the Gemini ``generateContent`` REST API.
"""
from typing import Any, Dict, Optional

import httpx

from ..core.config import Settings, settings as default_settings
from ..core.logging import logger
from ..utils.retry import retry_async


class GeminiClient:
    """
    Minimal text-in, text-out client for Gemini.

    Every failure mode (missing key, HTTP error status, transport error,
    body that is not JSON, empty candidate list) is logged and reported as ``None`` so crawl results
    can still be returned without an analysis.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.settings = settings or default_settings
        self.transport = transport

    def endpoint(self, model: Optional[str] = None) -> str:
        model = model or self.settings.GEMINI_MODEL
        return f"{self.settings.GEMINI_BASE_URL.rstrip('/')}/models/{model}:generateContent"

    async def generate(
        self,
        prompt: str,
        temperature: float = 0.2,
        max_output_tokens: int = 4096,
        model: Optional[str] = None
    ) -> Optional[str]:
        """
        Send a prompt and return the first candidate's text.

        Args:
            prompt: Full prompt text
            temperature: Sampling temperature
            max_output_tokens: Output token limit
            model: Model name, defaults to ``GEMINI_MODEL``

        Returns:
            Answer text, or None when no usable answer was produced
        """
        if not self.settings.GEMINI_API_KEY:
            logger.warning("GEMINI_API_KEY is not configured, skipping analysis")
            return None

        payload = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": temperature,
                "topK": 40,
                "topP": 0.95,
                "maxOutputTokens": max_output_tokens,
            },
        }

        model = model or self.settings.GEMINI_MODEL
        logger.info(f"Sending request to Gemini model {model} ({len(prompt)} prompt characters)")
        try:
            data = await self._post(self.endpoint(model), payload)
        except httpx.HTTPError as e:
            logger.error(f"Gemini request failed: {e!r}")
            return None
        except ValueError as e:
            logger.error(f"Gemini response is not JSON: {e}")
            return None

        text = self._first_candidate_text(data)
        if text is None:
            logger.error(f"Empty or invalid Gemini response: {str(data)[:200]}")
            return None

        logger.info(f"Received Gemini response ({len(text)} characters)")
        return text

    @retry_async(
        max_attempts=lambda self: self.settings.GEMINI_MAX_ATTEMPTS,
        retry_exceptions=(httpx.HTTPError,)
    )
    async def _post(self, url: str, payload: Dict[str, Any]) -> Any:
        async with httpx.AsyncClient(transport=self.transport, timeout=self.settings.GEMINI_TIMEOUT) as client:
            response = await client.post(
                url,
                params={"key": self.settings.GEMINI_API_KEY},
                json=payload,
                headers={"Content-Type": "application/json"},
            )
            response.raise_for_status()
            return response.json()

    @staticmethod
    def _first_candidate_text(data: Any) -> Optional[str]:
        if not isinstance(data, dict):
            return None
        candidates = data.get("candidates") or []
        if not candidates:
            return None
        try:
            return candidates[0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            return None
