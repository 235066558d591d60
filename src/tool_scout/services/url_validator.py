"""
URL validation with a headless browser, optionally applied to a tool.
"""
from typing import Optional

from ..core.config import Settings, settings as default_settings
from ..core.exceptions import InvalidURLError, PageRenderError
from ..core.logging import logger
from ..crawler.prober import RedirectProber
from ..crawler.renderer import RendererFactory
from ..models.validation import ValidationResult, ValidationState
from ..utils.url_utils import is_valid_url, normalize_url
from .store import ToolStore


# Fragments of browser and resolver errors meaning the site cannot be reached
CONNECTION_MARKERS = (
    "ERR_NAME_NOT_RESOLVED",
    "DNS_PROBE",
    "getaddrinfo",
    "ENOTFOUND",
    "ERR_CONNECTION_REFUSED",
    "ERR_CONNECTION_RESET",
    "ERR_CONNECTION_TIMED_OUT",
    "ERR_CONNECTION_CLOSED",
    "ERR_SSL_PROTOCOL_ERROR",
    "ERR_FAILED",
    "Impossible d'interagir avec la page",
)

DNS_STATUS = -1


def is_connection_error(message: str) -> bool:
    return any(marker in message for marker in CONNECTION_MARKERS)


def classify_status(result: ValidationResult) -> ValidationResult:
    """Set state, validity and message from the HTTP status of the final page."""
    code = result.status_code
    if 200 <= code < 300:
        result.state = ValidationState.VALID
        result.is_valid = True
        result.message = "L'URL est valide et accessible."
        if code == 206:
            result.status_code = 200
            result.message += " (Code 206 Partial Content traité comme 200 OK)"
        if result.is_redirected:
            result.message += f" Redirection vers {result.final_url}"
    elif 300 <= code < 400:
        result.state = ValidationState.INVALID_REDIRECT_INCOMPLETE
        result.message = (
            f"L'URL a répondu avec un code de redirection {code}, "
            "mais la redirection n'a pas abouti à une URL valide."
        )
    elif 400 <= code < 500:
        result.state = ValidationState.INVALID_CLIENT_ERROR
        result.message = f"L'URL a répondu avec une erreur client {code}."
    elif code >= 500:
        result.state = ValidationState.INVALID_SERVER_ERROR
        result.message = f"L'URL a répondu avec une erreur serveur {code}."
    else:
        result.state = ValidationState.UNDETERMINED
        result.message = "Impossible de déterminer la validité de l'URL."
    return result


class UrlValidator:
    """
    Validates a URL in two steps: DNS resolution, then a browser visit.

    The visit's final status code decides the terminal state. Unreachable
    hosts end in ``invalid_dns`` with status ``-1``.
    """

    def __init__(
        self,
        renderer_factory: RendererFactory,
        prober: RedirectProber,
        store: ToolStore,
        settings: Optional[Settings] = None
    ):
        self.renderer_factory = renderer_factory
        self.prober = prober
        self.store = store
        self.settings = settings or default_settings

    def _enter(self, result: ValidationResult, state: ValidationState) -> None:
        logger.debug(f"Validation of {result.original_url}: {result.state.value} -> {state.value}")
        result.state = state

    def _unreachable(self, result: ValidationResult, reason: str) -> ValidationResult:
        self._enter(result, ValidationState.INVALID_DNS)
        result.status_code = DNS_STATUS
        result.is_valid = False
        result.message = (
            "Erreur de connexion: Le domaine ne peut pas être résolu "
            f"ou le serveur n'est pas accessible ({reason})"
        )
        return result

    async def validate(
        self,
        url: str,
        tool_id: Optional[str] = None,
        slug: Optional[str] = None
    ) -> ValidationResult:
        """
        Validate a URL and update the matching tool.

        Args:
            url: URL to check, scheme optional
            tool_id: Tool to update
            slug: Tool to update, when no ID is given

        Returns:
            ValidationResult in a terminal state

        Raises:
            InvalidURLError: the URL cannot be parsed
            BrowserLaunchError: the browser could not be started
        """
        normalized = normalize_url(url)
        if not is_valid_url(normalized):
            raise InvalidURLError(url)

        result = ValidationResult(
            original_url=normalized,
            final_url=normalized,
            chain_of_redirects=[normalized],
        )

        self._enter(result, ValidationState.RESOLVING)
        if not await self.prober.is_resolvable(normalized):
            self._unreachable(result, "ENOTFOUND")
        else:
            await self._render(result)

        logger.info(
            f"Validated {normalized}: state={result.state.value} "
            f"status={result.status_code} final={result.final_url}"
        )

        if (tool_id or slug) and result.status_code != 0:
            self._apply_to_tool(result, tool_id, slug)

        return result

    async def _render(self, result: ValidationResult) -> None:
        self._enter(result, ValidationState.RENDERING)
        async with self.renderer_factory() as renderer:
            try:
                page = await renderer.render(
                    result.original_url,
                    timeout=self.settings.CRAWLER_VALIDATION_TIMEOUT,
                )
            except PageRenderError as e:
                if is_connection_error(e.reason):
                    self._unreachable(result, e.reason)
                elif e.page_status:
                    result.status_code = e.page_status
                    classify_status(result)
                else:
                    self._enter(result, ValidationState.UNDETERMINED)
                    result.message = f"Erreur lors de la vérification: {e.reason}"
                return

        result.status_code = page.status_code or 0
        result.final_url = page.final_url
        if page.final_url != result.original_url:
            result.is_redirected = True
            if page.final_url not in result.chain_of_redirects:
                result.chain_of_redirects.append(page.final_url)
        classify_status(result)

    def _apply_to_tool(self, result: ValidationResult, tool_id: Optional[str], slug: Optional[str]) -> None:
        tool = self.store.find(tool_id, slug)
        if tool is None:
            logger.warning(f"Validated URL for unknown tool id={tool_id!r} slug={slug!r}")
            return

        fields = {
            "website_url": result.final_url if result.is_valid and result.is_redirected else tool.website_url,
            "http_code": result.status_code,
            "http_chain": " -> ".join(result.chain_of_redirects),
        }
        if not result.is_valid and (result.status_code >= 400 or result.status_code == DNS_STATUS):
            fields["is_active"] = False
        elif result.is_valid:
            fields["is_active"] = True

        self.store.update_tool(tool.id, **fields)
        result.is_active = fields.get("is_active")
        if "is_active" in fields:
            result.message += f" Outil {'activé' if fields['is_active'] else 'désactivé'}."
