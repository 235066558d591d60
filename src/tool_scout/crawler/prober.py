"""
DNS and HTTP redirect prober used by the status crawl.
"""
from typing import Any, Awaitable, Callable, List, Optional, Tuple
from urllib.parse import urljoin
import asyncio
import socket

import httpx

from ..core.config import Settings, settings as default_settings
from ..core.logging import logger
from ..models.validation import ProbeResult
from ..utils.url_utils import get_hostname, normalize_url


Resolver = Callable[[str], Awaitable[Any]]

# Final codes after which the walk is repeated with GET
GET_FALLBACK_CODES = (0, 404, 405)


async def getaddrinfo_resolver(host: str):
    """Resolve ``host`` with the event loop's resolver."""
    loop = asyncio.get_running_loop()
    return await loop.getaddrinfo(host, None)


class RedirectProber:
    """
    Probe a website: DNS first, then a manual redirect walk.

    The walk uses ``HEAD`` and follows ``Location`` headers itself so every
    hop's status code can be reported. Servers that reject ``HEAD`` (or
    answer 404) get a second walk with ``GET``. Failures are returned as
    data, never raised.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        resolver: Optional[Resolver] = None
    ):
        self.settings = settings or default_settings
        self.transport = transport
        self.resolver = resolver or getaddrinfo_resolver

    async def is_resolvable(self, url: str) -> bool:
        """True when the URL's hostname resolves within ``DNS_TIMEOUT``."""
        host = get_hostname(url)
        if not host:
            return False
        try:
            await asyncio.wait_for(self.resolver(host), timeout=self.settings.DNS_TIMEOUT)
            return True
        except (asyncio.TimeoutError, socket.gaierror, OSError) as e:
            logger.info(f"DNS resolution failed for {host}: {e!r}")
            return False

    async def probe(self, url: str) -> ProbeResult:
        """
        Probe one URL.

        Args:
            url: Raw URL, scheme optional

        Returns:
            ProbeResult with ``chain`` holding hop codes joined by ``>``, or
            one of ``DNS``, ``Timeout``, ``Erreur``
        """
        normalized = normalize_url(url)
        result = ProbeResult(original_url=normalized, final_url=normalized)

        if not await self.is_resolvable(normalized):
            result.chain = "DNS"
            result.error = "Domaine non résolvable"
            return result

        async with httpx.AsyncClient(
            transport=self.transport,
            timeout=self.settings.PROBE_TIMEOUT,
            follow_redirects=False,
            headers={"User-Agent": self.settings.CRAWLER_USER_AGENT},
        ) as client:
            try:
                codes, final_url = await self._walk(client, "HEAD", normalized)
            except httpx.HTTPError as e:
                logger.debug(f"HEAD walk failed for {normalized}: {e!r}")
                codes, final_url = [0], normalized

            try:
                if codes[-1] in GET_FALLBACK_CODES:
                    codes, final_url = await self._walk(client, "GET", normalized)
            except httpx.TimeoutException as e:
                logger.warning(f"Timeout probing {normalized}: {e!r}")
                result.chain = "Timeout"
                result.error = "Timeout"
                return result
            except httpx.HTTPError as e:
                logger.warning(f"Error probing {normalized}: {e!r}")
                result.chain = "Erreur"
                result.error = str(e) or type(e).__name__
                return result

        result.final_url = final_url
        result.final_code = codes[-1]
        result.chain = ">".join(str(code) for code in codes)
        if result.final_code >= 400:
            result.error = "Erreur HTTP"
        return result

    async def _walk(self, client: httpx.AsyncClient, method: str, url: str) -> Tuple[List[int], str]:
        codes: List[int] = []
        current = url
        hops = 0
        while True:
            response = await client.request(method, current)
            codes.append(response.status_code)
            location = response.headers.get("location")
            if not response.is_redirect or not location or hops >= self.settings.PROBE_MAX_HOPS:
                return codes, current
            current = urljoin(current, location)
            hops += 1
