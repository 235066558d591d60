"""HTTP status crawl over catalog tools."""
from typing import List

from ..core.logging import logger
from ..crawler.prober import RedirectProber
from ..models.responses import ToolStatusResponse, ToolStatusResult
from .store import ToolStore


class StatusCrawler:
    """Probes each tool website in turn and stores its HTTP code and redirect chain."""

    def __init__(self, prober: RedirectProber, store: ToolStore):
        self.prober = prober
        self.store = store

    async def check_tools(self, tool_ids: List[str]) -> ToolStatusResponse:
        """
        Probe the websites of the given tools.

        Unknown IDs are skipped. Tools without a website get ``NO_URL``.
        The website URL is only replaced when the probe ends on a 2xx page.

        Args:
            tool_ids: Tool IDs to check

        Returns:
            ToolStatusResponse with one result per known tool
        """
        tools = self.store.list_by_ids(tool_ids)
        logger.info(f"Status crawl of {len(tools)} tools ({len(tool_ids)} requested)")

        results: List[ToolStatusResult] = []
        for tool in tools:
            if not tool.website_url:
                self.store.update_tool(tool.id, http_code=0, http_chain="NO_URL")
                results.append(ToolStatusResult(
                    id=tool.id,
                    name=tool.name,
                    http_code=0,
                    http_chain="NO_URL",
                    error="URL manquante",
                ))
                continue

            probe = await self.prober.probe(tool.website_url)
            fields = {"http_code": probe.final_code, "http_chain": probe.chain}
            if 200 <= probe.final_code < 300 and probe.final_url != tool.website_url:
                fields["website_url"] = probe.final_url
            self.store.update_tool(tool.id, **fields)

            logger.info(f"{tool.name}: {probe.chain} ({probe.final_url})")
            results.append(ToolStatusResult(
                id=tool.id,
                name=tool.name,
                original_url=tool.website_url,
                final_url=probe.final_url,
                http_code=probe.final_code,
                http_chain=probe.chain,
                error=probe.error,
            ))

        return ToolStatusResponse(success=True, results=results)
