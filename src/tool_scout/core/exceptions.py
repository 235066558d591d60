"""Exception types shared by crawlers, services and the API layer."""
from typing import Dict, Any, Optional


class ToolScoutError(Exception):
    """Base exception for crawler and enrichment errors."""

    def __init__(self, message: str, status_code: int = 500, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class InvalidURLError(ToolScoutError):
    """Raised for missing or unparseable URLs."""

    def __init__(self, url: Optional[str]):
        super().__init__(
            f"Invalid URL: {url!r}",
            status_code=400,
            details={"url": url}
        )


class ToolNotFoundError(ToolScoutError):
    """Raised when a tool id or slug does not exist in the store."""

    def __init__(self, key: str):
        super().__init__(
            f"Tool not found: {key}",
            status_code=404,
            details={"key": key}
        )


class ToolConflictError(ToolScoutError):
    """Raised when a slug is already used by another tool."""

    def __init__(self, slug: str):
        super().__init__(
            f"Slug already in use: {slug}",
            status_code=409,
            details={"slug": slug}
        )


class BrowserLaunchError(ToolScoutError):
    """Raised when the headless browser cannot be started."""

    def __init__(self, reason: str):
        super().__init__(
            f"Unable to launch browser: {reason}",
            status_code=500,
            details={"reason": reason}
        )


class PageRenderError(ToolScoutError):
    """Raised when a single page cannot be loaded or inspected."""

    def __init__(self, url: str, reason: str, status_code: Optional[int] = None):
        self.url = url
        self.reason = reason
        self.page_status = status_code
        super().__init__(
            f"Failed to render {url}: {reason}",
            status_code=502,
            details={"url": url, "reason": reason, "page_status": status_code}
        )


class AnalysisUnavailableError(ToolScoutError):
    """Raised when the generative text API gave no usable answer."""

    def __init__(self, reason: str = "Empty or invalid response from the generative API"):
        super().__init__(reason, status_code=502, details={})
