"""API route handlers."""

from . import (
    crawlers,
    health,
    tools,
)

__all__ = [
    "crawlers",
    "health",
    "tools",
]
