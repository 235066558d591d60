"""Tool Scout: crawling and enrichment backend for an AI video tools directory."""

__version__ = "1.0.0"
