"""Scrape proxy submodule: request contracts, the MCP proxy adapter and its client."""

from .client import ScrapeApiClient
from .models import ProxyScrapeResponse, ScrapeLink, ScrapeRequest, ScrapeResult
from .proxy import CORS_HEADERS, ProxyOutcome, ScrapeProxy

__all__ = [
    "CORS_HEADERS",
    "ProxyOutcome",
    "ProxyScrapeResponse",
    "ScrapeApiClient",
    "ScrapeLink",
    "ScrapeProxy",
    "ScrapeRequest",
    "ScrapeResult",
]
