"""Static HTTP fetching and headless rendering."""

from __future__ import annotations

__all__ = ["HttpFetcher", "PlaywrightRenderer", "browser_headers"]

from url_extract.fetchers.http import HttpFetcher, browser_headers
from url_extract.fetchers.playwright_fetcher import PlaywrightRenderer
