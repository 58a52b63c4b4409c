from __future__ import annotations

import asyncio
from dataclasses import dataclass, field

import httpx
from bs4.dammit import EncodingDetector, UnicodeDammit
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from url_extract.config import FetchConfig
from url_extract.errors import FetchFailedError
from url_extract.models import RawPage


def browser_headers(user_agent: str) -> dict[str, str]:
    return {
        "User-Agent": user_agent,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.5",
        "Cache-Control": "no-cache",
        "Pragma": "no-cache",
    }


@dataclass
class HttpFetcher:
    config: FetchConfig = field(default_factory=FetchConfig)
    transport: httpx.AsyncBaseTransport | None = None
    fetcher_name: str = "httpx"

    async def fetch(self, url: str) -> RawPage:
        """GET *url* and return the body of a 2xx response.

        Transport errors, timeouts and non-2xx statuses all raise
        FetchFailedError. Each attempt, body included, must finish within
        ``config.timeout_s``. Transport errors are retried only when
        ``config.max_attempts`` is above one.
        """
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.config.max_attempts),
                wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
                retry=retry_if_exception_type(httpx.TransportError),
                reraise=True,
            ):
                with attempt:
                    response = await asyncio.wait_for(
                        self._get(url), timeout=self.config.timeout_s
                    )
        except asyncio.TimeoutError as exc:
            raise FetchFailedError(
                f"GET {url} exceeded {self.config.timeout_s}s deadline", url=url
            ) from exc
        except httpx.HTTPError as exc:
            raise FetchFailedError(
                f"GET {url} failed: {type(exc).__name__}: {exc}", url=url
            ) from exc

        if not response.is_success:
            raise FetchFailedError(
                f"GET {url} returned HTTP {response.status_code}",
                url=url,
                status_code=response.status_code,
            )
        return RawPage(
            url=str(response.url),
            html=decode_body(response),
            status_code=response.status_code,
            content_type=response.headers.get("content-type"),
        )

    async def _get(self, url: str) -> httpx.Response:
        async with httpx.AsyncClient(
            timeout=self.config.timeout_s,
            headers=browser_headers(self.config.user_agent),
            follow_redirects=True,
            transport=self.transport,
        ) as client:
            return await client.get(url)


def decode_body(response: httpx.Response) -> str:
    """Decode with the header charset, else a <meta> declared one, else UTF-8."""
    if response.charset_encoding:
        return response.text
    declared = EncodingDetector.find_declared_encoding(response.content, is_html=True)
    if not declared:
        return response.text
    dammit = UnicodeDammit(
        response.content, known_definite_encodings=[declared], is_html=True
    )
    return dammit.unicode_markup or response.text
