from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Protocol

from url_extract.config import ExtractorConfig
from url_extract.errors import (
    ExtractionError,
    FetchFailedError,
    InvalidUrlError,
    NoContentError,
    RenderFailedError,
)
from url_extract.extractors.bs4_heuristic import Bs4HeuristicExtractor
from url_extract.extractors.readability import ReadabilityExtractor
from url_extract.fetchers.http import HttpFetcher
from url_extract.fetchers.playwright_fetcher import PlaywrightRenderer
from url_extract.models import ExtractionOutcome, ExtractionRequest, FailureKind, RawPage
from url_extract.normalize import normalize_text
from url_extract.reporting.logging import EventLogger, event_logger
from url_extract.scoring.heuristics import (
    ACCEPT,
    HeuristicThresholds,
    evaluate_text,
    is_sufficient,
)

_FAILURE_ERRORS = {
    FailureKind.INVALID_URL: InvalidUrlError,
    FailureKind.FETCH_FAILED: FetchFailedError,
    FailureKind.RENDER_FAILED: RenderFailedError,
    FailureKind.NO_CONTENT: NoContentError,
}


class Fetcher(Protocol):
    async def fetch(self, url: str) -> RawPage:
        ...


class ArticleParser(Protocol):
    name: str

    def extract(self, html: str, url: str | None = None) -> str | None:
        ...


class StructuralParser(Protocol):
    name: str

    def extract(self, html: str) -> str:
        ...


class Renderer(Protocol):
    name: str

    async def render(self, url: str) -> str:
        ...


@dataclass
class ExtractionEngine:
    """Static fetch and parse first, headless rendering when that is too thin.

    Each call is independent: components hold configuration only, so one
    engine can serve many concurrent ``run`` calls.
    """

    fetcher: Fetcher
    readability: ArticleParser
    structural: StructuralParser
    renderer: Renderer
    thresholds: HeuristicThresholds = field(default_factory=HeuristicThresholds)
    log: EventLogger = field(default_factory=lambda: event_logger(enabled=False))

    @classmethod
    def from_config(cls, config: ExtractorConfig | None = None) -> "ExtractionEngine":
        config = config or ExtractorConfig()
        return cls(
            fetcher=HttpFetcher(config=config.fetch),
            readability=ReadabilityExtractor(),
            structural=Bs4HeuristicExtractor(min_chars=config.sufficiency_chars),
            renderer=PlaywrightRenderer(
                config=config.render, min_chars=config.sufficiency_chars
            ),
            thresholds=HeuristicThresholds(min_chars=config.sufficiency_chars),
            log=event_logger(config.log_events, config.log_path),
        )

    async def run(self, url: str) -> ExtractionOutcome:
        started = _utc_now()
        try:
            request = ExtractionRequest.parse(url)
        except InvalidUrlError as exc:
            self.log("extract.invalid_url", {"url": url, "error": str(exc)})
            return ExtractionOutcome(
                url=url, failure=FailureKind.INVALID_URL, error=str(exc), elapsed_ms=0
            )

        url = request.url
        self.log("extract.start", {"url": url})
        fetch_error: FetchFailedError | None = None
        try:
            page = await self.fetcher.fetch(url)
        except FetchFailedError as exc:
            fetch_error = exc
            self.log("extract.fetch_failed", {"url": url, "error": str(exc)})
        else:
            method, text = await asyncio.to_thread(self._parse_static, page)
            decision, score = evaluate_text(text, self.thresholds)
            self.log(
                "extract.static_result",
                {
                    "url": url,
                    "method": method,
                    "chars": len(text),
                    "decision": decision,
                    "score": round(score, 2),
                },
            )
            if decision == ACCEPT:
                return self._finish(url, text, method, started)

        self.log("extract.render", {"url": url})
        try:
            text = normalize_text(await self.renderer.render(url))
        except RenderFailedError as exc:
            error = str(exc)
            if fetch_error is not None:
                error = f"{error} (static fetch: {fetch_error})"
            self.log("extract.render_failed", {"url": url, "error": error})
            return ExtractionOutcome(
                url=url,
                failure=FailureKind.RENDER_FAILED,
                error=error,
                elapsed_ms=_elapsed_ms(started),
            )
        return self._finish(url, text, self.renderer.name, started)

    async def extract_content(self, url: str, require_content: bool = False) -> str:
        """Return normalized text for *url*, raising on failure.

        An empty page is a valid result and comes back as ``""`` unless
        ``require_content`` is set, in which case NoContentError is raised.
        """
        outcome = await self.run(url)
        if outcome.success:
            return outcome.text
        if outcome.failure is FailureKind.NO_CONTENT and not require_content:
            return ""
        error_cls = _FAILURE_ERRORS.get(outcome.failure, ExtractionError)
        raise error_cls(outcome.error or "Extraction failed", url=url)

    def _parse_static(self, page: RawPage) -> tuple[str, str]:
        best_method = self.readability.name
        best = normalize_text(self.readability.extract(page.html, url=page.url))
        if is_sufficient(best, self.thresholds):
            return best_method, best

        fallback = normalize_text(self.structural.extract(page.html))
        if len(fallback) > len(best):
            return self.structural.name, fallback
        return best_method, best

    def _finish(
        self, url: str, text: str, method: str, started: datetime
    ) -> ExtractionOutcome:
        elapsed_ms = _elapsed_ms(started)
        if not text:
            self.log(
                "extract.done",
                {"url": url, "method": method, "chars": 0, "elapsed_ms": elapsed_ms},
            )
            return ExtractionOutcome(
                url=url,
                method=method,
                failure=FailureKind.NO_CONTENT,
                error="No content extracted",
                elapsed_ms=elapsed_ms,
            )
        self.log(
            "extract.done",
            {"url": url, "method": method, "chars": len(text), "elapsed_ms": elapsed_ms},
        )
        return ExtractionOutcome(url=url, text=text, method=method, elapsed_ms=elapsed_ms)


async def extract_content(url: str, config: ExtractorConfig | None = None) -> str:
    return await ExtractionEngine.from_config(config).extract_content(url)


def extract_content_sync(url: str, config: ExtractorConfig | None = None) -> str:
    """Blocking wrapper for callers outside an event loop."""
    return asyncio.run(extract_content(url, config))


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _elapsed_ms(started: datetime) -> int:
    return int((_utc_now() - started).total_seconds() * 1000)
