"""Grounding context for chat requests built from a list of web sources."""

from __future__ import annotations

import asyncio
from typing import Iterable, Protocol

from url_extract.extractors.engine import ExtractionEngine
from url_extract.models import ExtractionOutcome, FailureKind, WebSource
from url_extract.reporting.logging import EventLogger
from url_extract.utils import unique_ordered

NO_CONTENT_MARKER = "[No meaningful content extracted]"
FAILED_MARKER = "[Failed to fetch content]"
TRUNCATION_MARKER = "... [content truncated for length]"
SUMMARY_INPUT_CHARS = 12000


class Summarizer(Protocol):
    async def summarize(self, text: str) -> str:
        ...


async def build_sources_context(
    sources: Iterable[WebSource],
    engine: ExtractionEngine,
    summarizer: Summarizer | None = None,
    summarize_over: int = 8000,
    truncate_to: int = 6000,
    log: EventLogger | None = None,
) -> str:
    """Render a ``WEB SOURCES:`` prompt section, one block per source.

    Sources without pre-supplied content are extracted concurrently. A failed
    or empty source becomes a marker line instead of aborting the section.
    """
    logger = log or engine.log
    sources = list(sources)
    if not sources:
        return ""

    pending = unique_ordered(source.url for source in sources if not source.content)
    results = await asyncio.gather(
        *(engine.run(url) for url in pending), return_exceptions=True
    )
    by_url: dict[str, ExtractionOutcome] = {}
    for url, result in zip(pending, results):
        if isinstance(result, Exception):
            logger("sources.extract_error", {"url": url, "error": repr(result)})
            result = ExtractionOutcome(
                url=url, failure=FailureKind.RENDER_FAILED, error=str(result)
            )
        elif isinstance(result, BaseException):
            raise result
        by_url[url] = result

    blocks = []
    for source in sources:
        if source.content:
            blocks.append(_block(source.url, source.content))
            continue
        outcome = by_url[source.url]
        if outcome.no_content:
            blocks.append(f"Source ({source.url}): {NO_CONTENT_MARKER}")
        elif not outcome.success:
            blocks.append(f"Source ({source.url}): {FAILED_MARKER}")
        elif len(outcome.text) > summarize_over:
            blocks.append(
                await _condense(source.url, outcome.text, summarizer, truncate_to, logger)
            )
        else:
            blocks.append(_block(source.url, outcome.text))

    return "WEB SOURCES:\n\n" + "\n\n".join(blocks)


async def _condense(
    url: str,
    text: str,
    summarizer: Summarizer | None,
    truncate_to: int,
    log: EventLogger,
) -> str:
    if summarizer is not None:
        try:
            summary = await summarizer.summarize(text[:SUMMARY_INPUT_CHARS])
        except Exception as exc:
            log("sources.summarize_failed", {"url": url, "error": str(exc)})
        else:
            if summary and summary.strip():
                return f"Source ({url}) - Summarized:\n{summary.strip()}"
    return _block(url, text[:truncate_to] + TRUNCATION_MARKER)


def _block(url: str, text: str) -> str:
    return f"Source ({url}):\n{text}"
