from __future__ import annotations

import asyncio
import json

import pytest

from url_extract.errors import FetchFailedError, InvalidUrlError, NoContentError, RenderFailedError
from url_extract.extractors.bs4_heuristic import Bs4HeuristicExtractor
from url_extract.extractors.engine import ExtractionEngine
from url_extract.extractors.readability import ReadabilityExtractor
from url_extract.models import FailureKind, RawPage
from url_extract.reporting.logging import event_logger
from url_extract.scoring.heuristics import HeuristicThresholds


class StubFetcher:
    def __init__(self, html: str | None = None, error: Exception | None = None) -> None:
        self.html = html
        self.error = error
        self.calls = 0

    async def fetch(self, url: str) -> RawPage:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return RawPage(url=url, html=self.html or "", status_code=200, content_type="text/html")


class CountingParser:
    def __init__(self, inner) -> None:
        self.inner = inner
        self.name = inner.name
        self.calls = 0

    def extract(self, html: str, *args, **kwargs):
        self.calls += 1
        return self.inner.extract(html, *args, **kwargs)


class StaticParser:
    def __init__(self, name: str, text: str | None) -> None:
        self.name = name
        self.text = text
        self.calls = 0

    def extract(self, html: str, *args, **kwargs):
        self.calls += 1
        return self.text


class StubRenderer:
    name = "playwright"

    def __init__(self, text: str = "", error: Exception | None = None) -> None:
        self.text = text
        self.error = error
        self.calls = 0

    async def render(self, url: str) -> str:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.text


def _engine(fetcher, renderer, readability=None, structural=None, log=None) -> ExtractionEngine:
    return ExtractionEngine(
        fetcher=fetcher,
        readability=readability or CountingParser(ReadabilityExtractor()),
        structural=structural or CountingParser(Bs4HeuristicExtractor()),
        renderer=renderer,
        log=log or event_logger(enabled=False),
    )


def _article_text(length: int) -> str:
    sentence = "The quick brown fox jumps over the lazy dog. "
    return (sentence * (length // len(sentence) + 1))[:length]


def test_end_to_end_static_article_without_render() -> None:
    article = _article_text(500)
    nav = " ".join(f'<a href="/section-{i}">Section link {i:02d}</a>' for i in range(13))
    html = f"""
    <html><head><title>Example article</title></head>
    <body>
      <nav>{nav}</nav>
      <article><p>{article}</p></article>
    </body></html>
    """
    fetcher = StubFetcher(html=html)
    renderer = StubRenderer(text="should not be used")
    engine = _engine(fetcher, renderer)

    text = asyncio.run(engine.extract_content("https://example.test/article"))

    assert text == article
    assert len(text) == 500
    assert "Section link" not in text
    assert renderer.calls == 0


@pytest.mark.parametrize("length, expect_render", [(100, True), (101, False)])
def test_sufficiency_threshold_boundary(length: int, expect_render: bool) -> None:
    html = f"<html><body><p>{'x' * length}</p></body></html>"
    renderer = StubRenderer(text="rendered text")
    engine = _engine(StubFetcher(html=html), renderer)

    outcome = asyncio.run(engine.run("https://example.test/boundary"))

    assert renderer.calls == (1 if expect_render else 0)
    if expect_render:
        assert outcome.text == "rendered text"
        assert outcome.method == "playwright"
    else:
        assert outcome.text == "x" * length


def test_fetch_failure_escalates_without_static_parsing() -> None:
    fetcher = StubFetcher(error=FetchFailedError("GET timed out", url="https://example.test/js"))
    readability = StaticParser("readability", "never")
    structural = StaticParser("bs4_heuristic", "never")
    renderer = StubRenderer(text="Rendered   by the\n\n browser")
    engine = _engine(fetcher, renderer, readability, structural)

    outcome = asyncio.run(engine.run("https://example.test/js"))

    assert outcome.success
    assert outcome.text == "Rendered by the\nbrowser"
    assert outcome.method == "playwright"
    assert renderer.calls == 1
    assert readability.calls == 0
    assert structural.calls == 0


def test_sufficient_readability_skips_structural_parser() -> None:
    readability = StaticParser("readability", "r" * 150)
    structural = StaticParser("bs4_heuristic", "s" * 500)
    renderer = StubRenderer()
    engine = _engine(StubFetcher(html="<p>x</p>"), renderer, readability, structural)

    outcome = asyncio.run(engine.run("https://example.test/a"))

    assert outcome.text == "r" * 150
    assert outcome.method == "readability"
    assert structural.calls == 0


def test_readability_at_threshold_still_runs_structural_parser() -> None:
    readability = StaticParser("readability", "r" * 100)
    structural = StaticParser("bs4_heuristic", "s" * 50)
    renderer = StubRenderer(text="rendered")
    engine = _engine(StubFetcher(html="<p>x</p>"), renderer, readability, structural)

    outcome = asyncio.run(engine.run("https://example.test/a"))

    assert structural.calls == 1
    assert renderer.calls == 1
    assert outcome.text == "rendered"


def test_thin_readability_falls_back_to_structural_parser() -> None:
    readability = StaticParser("readability", "short")
    structural = StaticParser("bs4_heuristic", "s" * 120)
    renderer = StubRenderer()
    engine = _engine(StubFetcher(html="<p>x</p>"), renderer, readability, structural)

    outcome = asyncio.run(engine.run("https://example.test/a"))

    assert outcome.text == "s" * 120
    assert outcome.method == "bs4_heuristic"
    assert renderer.calls == 0


def test_both_static_strategies_thin_escalates_to_render() -> None:
    readability = StaticParser("readability", None)
    structural = StaticParser("bs4_heuristic", "tiny")
    renderer = StubRenderer(text="short but final")
    engine = _engine(StubFetcher(html="<p>x</p>"), renderer, readability, structural)

    outcome = asyncio.run(engine.run("https://example.test/a"))

    assert structural.calls == 1
    assert outcome.text == "short but final"
    assert outcome.success


def test_render_failure_is_terminal() -> None:
    fetcher = StubFetcher(error=FetchFailedError("HTTP 403", url="https://example.test/x"))
    renderer = StubRenderer(error=RenderFailedError("navigation timeout"))
    engine = _engine(fetcher, renderer)

    outcome = asyncio.run(engine.run("https://example.test/x"))

    assert outcome.failure is FailureKind.RENDER_FAILED
    assert "navigation timeout" in outcome.error
    assert "HTTP 403" in outcome.error
    with pytest.raises(RenderFailedError):
        asyncio.run(engine.extract_content("https://example.test/x"))


def test_malformed_url_fails_without_network() -> None:
    fetcher = StubFetcher(html="<p>unused</p>")
    renderer = StubRenderer(text="unused")
    engine = _engine(fetcher, renderer)

    outcome = asyncio.run(engine.run("not a url"))

    assert outcome.failure is FailureKind.INVALID_URL
    with pytest.raises(InvalidUrlError):
        asyncio.run(engine.extract_content("not a url"))
    assert fetcher.calls == 0
    assert renderer.calls == 0


def test_empty_render_is_no_content_not_error() -> None:
    engine = _engine(StubFetcher(html="<html><body></body></html>"), StubRenderer(text="  \n "))

    outcome = asyncio.run(engine.run("https://example.test/empty"))

    assert outcome.no_content
    assert outcome.text == ""
    assert asyncio.run(engine.extract_content("https://example.test/empty")) == ""
    with pytest.raises(NoContentError):
        asyncio.run(engine.extract_content("https://example.test/empty", require_content=True))


def test_unexpected_errors_propagate() -> None:
    class BrokenParser:
        name = "readability"

        def extract(self, html: str, url: str | None = None):
            raise ValueError("parser bug")

    engine = _engine(StubFetcher(html="<p>x</p>"), StubRenderer(), readability=BrokenParser())

    with pytest.raises(ValueError, match="parser bug"):
        asyncio.run(engine.run("https://example.test/a"))


def test_custom_threshold() -> None:
    engine = _engine(StubFetcher(html="<p>twelve chars</p>"), StubRenderer(text="rendered"))
    engine.thresholds = HeuristicThresholds(min_chars=5)

    outcome = asyncio.run(engine.run("https://example.test/a"))

    assert outcome.text == "twelve chars"


def test_concurrent_runs_are_independent() -> None:
    pages = {
        f"https://example.test/{i}": f"<html><body><p>{'page %d ' % i * 30}</p></body></html>"
        for i in range(5)
    }

    class MappingFetcher:
        async def fetch(self, url: str) -> RawPage:
            await asyncio.sleep(0)
            return RawPage(url=url, html=pages[url], status_code=200)

    engine = _engine(MappingFetcher(), StubRenderer())

    async def scenario():
        return await asyncio.gather(*(engine.run(url) for url in pages))

    outcomes = asyncio.run(scenario())

    for index, outcome in enumerate(outcomes):
        assert outcome.url == f"https://example.test/{index}"
        assert outcome.text.startswith(f"page {index} page {index}")


def test_events_logged(capsys) -> None:
    fetcher = StubFetcher(error=FetchFailedError("boom"))
    engine = _engine(fetcher, StubRenderer(text="rendered"), log=event_logger(enabled=True))

    asyncio.run(engine.run("https://example.test/logged"))

    events = [json.loads(line)["event"] for line in capsys.readouterr().out.splitlines()]
    assert events == ["extract.start", "extract.fetch_failed", "extract.render", "extract.done"]
