"""Extraction methods and orchestration."""

from __future__ import annotations

__all__ = [
    "ArticleParser",
    "Bs4HeuristicExtractor",
    "ExtractionEngine",
    "Fetcher",
    "ReadabilityExtractor",
    "Renderer",
    "StructuralParser",
]

from url_extract.extractors.bs4_heuristic import Bs4HeuristicExtractor
from url_extract.extractors.engine import (
    ArticleParser,
    ExtractionEngine,
    Fetcher,
    Renderer,
    StructuralParser,
)
from url_extract.extractors.readability import ReadabilityExtractor
