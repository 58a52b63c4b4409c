"""URL-to-clean-text extraction for LLM grounding."""

from __future__ import annotations

__all__ = [
    "ExtractionEngine",
    "ExtractionError",
    "ExtractionOutcome",
    "ExtractorConfig",
    "FailureKind",
    "FetchFailedError",
    "InvalidUrlError",
    "NoContentError",
    "RenderFailedError",
    "WebSource",
    "build_sources_context",
    "extract_content",
    "extract_content_sync",
    "load_config",
    "normalize_text",
]

from url_extract.config import ExtractorConfig, load_config
from url_extract.errors import (
    ExtractionError,
    FetchFailedError,
    InvalidUrlError,
    NoContentError,
    RenderFailedError,
)
from url_extract.extractors.engine import (
    ExtractionEngine,
    extract_content,
    extract_content_sync,
)
from url_extract.models import ExtractionOutcome, FailureKind, WebSource
from url_extract.normalize import normalize_text
from url_extract.sources import build_sources_context
