from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class FailureKind(str, Enum):
    INVALID_URL = "invalid_url"
    FETCH_FAILED = "fetch_failed"
    RENDER_FAILED = "render_failed"
    NO_CONTENT = "no_content"


@dataclass(frozen=True)
class ExtractionRequest:
    url: str

    @classmethod
    def parse(cls, url: str) -> "ExtractionRequest":
        from url_extract.url_utils import validate_url

        return cls(url=validate_url(url))


@dataclass
class RawPage:
    url: str
    html: str
    status_code: int
    content_type: str | None = None


@dataclass(frozen=True)
class ExtractionOutcome:
    url: str
    text: str = ""
    method: str | None = None
    failure: FailureKind | None = None
    error: str | None = None
    elapsed_ms: int | None = None

    @property
    def success(self) -> bool:
        return self.failure is None

    @property
    def no_content(self) -> bool:
        return self.failure is FailureKind.NO_CONTENT


@dataclass(frozen=True)
class WebSource:
    url: str
    content: str | None = None
