from __future__ import annotations

from url_extract.models import FailureKind


class ExtractionError(Exception):
    """Base class for extraction pipeline errors."""

    kind: FailureKind

    def __init__(self, message: str, *, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class InvalidUrlError(ExtractionError):
    """Input is not an absolute http(s) URL; raised before any network access."""

    kind = FailureKind.INVALID_URL


class FetchFailedError(ExtractionError):
    """Static GET errored, timed out or returned a non-2xx status."""

    kind = FailureKind.FETCH_FAILED

    def __init__(
        self,
        message: str,
        *,
        url: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message, url=url)
        self.status_code = status_code


class RenderFailedError(ExtractionError):
    """Headless launch, navigation, selector wait or evaluation failed."""

    kind = FailureKind.RENDER_FAILED


class NoContentError(ExtractionError):
    """Every strategy ran but produced no usable text."""

    kind = FailureKind.NO_CONTENT


__all__ = [
    "ExtractionError",
    "InvalidUrlError",
    "FetchFailedError",
    "RenderFailedError",
    "NoContentError",
]
