from __future__ import annotations

from dataclasses import dataclass

from bs4 import BeautifulSoup
from readability import Document
from readability.readability import Unparseable

from url_extract.normalize import normalize_text


@dataclass
class ReadabilityExtractor:
    name: str = "readability"

    def extract(self, html: str, url: str | None = None) -> str | None:
        """Return the text of the best-scoring article container, or None."""
        if not html or not html.strip():
            return None
        try:
            doc = Document(html, url=url)
            content = doc.summary(html_partial=True)
        except Unparseable:
            return None
        text = normalize_text(_strip_tags(content))
        return text or None


def _strip_tags(html: str) -> str:
    soup = BeautifulSoup(html, "html.parser")
    return soup.get_text(" ", strip=True)
