from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable

from bs4 import BeautifulSoup

from url_extract.normalize import normalize_text

BOILERPLATE_SELECTOR = (
    "script, style, nav, footer, iframe, header, "
    ".header, .footer, .nav, .menu, .advertisement, .ads, .ad, "
    '[aria-hidden="true"]'
)
TEXT_BLOCK_SELECTOR = "p, h1, h2, h3, h4, h5, h6, li"
CONTAINER_SELECTORS = (
    "article",
    "main",
    ".content",
    ".article",
    ".post",
    "#content",
    "#main",
)


@dataclass
class Bs4HeuristicExtractor:
    """Rule-based extraction over static markup.

    Boilerplate is removed first, then text is taken from the first strategy
    that yields more than ``min_chars``: text blocks, a main content
    container, the whole body. If none clears the bar, the first non-empty
    strategy output wins.
    """

    min_chars: int = 100
    name: str = "bs4_heuristic"

    def extract(self, html: str) -> str:
        soup = BeautifulSoup(html, "html.parser")
        strip_boilerplate(soup)
        return pick_text(
            (
                lambda: text_blocks(soup),
                lambda: container_text(soup),
                lambda: body_text(soup),
            ),
            self.min_chars,
        )


def strip_boilerplate(soup: BeautifulSoup) -> None:
    for tag in soup.select(BOILERPLATE_SELECTOR):
        # A removed ancestor already took this tag with it.
        if tag.decomposed:
            continue
        tag.decompose()


def text_blocks(soup: BeautifulSoup) -> str:
    parts = []
    for element in soup.select(TEXT_BLOCK_SELECTOR):
        text = element.get_text().strip()
        if text:
            parts.append(text)
    return normalize_text(" ".join(parts))


def container_text(soup: BeautifulSoup) -> str:
    for selector in CONTAINER_SELECTORS:
        container = soup.select_one(selector)
        if container is None:
            continue
        text = normalize_text(container.get_text(" "))
        if text:
            return text
    return ""


def body_text(soup: BeautifulSoup) -> str:
    root = soup.body
    if root is None:
        # Fragment without <body>: keep <head> metadata out of the text.
        for tag in soup.find_all(["head", "title"]):
            if not tag.decomposed:
                tag.decompose()
        root = soup
    return normalize_text(" ".join(root.stripped_strings))


def pick_text(strategies: Iterable[Callable[[], str]], min_chars: int) -> str:
    fallback = ""
    for strategy in strategies:
        text = strategy()
        if len(text) > min_chars:
            return text
        if text and not fallback:
            fallback = text
    return fallback
