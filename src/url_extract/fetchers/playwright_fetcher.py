from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Callable

from url_extract.config import RenderConfig
from url_extract.errors import RenderFailedError
from url_extract.extractors.bs4_heuristic import (
    BOILERPLATE_SELECTOR,
    CONTAINER_SELECTORS,
    TEXT_BLOCK_SELECTOR,
)
from url_extract.normalize import normalize_text

# Mirrors Bs4HeuristicExtractor, run against the live DOM.
EXTRACT_SCRIPT = """
(rules) => {
  document.querySelectorAll(rules.boilerplate).forEach((el) => el.remove());
  const squash = (text) =>
    (text || "").replace(/[^\\S\\n]+/g, " ").replace(/\\s*\\n\\s*/g, "\\n").trim();
  const strategies = [
    () => squash(
      Array.from(document.querySelectorAll(rules.blocks))
        .map((el) => (el.textContent || "").trim())
        .filter((text) => text.length > 0)
        .join(" ")
    ),
    () => {
      for (const selector of rules.containers) {
        const el = document.querySelector(selector);
        if (el) {
          const text = squash(el.textContent);
          if (text) return text;
        }
      }
      return "";
    },
    () => squash(document.body ? document.body.textContent : ""),
  ];
  let fallback = "";
  for (const strategy of strategies) {
    const text = strategy();
    if (text.length > rules.minChars) return text;
    if (text && !fallback) fallback = text;
  }
  return fallback;
}
"""


def _default_playwright() -> Any:
    # Lazy import so the static path works without a browser install.
    from playwright.async_api import async_playwright

    return async_playwright()


@dataclass
class PlaywrightRenderer:
    """
    Browser-based extraction for JavaScript-rendered pages.

    Notes:
    - Requires the `playwright` package and a browser install
      (e.g. via `playwright install chromium`).
    - One browser process per call; it is closed on every exit path,
      including task cancellation.
    """

    config: RenderConfig = field(default_factory=RenderConfig)
    min_chars: int = 100
    playwright_factory: Callable[[], Any] = _default_playwright
    name: str = "playwright"

    async def render(self, url: str) -> str:
        try:
            async with self.playwright_factory() as p:
                browser_type = getattr(p, self.config.browser)
                try:
                    browser = await browser_type.launch(
                        headless=self.config.headless,
                        args=list(self.config.launch_args),
                    )
                except Exception as exc:
                    raise RenderFailedError(
                        f"Could not launch {self.config.browser}: {exc}", url=url
                    ) from exc
                try:
                    text = await self._extract(browser, url)
                finally:
                    await browser.close()
        except RenderFailedError:
            raise
        except Exception as exc:
            raise RenderFailedError(
                f"Rendering {url} failed: {type(exc).__name__}: {exc}", url=url
            ) from exc
        return normalize_text(text)

    async def _extract(self, browser: Any, url: str) -> str:
        page = await browser.new_page(user_agent=self.config.user_agent)
        await page.goto(
            url,
            wait_until="networkidle",
            timeout=int(self.config.navigation_timeout_s * 1000),
        )
        await page.wait_for_selector(
            "body",
            state="attached",
            timeout=int(self.config.selector_timeout_s * 1000),
        )
        rules = {
            "boilerplate": BOILERPLATE_SELECTOR,
            "blocks": TEXT_BLOCK_SELECTOR,
            "containers": list(CONTAINER_SELECTORS),
            "minChars": self.min_chars,
        }
        try:
            text = await asyncio.wait_for(
                page.evaluate(EXTRACT_SCRIPT, rules),
                timeout=self.config.evaluate_timeout_s,
            )
        except asyncio.TimeoutError as exc:
            raise RenderFailedError(
                f"In-page extraction on {url} exceeded "
                f"{self.config.evaluate_timeout_s}s",
                url=url,
            ) from exc
        return text if isinstance(text, str) else ""
