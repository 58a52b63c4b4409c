from __future__ import annotations

import re

# Whitespace other than newline: spaces, tabs, \r, \f, \v, nbsp.
_INLINE_SPACE = re.compile(r"[^\S\n]+")
_LINE_BREAKS = re.compile(r"\s*\n\s*")


def normalize_text(text: str | None) -> str:
    """Collapse whitespace runs and line breaks, then trim.

    Inline whitespace becomes a single space and any run of whitespace that
    contains a newline becomes a single newline, so the result never holds a
    blank line. Idempotent.
    """
    if not text:
        return ""
    collapsed = _INLINE_SPACE.sub(" ", text)
    collapsed = _LINE_BREAKS.sub("\n", collapsed)
    return collapsed.strip()
