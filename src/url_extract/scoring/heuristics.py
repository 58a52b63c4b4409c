from __future__ import annotations

from dataclasses import dataclass

ACCEPT = "ACCEPT"
TOO_SHORT = "TOO_SHORT"


@dataclass(frozen=True)
class HeuristicThresholds:
    # Text must be strictly longer than this to count as sufficient.
    min_chars: int = 100


def evaluate_text(text: str, thresholds: HeuristicThresholds | None = None) -> tuple[str, float]:
    thresholds = thresholds or HeuristicThresholds()
    if not text:
        return TOO_SHORT, 0.0

    char_count = len(text)
    if thresholds.min_chars <= 0:
        return ACCEPT, float(char_count)

    score = char_count / thresholds.min_chars
    if char_count <= thresholds.min_chars:
        return TOO_SHORT, score
    return ACCEPT, score


def is_sufficient(text: str, thresholds: HeuristicThresholds | None = None) -> bool:
    decision, _score = evaluate_text(text, thresholds)
    return decision == ACCEPT
