"""Threshold ladders for step-function scoring."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Union

Number = Union[int, float, Decimal]

MIN_SCORE = 0
MAX_SCORE = 100


def clamp_score(value: Number, *, upper: int = MAX_SCORE) -> int:
    """Clamp a score into [0, upper] and return it as an int."""
    return int(max(MIN_SCORE, min(upper, int(value))))


@dataclass(frozen=True)
class ScoreLadder:
    """Ordered table of (threshold, score) steps.

    `score_for(value)` returns the score of the highest threshold the value
    reaches, or `floor` when it reaches none.

    Example:
        >>> ladder = ScoreLadder(((1, 40), (2, 60), (3, 75)))
        >>> ladder.score_for(2)
        60
    """

    steps: tuple[tuple[Number, int], ...]
    floor: int = 0

    def __post_init__(self) -> None:
        thresholds = [t for t, _ in self.steps]
        if thresholds != sorted(thresholds) or len(set(thresholds)) != len(thresholds):
            raise ValueError("Ladder thresholds must be strictly ascending")
        scores = [s for _, s in self.steps]
        if scores != sorted(scores):
            raise ValueError("Ladder scores must be non-decreasing")
        if any(not MIN_SCORE <= s <= MAX_SCORE for s in [self.floor, *scores]):
            raise ValueError("Ladder scores must lie in [0, 100]")

    def score_for(self, value: Number) -> int:
        matched = self.floor
        for threshold, score in self.steps:
            if value < threshold:
                break
            matched = score
        return matched
