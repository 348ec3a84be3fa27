"""Tests for threshold ladders and score clamping."""

from decimal import Decimal

import pytest

from solana_exposure_scanner.detector.ladder import ScoreLadder, clamp_score


def _sequential_if(value: int, steps: tuple[tuple[int, int], ...]) -> int:
    score = 0
    for threshold, step_score in steps:
        if value >= threshold:
            score = step_score
    return score


class TestScoreLadder:
    def test_below_first_threshold_returns_floor(self) -> None:
        ladder = ScoreLadder(((1, 40), (2, 60), (3, 75)))
        assert ladder.score_for(0) == 0

    def test_highest_matched_step_wins(self) -> None:
        ladder = ScoreLadder(((1, 40), (2, 60), (3, 75)))
        assert ladder.score_for(1) == 40
        assert ladder.score_for(2) == 60
        assert ladder.score_for(3) == 75
        assert ladder.score_for(50) == 75

    def test_matches_sequential_overwriting_checks(self) -> None:
        steps = ((1, 10), (5, 20), (20, 35), (50, 50), (100, 65), (250, 80), (500, 90))
        ladder = ScoreLadder(steps)
        for value in range(0, 700, 3):
            assert ladder.score_for(value) == _sequential_if(value, steps)

    def test_custom_floor(self) -> None:
        ladder = ScoreLadder(((Decimal("10"), 20),), floor=10)
        assert ladder.score_for(Decimal("0.5")) == 10
        assert ladder.score_for(Decimal("10")) == 20

    def test_rejects_unsorted_thresholds(self) -> None:
        with pytest.raises(ValueError, match="ascending"):
            ScoreLadder(((5, 20), (1, 10)))

    def test_rejects_duplicate_thresholds(self) -> None:
        with pytest.raises(ValueError, match="ascending"):
            ScoreLadder(((1, 10), (1, 20)))

    def test_rejects_decreasing_scores(self) -> None:
        with pytest.raises(ValueError, match="non-decreasing"):
            ScoreLadder(((1, 50), (2, 40)))

    def test_rejects_out_of_range_scores(self) -> None:
        with pytest.raises(ValueError, match=r"\[0, 100\]"):
            ScoreLadder(((1, 150),))


class TestClampScore:
    @pytest.mark.parametrize(
        ("value", "upper", "expected"),
        [
            (-5, 100, 0),
            (50, 100, 50),
            (120, 100, 100),
            (120, 95, 95),
            (Decimal("42"), 100, 42),
        ],
    )
    def test_clamps(self, value: int, upper: int, expected: int) -> None:
        assert clamp_score(value, upper=upper) == expected
