"""Tests for the green score curve."""

import pytest

from backend.app.carbon.green_score import green_score, score_band


class TestGreenScore:
    """Test green_score breakpoints and bounds."""

    @pytest.mark.parametrize(
        ("daily_kg", "expected"),
        [(5, 90), (15, 50), (30, 20), (50, 10)],
    )
    def test_breakpoints(self, daily_kg: float, expected: int) -> None:
        """Segment boundaries hit their benchmark scores exactly."""
        assert green_score(daily_kg * 4, 4) == expected

    def test_zero_carbon_scores_100(self) -> None:
        assert green_score(0, 3) == 100
        assert green_score(0.0, 1) == 100

    def test_missing_carbon_scores_zero(self) -> None:
        assert green_score(None, 5) == 0

    @pytest.mark.parametrize("days", [0, -1, None])
    def test_non_positive_days_scores_zero(self, days: int | None) -> None:
        assert green_score(100, days) == 0

    def test_very_high_emissions_floor_at_zero(self) -> None:
        """daily >= 100 kg bottoms out at 0."""
        assert green_score(100 * 7, 7) == 0
        assert green_score(10_000, 1) == 0

    def test_rounds_half_up(self) -> None:
        """daily 1.25 -> 97.5 -> 98; daily 26.4 -> 27.2 -> 27."""
        assert green_score(2.5, 2) == 98
        assert green_score(184.8, 7) == 27

    def test_non_increasing_in_carbon(self) -> None:
        scores = [green_score(kg / 2, 3) for kg in range(0, 800)]
        assert all(a >= b for a, b in zip(scores, scores[1:]))
        assert all(0 <= s <= 100 for s in scores)

    def test_segment_interiors(self) -> None:
        # 10/day -> 90 - 5*4 = 70; 40/day -> 20 - 10*0.5 = 15; 75/day -> 10 - 25*0.2 = 5
        assert green_score(10, 1) == 70
        assert green_score(40, 1) == 15
        assert green_score(75, 1) == 5


class TestScoreBand:
    """Test dashboard banding of scores."""

    @pytest.mark.parametrize(
        ("score", "band"),
        [(100, "good"), (70, "good"), (69, "moderate"), (40, "moderate"), (39, "poor"), (0, "poor")],
    )
    def test_bands(self, score: int, band: str) -> None:
        assert score_band(score) == band
