"""Tests for the alcohol tracker calculations.

Widmark reference values (40 % spirit, density 0.789 g/ml):
    10 cl  -> 100 ml * 0.4 * 0.789 = 31.56 g
    2 beer -> 1000 ml * 0.05 * 0.789 = 39.45 g
    r = 0.70 (male), 0.60 (female); elimination 0.15 ‰/h
"""

import pytest

from fifa_tracker.services.alcohol import (
    alcohol_grams,
    calculate_blood_alcohol,
    calculate_player_alcohol,
    calculate_shot_penalties,
    classify_bac,
    convert_alcohol_units,
    top_alcohol_causers,
)
from tests.conftest import make_match, make_player


class TestShotPenalties:
    """Tests for calculate_shot_penalties."""

    def test_no_matches(self):
        assert calculate_shot_penalties([]) == {"total_cl": 0, "home_cl": 0, "away_cl": 0}

    def test_goals_accumulate_within_a_day(self):
        """3:1 then 1:2 on one day: home conceded 3 (1 shot), away 4 (2 shots)."""
        matches = [
            make_match(3, 1, "2024-01-05T18:00:00"),
            make_match(1, 2, "2024-01-05T20:00:00"),
        ]

        assert calculate_shot_penalties(matches) == {"total_cl": 6, "home_cl": 2, "away_cl": 4}

    def test_counts_reset_each_day(self):
        """Single goals on separate days never reach the 2-goal threshold."""
        matches = [make_match(1, 0, "2024-01-05"), make_match(1, 0, "2024-01-06")]

        assert calculate_shot_penalties(matches)["away_cl"] == 0

    def test_same_day_goals_combine(self):
        matches = [make_match(1, 0, "2024-01-05"), make_match(1, 0, "2024-01-05")]

        assert calculate_shot_penalties(matches)["away_cl"] == 2

    def test_input_order_does_not_matter(self):
        matches = [
            make_match(0, 3, "2024-02-10"),
            make_match(2, 0, "2024-02-09"),
            make_match(0, 1, "2024-02-10"),
        ]
        forward = calculate_shot_penalties(matches)
        backward = calculate_shot_penalties(list(reversed(matches)))

        assert forward == backward
        assert forward == {"total_cl": 6, "home_cl": 4, "away_cl": 2}

    def test_undated_matches_group_together(self):
        matches = [make_match(0, 1, None), make_match(0, 1, "garbage")]

        assert calculate_shot_penalties(matches)["home_cl"] == 2


class TestPlayerAlcohol:
    """Tests for per-player alcohol caused."""

    def test_two_cl_per_two_goals(self):
        players = [
            make_player(1, "Alex", goals=5),
            make_player(2, "Ben", goals=1),
            make_player(3, "Chris", goals=0),
        ]

        assert calculate_player_alcohol(players) == {
            "Alex": {"total_goals": 5, "alcohol_caused": 4},
            "Ben": {"total_goals": 1, "alcohol_caused": 0},
        }

    def test_top_causers_sorted_and_limited(self):
        players = [make_player(i, f"P{i}", goals=i * 2) for i in range(1, 6)]
        top = top_alcohol_causers(players, limit=2)

        assert [row["name"] for row in top] == ["P5", "P4"]
        assert top[0]["alcohol_caused"] == 10


class TestUnitConversion:
    """Tests for convert_alcohol_units."""

    def test_conversion(self):
        assert convert_alcohol_units(30) == {
            "cl": 30.0,
            "liters": 0.3,
            "shots": 15,
            "glasses": 1.5,
        }

    def test_zero(self):
        assert convert_alcohol_units(0)["shots"] == 0


class TestBloodAlcohol:
    """Tests for calculate_blood_alcohol."""

    def test_alcohol_grams(self):
        assert alcohol_grams(10) == pytest.approx(31.56)
        assert alcohol_grams(0, beer_count=2) == pytest.approx(39.45)

    def test_male_no_elimination(self):
        assert calculate_blood_alcohol(10, 80) == 0.56

    def test_elimination_over_time(self):
        assert calculate_blood_alcohol(10, 80, hours_elapsed=2) == 0.26

    def test_female_factor(self):
        assert calculate_blood_alcohol(4, 60, gender="female") == 0.35

    def test_beer_only(self):
        assert calculate_blood_alcohol(0, 70, beer_count=2) == 0.81

    def test_never_negative(self):
        assert calculate_blood_alcohol(2, 90, hours_elapsed=24) == 0.0

    @pytest.mark.parametrize("weight", [None, 0, -5])
    def test_missing_weight_is_zero(self, weight):
        assert calculate_blood_alcohol(10, weight) == 0.0

    def test_nothing_drunk_is_zero(self):
        assert calculate_blood_alcohol(0, 80, beer_count=0) == 0.0


class TestClassifyBac:
    """Tests for classify_bac thresholds."""

    @pytest.mark.parametrize(
        ("bac", "level"),
        [
            (0.0, "sober"),
            (0.3, "slightly_impaired"),
            (0.5, "unfit_to_drive"),
            (1.09, "unfit_to_drive"),
            (1.1, "heavily_impaired"),
            (2.0, "life_threatening"),
            (3.4, "life_threatening"),
        ],
    )
    def test_levels(self, bac, level):
        assert classify_bac(bac) == level
