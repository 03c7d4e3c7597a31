"""Pure calculation functions for the match-day alcohol tracker.

Shot rule: within one calendar day, every 2 goals a team has scored (summed
over that day's matches) make the other team drink one 2 cl shot.

Blood alcohol uses the Widmark formula with a linear elimination rate:

    BAC (‰) = A / (r × m) - 0.15 × hours

where A is grams of pure alcohol, r the distribution factor (0.70 male,
0.60 female) and m body weight in kg.
"""

from datetime import date, datetime
from typing import Any, Literal, TypedDict

from fifa_tracker.services.calculations import (
    MatchRow,
    PlayerRow,
    coalesce_float,
    coalesce_int,
    match_goals,
)

# =============================================================================
# Constants
# =============================================================================

CL_PER_SHOT = 2
CL_PER_GLASS = 20
GOALS_PER_SHOT = 2

SPIRIT_ABV = 0.40
BEER_ABV = 0.05
BEER_VOLUME_L = 0.5
ETHANOL_DENSITY_G_PER_ML = 0.789

WIDMARK_R_MALE = 0.70
WIDMARK_R_FEMALE = 0.60
ELIMINATION_PER_HOUR = 0.15  # promille per hour

Gender = Literal["male", "female"]

# (upper bound exclusive, level) - checked in order after the sober case
BAC_LEVELS: list[tuple[float, str]] = [
    (0.5, "slightly_impaired"),
    (1.1, "unfit_to_drive"),
    (2.0, "heavily_impaired"),
]
BAC_LEVEL_SOBER = "sober"
BAC_LEVEL_CRITICAL = "life_threatening"


class ShotTotals(TypedDict):
    """Alcohol in cl drunk per side from shot penalties."""

    total_cl: int
    home_cl: int
    away_cl: int


class PlayerAlcohol(TypedDict):
    total_goals: int
    alcohol_caused: int


class AlcoholUnits(TypedDict):
    cl: float
    liters: float
    shots: int
    glasses: float


# =============================================================================
# Shots
# =============================================================================


def _parse_match_datetime(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str) and value:
        try:
            parsed = datetime.fromisoformat(value)
        except ValueError:
            return None
    else:
        return None
    # Compare wall-clock times so naive and aware dates can be mixed
    return parsed.replace(tzinfo=None)


def calculate_shot_penalties(matches: list[MatchRow]) -> ShotTotals:
    """Shots owed per side, applying the 2-goals-per-shot rule per day.

    Matches are processed chronologically and grouped by calendar day; goal
    counts reset at the start of each day. Matches with no usable date form
    a single group of their own.

    Args:
        matches: Match rows in any order

    Returns:
        ShotTotals in cl (each shot is 2 cl)
    """
    dated = [(_parse_match_datetime(m.get("date")), m) for m in matches]
    dated.sort(key=lambda pair: pair[0] or datetime.min)

    by_day: dict[str, list[MatchRow]] = {}
    for parsed, match in dated:
        day = parsed.date().isoformat() if parsed else ""
        by_day.setdefault(day, []).append(match)

    totals: ShotTotals = {"total_cl": 0, "home_cl": 0, "away_cl": 0}
    for day_matches in by_day.values():
        home_scored = 0
        away_scored = 0
        home_shots_given = 0
        away_shots_given = 0

        for match in day_matches:
            home_goals, away_goals = match_goals(match)
            home_scored += home_goals
            away_scored += away_goals

            # Home drinks for goals conceded, i.e. scored by away
            home_shots = away_scored // GOALS_PER_SHOT
            away_shots = home_scored // GOALS_PER_SHOT

            home_cl = (home_shots - home_shots_given) * CL_PER_SHOT
            away_cl = (away_shots - away_shots_given) * CL_PER_SHOT
            totals["home_cl"] += home_cl
            totals["away_cl"] += away_cl
            totals["total_cl"] += home_cl + away_cl

            home_shots_given = home_shots
            away_shots_given = away_shots

    return totals


def calculate_player_alcohol(players: list[PlayerRow]) -> dict[str, PlayerAlcohol]:
    """Alcohol caused per scorer: 2 cl for every 2 goals.

    Uses the authoritative player.goals counter. Players without goals are
    left out.
    """
    result: dict[str, PlayerAlcohol] = {}
    for player in players:
        goals = coalesce_int(player.get("goals"))
        name = player.get("name")
        if goals <= 0 or not name:
            continue
        result[name] = {
            "total_goals": goals,
            "alcohol_caused": (goals // GOALS_PER_SHOT) * CL_PER_SHOT,
        }
    return result


def top_alcohol_causers(players: list[PlayerRow], limit: int = 10) -> list[dict[str, Any]]:
    """Scorers ordered by alcohol caused, highest first."""
    per_player = calculate_player_alcohol(players)
    ranked = sorted(per_player.items(), key=lambda item: item[1]["alcohol_caused"], reverse=True)
    return [{"name": name, **data} for name, data in ranked[:limit]]


def convert_alcohol_units(cl: float) -> AlcoholUnits:
    """Express a volume in cl as liters, 2 cl shots and 20 cl glasses."""
    cl = coalesce_float(cl)
    return {
        "cl": cl,
        "liters": round(cl / 100, 3),
        "shots": int(cl // CL_PER_SHOT),
        "glasses": round(cl / CL_PER_GLASS, 1),
    }


# =============================================================================
# Blood alcohol
# =============================================================================


def alcohol_grams(alcohol_cl: float, beer_count: int = 0) -> float:
    """Grams of pure alcohol in spirit (40 %, in cl) plus 0.5 l beers (5 %)."""
    spirit_ml = coalesce_float(alcohol_cl) * 10
    beer_ml = coalesce_int(beer_count) * BEER_VOLUME_L * 1000
    return (spirit_ml * SPIRIT_ABV + beer_ml * BEER_ABV) * ETHANOL_DENSITY_G_PER_ML


def calculate_blood_alcohol(
    alcohol_cl: float,
    weight_kg: float | None,
    gender: Gender = "male",
    hours_elapsed: float = 0.0,
    beer_count: int = 0,
) -> float:
    """Estimate blood alcohol content in promille.

    Args:
        alcohol_cl: Spirits drunk, in cl of 40 % alcohol
        weight_kg: Body weight; missing or non-positive gives 0.0
        gender: "female" uses r=0.60, anything else r=0.70
        hours_elapsed: Hours since drinking started (elimination period)
        beer_count: Number of 0.5 l beers

    Returns:
        BAC in ‰ rounded to two decimals, never negative
    """
    weight = coalesce_float(weight_kg)
    if weight <= 0:
        return 0.0

    grams = alcohol_grams(alcohol_cl, beer_count)
    if grams <= 0:
        return 0.0

    r = WIDMARK_R_FEMALE if gender == "female" else WIDMARK_R_MALE
    bac = grams / (weight * r)
    bac -= max(0.0, coalesce_float(hours_elapsed)) * ELIMINATION_PER_HOUR

    return round(max(0.0, bac), 2)


def classify_bac(bac: float) -> str:
    """Map a BAC value (‰) to an impairment level."""
    if bac <= 0:
        return BAC_LEVEL_SOBER
    for upper, level in BAC_LEVELS:
        if bac < upper:
            return level
    return BAC_LEVEL_CRITICAL
