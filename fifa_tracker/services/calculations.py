"""Pure calculation functions for match, roster and ban statistics.

These functions are stateless and have no database or external dependencies,
making them easy to test in isolation.

Rows come straight from the data layer and may be incomplete, so every
numeric read goes through coalesce_int/coalesce_float and nothing here raises
on malformed input.
"""

import json
import logging
import math
from collections import Counter
from typing import Any, Literal, TypedDict

logger = logging.getLogger(__name__)

# =============================================================================
# TypedDicts for type hints
# =============================================================================


class GoalEntry(TypedDict):
    """Normalised goal-scorer entry."""

    player: str
    count: int


class MatchRow(TypedDict, total=False):
    """Database row structure for a match."""

    id: int
    date: str
    goals_home: int
    goals_away: int
    goal_scorers_home: list[Any] | str | None
    goal_scorers_away: list[Any] | str | None
    yellow_home: int
    red_home: int
    yellow_away: int
    red_away: int
    man_of_the_match_name: str | None
    prize_home: float
    prize_away: float


class PlayerRow(TypedDict, total=False):
    """Database row structure for a player."""

    id: int
    name: str
    team: str  # "Home", "Away" or "Former"
    position: str
    goals: int
    value: float  # market value in millions


class BanRow(TypedDict, total=False):
    """Database row structure for a suspension."""

    id: int
    player_id: int
    type: str
    total_games: int
    games_served: int
    reason: str


class PlayerOfMatchAwardRow(TypedDict, total=False):
    """Aggregated player-of-the-match awards, one per (name, team) pair."""

    name: str
    team: str
    count: int


class TransactionRow(TypedDict, total=False):
    """Database row structure for a finance transaction."""

    id: int
    team: str
    amount: float  # signed: income positive, expense negative
    type: str
    date: str
    match_id: int | None
    info: str


class TeamTotals(TypedDict):
    """Per-team numeric pair."""

    home: float
    away: float


# =============================================================================
# Constants
# =============================================================================

HOME_TEAM = "Home"
AWAY_TEAM = "Away"

# Ban types as stored by the data layer
BAN_SECOND_YELLOW = "Gelb-Rote Karte"
BAN_RED_CARD = "Rote Karte"
BAN_INJURY = "Verletzung"

DISCIPLINARY_WEIGHTS = {
    BAN_SECOND_YELLOW: 3,
    BAN_RED_CARD: 5,
    BAN_INJURY: 1,
}
DEFAULT_DISCIPLINARY_WEIGHT = 1

MatchResult = Literal["home", "away", "draw"]


# =============================================================================
# Coalescing helpers
# =============================================================================


def coalesce_int(value: Any) -> int:
    """Return value as int, or 0 if missing, not numeric or not finite."""
    if value is None or isinstance(value, bool):
        return 0
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return 0


def coalesce_float(value: Any) -> float:
    """Return value as float, or 0.0 if missing, not numeric or not finite."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        result = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    return result if math.isfinite(result) else 0.0


def format_two_decimals(value: float) -> str:
    """Format a number with exactly two decimals (e.g. "1.50")."""
    return f"{value:.2f}"


def match_goals(match: MatchRow) -> tuple[int, int]:
    """Return (home_goals, away_goals) for a match, missing values as 0."""
    return coalesce_int(match.get("goals_home")), coalesce_int(match.get("goals_away"))


def match_result(match: MatchRow) -> MatchResult:
    """Classify a match as a home win, away win or draw."""
    home_goals, away_goals = match_goals(match)
    if home_goals > away_goals:
        return "home"
    if away_goals > home_goals:
        return "away"
    return "draw"


# =============================================================================
# Goal lists
# =============================================================================


def parse_goal_list(raw: Any) -> list[GoalEntry]:
    """Normalise a goal-scorer list to [{"player", "count"}, ...].

    Accepts None, a JSON-encoded string, or a list whose entries are bare
    names or {"player", "count"} dicts. A bare name counts as one goal, as
    does a dict entry without a positive count. Unparseable input yields [].

    Args:
        raw: Goal list as stored on the match row

    Returns:
        List of normalised goal entries (entries without a player dropped)
    """
    if raw is None:
        return []

    if isinstance(raw, str):
        if not raw.strip():
            return []
        try:
            raw = json.loads(raw)
        except ValueError:
            logger.debug("Ignoring unparseable goal list: %r", raw)
            return []

    if not isinstance(raw, list):
        return []

    entries: list[GoalEntry] = []
    for item in raw:
        if isinstance(item, str):
            if item:
                entries.append({"player": item, "count": 1})
        elif isinstance(item, dict):
            player = item.get("player")
            if not player:
                continue
            count = coalesce_int(item.get("count"))
            entries.append({"player": str(player), "count": count if count > 0 else 1})

    return entries


def count_player_goals_from_matches(
    matches: list[MatchRow],
    player_name: str,
    player_team: str,
) -> int:
    """Count a player's goals from match goal lists.

    This is the secondary goal source; player.goals stays authoritative for
    player-level totals. Only the list of the player's own side is scanned.

    Args:
        matches: Match rows with goal_scorers_home / goal_scorers_away
        player_name: Exact player name as written in the goal lists
        player_team: "Home" or "Away" (any other team counts nothing)

    Returns:
        Total goals attributed to the player
    """
    if player_team == HOME_TEAM:
        field = "goal_scorers_home"
    elif player_team == AWAY_TEAM:
        field = "goal_scorers_away"
    else:
        return 0

    total = 0
    for match in matches:
        for entry in parse_goal_list(match.get(field)):
            if entry["player"] == player_name:
                total += entry["count"]
    return total


# =============================================================================
# Bans
# =============================================================================


def ban_remaining_games(ban: BanRow) -> int:
    """Games left on a ban, clamped at zero for inconsistent rows."""
    return max(0, coalesce_int(ban.get("total_games")) - coalesce_int(ban.get("games_served")))


def is_ban_active(ban: BanRow) -> bool:
    """A ban is active while it has games remaining."""
    return ban_remaining_games(ban) > 0


def split_bans(bans: list[BanRow]) -> dict[str, list[BanRow]]:
    """Split bans into active and completed, preserving input order."""
    result: dict[str, list[BanRow]] = {"active": [], "completed": []}
    for ban in bans:
        result["active" if is_ban_active(ban) else "completed"].append(ban)
    return result


def ban_type_counts(bans: list[BanRow]) -> dict[str, int]:
    """Count bans per type; missing types are grouped under ""."""
    return dict(Counter(ban.get("type") or "" for ban in bans))


def disciplinary_weight(ban_type: str | None) -> int:
    """Weight of a single ban type in the disciplinary score."""
    return DISCIPLINARY_WEIGHTS.get(ban_type or "", DEFAULT_DISCIPLINARY_WEIGHT)


def calculate_disciplinary_score(bans: list[BanRow]) -> int:
    """Sum ban weights: second yellow 3, red 5, injury 1, anything else 1."""
    return sum(disciplinary_weight(ban.get("type")) for ban in bans)


# =============================================================================
# Awards, finance, roster
# =============================================================================


def aggregate_player_of_match_awards(
    matches: list[MatchRow],
    players: list[PlayerRow],
) -> list[PlayerOfMatchAwardRow]:
    """Build award records from each match's man_of_the_match_name.

    The team is taken from the roster entry with the same name (first match
    wins); names not on the roster get an empty team.

    Returns:
        Awards sorted by count descending, then name
    """
    team_by_name: dict[str, str] = {}
    for player in players:
        name = player.get("name")
        if name and name not in team_by_name:
            team_by_name[name] = player.get("team") or ""

    counts: Counter[tuple[str, str]] = Counter()
    for match in matches:
        name = match.get("man_of_the_match_name")
        if not name:
            continue
        counts[(name, team_by_name.get(name, ""))] += 1

    awards: list[PlayerOfMatchAwardRow] = [
        {"name": name, "team": team, "count": count} for (name, team), count in counts.items()
    ]
    awards.sort(key=lambda a: (-a["count"], a["name"]))
    return awards


def calculate_team_balances(transactions: list[TransactionRow]) -> TeamTotals:
    """Sum signed transaction amounts per team."""
    balances: TeamTotals = {"home": 0.0, "away": 0.0}
    for tx in transactions:
        team = tx.get("team")
        if team == HOME_TEAM:
            balances["home"] += coalesce_float(tx.get("amount"))
        elif team == AWAY_TEAM:
            balances["away"] += coalesce_float(tx.get("amount"))
    return balances


def calculate_match_prize_totals(matches: list[MatchRow]) -> TeamTotals:
    """Sum prize money awarded per side across matches."""
    return {
        "home": sum(coalesce_float(m.get("prize_home")) for m in matches),
        "away": sum(coalesce_float(m.get("prize_away")) for m in matches),
    }


def calculate_team_market_value(players: list[PlayerRow], team: str) -> float:
    """Total market value (millions) of a team's roster."""
    return sum(coalesce_float(p.get("value")) for p in players if p.get("team") == team)
