"""Statistics aggregator over one snapshot of matches, players and bans.

StatsAggregator is a read-only value object: build one per data refresh and
call its query methods. It never mutates its inputs, performs no I/O and
degrades to zero/empty results on missing or malformed fields.

Matches are used in the order given. recent_form() and the streak query rely
on that order, so callers sort before constructing the aggregator.
"""

import logging
from datetime import date, datetime
from typing import Any, TypedDict

from fifa_tracker.services.calculations import (
    AWAY_TEAM,
    HOME_TEAM,
    BanRow,
    MatchRow,
    PlayerOfMatchAwardRow,
    PlayerRow,
    calculate_disciplinary_score,
    calculate_team_market_value,
    coalesce_float,
    coalesce_int,
    count_player_goals_from_matches,
    format_two_decimals,
    match_goals,
    match_result,
    parse_goal_list,
)

logger = logging.getLogger(__name__)

UNKNOWN_MONTH = "unknown"

# =============================================================================
# Result types
# =============================================================================


class WinLoss(TypedDict):
    wins: int
    losses: int


class TeamRecords(TypedDict):
    home: WinLoss
    away: WinLoss


class RecentForm(TypedDict):
    home: list[str]
    away: list[str]


class CleanSheets(TypedDict):
    home: int
    away: int


class AdvancedStats(TypedDict):
    avg_goals_per_match: str
    total_matches: int
    total_goals: int
    home_total_goals: int
    away_total_goals: int
    highest_scoring_match: int
    clean_sheets: CleanSheets


class MonthlyTrend(TypedDict):
    month: str
    home_wins: int
    away_wins: int
    total_goals: int
    match_count: int


class BiggestWin(TypedDict):
    diff: int
    score: str
    date: str
    opponent: str


class HeadToHead(TypedDict):
    total_matches: int
    home_wins: int
    away_wins: int
    home_goals: int
    away_goals: int
    biggest_home_win: BiggestWin
    biggest_away_win: BiggestWin


class WinStreak(TypedDict):
    length: int
    team: str | None


class MostGoalsInMatch(TypedDict):
    player: str | None
    count: int
    match_id: int | None
    date: str


class MostSuspended(TypedDict):
    name: str
    count: int


class TeamSummary(TypedDict):
    player_count: int
    total_goals: int
    total_value: float
    avg_value: float


def month_key(value: Any) -> str:
    """Return the "YYYY-MM" bucket for a match date, or "unknown"."""
    if isinstance(value, (date, datetime)):
        parsed = value
    elif isinstance(value, str) and value:
        try:
            parsed = datetime.fromisoformat(value)
        except ValueError:
            logger.debug("Unparseable match date: %r", value)
            return UNKNOWN_MONTH
    else:
        return UNKNOWN_MONTH
    return f"{parsed.year}-{parsed.month:02d}"


def _empty_biggest_win(opponent: str) -> BiggestWin:
    return {"diff": 0, "score": "", "date": "", "opponent": opponent}


# =============================================================================
# Aggregator
# =============================================================================


class StatsAggregator:
    """Derived statistics for one immutable data snapshot."""

    def __init__(
        self,
        matches: list[MatchRow] | None = None,
        players: list[PlayerRow] | None = None,
        bans: list[BanRow] | None = None,
        player_of_match_awards: list[PlayerOfMatchAwardRow] | None = None,
        home_team_name: str = HOME_TEAM,
        away_team_name: str = AWAY_TEAM,
    ) -> None:
        self._matches: tuple[MatchRow, ...] = tuple(matches or ())
        self._players: tuple[PlayerRow, ...] = tuple(players or ())
        self._bans: tuple[BanRow, ...] = tuple(bans or ())
        self._awards: tuple[PlayerOfMatchAwardRow, ...] = tuple(player_of_match_awards or ())
        self._home_team_name = home_team_name
        self._away_team_name = away_team_name

    @property
    def total_matches(self) -> int:
        return len(self._matches)

    def team_records(self) -> TeamRecords:
        """Wins and losses per side. Draws are total - wins - losses."""
        records: TeamRecords = {
            "home": {"wins": 0, "losses": 0},
            "away": {"wins": 0, "losses": 0},
        }
        for match in self._matches:
            result = match_result(match)
            if result == "home":
                records["home"]["wins"] += 1
                records["away"]["losses"] += 1
            elif result == "away":
                records["away"]["wins"] += 1
                records["home"]["losses"] += 1
        return records

    def recent_form(self, n: int = 5) -> RecentForm:
        """W/L/D sequences for the last n matches, in input order.

        Args:
            n: Number of matches to include (n <= 0 gives empty sequences)

        Returns:
            Dict with "home" and "away" lists of "W", "L" or "D"
        """
        form: RecentForm = {"home": [], "away": []}
        if n <= 0:
            return form

        for match in self._matches[-n:]:
            result = match_result(match)
            if result == "home":
                form["home"].append("W")
                form["away"].append("L")
            elif result == "away":
                form["home"].append("L")
                form["away"].append("W")
            else:
                form["home"].append("D")
                form["away"].append("D")
        return form

    def player_stats(self) -> list[dict[str, Any]]:
        """Per-player derived stats sorted by goals descending.

        matches_played is the total match count for every player: per-match
        participation is not tracked, so goals_per_game is an approximation
        for anyone who missed matches.

        goals stays the authoritative counter; match_list_goals is the tally
        from the match goal lists and may disagree with it.
        """
        matches = list(self._matches)
        matches_played = len(matches)

        bans_by_player: dict[Any, list[BanRow]] = {}
        for ban in self._bans:
            bans_by_player.setdefault(ban.get("player_id"), []).append(ban)

        sds_by_key: dict[tuple[Any, Any], int] = {}
        for award in self._awards:
            key = (award.get("name"), award.get("team"))
            # First record for a pair wins, matching a find() over the list
            sds_by_key.setdefault(key, coalesce_int(award.get("count")))

        stats = []
        for player in self._players:
            goals = coalesce_int(player.get("goals"))
            player_id = player.get("id")
            player_bans = bans_by_player.get(player_id, []) if player_id is not None else []
            stats.append(
                {
                    **player,
                    "goals": goals,
                    "match_list_goals": count_player_goals_from_matches(
                        matches, player.get("name") or "", player.get("team") or ""
                    ),
                    "matches_played": matches_played,
                    "sds_count": sds_by_key.get((player.get("name"), player.get("team")), 0),
                    "goals_per_game": (
                        format_two_decimals(goals / matches_played) if matches_played > 0 else "0.00"
                    ),
                    "total_bans": len(player_bans),
                    "disciplinary_score": calculate_disciplinary_score(player_bans),
                }
            )

        stats.sort(key=lambda p: p["goals"], reverse=True)
        return stats

    def advanced_stats(self) -> AdvancedStats:
        """League-wide goal totals, averages and clean sheets."""
        total_matches = self.total_matches
        home_total = 0
        away_total = 0
        highest = 0
        clean_sheets: CleanSheets = {"home": 0, "away": 0}

        for match in self._matches:
            home_goals, away_goals = match_goals(match)
            home_total += home_goals
            away_total += away_goals
            highest = max(highest, home_goals + away_goals)
            if away_goals == 0:
                clean_sheets["home"] += 1
            if home_goals == 0:
                clean_sheets["away"] += 1

        total_goals = home_total + away_total
        return {
            "avg_goals_per_match": (
                format_two_decimals(total_goals / total_matches) if total_matches > 0 else "0.00"
            ),
            "total_matches": total_matches,
            "total_goals": total_goals,
            "home_total_goals": home_total,
            "away_total_goals": away_total,
            "highest_scoring_match": highest,
            "clean_sheets": clean_sheets,
        }

    def performance_trends(self) -> dict[str, MonthlyTrend]:
        """Wins and goals bucketed by calendar month of the match date."""
        trends: dict[str, MonthlyTrend] = {}
        for match in self._matches:
            key = month_key(match.get("date"))
            bucket = trends.get(key)
            if bucket is None:
                bucket = trends[key] = {
                    "month": key,
                    "home_wins": 0,
                    "away_wins": 0,
                    "total_goals": 0,
                    "match_count": 0,
                }

            home_goals, away_goals = match_goals(match)
            bucket["total_goals"] += home_goals + away_goals
            bucket["match_count"] += 1

            result = match_result(match)
            if result == "home":
                bucket["home_wins"] += 1
            elif result == "away":
                bucket["away_wins"] += 1
        return trends

    def head_to_head(self) -> HeadToHead:
        """Head-to-head totals with the biggest win for each side.

        A biggest win is only replaced by a strictly larger margin, so the
        first match reaching the maximum is kept.
        """
        h2h: HeadToHead = {
            "total_matches": self.total_matches,
            "home_wins": 0,
            "away_wins": 0,
            "home_goals": 0,
            "away_goals": 0,
            "biggest_home_win": _empty_biggest_win(self._away_team_name),
            "biggest_away_win": _empty_biggest_win(self._home_team_name),
        }

        for match in self._matches:
            home_goals, away_goals = match_goals(match)
            diff = abs(home_goals - away_goals)
            h2h["home_goals"] += home_goals
            h2h["away_goals"] += away_goals

            if home_goals > away_goals:
                h2h["home_wins"] += 1
                if diff > h2h["biggest_home_win"]["diff"]:
                    h2h["biggest_home_win"] = {
                        "diff": diff,
                        "score": f"{home_goals}:{away_goals}",
                        "date": str(match.get("date") or ""),
                        "opponent": self._away_team_name,
                    }
            elif away_goals > home_goals:
                h2h["away_wins"] += 1
                if diff > h2h["biggest_away_win"]["diff"]:
                    h2h["biggest_away_win"] = {
                        "diff": diff,
                        "score": f"{away_goals}:{home_goals}",
                        "date": str(match.get("date") or ""),
                        "opponent": self._home_team_name,
                    }
        return h2h

    def longest_win_streak(self) -> WinStreak:
        """Longest run of consecutive wins by either side, in input order."""
        best: WinStreak = {"length": 0, "team": None}
        home_run = 0
        away_run = 0

        for match in self._matches:
            result = match_result(match)
            if result == "home":
                home_run += 1
                away_run = 0
                if home_run > best["length"]:
                    best = {"length": home_run, "team": "home"}
            elif result == "away":
                away_run += 1
                home_run = 0
                if away_run > best["length"]:
                    best = {"length": away_run, "team": "away"}
            else:
                home_run = 0
                away_run = 0
        return best

    def most_goals_in_match(self) -> MostGoalsInMatch:
        """Largest single goal-list entry across all matches."""
        best: MostGoalsInMatch = {"player": None, "count": 0, "match_id": None, "date": ""}
        for match in self._matches:
            entries = parse_goal_list(match.get("goal_scorers_home")) + parse_goal_list(
                match.get("goal_scorers_away")
            )
            for entry in entries:
                if entry["count"] > best["count"]:
                    best = {
                        "player": entry["player"],
                        "count": entry["count"],
                        "match_id": match.get("id"),
                        "date": str(match.get("date") or ""),
                    }
        return best

    def most_suspended_player(self) -> MostSuspended | None:
        """Player with the most bans, or None when there are no bans."""
        if not self._bans:
            return None

        name_by_id = {p.get("id"): p.get("name") or "Unknown" for p in self._players}
        counts: dict[str, int] = {}
        for ban in self._bans:
            name = name_by_id.get(ban.get("player_id"), "Unknown")
            counts[name] = counts.get(name, 0) + 1

        # max() keeps the first name reaching the top count
        name = max(counts, key=lambda n: counts[n])
        return {"name": name, "count": counts[name]}

    def team_summaries(self) -> dict[str, TeamSummary]:
        """Roster size, goals and market value for the two active teams."""
        summaries: dict[str, TeamSummary] = {}
        for key, team in (("home", HOME_TEAM), ("away", AWAY_TEAM)):
            roster = [p for p in self._players if p.get("team") == team]
            total_value = calculate_team_market_value(roster, team)
            summaries[key] = {
                "player_count": len(roster),
                "total_goals": sum(coalesce_int(p.get("goals")) for p in roster),
                "total_value": total_value,
                "avg_value": total_value / len(roster) if roster else 0.0,
            }
        return summaries

    def active_scorers(self) -> int:
        """Number of players with at least one goal."""
        return sum(1 for p in self._players if coalesce_float(p.get("goals")) > 0)

    def summary(self, form_window: int = 5) -> dict[str, Any]:
        """Every aggregate in one structure, for a single dashboard refresh."""
        return {
            "team_records": self.team_records(),
            "recent_form": self.recent_form(form_window),
            "player_stats": self.player_stats(),
            "advanced_stats": self.advanced_stats(),
            "performance_trends": self.performance_trends(),
            "head_to_head": self.head_to_head(),
            "longest_win_streak": self.longest_win_streak(),
            "most_goals_in_match": self.most_goals_in_match(),
            "most_suspended_player": self.most_suspended_player(),
            "team_summaries": self.team_summaries(),
            "active_scorers": self.active_scorers(),
            "total_bans": len(self._bans),
        }
