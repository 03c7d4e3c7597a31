"""Request schemas for posted data snapshots.

Field names are snake_case; the camelCase spelling used by the web client
(goalsHome, playerId, ...) is accepted as an alias. Validation is lenient:
null or non-numeric counters become 0 and unparseable goal lists become [],
so a single bad row never rejects a whole snapshot.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from fifa_tracker.services.calculations import coalesce_float, coalesce_int, parse_goal_list


class _Row(BaseModel):
    """Base for inbound rows: camelCase aliases, unknown keys ignored."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


def _optional_str(value: Any) -> str | None:
    return None if value is None else str(value)


class GoalEntry(_Row):
    """A scorer and the goals they scored in one match."""

    player: str
    count: int = 1


class Match(_Row):
    """A match between the home and away side."""

    id: int | None = None
    date: str | None = None
    goals_home: int = 0
    goals_away: int = 0
    goal_scorers_home: list[GoalEntry] = Field(default_factory=list)
    goal_scorers_away: list[GoalEntry] = Field(default_factory=list)
    yellow_home: int = 0
    red_home: int = 0
    yellow_away: int = 0
    red_away: int = 0
    man_of_the_match_name: str | None = None
    prize_home: float = 0.0
    prize_away: float = 0.0

    @field_validator(
        "goals_home",
        "goals_away",
        "yellow_home",
        "red_home",
        "yellow_away",
        "red_away",
        mode="before",
    )
    @classmethod
    def _coalesce_counts(cls, value: Any) -> int:
        return coalesce_int(value)

    @field_validator("prize_home", "prize_away", mode="before")
    @classmethod
    def _coalesce_prizes(cls, value: Any) -> float:
        return coalesce_float(value)

    @field_validator("goal_scorers_home", "goal_scorers_away", mode="before")
    @classmethod
    def _normalise_goal_list(cls, value: Any) -> list[dict[str, Any]]:
        return [dict(entry) for entry in parse_goal_list(value)]

    @field_validator("date", "man_of_the_match_name", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> str | None:
        return _optional_str(value)


class Player(_Row):
    """A roster entry. goals is the authoritative season counter."""

    id: int | None = None
    name: str = ""
    team: str = ""
    position: str | None = None
    goals: int = 0
    value: float = 0.0

    @field_validator("goals", mode="before")
    @classmethod
    def _coalesce_goals(cls, value: Any) -> int:
        return coalesce_int(value)

    @field_validator("value", mode="before")
    @classmethod
    def _coalesce_value(cls, value: Any) -> float:
        return coalesce_float(value)

    @field_validator("name", "team", mode="before")
    @classmethod
    def _empty_if_null(cls, value: Any) -> str:
        return "" if value is None else str(value)


class Ban(_Row):
    """A suspension or injury lay-off."""

    id: int | None = None
    player_id: int | None = None
    type: str | None = None
    total_games: int = 0
    games_served: int = 0
    reason: str | None = None

    @field_validator("total_games", "games_served", mode="before")
    @classmethod
    def _coalesce_games(cls, value: Any) -> int:
        return coalesce_int(value)


class PlayerOfMatchAward(_Row):
    """Aggregated player-of-the-match count for a (name, team) pair."""

    name: str = ""
    team: str = ""
    count: int = 0

    @field_validator("count", mode="before")
    @classmethod
    def _coalesce_count(cls, value: Any) -> int:
        return coalesce_int(value)


class Transaction(_Row):
    """A signed finance entry for one team."""

    id: int | None = None
    team: str = ""
    amount: float = 0.0
    type: str | None = None
    date: str | None = None
    match_id: int | None = None
    info: str | None = None

    @field_validator("amount", mode="before")
    @classmethod
    def _coalesce_amount(cls, value: Any) -> float:
        return coalesce_float(value)

    @field_validator("date", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> str | None:
        return _optional_str(value)


# =============================================================================
# Request bodies
# =============================================================================


class StatsDataset(_Row):
    """Snapshot of everything the stats aggregator reads."""

    matches: list[Match] = Field(default_factory=list)
    players: list[Player] = Field(default_factory=list)
    bans: list[Ban] = Field(default_factory=list)
    player_of_match_awards: list[PlayerOfMatchAward] = Field(default_factory=list)

    def rows(self) -> dict[str, list[dict[str, Any]]]:
        """Plain dict rows keyed like the StatsAggregator arguments."""
        return {
            "matches": [m.model_dump() for m in self.matches],
            "players": [p.model_dump() for p in self.players],
            "bans": [b.model_dump() for b in self.bans],
            "player_of_match_awards": [a.model_dump() for a in self.player_of_match_awards],
        }


class BansRequest(_Row):
    bans: list[Ban] = Field(default_factory=list)


class FinanceRequest(_Row):
    transactions: list[Transaction] = Field(default_factory=list)
    matches: list[Match] = Field(default_factory=list)


class ShotsRequest(_Row):
    matches: list[Match] = Field(default_factory=list)
    players: list[Player] = Field(default_factory=list)


class BloodAlcoholRequest(_Row):
    """Inputs for a single blood-alcohol estimate."""

    alcohol_cl: float = Field(default=0.0, ge=0)
    weight_kg: float | None = Field(default=None, gt=0)
    gender: Literal["male", "female"] = "male"
    hours_elapsed: float = Field(default=0.0, ge=0)
    beer_count: int = Field(default=0, ge=0)
