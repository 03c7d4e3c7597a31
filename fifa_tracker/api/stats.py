"""Stats API routes - aggregates over a posted data snapshot."""

import logging
from typing import Any

from fastapi import APIRouter, Query
from pydantic import BaseModel

from fifa_tracker.config import get_settings
from fifa_tracker.schemas import BansRequest, FinanceRequest, StatsDataset
from fifa_tracker.services.aggregator import StatsAggregator
from fifa_tracker.services.calculations import (
    aggregate_player_of_match_awards,
    ban_remaining_games,
    ban_type_counts,
    calculate_match_prize_totals,
    calculate_team_balances,
    split_bans,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1", tags=["stats"])


# =============================================================================
# Pydantic Response Models
# =============================================================================


class BanStatus(BaseModel):
    """A ban with its remaining games."""

    id: int | None
    player_id: int | None
    type: str | None
    total_games: int
    games_served: int
    remaining_games: int
    active: bool


class BansSummaryResponse(BaseModel):
    """Response for the bans summary endpoint."""

    total: int
    active: list[BanStatus]
    completed: list[BanStatus]
    by_type: dict[str, int]


class FinanceResponse(BaseModel):
    """Team balances from transactions plus match prize totals."""

    balances: dict[str, float]
    prize_totals: dict[str, float]


# =============================================================================
# Helpers
# =============================================================================


def _build_aggregator(dataset: StatsDataset) -> StatsAggregator:
    """One aggregator per request; snapshots are never reused.

    When no award records are posted they are derived from each match's
    man_of_the_match_name.
    """
    settings = get_settings()
    rows = dataset.rows()
    logger.debug(
        "Aggregating %d matches, %d players, %d bans",
        len(rows["matches"]),
        len(rows["players"]),
        len(rows["bans"]),
    )
    if not rows["player_of_match_awards"]:
        rows["player_of_match_awards"] = aggregate_player_of_match_awards(
            rows["matches"], rows["players"]
        )
    return StatsAggregator(
        **rows,
        home_team_name=settings.home_team_name,
        away_team_name=settings.away_team_name,
    )


# =============================================================================
# Endpoints
# =============================================================================


@router.post("/stats/summary")
async def get_stats_summary(
    dataset: StatsDataset,
    n: int | None = Query(None, ge=0, description="Recent form window"),
) -> dict[str, Any]:
    """All dashboard aggregates in one call."""
    window = n if n is not None else get_settings().recent_form_window
    return _build_aggregator(dataset).summary(form_window=window)


@router.post("/stats/players")
async def get_player_stats(dataset: StatsDataset) -> list[dict[str, Any]]:
    """Per-player derived stats, top scorers first."""
    return _build_aggregator(dataset).player_stats()


@router.post("/stats/recent-form")
async def get_recent_form(
    dataset: StatsDataset,
    n: int | None = Query(None, ge=0, description="Number of matches"),
) -> dict[str, list[str]]:
    """W/L/D form for the last n matches in posted order."""
    window = n if n is not None else get_settings().recent_form_window
    return dict(_build_aggregator(dataset).recent_form(window))


@router.post("/stats/head-to-head")
async def get_head_to_head(dataset: StatsDataset) -> dict[str, Any]:
    """Head-to-head totals and biggest wins."""
    return dict(_build_aggregator(dataset).head_to_head())


@router.post("/stats/trends")
async def get_performance_trends(dataset: StatsDataset) -> dict[str, Any]:
    """Monthly wins and goals keyed by YYYY-MM."""
    return dict(_build_aggregator(dataset).performance_trends())


@router.post("/bans/summary", response_model=BansSummaryResponse)
async def get_bans_summary(body: BansRequest) -> BansSummaryResponse:
    """Active and completed bans with remaining games per ban."""
    rows = [ban.model_dump() for ban in body.bans]
    split = split_bans(rows)

    def to_status(row: dict[str, Any], active: bool) -> BanStatus:
        return BanStatus(
            id=row["id"],
            player_id=row["player_id"],
            type=row["type"],
            total_games=row["total_games"],
            games_served=row["games_served"],
            remaining_games=ban_remaining_games(row),
            active=active,
        )

    return BansSummaryResponse(
        total=len(rows),
        active=[to_status(row, True) for row in split["active"]],
        completed=[to_status(row, False) for row in split["completed"]],
        by_type=ban_type_counts(rows),
    )


@router.post("/finance/balances", response_model=FinanceResponse)
async def get_finance_balances(body: FinanceRequest) -> FinanceResponse:
    """Signed transaction balances and prize money per side."""
    transactions = [tx.model_dump() for tx in body.transactions]
    matches = [m.model_dump() for m in body.matches]
    return FinanceResponse(
        balances=dict(calculate_team_balances(transactions)),
        prize_totals=dict(calculate_match_prize_totals(matches)),
    )
