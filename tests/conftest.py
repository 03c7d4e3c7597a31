"""Shared pytest fixtures for backend tests."""

from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from fifa_tracker.main import app


@pytest.fixture
async def async_client():
    """Async HTTP client for testing the FastAPI app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


def make_match(
    goals_home: int | None = 0,
    goals_away: int | None = 0,
    date: str | None = "2024-01-05",
    match_id: int | None = 1,
    **extra: Any,
) -> dict[str, Any]:
    """Create a match row for testing.

    Args:
        goals_home: Goals by the home side (None simulates a missing value).
        goals_away: Goals by the away side.
        date: ISO date string as stored by the data layer.
        match_id: Row id.
        **extra: Any further match fields (goal lists, cards, prizes).

    Returns:
        Match dict matching the data layer row structure.
    """
    row: dict[str, Any] = {"id": match_id, "date": date, **extra}
    if goals_home is not None:
        row["goals_home"] = goals_home
    if goals_away is not None:
        row["goals_away"] = goals_away
    return row


def make_player(
    player_id: int = 1,
    name: str = "Player",
    team: str = "Home",
    goals: int | None = 0,
    value: float = 0.0,
    position: str = "ST",
) -> dict[str, Any]:
    """Create a player row for testing."""
    return {
        "id": player_id,
        "name": name,
        "team": team,
        "position": position,
        "goals": goals,
        "value": value,
    }


def make_ban(
    ban_id: int = 1,
    player_id: int = 1,
    ban_type: str = "Rote Karte",
    total_games: int | None = 1,
    games_served: int | None = 0,
) -> dict[str, Any]:
    """Create a ban row for testing."""
    return {
        "id": ban_id,
        "player_id": player_id,
        "type": ban_type,
        "total_games": total_games,
        "games_served": games_served,
        "reason": "",
    }


@pytest.fixture
def january_matches() -> list[dict[str, Any]]:
    """Three January matches: 3:1, 0:0, 2:2 (in that order)."""
    return [
        make_match(3, 1, "2024-01-05", match_id=1),
        make_match(0, 0, "2024-01-12", match_id=2),
        make_match(2, 2, "2024-01-19", match_id=3),
    ]
