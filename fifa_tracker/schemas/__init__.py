"""API request schemas."""

from fifa_tracker.schemas.dataset import (
    Ban,
    BansRequest,
    BloodAlcoholRequest,
    FinanceRequest,
    Match,
    Player,
    PlayerOfMatchAward,
    ShotsRequest,
    StatsDataset,
    Transaction,
)

__all__ = [
    "Ban",
    "BansRequest",
    "BloodAlcoholRequest",
    "FinanceRequest",
    "Match",
    "Player",
    "PlayerOfMatchAward",
    "ShotsRequest",
    "StatsDataset",
    "Transaction",
]
