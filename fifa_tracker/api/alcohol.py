"""Alcohol tracker API routes - shot penalties and blood alcohol."""

import logging
from typing import Any

from fastapi import APIRouter
from pydantic import BaseModel

from fifa_tracker.config import get_settings
from fifa_tracker.schemas import BloodAlcoholRequest, ShotsRequest
from fifa_tracker.services.alcohol import (
    calculate_blood_alcohol,
    calculate_shot_penalties,
    classify_bac,
    convert_alcohol_units,
    top_alcohol_causers,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/alcohol", tags=["alcohol"])


class BloodAlcoholResponse(BaseModel):
    """Estimated BAC in promille and its impairment level."""

    bac: float
    level: str


@router.post("/blood-alcohol", response_model=BloodAlcoholResponse)
async def get_blood_alcohol(body: BloodAlcoholRequest) -> BloodAlcoholResponse:
    """Widmark estimate for one drinker."""
    bac = calculate_blood_alcohol(
        alcohol_cl=body.alcohol_cl,
        weight_kg=body.weight_kg,
        gender=body.gender,
        hours_elapsed=body.hours_elapsed,
        beer_count=body.beer_count,
    )
    return BloodAlcoholResponse(bac=bac, level=classify_bac(bac))


@router.post("/shots")
async def get_shots(body: ShotsRequest) -> dict[str, Any]:
    """Shot penalties per side with unit conversions and top causers."""
    matches = [m.model_dump() for m in body.matches]
    players = [p.model_dump() for p in body.players]
    totals = calculate_shot_penalties(matches)
    logger.debug("Shot totals for %d matches: %s", len(matches), totals)

    return {
        "totals": totals,
        "units": {
            "total": convert_alcohol_units(totals["total_cl"]),
            "home": convert_alcohol_units(totals["home_cl"]),
            "away": convert_alcohol_units(totals["away_cl"]),
        },
        "top_causers": top_alcohol_causers(players, limit=get_settings().top_scorers_limit),
    }
