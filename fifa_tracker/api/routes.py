"""API route definitions - collects the feature routers."""

from fastapi import APIRouter

from fifa_tracker.api import alcohol, stats

router = APIRouter()

router.include_router(stats.router)
router.include_router(alcohol.router)
