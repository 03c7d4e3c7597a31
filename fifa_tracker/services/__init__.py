"""Service layer for business logic."""

from fifa_tracker.services.aggregator import StatsAggregator

__all__ = ["StatsAggregator"]
