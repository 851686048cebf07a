"""Shared utilities: datetime."""

from fedisearch.shared.utils.datetime import day_bounds_utc, start_of_day_utc

__all__ = [
    "day_bounds_utc",
    "start_of_day_utc",
]
