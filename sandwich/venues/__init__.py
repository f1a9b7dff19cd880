"""Venue adapters."""

from sandwich.venues.base import ActualAmounts, VenueAdapter, VenueConfig
from sandwich.venues.simulated import SimulatedVenue

__all__ = [
    "ActualAmounts",
    "VenueAdapter",
    "VenueConfig",
    "SimulatedVenue",
]
