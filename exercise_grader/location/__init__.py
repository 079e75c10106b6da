"""
Location - coordinates, distances, grid squares and jitter
"""

from .coordinate import (
    Coordinate,
    FALLBACK_ORIGIN,
    INVALID,
    EARTH_RADIUS_METERS,
    haversine_m,
    distance_meters,
    distance_miles,
    bearing,
    centroid,
    parse_degrees_minutes,
)
from .grid import from_grid, to_grid, is_grid
from .jitter import jitter
from .bands import band_for_frequency

__all__ = [
    'Coordinate',
    'FALLBACK_ORIGIN',
    'INVALID',
    'EARTH_RADIUS_METERS',
    'haversine_m',
    'distance_meters',
    'distance_miles',
    'bearing',
    'centroid',
    'parse_degrees_minutes',
    'from_grid',
    'to_grid',
    'is_grid',
    'jitter',
    'band_for_frequency',
]
