"""
Location Jitter - Synthetic coordinates for entities without GPS

Points are laid out on a golden-angle (Vogel) spiral around the center so
they fill the disc evenly and never coincide. Every point is placed with
the great-circle destination formula, so its haversine distance from the
center is exactly the spiral radius (minus rounding slack).
"""

import math
from typing import List, Optional

import numpy as np

from .coordinate import (
    Coordinate, EARTH_RADIUS_METERS, FALLBACK_ORIGIN, PRECISION, haversine_m,
)

GOLDEN_ANGLE = math.pi * (3.0 - math.sqrt(5.0))
METERS_PER_DEGREE = 111_320.0
MAX_PRECISION = 9


def _rounding_slack(precision: int) -> float:
    # Worst case drift from rounding both lat and lon to `precision` places
    return METERS_PER_DEGREE * 0.5 * 10 ** -precision * math.sqrt(2.0) * 1.01


def _usable_center(center: Optional[Coordinate]) -> Coordinate:
    if center is None or center.lat is None or center.lon is None:
        return FALLBACK_ORIGIN
    if not (-90.0 <= center.lat <= 90.0 and -180.0 <= center.lon <= 180.0):
        return FALLBACK_ORIGIN
    return center


def spiral_offsets(n: int, radius_meters: float):
    """Distances (m) and bearings (rad) for n points on a Vogel spiral"""
    index = np.arange(n, dtype=float)
    distances = radius_meters * np.sqrt((index + 0.5) / n)
    bearings = np.mod(index * GOLDEN_ANGLE, 2.0 * math.pi)
    return distances, bearings


def destination_points(center: Coordinate, distances, bearings):
    """Great-circle destinations from center; returns (lats, lons) in degrees"""
    lat1 = math.radians(center.lat)
    lon1 = math.radians(center.lon)
    delta = np.asarray(distances) / EARTH_RADIUS_METERS

    lat2 = np.arcsin(
        np.sin(lat1) * np.cos(delta) + np.cos(lat1) * np.sin(delta) * np.cos(bearings)
    )
    lon2 = lon1 + np.arctan2(
        np.sin(bearings) * np.sin(delta) * np.cos(lat1),
        np.cos(delta) - np.sin(lat1) * np.sin(lat2),
    )
    lons = (np.rad2deg(lon2) + 540.0) % 360.0 - 180.0
    return np.rad2deg(lat2), lons


def jitter(n: int, center: Optional[Coordinate], radius_meters: float) -> List[Coordinate]:
    """
    Produce n distinct coordinates within radius_meters of center

    A missing or unparseable center falls back to FALLBACK_ORIGIN. Points
    are rounded to 4 decimals; if that makes two of them collide (tiny
    radius, large n) the batch is re-rounded at a finer precision. The loop
    is bounded, so a hopeless request still returns n points.
    """
    if n <= 0:
        return []

    center = _usable_center(center)
    if radius_meters <= 0:
        return [Coordinate(center.lat, center.lon) for _ in range(n)]

    best = None
    for precision in range(PRECISION, MAX_PRECISION + 1):
        usable_radius = radius_meters - _rounding_slack(precision)
        if usable_radius <= 0:
            continue

        distances, bearings = spiral_offsets(n, usable_radius)
        lats, lons = destination_points(center, distances, bearings)
        lats = np.round(lats, precision)
        lons = np.round(lons, precision)

        within = haversine_m(center.lat, center.lon, lats, lons) <= radius_meters
        distinct = len(set(zip(lats.tolist(), lons.tolist()))) == n
        best = (lats, lons)
        if bool(np.all(within)) and distinct:
            break

    if best is None:
        # Radius smaller than any rounding slack; stack on the center
        return [Coordinate(center.lat, center.lon) for _ in range(n)]

    lats, lons = best
    return [Coordinate(float(lat), float(lon)) for lat, lon in zip(lats, lons)]
