"""
Coordinate - Latitude/longitude pairs and great-circle math

Handles:
- Validity checks (parseable, in range, not the null-island default)
- Haversine distance and initial bearing
- Centroid of a set of points
- Degree-minute strings like "47-32.23N"
"""

import math
import re
from dataclasses import dataclass
from typing import Iterable, Optional, Union

import numpy as np

# Mean Earth radius used for every distance in reports
EARTH_RADIUS_METERS = 6_371_009.0
METERS_TO_MILES = 0.000621371
PRECISION = 4

Number = Union[str, float, int, None]


def _to_float(value: Number) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value).strip()
    if not text:
        return None
    try:
        parsed = float(text)
    except ValueError:
        return None
    if math.isnan(parsed) or math.isinf(parsed):
        return None
    return parsed


@dataclass(frozen=True)
class Coordinate:
    """Latitude/longitude as reported; may be missing or garbage"""
    latitude: Number = None
    longitude: Number = None

    @property
    def lat(self) -> Optional[float]:
        return _to_float(self.latitude)

    @property
    def lon(self) -> Optional[float]:
        return _to_float(self.longitude)

    def is_valid(self) -> bool:
        """Non-null, parseable, in range and not exactly (0, 0)"""
        lat, lon = self.lat, self.lon
        if lat is None or lon is None:
            return False
        if not (-90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0):
            return False
        return not (lat == 0.0 and lon == 0.0)

    def format_latitude(self) -> str:
        lat = self.lat
        return "" if lat is None else f"{lat:.{PRECISION}f}"

    def format_longitude(self) -> str:
        lon = self.lon
        return "" if lon is None else f"{lon:.{PRECISION}f}"

    def kml(self) -> str:
        """KML wants lon,lat"""
        return f"{self.format_longitude()},{self.format_latitude()}"

    def __str__(self) -> str:
        if self.lat is None or self.lon is None:
            return f"({self.latitude}, {self.longitude})"
        return f"({self.format_latitude()}, {self.format_longitude()})"


FALLBACK_ORIGIN = Coordinate(0.0, 0.0)
INVALID = Coordinate(None, None)


def haversine_m(lat1, lon1, lat2, lon2):
    """Great-circle distance in meters; accepts scalars or numpy arrays"""
    lat1_rad = np.deg2rad(lat1)
    lat2_rad = np.deg2rad(lat2)
    dlat = lat2_rad - lat1_rad
    dlon = np.deg2rad(np.asarray(lon2) - np.asarray(lon1))
    a = np.sin(dlat / 2.0) ** 2 + np.cos(lat1_rad) * np.cos(lat2_rad) * np.sin(dlon / 2.0) ** 2
    return 2.0 * EARTH_RADIUS_METERS * np.arcsin(np.sqrt(np.clip(a, 0.0, 1.0)))


def distance_meters(a: Coordinate, b: Coordinate) -> Optional[float]:
    """Distance between two coordinates, None if either is unusable"""
    if a is None or b is None:
        return None
    if a.lat is None or a.lon is None or b.lat is None or b.lon is None:
        return None
    return float(haversine_m(a.lat, a.lon, b.lat, b.lon))


def distance_miles(a: Coordinate, b: Coordinate) -> Optional[int]:
    meters = distance_meters(a, b)
    if meters is None:
        return None
    return int(round(meters * METERS_TO_MILES))


def bearing(a: Coordinate, b: Coordinate) -> Optional[int]:
    """Initial bearing from a to b in whole degrees, 0-359"""
    if distance_meters(a, b) is None:
        return None
    lat1, lat2 = math.radians(a.lat), math.radians(b.lat)
    dlon = math.radians(b.lon - a.lon)
    y = math.sin(dlon) * math.cos(lat2)
    x = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(dlon)
    return int(round(math.degrees(math.atan2(y, x)) + 360)) % 360


def centroid(coordinates: Iterable[Coordinate]) -> Optional[Coordinate]:
    """Spherical mean of the valid coordinates, None if there are none"""
    points = [c for c in coordinates if c is not None and c.is_valid()]
    if not points:
        return None

    lats = np.deg2rad([p.lat for p in points])
    lons = np.deg2rad([p.lon for p in points])
    x = np.mean(np.cos(lats) * np.cos(lons))
    y = np.mean(np.cos(lats) * np.sin(lons))
    z = np.mean(np.sin(lats))

    lon = math.degrees(math.atan2(y, x))
    lat = math.degrees(math.atan2(z, math.hypot(x, y)))
    return Coordinate(round(lat, PRECISION), round(lon, PRECISION))


_DEGREE_MINUTES = re.compile(r"^\s*(\d{1,3})-(\d{1,2}(?:\.\d+)?)\s*([NSEWnsew])\s*$")


def parse_degrees_minutes(text: str) -> Optional[float]:
    """
    Convert "47-32.23N" style text to decimal degrees

    Returns None when the text doesn't match; south and west are negative.
    """
    if not text:
        return None
    match = _DEGREE_MINUTES.match(text)
    if not match:
        return None
    degrees, minutes, hemisphere = match.groups()
    value = int(degrees) + float(minutes) / 60.0
    if hemisphere.upper() in ("S", "W"):
        value = -value
    return round(value, PRECISION)

