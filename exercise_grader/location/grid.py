"""
Maidenhead grid locators

Position reports sometimes carry only a grid square; the center of the
square is a usable map location.
"""

import re
from typing import Optional

from .coordinate import Coordinate, PRECISION

_GRID = re.compile(r"^[A-Ra-r]{2}[0-9]{2}([A-Xa-x]{2})?$")


def is_grid(text: str) -> bool:
    return bool(text) and bool(_GRID.match(text.strip()))


def from_grid(grid: str) -> Optional[Coordinate]:
    """Center of a 4- or 6-character grid square, None if malformed"""
    if not is_grid(grid):
        return None
    grid = grid.strip()

    lon = (ord(grid[0].upper()) - ord("A")) * 20.0 - 180.0
    lat = (ord(grid[1].upper()) - ord("A")) * 10.0 - 90.0
    lon += int(grid[2]) * 2.0
    lat += int(grid[3]) * 1.0

    if len(grid) == 6:
        lon += (ord(grid[4].lower()) - ord("a")) * (2.0 / 24)
        lat += (ord(grid[5].lower()) - ord("a")) * (1.0 / 24)
        lon += 1.0 / 24
        lat += 0.5 / 24
    else:
        lon += 1.0
        lat += 0.5

    return Coordinate(round(lat, PRECISION), round(lon, PRECISION))


def to_grid(coordinate: Coordinate) -> str:
    """Six-character locator for a valid coordinate, '' otherwise"""
    if coordinate is None or coordinate.lat is None or coordinate.lon is None:
        return ""

    lon = coordinate.lon + 180.0
    lat = coordinate.lat + 90.0
    if not (0.0 <= lon < 360.0 and 0.0 <= lat < 180.0):
        return ""

    field = chr(ord("A") + int(lon // 20)) + chr(ord("A") + int(lat // 10))
    square = str(int((lon % 20) // 2)) + str(int(lat % 10))
    sub_lon = int((lon % 2) * 12)
    sub_lat = int((lat % 1) * 24)
    subsquare = chr(ord("a") + sub_lon) + chr(ord("a") + sub_lat)
    return field + square + subsquare
