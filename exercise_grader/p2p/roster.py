"""
Station Rosters - Target and field station lists from CSV

Target columns (fixed order): active, call, band, center freq (kHz),
dial freq (kHz), location name, latitude, longitude, then any number of
extra columns named by the header row.

Field columns: call, latitude, longitude.
"""

import csv
from pathlib import Path
from typing import List

from ..errors import ConfigurationError
from ..location import Coordinate, band_for_frequency
from .graph import Field, Target

TARGET_COLUMNS = 8
TRUE_VALUES = {'true', 'yes', 'y', '1', 'x'}


def _read_rows(path: str, skip_lines: int, kind: str):
    csv_path = Path(path)
    if not csv_path.exists():
        raise ConfigurationError(f"{kind} file not found: {csv_path}")

    with open(csv_path, 'r', encoding='utf-8-sig', newline='') as f:
        rows = list(csv.reader(f))

    header = rows[skip_lines - 1] if 0 < skip_lines <= len(rows) else []
    data = [row for row in rows[skip_lines:] if any(cell.strip() for cell in row)]
    if not data:
        raise ConfigurationError(f"Nothing read from {kind.lower()} file: {csv_path}")
    return header, data


def load_targets(path: str, skip_lines: int = 1) -> List[Target]:
    """Active targets from a roster CSV; inactive rows are skipped"""
    header, rows = _read_rows(path, skip_lines, "Targets")
    extra_names = [name.strip() for name in header[TARGET_COLUMNS:]]

    targets = []
    inactive = 0
    for row in rows:
        row = [cell.strip() for cell in row]
        if len(row) < TARGET_COLUMNS:
            raise ConfigurationError(f"Target row has {len(row)} columns, need {TARGET_COLUMNS}: {row}")

        if row[0].lower() not in TRUE_VALUES:
            inactive += 1
            continue

        extra = {}
        for i, value in enumerate(row[TARGET_COLUMNS:]):
            name = extra_names[i] if i < len(extra_names) and extra_names[i] else f"column {TARGET_COLUMNS + i + 1}"
            extra[name] = value

        targets.append(Target(
            call=row[1].upper(),
            band=row[2] or band_for_frequency(row[4]) or "",
            center_freq=row[3],
            dial_freq=row[4],
            location_name=row[5],
            location=Coordinate(row[6], row[7]),
            extra=extra,
        ))

    if not targets:
        raise ConfigurationError(f"No active targets in {path}")

    print(f"  ✓ {len(targets)} active targets loaded ({inactive} inactive skipped)")
    return targets


def load_fields(path: str, skip_lines: int = 1) -> List[Field]:
    """Field station roster"""
    _, rows = _read_rows(path, skip_lines, "Fields")

    fields = []
    for row in rows:
        row = [cell.strip() for cell in row]
        if len(row) < 3:
            raise ConfigurationError(f"Field row needs call, latitude, longitude: {row}")
        fields.append(Field(call=row[0].upper(), location=Coordinate(row[1], row[2])))

    print(f"  ✓ {len(fields)} field stations loaded")
    return fields
