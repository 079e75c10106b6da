"""
Ground Truth - Auxiliary spreadsheets used as a lookup table

Some exercises compare reported values against a published spreadsheet
(e.g. observed weather per city). Rows are keyed by a natural key column,
upper-cased. When two rows share a key the later row wins; every such
collision is recorded in `duplicates` so the run can report it.
"""

import csv
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .errors import ConfigurationError


@dataclass
class GroundTruthTable:
    """Rows keyed by natural key"""
    path: str
    key_column: int
    rows: Dict[str, List[str]] = field(default_factory=dict)
    duplicates: List[Tuple[str, int]] = field(default_factory=list)

    @staticmethod
    def normalize(key) -> str:
        return str(key or "").strip().upper()

    def lookup(self, key) -> Optional[List[str]]:
        """Row for key, or None on a miss"""
        return self.rows.get(self.normalize(key))

    def value(self, key, column: int) -> Optional[str]:
        row = self.lookup(key)
        if row is None or column >= len(row):
            return None
        return row[column]

    def __len__(self) -> int:
        return len(self.rows)

    def __contains__(self, key) -> bool:
        return self.normalize(key) in self.rows


def load_ground_truth(path: str, key_column: int = 0, skip_lines: int = 1) -> GroundTruthTable:
    """
    Read a ground-truth CSV

    Args:
        path: CSV file
        key_column: Column holding the natural key
        skip_lines: Header lines to skip before data

    Raises:
        ConfigurationError: file missing, or no data rows
    """
    csv_path = Path(path)
    if not csv_path.exists():
        raise ConfigurationError(f"Ground truth spreadsheet not found: {csv_path}")

    table = GroundTruthTable(path=str(csv_path), key_column=key_column)

    with open(csv_path, 'r', encoding='utf-8-sig', newline='') as f:
        reader = csv.reader(f)
        for line_number, row in enumerate(reader, start=1):
            if line_number <= skip_lines:
                continue
            if not row or key_column >= len(row):
                continue
            key = table.normalize(row[key_column])
            if not key:
                continue
            if key in table.rows:
                table.duplicates.append((key, line_number))
            table.rows[key] = [cell.strip() for cell in row]

    if not table.rows:
        raise ConfigurationError(f"Nothing read from ground truth spreadsheet: {csv_path}")

    for key, line_number in table.duplicates:
        print(f"  ⚠ Duplicate ground truth key '{key}' at line {line_number}, later row wins")

    return table
