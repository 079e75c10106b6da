"""
Amateur band lookup by frequency

Target rosters sometimes list only a dial frequency; the band name is
derived from it.
"""

from typing import Optional

# (name, lower kHz, upper kHz)
BANDS = [
    ("160m", 1800, 2000),
    ("80m", 3500, 4000),
    ("60m", 5330.5, 5403.5),
    ("40m", 7000, 7300),
    ("30m", 10100, 10150),
    ("20m", 14000, 14350),
    ("17m", 18068, 18168),
    ("15m", 21000, 21450),
    ("12m", 24890, 24990),
    ("10m", 28000, 29700),
    ("6m", 50000, 54000),
    ("2m", 140000, 148000),
    ("1.25m", 222000, 225000),
    ("70cm", 420000, 450000),
    ("33cm", 902000, 928000),
    ("23cm", 1240000, 1300000),
    ("13cm", 2300000, 2450000),
]


def band_for_frequency(khz) -> Optional[str]:
    """Band name for a frequency in kHz, None if outside every band"""
    try:
        freq = float(str(khz).strip())
    except (TypeError, ValueError):
        return None
    for name, lower, upper in BANDS:
        if lower <= freq <= upper:
            return name
    return None
