"""
Counter - Histogram of categorical values

Tallies how often each observed value appears across a run, for the
summary report and the per-field CSV histograms.
"""

from typing import Dict, Iterable, List, Optional, Tuple

NULL_KEY = "(null)"
BLANK_KEY = "(blank)"


class Counter:
    """Mapping from observed value to count"""

    def __init__(self, name: str = ""):
        self.name = name
        self.counts: Dict[str, int] = {}

    @staticmethod
    def _bucket(key) -> str:
        if key is None:
            return NULL_KEY
        key = str(key).strip()
        if not key:
            return BLANK_KEY
        return key

    def increment(self, key, amount: int = 1) -> None:
        """Count one occurrence of key; null and blank keys get their own buckets"""
        bucket = self._bucket(key)
        self.counts[bucket] = self.counts.get(bucket, 0) + amount

    def get(self, key) -> int:
        return self.counts.get(self._bucket(key), 0)

    def total(self) -> int:
        """Sum of all counts, for percentage computation"""
        return sum(self.counts.values())

    def descending_by_count(self) -> List[Tuple[str, int]]:
        """Highest counts first, ties broken alphabetically by key"""
        return sorted(self.counts.items(), key=lambda item: (-item[1], item[0]))

    def ascending_by_key(self) -> List[Tuple[str, int]]:
        return sorted(self.counts.items())

    def merge(self, other: "Counter") -> None:
        for key, count in other.counts.items():
            self.counts[key] = self.counts.get(key, 0) + count

    def __len__(self) -> int:
        return len(self.counts)

    def __contains__(self, key) -> bool:
        return self._bucket(key) in self.counts

    def __repr__(self) -> str:
        return f"Counter(name={self.name!r}, keys={len(self)}, total={self.total()})"


def count_values(values: Iterable, name: str = "") -> Counter:
    """Build a Counter from an iterable of values"""
    counter = Counter(name)
    for value in values:
        counter.increment(value)
    return counter


def format_percent(count: int, total: int) -> str:
    """Percentage with two decimals, '0%' when there is nothing to divide by"""
    if not total:
        return "0%"
    return f"{100.0 * count / total:.2f}%"


def format_histogram(counter: Counter, limit: Optional[int] = None) -> List[str]:
    """Lines of 'value: count (pct)', highest first"""
    total = counter.total()
    lines = []
    for key, count in counter.descending_by_count()[:limit]:
        lines.append(f"  {key}: {count} ({format_percent(count, total)})")
    return lines
