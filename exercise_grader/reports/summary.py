"""
Run Summary - Plain-text overview for the exercise coordinator
"""

from typing import List

from ..counter import Counter, format_histogram, format_percent
from .maps import write_text

# Score buckets for the grade distribution
GRADE_BUCKETS = [(100, 100), (90, 99), (80, 89), (70, 79), (50, 69), (1, 49), (0, 0)]
HISTOGRAM_LIMIT = 20


def _bucket_label(low: int, high: int) -> str:
    return str(low) if low == high else f"{low}-{high}"


def build_summary(context, grades: List) -> str:
    """
    Summary text for a finished run

    Covers participation, grade distribution, per-field correct/incorrect
    tallies for fields anybody got wrong, histograms and run warnings.
    """
    config = context.config
    total = len(grades)
    perfect = sum(1 for g in grades if g.result.is_perfect)
    auto_fail = sum(1 for g in grades if g.result.automatic_fail)
    synthetic = sum(1 for g in grades if g.synthetic_location)

    lines = [
        f"Exercise: {config.name}",
        config.description,
        "=" * 60,
        f"Graded: {total}",
        f"Perfect scores: {perfect} ({format_percent(perfect, total)})",
        f"Automatic fails: {auto_fail} ({format_percent(auto_fail, total)})",
        f"Synthetic locations: {synthetic}",
    ]
    if context.skipped.total():
        lines.append(f"Skipped (wrong message type): {context.skipped.total()}")

    distribution = Counter('grades')
    for grade in grades:
        for low, high in GRADE_BUCKETS:
            if low <= grade.result.score <= high:
                distribution.increment(_bucket_label(low, high))
                break
    lines += ["", "Grade distribution:"]
    for low, high in GRADE_BUCKETS:
        label = _bucket_label(low, high)
        count = distribution.get(label)
        lines.append(f"  {label}: {count} ({format_percent(count, total)})")

    failures = context.suite.failure_summary()
    lines += ["", "Field results:"]
    lines += [f"  {line}" for line in failures] if failures else ["  no field failures"]

    for source, counter in context.counters.items():
        lines += ["", f"{source} ({len(counter)} distinct):"]
        lines += format_histogram(counter, HISTOGRAM_LIMIT)

    if context.lookup_misses.total():
        lines += ["", "Ground truth misses:"]
        lines += format_histogram(context.lookup_misses)

    if context.warnings:
        lines += ["", "Warnings:"]
        lines += [f"  {w}" for w in context.warnings]

    return "\n".join(lines) + "\n"


def write_summary(context, grades: List, path: str) -> None:
    write_text(build_summary(context, grades), path)
