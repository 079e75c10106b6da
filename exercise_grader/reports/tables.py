"""
CSV Reports - Grade rows, histograms, outbound messages and P2P tables

Every writer creates the parent directory and truncates any existing file.
"""

import csv
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

from ..counter import Counter
from ..p2p.graph import P2PGraph

GRADE_COLUMNS = ["Grade", "Explanation"]

# Leading columns for grade rows: header -> value getter
DEFAULT_LEADING_COLUMNS: Dict[str, Callable] = {
    "From": lambda g: g.sender,
    "To": lambda g: g.to,
    "MessageId": lambda g: g.message_id,
    "DateTime": lambda g: g.timestamp.strftime("%Y-%m-%d %H:%M") if g.timestamp else "",
    "Latitude": lambda g: g.location.format_latitude(),
    "Longitude": lambda g: g.location.format_longitude(),
    "Synthetic Location": lambda g: "yes" if g.synthetic_location else "",
    "Messages": lambda g: g.message_count,
}


def _open_for_write(path: str):
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    return open(out, 'w', encoding='utf-8', newline='')


def write_rows(path: str, header: Sequence[str], rows: List[Sequence]) -> None:
    with _open_for_write(path) as f:
        writer = csv.writer(f)
        writer.writerow(header)
        writer.writerows(rows)


def write_grades_csv(
    grades: List,
    path: str,
    leading_columns: Optional[Dict[str, Callable]] = None,
    value_columns: Sequence[str] = (),
) -> None:
    """
    One row per graded unit: leading columns, field values, Grade, Explanation

    Args:
        grades: MessageGrade list
        path: Output CSV
        leading_columns: header -> getter; defaults to sender/to/id/time/location
        value_columns: Field ids whose observed values get their own column
    """
    leading = DEFAULT_LEADING_COLUMNS if leading_columns is None else leading_columns
    header = list(leading.keys()) + list(value_columns) + GRADE_COLUMNS

    rows = []
    for grade in grades:
        row = [getter(grade) for getter in leading.values()]
        row += [grade.values.get(field_id) or "" for field_id in value_columns]
        row += [grade.result.score, grade.result.explanation]
        rows.append(row)

    write_rows(path, header, rows)


def write_counter_csv(counter: Counter, path: str, header: Sequence[str] = ("Value", "Count")) -> None:
    write_rows(path, header, counter.descending_by_count())


def write_outbound_csv(messages: List, path: str) -> None:
    rows = [[m.sender, m.recipient, m.subject, m.body] for m in messages]
    write_rows(path, ["From", "To", "Subject", "Body"], rows)


def _kind_columns(counters: List[Counter]) -> List[str]:
    kinds = set()
    for counter in counters:
        kinds.update(counter.counts.keys())
    return sorted(kinds)


def write_targets_csv(graph: P2PGraph, path: str) -> None:
    """Targets that received messages, busiest first, with counts appended"""
    targets = sorted(
        (t for t in graph.targets.values() if t.inbound),
        key=lambda t: (-len(t.inbound), t.call),
    )
    counts = [t.kind_counts() for t in targets]
    kinds = _kind_columns(counts)
    extra_names = []
    for target in targets:
        for name in target.extra:
            if name not in extra_names:
                extra_names.append(name)

    header = ["Call", "Band", "Center Freq (KHz)", "Dial Freq (KHz)", "Location",
              "Latitude", "Longitude"] + extra_names + ["Messages"] + kinds
    rows = []
    for target, counter in zip(targets, counts):
        rows.append(
            [target.call, target.band, target.center_freq, target.dial_freq, target.location_name,
             target.location.format_latitude(), target.location.format_longitude()]
            + [target.extra.get(name, "") for name in extra_names]
            + [len(target.inbound)]
            + [counter.counts.get(kind, 0) for kind in kinds]
        )
    write_rows(path, header, rows)


def write_fields_csv(graph: P2PGraph, path: str) -> None:
    """Field stations that sent messages, busiest first, with counts appended"""
    fields = sorted(graph.active_fields(), key=lambda f: (-len(f.outbound), f.call))
    counts = [f.kind_counts() for f in fields]
    kinds = _kind_columns(counts)

    header = ["Call", "Latitude", "Longitude", "Messages"] + kinds
    rows = []
    for station, counter in zip(fields, counts):
        rows.append(
            [station.call, station.location.format_latitude(), station.location.format_longitude(),
             len(station.outbound)]
            + [counter.counts.get(kind, 0) for kind in kinds]
        )
    write_rows(path, header, rows)


def write_edges_csv(graph: P2PGraph, path: str) -> None:
    rows = [
        [e.from_call, e.to_call, e.message_id,
         e.timestamp.strftime("%Y-%m-%d %H:%M") if e.timestamp else "", e.message_kind]
        for e in graph.edges
    ]
    write_rows(path, ["From", "To", "MessageId", "DateTime", "Type"], rows)
