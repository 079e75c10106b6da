#!/usr/bin/env python3
"""
P2P Map CLI - Match field stations to targets and map the links

Usage:
    python p2p_map.py --messages messages.json --targets targets.csv
    python p2p_map.py --messages messages.json --targets targets.csv --fields fields.csv

Output:
    {output}/p2p/p2p.kml
    {output}/p2p/updated-targets.csv
    {output}/p2p/updated-fields.csv
    {output}/p2p/p2p-entries.csv
"""

import argparse
import sys
from pathlib import Path

from exercise_grader.config import default_output_dir
from exercise_grader.errors import ConfigurationError
from exercise_grader.messages import load_messages
from exercise_grader.p2p import build, link_count, load_fields, load_targets, render_kml
from exercise_grader.reports import write_edges_csv, write_fields_csv, write_targets_csv, write_text


def main():
    parser = argparse.ArgumentParser(
        description='Build the field/target P2P map from exported messages',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Field stations taken from the message senders
    python p2p_map.py --messages exported.json --targets targets.csv

    # Only stations on the field roster count
    python p2p_map.py --messages exported.json --targets targets.csv --fields fields.csv

    # Warn about stations within 50 meters of each other
    python p2p_map.py --messages exported.json --targets targets.csv --co-location 50
        """
    )

    parser.add_argument('--messages', required=True, help='Path to exported messages JSON file')
    parser.add_argument('--targets', required=True, help='Target roster CSV')
    parser.add_argument('--fields', help='Field station roster CSV (optional)')
    parser.add_argument('--skip-lines', type=int, default=1, help='Header lines in roster files (default: 1)')
    parser.add_argument('--name', default='P2P', help='KML document name')
    parser.add_argument(
        '--co-location',
        type=float,
        default=10,
        help='Warn when stations are within this many meters (default: 10)'
    )
    parser.add_argument(
        '--output',
        default=default_output_dir(),
        help='Output directory base (default: ./outputs)'
    )

    args = parser.parse_args()

    print(f"\n{'='*60}")
    print(f"LOADING")
    print(f"{'='*60}")

    try:
        messages = load_messages(args.messages)
        print(f"✓ {len(messages)} messages loaded")
        targets = load_targets(args.targets, args.skip_lines)
        fields = load_fields(args.fields, args.skip_lines) if args.fields else None
    except ConfigurationError as e:
        print(f"ERROR: {e}")
        sys.exit(1)

    print(f"\n{'='*60}")
    print(f"MATCHING")
    print(f"{'='*60}")

    graph = build(targets, messages, fields)

    print(f"✓ {graph.resolved_count} messages matched")
    print(f"  Field stations: {len(graph.active_fields())}")
    if graph.unresolved_targets.total():
        print(f"  ⚠ {graph.unresolved_targets.total()} messages to unknown targets")
        for call, count in graph.unresolved_targets.descending_by_count():
            print(f"      {call}: {count}")
    if graph.unresolved_fields.total():
        print(f"  ⚠ {graph.unresolved_fields.total()} messages from stations not on the roster")

    for a, b, meters in graph.co_located(args.co_location):
        print(f"  ⚠ {a} and {b} are {meters:.1f} meters apart")

    missing = graph.missing_targets()
    if missing:
        print(f"  ⚠ No messages for {len(missing)} targets: {', '.join(t.call for t in missing)}")

    out_dir = Path(args.output) / "p2p"
    kml_text = render_kml(graph, args.name)
    write_text(kml_text, str(out_dir / "p2p.kml"))
    write_targets_csv(graph, str(out_dir / "updated-targets.csv"))
    write_fields_csv(graph, str(out_dir / "updated-fields.csv"))
    write_edges_csv(graph, str(out_dir / "p2p-entries.csv"))

    print(f"\n{'='*60}")
    print(f"✓ Map saved with {link_count(kml_text)} links to: {out_dir}")
    print(f"{'='*60}\n")


if __name__ == "__main__":
    main()
