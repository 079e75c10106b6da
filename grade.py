#!/usr/bin/env python3
"""
Grade CLI - Score exported exercise messages

Grades every message (or sender) of an exercise against its field specs
and writes grade/histogram/feedback reports.

Usage:
    python grade.py --messages messages.json --exercise eto-2025-01-16
    python grade.py --messages messages.json --exercise eto-spring-precheck --ground-truth cities.csv
    python grade.py --messages messages.json --config my_exercise.json

Output:
    {output}/{exercise}/grades.csv
    {output}/{exercise}/feedback.kml
    {output}/{exercise}/summary.txt
    {output}/{exercise}/outbound-messages.csv
    {output}/{exercise}/counter-{field}.csv
"""

import argparse
import sys
from pathlib import Path

from exercise_grader.config import default_output_dir, load_exercise_config
from exercise_grader.errors import ConfigurationError
from exercise_grader.exercises import get_exercise, list_exercises
from exercise_grader.grader import ExerciseGrader, RunContext, assign_jitter
from exercise_grader.messages import load_messages
from exercise_grader.reports import (
    write_counter_csv, write_feedback_kml, write_grades_csv, write_outbound_csv, write_summary,
)


def main():
    parser = argparse.ArgumentParser(
        description='Grade exported exercise messages',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Available exercises: {', '.join(list_exercises())}

Examples:
    # Built-in exercise
    python grade.py --messages exported.json --exercise eto-2025-01-16

    # Exercise with a ground truth spreadsheet
    python grade.py --messages exported.json --exercise eto-spring-precheck --ground-truth cities.csv

    # Exercise defined in a JSON file, with an image check
    python grade.py --messages exported.json --config drill.json --reference-image poster.png

    # Custom output directory (or set GRADER_OUTPUT_DIR)
    python grade.py --messages exported.json --exercise eto-2025-01-16 --output ./my_outputs
        """
    )

    parser.add_argument(
        '--messages',
        required=True,
        help='Path to exported messages JSON file'
    )
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument(
        '--exercise',
        choices=list_exercises(),
        help=f'Built-in exercise: {", ".join(list_exercises())}'
    )
    group.add_argument(
        '--config',
        help='Path to exercise config JSON file'
    )
    parser.add_argument(
        '--ground-truth',
        help='Ground truth spreadsheet (CSV) for exercises that use one'
    )
    parser.add_argument(
        '--reference-image',
        help='Reference image for attachment similarity checks'
    )
    parser.add_argument(
        '--feedback-from',
        default='ETO-FEEDBACK',
        help='Sender address for outbound feedback messages (default: ETO-FEEDBACK)'
    )
    parser.add_argument(
        '--output',
        default=default_output_dir(),
        help='Output directory base (default: ./outputs)'
    )

    args = parser.parse_args()

    try:
        config = get_exercise(args.exercise) if args.exercise else load_exercise_config(args.config)

        print(f"\n{'='*60}")
        print(f"LOADING {config.name.upper()}")
        print(f"{'='*60}")

        messages = load_messages(args.messages)
        print(f"✓ {len(messages)} messages loaded")

        context = RunContext.create(
            config,
            ground_truth_path=args.ground_truth,
            reference_image=args.reference_image,
        )
        if context.ground_truth is not None:
            print(f"✓ {len(context.ground_truth)} ground truth rows loaded")
    except ConfigurationError as e:
        print(f"ERROR: {e}")
        sys.exit(1)

    print(f"\n{'='*60}")
    print(f"GRADING")
    if config.per_sender:
        print("  One grade per sender")
    print(f"{'='*60}")

    grader = ExerciseGrader(config, context)
    grades = grader.grade_all(messages)
    moved = assign_jitter(grades, config.jitter_meters)
    grader.build_outbound(grades, args.feedback_from)

    perfect = sum(1 for g in grades if g.result.is_perfect)
    print(f"\n✓ Grading complete")
    print(f"  Graded: {len(grades)}")
    print(f"  Perfect: {perfect}")
    if context.skipped.total():
        print(f"  Skipped (wrong type): {context.skipped.total()}")
    if moved:
        print(f"  ⚠ {moved} without a usable location, placed near the fallback origin")

    out_dir = Path(args.output) / config.name
    out_dir.mkdir(parents=True, exist_ok=True)

    write_grades_csv(grades, str(out_dir / "grades.csv"), value_columns=[s.id for s in config.specs])
    write_summary(context, grades, str(out_dir / "summary.txt"))
    write_outbound_csv(context.outbound, str(out_dir / "outbound-messages.csv"))
    for source, counter in context.counters.items():
        write_counter_csv(counter, str(out_dir / f"counter-{source}.csv"), header=(source, "Count"))

    try:
        write_feedback_kml(grades, str(out_dir / "feedback.kml"), config.name)
    except Exception as e:
        print(f"⚠ Feedback map not written: {e}")

    print(f"\n{'='*60}")
    print(f"✓ Reports saved to: {out_dir}")
    print(f"{'='*60}\n")


if __name__ == "__main__":
    main()
