"""
Exercise Configuration - Parameters for one exercise

An exercise is data: the field specs to test, the posting window, which
fields to histogram, and optional ground-truth / reference-image checks.
Configs come from the built-in tables (exercise_grader.exercises) or from
a JSON file with the same keys.
"""

import json
import os
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from .errors import ConfigurationError
from .evaluators.fieldtest.specs import FieldSpec, parse_datetime, spec_from_dict

DEFAULT_OUTPUT_DIR = "outputs"
OUTPUT_DIR_ENV = "GRADER_OUTPUT_DIR"
DEFAULT_JITTER_METERS = 10_000


@dataclass
class GroundTruthConfig:
    """Where to find the lookup spreadsheet and how to key it"""
    path: Optional[str] = None
    key_column: int = 0
    skip_lines: int = 1
    key_source: str = ""


@dataclass
class ExerciseConfig:
    """Everything the grader needs to know about one exercise"""
    name: str
    description: str = ""
    message_type: str = ""
    specs: List[FieldSpec] = field(default_factory=list)
    window_open: Optional[datetime] = None
    window_close: Optional[datetime] = None
    window_disqualifying: bool = False
    require_location: bool = True
    per_sender: bool = False
    base_points: int = 0
    counters: List[str] = field(default_factory=list)
    ground_truth: Optional[GroundTruthConfig] = None
    reference_image: Optional[str] = None
    image_threshold: float = 0.8
    image_points: int = 0
    feedback_subject: str = ""
    jitter_meters: int = DEFAULT_JITTER_METERS

    def __post_init__(self):
        ids = [spec.id for spec in self.specs]
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            raise ConfigurationError(f"Exercise '{self.name}': duplicate field ids {duplicates}")
        if self.window_open and self.window_close and self.window_open > self.window_close:
            raise ConfigurationError(f"Exercise '{self.name}': window opens after it closes")
        if not self.feedback_subject:
            self.feedback_subject = f"Feedback for {self.name}"


def _parse_bound(name: str, value) -> Optional[datetime]:
    if value is None or value == "":
        return None
    parsed = parse_datetime(value)
    if parsed is None:
        raise ConfigurationError(f"Invalid {name}: '{value}'")
    return parsed


def exercise_from_dict(data: dict) -> ExerciseConfig:
    """Build an ExerciseConfig from a config table"""
    if not data.get('name'):
        raise ConfigurationError("Exercise config needs a 'name'")

    ground_truth = None
    if data.get('ground_truth'):
        gt = data['ground_truth']
        ground_truth = GroundTruthConfig(
            path=gt.get('path'),
            key_column=int(gt.get('key_column', 0)),
            skip_lines=int(gt.get('skip_lines', 1)),
            key_source=gt.get('key_source', ''),
        )

    return ExerciseConfig(
        name=data['name'],
        description=data.get('description', ''),
        message_type=data.get('message_type', ''),
        specs=[spec_from_dict(s) for s in data.get('specs', [])],
        window_open=_parse_bound('window_open', data.get('window_open')),
        window_close=_parse_bound('window_close', data.get('window_close')),
        window_disqualifying=bool(data.get('window_disqualifying', False)),
        require_location=bool(data.get('require_location', True)),
        per_sender=bool(data.get('per_sender', False)),
        base_points=int(data.get('base_points', 0)),
        counters=list(data.get('counters', [])),
        ground_truth=ground_truth,
        reference_image=data.get('reference_image'),
        image_threshold=float(data.get('image_threshold', 0.8)),
        image_points=int(data.get('image_points', 0)),
        feedback_subject=data.get('feedback_subject', ''),
        jitter_meters=int(data.get('jitter_meters', DEFAULT_JITTER_METERS)),
    )


def load_exercise_config(path: str) -> ExerciseConfig:
    """Load an exercise from a JSON file"""
    config_path = Path(path)
    if not config_path.exists():
        raise ConfigurationError(f"Exercise config not found: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Exercise config {config_path} is not valid JSON: {e}")

    return exercise_from_dict(data)


def default_output_dir() -> str:
    return os.environ.get(OUTPUT_DIR_ENV, DEFAULT_OUTPUT_DIR)
