"""
Exercise Grader - Apply one exercise configuration to a batch of messages

This is the primary interface. It coordinates:
- Posting-window checks
- Field tests (literal and ground-truth driven)
- Image similarity and location checks
- Histograms
- Jitter for messages without a usable location

All run state lives in a RunContext, so two exercises graded in the same
process never share counters or tallies.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from .config import ExerciseConfig
from .counter import Counter
from .errors import ConfigurationError
from .evaluators.fieldtest import (
    FieldSpec, FieldTestSuite, GradeAccumulator, GradeResult, TestKind, format_datetime,
)
from .groundtruth import GroundTruthTable, load_ground_truth
from .images import ImageScore, ImageSimilarityService
from .location import Coordinate, jitter
from .messages import ExportedMessage
from .outbound import OutboundMessage, build_feedback

# Field ids the grader adds on top of the configured specs
WINDOW_OPEN_ID = 'window_open'
WINDOW_CLOSE_ID = 'window_close'
LOCATION_ID = 'location'
IMAGE_ID = 'image'


@dataclass
class MessageGrade:
    """Grade for one message, or one sender in per-sender exercises"""
    message_id: str
    sender: str
    to: str
    timestamp: Optional[datetime]
    location: Coordinate
    result: GradeResult
    values: Dict[str, Optional[str]] = field(default_factory=dict)
    message_count: int = 1
    synthetic_location: bool = False
    image: Optional[ImageScore] = None

    @property
    def score(self) -> int:
        return self.result.score

    @property
    def explanation(self) -> str:
        return self.result.explanation


@dataclass
class RunContext:
    """Everything one grading run mutates"""
    config: ExerciseConfig
    suite: FieldTestSuite
    counters: Dict[str, Counter] = field(default_factory=dict)
    ground_truth: Optional[GroundTruthTable] = None
    images: Optional[ImageSimilarityService] = None
    lookup_misses: Counter = field(default_factory=lambda: Counter('lookup_misses'))
    skipped: Counter = field(default_factory=lambda: Counter('skipped'))
    outbound: List[OutboundMessage] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @classmethod
    def create(
        cls,
        config: ExerciseConfig,
        ground_truth_path: Optional[str] = None,
        reference_image: Optional[str] = None,
    ) -> "RunContext":
        """
        Build the run state for an exercise

        Loads the ground-truth spreadsheet and reference image when the
        exercise uses them. Missing inputs raise ConfigurationError.
        """
        suite = FieldTestSuite(_builtin_specs(config, reference_image))
        for spec in config.specs:
            suite.add(spec)

        context = cls(config=config, suite=suite)
        context.counters = {source: Counter(source) for source in config.counters}

        if config.ground_truth is not None:
            gt = config.ground_truth
            path = ground_truth_path or gt.path
            if not path:
                raise ConfigurationError(f"Exercise '{config.name}' needs a ground truth spreadsheet")
            context.ground_truth = load_ground_truth(path, gt.key_column, gt.skip_lines)
            for key, line_number in context.ground_truth.duplicates:
                context.warnings.append(
                    f"duplicate ground truth key '{key}' (line {line_number}), later row used"
                )

        image_path = reference_image or config.reference_image
        if image_path:
            context.images = ImageSimilarityService(image_path, config.image_threshold)

        return context

    def warn(self, text: str) -> None:
        self.warnings.append(text)
        print(f"  ⚠ {text}")


def _builtin_specs(config: ExerciseConfig, reference_image: Optional[str]) -> List[FieldSpec]:
    specs = []
    if config.window_open:
        specs.append(FieldSpec(
            WINDOW_OPEN_ID, 'Message date/time', TestKind.DATE_TIME_ON_OR_AFTER,
            expected=format_datetime(config.window_open), source='timestamp',
            disqualifying=config.window_disqualifying,
        ))
    if config.window_close:
        specs.append(FieldSpec(
            WINDOW_CLOSE_ID, 'Message date/time', TestKind.DATE_TIME_ON_OR_BEFORE,
            expected=format_datetime(config.window_close), source='timestamp',
            disqualifying=config.window_disqualifying,
        ))
    if reference_image or config.reference_image:
        specs.append(FieldSpec(
            IMAGE_ID, 'Image similarity', TestKind.AT_LEAST,
            expected=str(config.image_threshold), points=config.image_points,
        ))
    if config.require_location:
        specs.append(FieldSpec(LOCATION_ID, 'LAT/LON', TestKind.REQUIRED))
    return specs


class ExerciseGrader:
    """Main grader class"""

    def __init__(self, config: ExerciseConfig, context: Optional[RunContext] = None):
        self.config = config
        self.context = context or RunContext.create(config)
        self.accumulator = GradeAccumulator(config.base_points)

    def grade_all(self, messages: List[ExportedMessage]) -> List[MessageGrade]:
        """Grade every relevant message (or sender) in time order"""
        selected = []
        for message in messages:
            if self._wrong_type(message):
                self.context.skipped.increment(message.message_type)
                continue
            selected.append(message)

        selected.sort(key=lambda m: (m.timestamp is None, m.timestamp or datetime.min, m.message_id))

        if not self.config.per_sender:
            return [self.grade_message(m) for m in selected]

        by_sender: Dict[str, List[ExportedMessage]] = {}
        for message in selected:
            by_sender.setdefault(message.sender, []).append(message)
        return [self.grade_sender(sender, msgs) for sender, msgs in by_sender.items()]

    def _wrong_type(self, message: ExportedMessage) -> bool:
        wanted = self.config.message_type
        return bool(wanted and message.message_type and message.message_type != wanted)

    def grade_message(self, message: ExportedMessage) -> MessageGrade:
        """Grade one message in its own accumulator"""
        self.accumulator.reset(self.config.base_points)
        values, image = self._test_message(message, self.accumulator)
        result = self.accumulator.finalize()
        return MessageGrade(
            message_id=message.message_id,
            sender=message.sender,
            to=message.to,
            timestamp=message.timestamp,
            location=message.location,
            result=result,
            values=values,
            image=image,
        )

    def grade_sender(self, sender: str, messages: List[ExportedMessage]) -> MessageGrade:
        """
        Grade all of one sender's messages as a single unit

        Each message is scored on its own; the sender's points are the mean
        of those, explanations are prefixed with the message id, and any
        disqualifying failure fails the sender.
        """
        grades = [self.grade_message(m) for m in messages]
        latest = grades[-1]

        self.accumulator.reset(0)
        self.accumulator.add_points(
            sum(g.result.raw_points for g in grades) / len(grades)
        )
        for grade in grades:
            prefix = f"{grade.message_id}: " if len(grades) > 1 else ""
            for text in grade.result.explanations:
                self.accumulator.explain(prefix + text)
            if grade.result.automatic_fail:
                self.accumulator.mark_automatic_fail(f"{prefix}disqualified")

        location = next(
            (g.location for g in reversed(grades) if g.location.is_valid()), latest.location
        )
        return MessageGrade(
            message_id=latest.message_id,
            sender=sender,
            to=latest.to,
            timestamp=latest.timestamp,
            location=location,
            result=self.accumulator.finalize(),
            values=latest.values,
            message_count=len(grades),
            image=latest.image,
        )

    def _test_message(self, message: ExportedMessage, acc: GradeAccumulator):
        suite = self.context.suite
        values: Dict[str, Optional[str]] = {}

        for window_id in (WINDOW_OPEN_ID, WINDOW_CLOSE_ID):
            if window_id in suite.specs:
                suite.test(window_id, message.get('timestamp'), acc)

        deferred = []
        for spec in self.config.specs:
            observed = message.get(spec.source)
            values[spec.id] = observed
            if spec.expected_column is not None:
                deferred.append(spec)
                continue
            suite.test(spec.id, observed, acc)

        if deferred:
            self._test_ground_truth(message, deferred, values, acc)

        image = None
        if self.context.images is not None:
            image = self._test_image(message, acc)

        if LOCATION_ID in suite.specs:
            location = message.location
            suite.test(LOCATION_ID, str(location) if location.is_valid() else None, acc)

        for source, counter in self.context.counters.items():
            counter.increment(message.get(source))

        return values, image

    def _test_ground_truth(self, message, deferred, values, acc) -> None:
        table = self.context.ground_truth
        if table is None:
            return

        key = message.get(self.config.ground_truth.key_source)
        row = table.lookup(key)
        if row is None:
            shown = GroundTruthTable.normalize(key) or "missing key"
            acc.explain(f"No ground truth for {shown}")
            self.context.lookup_misses.increment(key)
            return

        for spec in deferred:
            if spec.expected_column >= len(row):
                acc.explain(f"{spec.label}: ground truth has no column {spec.expected_column}")
                continue
            self.context.suite.test(spec.id, values[spec.id], acc, expected=row[spec.expected_column])

    def _test_image(self, message, acc) -> Optional[ImageScore]:
        try:
            image = self.context.images.score(message)
        except Exception as e:
            self.context.warn(f"{message.message_id}: image scoring failed: {e}")
            return None

        observed = f"{image.score:.2f}" if image is not None else None
        self.context.suite.test(IMAGE_ID, observed, acc)
        return image

    def build_outbound(self, grades: List[MessageGrade], sender: str) -> List[OutboundMessage]:
        """Feedback messages for every graded unit, kept on the context"""
        messages = [build_feedback(g, sender, self.config.feedback_subject) for g in grades]
        self.context.outbound.extend(messages)
        return messages


def assign_jitter(
    grades: List[MessageGrade],
    radius_meters: float,
    center: Optional[Coordinate] = None,
) -> int:
    """
    Give every grade without a valid location a synthetic one

    Returns how many grades were moved. Synthetic points never coincide
    with each other.
    """
    missing = [g for g in grades if not g.location.is_valid()]
    if not missing:
        return 0

    points = jitter(len(missing), center, radius_meters)
    for grade, point in zip(missing, points):
        grade.location = point
        grade.synthetic_location = True
    return len(missing)
