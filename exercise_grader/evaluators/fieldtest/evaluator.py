"""
Field Test Evaluator - Check one observed value against one FieldSpec

evaluate() is pure: it returns an EvaluationResult and touches nothing
else. FieldTestSuite wraps it for a grading run, keeping pass counts per
field and folding results into the accumulator it is handed.
"""

import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from ...counter import format_percent
from ...errors import ConfigurationError
from .feedback import explain, explain_no_ground_truth, explain_unparsable, explain_unusable_bound
from .scoring import GradeAccumulator
from .specs import (
    ACCEPTS_MISSING, DATE_TIME_FORMATS, NEEDS_EXPECTED, FieldSpec, TestKind, parse_datetime,
)


@dataclass
class EvaluationResult:
    """Outcome of one (message, field) test"""
    field_id: str
    passed: bool
    explanation: Optional[str] = None
    points: int = 0


def _clean(value) -> Optional[str]:
    if value is None:
        return None
    return str(value).strip()


def _alphanumeric(text: str) -> str:
    return re.sub(r'[^A-Za-z0-9]', '', text).lower()


def _no_whitespace(text: str) -> str:
    return re.sub(r'\s+', '', text)


def _date_check(spec: FieldSpec, observed) -> EvaluationResult:
    """DATE_TIME and the two window kinds"""
    if observed is None or _clean(observed) == "":
        return _fail(spec, observed)

    formats = DATE_TIME_FORMATS
    if spec.kind == TestKind.DATE_TIME and spec.expected:
        formats = (spec.expected,)

    when = parse_datetime(observed, formats)
    if when is None:
        return EvaluationResult(spec.id, False, explain_unparsable(spec, observed), 0)

    if spec.kind == TestKind.DATE_TIME:
        return _pass(spec)

    bound = parse_datetime(spec.expected)
    if bound is None:
        return EvaluationResult(spec.id, False, explain_unusable_bound(spec, observed), 0)
    if spec.kind == TestKind.DATE_TIME_ON_OR_AFTER:
        ok = when >= bound
    else:
        ok = when <= bound
    return _pass(spec) if ok else _fail(spec, observed)


def _pass(spec: FieldSpec) -> EvaluationResult:
    return EvaluationResult(spec.id, True, None, spec.points)


def _fail(spec: FieldSpec, observed, note: str = "") -> EvaluationResult:
    return EvaluationResult(spec.id, False, explain(spec, observed, note=note), 0)


def evaluate(spec: FieldSpec, observed) -> EvaluationResult:
    """
    Test an observed value against a spec

    Never raises for bad data: missing values, garbage dates and
    non-numbers all come back as failed results with an explanation.
    """
    kind = spec.kind

    if kind in (TestKind.DATE_TIME, TestKind.DATE_TIME_ON_OR_AFTER, TestKind.DATE_TIME_ON_OR_BEFORE):
        return _date_check(spec, observed)

    text = _clean(observed)
    blank = text is None or text == ""

    if blank and kind not in ACCEPTS_MISSING:
        return _fail(spec, observed)

    expected = _clean(spec.expected) or ""

    if kind == TestKind.EQUALS:
        ok = text == expected
    elif kind in (TestKind.EQUALS_IGNORE_CASE, TestKind.SPECIFIED):
        ok = text.lower() == expected.lower()
    elif kind == TestKind.REQUIRED:
        ok = True
    elif kind == TestKind.REQUIRED_NOT:
        ok = text.lower() != expected.lower()
    elif kind == TestKind.EMPTY:
        ok = blank
    elif kind == TestKind.OPTIONAL:
        ok = True
    elif kind == TestKind.OPTIONAL_NOT:
        ok = blank or text.lower() != expected.lower()
    elif kind == TestKind.SET_MEMBERSHIP:
        ok = text in spec.choices
    elif kind == TestKind.CONTAINS:
        ok = expected.lower() in text.lower()
    elif kind == TestKind.ALPHANUMERIC:
        ok = _alphanumeric(text) == _alphanumeric(expected)
    elif kind == TestKind.IGNORE_WHITESPACE:
        ok = _no_whitespace(text) == _no_whitespace(expected)
    elif kind == TestKind.AT_LEAST:
        try:
            ok = float(text) >= float(expected)
        except ValueError:
            return _fail(spec, observed, note="not a number")
    else:
        ok = False

    return _pass(spec) if ok else _fail(spec, observed)


@dataclass
class FieldTally:
    """Pass/total counts for one field over a run"""
    passed: int = 0
    total: int = 0

    @property
    def failed(self) -> int:
        return self.total - self.passed


class FieldTestSuite:
    """
    The field specs of one run plus their running pass counts

    Specs stay immutable; counts live here so two runs never share state.
    """

    def __init__(self, specs: Iterable[FieldSpec] = ()):
        self.specs: Dict[str, FieldSpec] = {}
        self.tallies: Dict[str, FieldTally] = {}
        for spec in specs:
            self.add(spec)

    def add(self, spec: FieldSpec) -> None:
        if spec.id in self.specs:
            raise ConfigurationError(f"Duplicate field id: '{spec.id}'")
        self.specs[spec.id] = spec
        self.tallies[spec.id] = FieldTally()

    def get(self, field_id: str) -> FieldSpec:
        if field_id not in self.specs:
            available = ', '.join(self.specs.keys())
            raise ConfigurationError(f"Unknown field: '{field_id}'. Available: {available}")
        return self.specs[field_id]

    def __iter__(self):
        return iter(self.specs.values())

    def __len__(self) -> int:
        return len(self.specs)

    def test(
        self,
        field_id: str,
        observed,
        accumulator: Optional[GradeAccumulator] = None,
        expected: Optional[str] = None,
    ) -> EvaluationResult:
        """
        Evaluate one field, count it, and fold it into the accumulator

        Args:
            field_id: Spec to test
            observed: Value read from the message
            accumulator: Receives points/explanation (optional)
            expected: Per-message expected value, e.g. from ground truth

        Returns:
            The EvaluationResult
        """
        spec = self.get(field_id)
        if expected is not None:
            spec = spec.with_expected(str(expected).strip())

        if expected is not None and not spec.expected and spec.kind in NEEDS_EXPECTED:
            result = EvaluationResult(spec.id, False, explain_no_ground_truth(spec, observed), 0)
        else:
            result = evaluate(spec, observed)

        tally = self.tallies[field_id]
        tally.total += 1
        if result.passed:
            tally.passed += 1

        if accumulator is not None:
            accumulator.apply(result)
            if spec.disqualifying and not result.passed:
                # Short reason; the full explanation is already in the list
                accumulator.mark_automatic_fail(spec.display_label)

        return result

    def tally(self, field_id: str) -> FieldTally:
        return self.tallies[field_id]

    def has_failures(self, field_id: str) -> bool:
        return self.tallies[field_id].failed > 0

    def format_tally(self, field_id: str) -> str:
        """'label, correct: N(xx.xx%), incorrect: M(yy.yy%)'"""
        spec = self.specs[field_id]
        tally = self.tallies[field_id]
        return (
            f"{spec.display_label}, "
            f"correct: {tally.passed}({format_percent(tally.passed, tally.total)}), "
            f"incorrect: {tally.failed}({format_percent(tally.failed, tally.total)})"
        )

    def failure_summary(self) -> List[str]:
        """Tally lines for every field that failed at least once"""
        return [self.format_tally(fid) for fid in self.specs if self.has_failures(fid)]

    def merge(self, other: "FieldTestSuite") -> None:
        """Add another suite's counts for the fields both suites share"""
        for field_id, tally in other.tallies.items():
            if field_id in self.tallies:
                self.tallies[field_id].passed += tally.passed
                self.tallies[field_id].total += tally.total
