"""
Field Specs - Declarative description of one expected report field

A FieldSpec names the field, where to read it from, how to test it and how
many points it is worth. Specs are built once per exercise configuration
and never change afterwards.
"""

import copy
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import FrozenSet, Iterable, Optional

from ...errors import ConfigurationError

# Accepted date/time layouts, tried in order
DATE_TIME_FORMATS = (
    "%Y-%m-%d %H:%M",
    "%Y/%m/%d %H:%M",
    "%Y-%m-%dT%H:%M",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%dT%H:%M:%S",
)
DISPLAY_FORMAT = "%Y-%m-%d %H:%M"

# Label token replaced by the expected value
EXPECTED_TOKEN = "#EV"


class TestKind(Enum):
    """How an observed value is checked"""
    __test__ = False

    EQUALS = "equals"
    EQUALS_IGNORE_CASE = "equals_ignore_case"
    REQUIRED = "required"
    REQUIRED_NOT = "required_not"
    EMPTY = "empty"
    OPTIONAL = "optional"
    OPTIONAL_NOT = "optional_not"
    DATE_TIME = "date_time"
    DATE_TIME_ON_OR_AFTER = "date_time_on_or_after"
    DATE_TIME_ON_OR_BEFORE = "date_time_on_or_before"
    SPECIFIED = "specified"
    SET_MEMBERSHIP = "set_membership"
    CONTAINS = "contains"
    ALPHANUMERIC = "alphanumeric"
    IGNORE_WHITESPACE = "ignore_whitespace"
    AT_LEAST = "at_least"

    @classmethod
    def parse(cls, text: str) -> "TestKind":
        key = str(text).strip()
        for kind in cls:
            if key.lower() == kind.value or key.upper() == kind.name:
                return kind
        available = ', '.join(k.name for k in cls)
        raise ConfigurationError(f"Unknown test kind: '{text}'. Available: {available}")


# Kinds that must carry an expected value (or placeholder / bound)
NEEDS_EXPECTED = {
    TestKind.EQUALS,
    TestKind.EQUALS_IGNORE_CASE,
    TestKind.REQUIRED_NOT,
    TestKind.OPTIONAL_NOT,
    TestKind.DATE_TIME_ON_OR_AFTER,
    TestKind.DATE_TIME_ON_OR_BEFORE,
    TestKind.SPECIFIED,
    TestKind.CONTAINS,
    TestKind.ALPHANUMERIC,
    TestKind.IGNORE_WHITESPACE,
    TestKind.AT_LEAST,
}

# Kinds where an expected value makes no sense
REJECTS_EXPECTED = {
    TestKind.REQUIRED,
    TestKind.EMPTY,
    TestKind.OPTIONAL,
}

# Kinds that pass on a missing value
ACCEPTS_MISSING = {
    TestKind.EMPTY,
    TestKind.OPTIONAL,
    TestKind.OPTIONAL_NOT,
}


def parse_datetime(value, formats: Iterable[str] = DATE_TIME_FORMATS) -> Optional[datetime]:
    """Parse value under the first matching format, None if none match"""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    text = str(value).strip()
    if not text:
        return None
    for fmt in formats:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def format_datetime(value: datetime) -> str:
    return value.strftime(DISPLAY_FORMAT)


@dataclass(frozen=True)
class FieldSpec:
    """One expected report field and how to test it"""
    id: str
    label: str
    kind: TestKind
    expected: Optional[str] = None
    choices: FrozenSet[str] = field(default_factory=frozenset)
    points: int = 0
    source: Optional[str] = None
    disqualifying: bool = False
    importance: int = 0
    expected_column: Optional[int] = None

    def __post_init__(self):
        if not isinstance(self.kind, TestKind):
            object.__setattr__(self, 'kind', TestKind.parse(self.kind))
        if not isinstance(self.choices, frozenset):
            object.__setattr__(self, 'choices', frozenset(self.choices or ()))
        if self.source is None:
            object.__setattr__(self, 'source', self.id)
        self.validate()

    def validate(self) -> None:
        """Reject parameter combinations the evaluator can't honor"""
        has_expected = self.expected is not None and str(self.expected).strip() != ""

        # Lookup-driven specs get their expected value from ground truth per message
        if self.kind in NEEDS_EXPECTED and not has_expected and self.expected_column is None:
            raise ConfigurationError(
                f"Field '{self.id}': {self.kind.name} needs an expected value"
            )
        if self.kind in REJECTS_EXPECTED and has_expected:
            raise ConfigurationError(
                f"Field '{self.id}': {self.kind.name} doesn't take an expected value"
            )
        if self.kind == TestKind.SET_MEMBERSHIP and not self.choices:
            raise ConfigurationError(f"Field '{self.id}': SET_MEMBERSHIP needs choices")
        if self.kind in (TestKind.DATE_TIME_ON_OR_AFTER, TestKind.DATE_TIME_ON_OR_BEFORE):
            if has_expected and parse_datetime(self.expected) is None:
                raise ConfigurationError(
                    f"Field '{self.id}': window bound '{self.expected}' is not a valid date/time"
                )
        if self.kind == TestKind.AT_LEAST and has_expected:
            try:
                float(self.expected)
            except (TypeError, ValueError):
                raise ConfigurationError(
                    f"Field '{self.id}': AT_LEAST bound '{self.expected}' is not a number"
                )
        if not 0 <= self.importance <= 3:
            raise ConfigurationError(f"Field '{self.id}': importance must be 0-3")

    def with_expected(self, expected: Optional[str]) -> "FieldSpec":
        """
        Copy of this spec with a per-message expected value

        The copy skips validate(): a lookup value is data, so a blank or
        malformed one has to fail the field rather than the run.
        """
        overridden = copy.copy(self)
        object.__setattr__(overridden, 'expected', expected)
        object.__setattr__(overridden, 'expected_column', None)
        return overridden

    @property
    def display_label(self) -> str:
        """Label with the expected value substituted and importance prefix applied"""
        label = self.label
        if EXPECTED_TOKEN in label:
            label = label.replace(EXPECTED_TOKEN, self.expected_text)
        if self.importance:
            label = "!" * self.importance + " " + label
        return label

    @property
    def expected_text(self) -> str:
        if self.kind == TestKind.SET_MEMBERSHIP:
            return ', '.join(sorted(self.choices))
        if self.expected is None:
            return ""
        if self.kind in (TestKind.DATE_TIME_ON_OR_AFTER, TestKind.DATE_TIME_ON_OR_BEFORE):
            bound = parse_datetime(self.expected)
            return format_datetime(bound) if bound else str(self.expected)
        return str(self.expected)


def spec_from_dict(data: dict) -> FieldSpec:
    """Build a FieldSpec from a config table entry"""
    if 'id' not in data or 'kind' not in data:
        raise ConfigurationError(f"Field spec needs 'id' and 'kind': {data}")
    expected = data.get('expected')
    return FieldSpec(
        id=data['id'],
        label=data.get('label', data['id']),
        kind=TestKind.parse(data['kind']),
        expected=None if expected is None else str(expected),
        choices=frozenset(str(c) for c in data.get('choices', [])),
        points=int(data.get('points', 0)),
        source=data.get('source'),
        disqualifying=bool(data.get('disqualifying', False)),
        importance=int(data.get('importance', 0)),
        expected_column=data.get('expected_column'),
    )
