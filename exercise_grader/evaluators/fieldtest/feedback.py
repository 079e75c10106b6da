"""
Field Test Feedback - Explanation text for failed field tests

Every failure reads "<label> (<observed>) should be <expected>" so graders
and participants see the same phrasing regardless of test kind.
"""

from typing import Optional

from .specs import FieldSpec, TestKind

PERFECT_SCORE = "Perfect Score!"
AUTOMATIC_FAIL = "Automatic Fail"


def describe_observed(value) -> str:
    """Render an observed value for an explanation"""
    if value is None:
        return "missing"
    text = str(value).strip()
    if not text:
        return "blank"
    return text


def expectation(spec: FieldSpec, expected: Optional[str] = None) -> str:
    """What the field should have been, phrased for 'should be ...'"""
    expected = spec.expected_text if expected is None else expected
    kind = spec.kind

    if kind in (TestKind.EQUALS, TestKind.EQUALS_IGNORE_CASE, TestKind.SPECIFIED,
                TestKind.ALPHANUMERIC, TestKind.IGNORE_WHITESPACE):
        return expected
    if kind == TestKind.REQUIRED:
        return "provided"
    if kind == TestKind.REQUIRED_NOT:
        return f"provided and not {expected}"
    if kind == TestKind.EMPTY:
        return "blank"
    if kind == TestKind.OPTIONAL_NOT:
        return f"blank or not {expected}"
    if kind == TestKind.DATE_TIME:
        return "a valid date/time"
    if kind == TestKind.DATE_TIME_ON_OR_AFTER:
        return f"on or after {expected}"
    if kind == TestKind.DATE_TIME_ON_OR_BEFORE:
        return f"on or before {expected}"
    if kind == TestKind.SET_MEMBERSHIP:
        return f"one of {expected}"
    if kind == TestKind.CONTAINS:
        return f"containing {expected}"
    if kind == TestKind.AT_LEAST:
        return f"at least {expected}"
    return expected


def explain(spec: FieldSpec, observed, expected: Optional[str] = None, note: str = "") -> str:
    """Build the failure explanation for one field"""
    text = f"{spec.display_label} ({describe_observed(observed)}) should be {expectation(spec, expected)}"
    if note:
        text += f" ({note})"
    return text


def explain_unparsable(spec: FieldSpec, observed) -> str:
    return f"{spec.display_label} ({describe_observed(observed)}) should be a valid date/time (unparsable)"


def explain_unusable_bound(spec: FieldSpec, observed) -> str:
    bound = spec.expected_text or "none"
    return (
        f"{spec.display_label} ({describe_observed(observed)}) can't be checked "
        f"(no usable date/time bound: {bound})"
    )


def explain_no_ground_truth(spec: FieldSpec, observed) -> str:
    return f"{spec.display_label} ({describe_observed(observed)}) can't be checked (ground truth has no value)"
