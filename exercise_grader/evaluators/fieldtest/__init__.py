"""
Field Test Evaluator

Main interface:
    from exercise_grader.evaluators.fieldtest import FieldSpec, TestKind, evaluate

    spec = FieldSpec('agency', 'Agency/Group', TestKind.EQUALS,
                     expected='EmComm Training Organization', points=10)
    result = evaluate(spec, observed)
"""

from .specs import (
    FieldSpec,
    TestKind,
    DATE_TIME_FORMATS,
    parse_datetime,
    format_datetime,
    spec_from_dict,
)
from .evaluator import EvaluationResult, FieldTally, FieldTestSuite, evaluate
from .scoring import GradeAccumulator, GradeResult
from .feedback import PERFECT_SCORE, AUTOMATIC_FAIL, explain

__all__ = [
    'FieldSpec',
    'TestKind',
    'DATE_TIME_FORMATS',
    'parse_datetime',
    'format_datetime',
    'spec_from_dict',
    'EvaluationResult',
    'FieldTally',
    'FieldTestSuite',
    'evaluate',
    'GradeAccumulator',
    'GradeResult',
    'PERFECT_SCORE',
    'AUTOMATIC_FAIL',
    'explain',
]
