"""
Evaluators

The field-test engine lives in the fieldtest subpackage; exercises are
plain configuration consumed by it (see exercise_grader.exercises).
"""

from .fieldtest import (
    FieldSpec,
    TestKind,
    FieldTestSuite,
    GradeAccumulator,
    GradeResult,
    EvaluationResult,
    evaluate,
)

__all__ = [
    'FieldSpec',
    'TestKind',
    'FieldTestSuite',
    'GradeAccumulator',
    'GradeResult',
    'EvaluationResult',
    'evaluate',
]
