"""
Exercise Grader - Source Package
"""

from .errors import ConfigurationError
from .counter import Counter
from .location import Coordinate, jitter
from .evaluators import FieldSpec, TestKind, evaluate, GradeAccumulator
from .config import ExerciseConfig, load_exercise_config
from .exercises import get_exercise, list_exercises
from .messages import ExportedMessage, load_messages
from .grader import ExerciseGrader, MessageGrade, RunContext, assign_jitter
from .p2p import build as build_p2p_graph

__all__ = [
    'ConfigurationError',
    'Counter',
    'Coordinate',
    'jitter',
    'FieldSpec',
    'TestKind',
    'evaluate',
    'GradeAccumulator',
    'ExerciseConfig',
    'load_exercise_config',
    'get_exercise',
    'list_exercises',
    'ExportedMessage',
    'load_messages',
    'ExerciseGrader',
    'MessageGrade',
    'RunContext',
    'assign_jitter',
    'build_p2p_graph',
]
