"""
Exercises Registry

Maps exercise names to their configuration tables.
Add new exercises here.
"""

from ..config import ExerciseConfig, exercise_from_dict
from .tables import ETO_2025_01_16, ETO_SPRING_PRECHECK, ETO_2022_12_08_P2P

# Registry: name -> config table
EXERCISES = {
    'eto-2025-01-16': ETO_2025_01_16,
    'eto-spring-precheck': ETO_SPRING_PRECHECK,
    'eto-2022-12-08-p2p': ETO_2022_12_08_P2P,
}


def get_exercise(name: str) -> ExerciseConfig:
    """Get a fresh exercise config by name"""
    if name not in EXERCISES:
        available = ', '.join(EXERCISES.keys())
        raise ValueError(f"Unknown exercise: '{name}'. Available: {available}")
    return exercise_from_dict(EXERCISES[name])


def list_exercises():
    """List available exercise names"""
    return list(EXERCISES.keys())


__all__ = ['EXERCISES', 'get_exercise', 'list_exercises']
