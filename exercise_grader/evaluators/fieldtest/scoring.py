"""
Grade Accumulator - Roll field results into a score and explanation

The raw point total and the list of disqualifying conditions are kept
apart and only combined in finalize(): any disqualifying condition forces
the score to 0, but every explanation is still reported.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from .feedback import AUTOMATIC_FAIL, PERFECT_SCORE

MIN_SCORE = 0
MAX_SCORE = 100


@dataclass
class GradeResult:
    """Finalized grade for one message or sender"""
    score: int
    explanation: str
    raw_points: int = 0
    automatic_fail: bool = False
    explanations: List[str] = field(default_factory=list)

    @property
    def is_perfect(self) -> bool:
        return self.explanation == PERFECT_SCORE


class GradeAccumulator:
    """Running points, explanations and disqualifying conditions"""

    def __init__(self, base_points: int = 0):
        self.base_points = base_points
        self.reset()

    def reset(self, base_points: Optional[int] = None) -> None:
        """Start a fresh unit of evaluation"""
        if base_points is not None:
            self.base_points = base_points
        self.points = self.base_points
        self.explanations: List[str] = []
        self.disqualifications: List[str] = []

    def apply(self, result) -> None:
        """Add an EvaluationResult's points and explanation"""
        self.points += result.points
        if result.explanation:
            self.explanations.append(result.explanation)

    def add_points(self, points: int) -> None:
        self.points += points

    def explain(self, text: str) -> None:
        """Record an explanation that isn't tied to a field test"""
        if text:
            self.explanations.append(text)

    def mark_automatic_fail(self, reason: str) -> None:
        self.disqualifications.append(reason or AUTOMATIC_FAIL)

    @property
    def automatic_fail(self) -> bool:
        return bool(self.disqualifications)

    def finalize(self) -> GradeResult:
        """Clamp to [0, 100]; automatic fail forces 0"""
        if self.automatic_fail:
            score = MIN_SCORE
        else:
            score = max(MIN_SCORE, min(MAX_SCORE, int(round(self.points))))

        lines = [f"{AUTOMATIC_FAIL}: {reason}" for reason in self.disqualifications]
        lines.extend(self.explanations)
        explanation = "\n".join(lines) if lines else PERFECT_SCORE

        return GradeResult(
            score=score,
            explanation=explanation,
            raw_points=self.points,
            automatic_fail=self.automatic_fail,
            explanations=list(self.explanations),
        )
