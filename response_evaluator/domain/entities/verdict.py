"""Verdict — the scored evaluation of one team reply."""

from __future__ import annotations

from dataclasses import dataclass, field

from response_evaluator.domain.value_objects.enums import RubricCategory

EVALUATION_ERROR_FEEDBACK = "Evaluation failed"


@dataclass(frozen=True)
class CategoryScore:
    score: int
    feedback: str


@dataclass(frozen=True)
class Verdict:
    overall_score: float
    categories: dict[RubricCategory, CategoryScore]
    key_improvements: list[str] = field(default_factory=list)
    error: str | None = None

    @classmethod
    def failed(cls, message: str) -> Verdict:
        """Zeroed verdict carrying the failure message."""
        return cls(
            overall_score=0.0,
            categories={
                category: CategoryScore(score=0, feedback=EVALUATION_ERROR_FEEDBACK)
                for category in RubricCategory
            },
            key_improvements=[],
            error=message or "Unknown error",
        )

    @property
    def is_error(self) -> bool:
        return self.error is not None

    def to_dict(self) -> dict:
        data = {
            "overall_score": self.overall_score,
            "categories": {
                category.value: {"score": cs.score, "feedback": cs.feedback}
                for category, cs in self.categories.items()
            },
            "key_improvements": list(self.key_improvements),
        }
        if self.error is not None:
            data["error"] = self.error
        return data
