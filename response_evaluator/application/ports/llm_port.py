"""Port interface for LLM-based reply evaluation."""

from abc import ABC, abstractmethod

from response_evaluator.domain.entities.thread import SelectedReply
from response_evaluator.domain.entities.verdict import Verdict
from response_evaluator.domain.value_objects.enums import ProductContext


class LLMPort(ABC):
    @abstractmethod
    async def evaluate_reply(
        self, reply: SelectedReply, context: str, product: ProductContext
    ) -> Verdict:
        """Score a team reply against the support rubric.

        Never raises: any failure is returned as ``Verdict.failed(...)``.
        """
        ...
