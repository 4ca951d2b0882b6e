"""Port interface for reading conversation threads from the help desk."""

from abc import ABC, abstractmethod

from response_evaluator.domain.entities.thread import Thread


class ConversationPort(ABC):
    @abstractmethod
    async def fetch_threads(self, conversation_id: str) -> list[Thread] | None:
        """Return the conversation's threads (in any order).

        Returns None when the conversation is unavailable (auth failure,
        network error, not found). Implementations must not raise.
        """
        ...
