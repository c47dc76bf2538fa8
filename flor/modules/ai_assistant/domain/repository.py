from abc import ABC, abstractmethod

from .models import AIFeedback


class AIFeedbackRepository(ABC):
    """Insert-only store for AI quality feedback."""

    @abstractmethod
    async def add(self, feedback: AIFeedback) -> AIFeedback:
        pass
