"""
Usage Limit Repository Interface
"""

from abc import ABC, abstractmethod


class UsageLimitRepository(ABC):
    """
    Persistence port for usage counters.

    Implementations raise DatabaseError on failure; the fail-open policy
    belongs to UsageLimitService.
    """

    @abstractmethod
    async def get_ai_generations(self, user_id: str, month_year: str) -> int:
        """Generations used in ``month_year``; 0 when no row exists."""
        pass

    @abstractmethod
    async def increment_ai_generations(self, user_id: str, month_year: str) -> int:
        """Atomically add one generation and return the new count."""
        pass

    @abstractmethod
    async def count_plants(self, user_id: str) -> int:
        pass
