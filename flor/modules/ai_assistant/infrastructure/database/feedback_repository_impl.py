import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from flor.shared.core.exceptions import DatabaseError

from ...domain.models import AIFeedback
from ...domain.repository import AIFeedbackRepository
from .models import AIFeedbackModel

logger = logging.getLogger(__name__)


class AIFeedbackRepositoryImpl(AIFeedbackRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def add(self, feedback: AIFeedback) -> AIFeedback:
        try:
            model = AIFeedbackModel(**feedback.model_dump(mode="json", exclude={"created_at"}))
            model.created_at = feedback.created_at
            self._session.add(model)
            await self._session.flush()
            return AIFeedback.model_validate(model)
        except SQLAlchemyError as e:
            await self._session.rollback()
            logger.error(f"Database error saving AI feedback for plant {feedback.plant_id}: {e}")
            raise DatabaseError(f"Failed to save AI feedback: {e}", operation="insert", table="ai_feedback") from e
