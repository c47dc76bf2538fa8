"""
SQLAlchemy model for AI quality feedback.
"""

from uuid import uuid4

from sqlalchemy import JSON, CheckConstraint, Column, DateTime, ForeignKey, String, Text, Uuid, func

from flor.shared.config.database import DatabaseBase


class AIFeedbackModel(DatabaseBase):
    __tablename__ = "ai_feedback"
    __table_args__ = (
        CheckConstraint("feedback_type IN ('thumbs_up', 'thumbs_down')", name="feedback_type_valid"),
    )

    id = Column(Uuid(as_uuid=False), primary_key=True, default=lambda: str(uuid4()))
    user_id = Column(Uuid(as_uuid=False), nullable=False, index=True)
    plant_id = Column(
        Uuid(as_uuid=False),
        ForeignKey("plants.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    feedback_type = Column(String(20), nullable=False)
    comment = Column(Text, nullable=True)
    ai_response_snapshot = Column(JSON, nullable=True, comment="AI output the feedback refers to")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
