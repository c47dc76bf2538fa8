"""
SQLAlchemy model for monthly usage counters.

One row per (user, month); a new month simply starts a new row, so no
reset job is needed.
"""

from uuid import uuid4

from sqlalchemy import Column, DateTime, Integer, String, UniqueConstraint, Uuid, func

from flor.shared.config.database import DatabaseBase


class UsageLimitModel(DatabaseBase):
    __tablename__ = "usage_limits"
    __table_args__ = (
        UniqueConstraint("user_id", "month_year", name="uq_usage_limits_user_month"),
    )

    id = Column(Uuid(as_uuid=False), primary_key=True, default=lambda: str(uuid4()))
    user_id = Column(Uuid(as_uuid=False), nullable=False, index=True)
    month_year = Column(String(7), nullable=False, comment="YYYY-MM (UTC)")
    ai_generations_this_month = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
