# 📄 File: flor/modules/plant_management/infrastructure/database/models.py
# 🧭 Purpose (Layman Explanation):
# Describes how plants, rooms and watering records are laid out as database tables.
#
# 🧪 Purpose (Technical Summary):
# SQLAlchemy ORM models for the plants, rooms and watering_history tables with UUID keys,
# ownership indexes and cascading foreign keys.
#
# 🔗 Dependencies:
# - SQLAlchemy ORM
# - flor.shared.config.database (shared declarative base)
#
# 🔄 Connected Modules / Calls From:
# - plant/room/watering repository implementations
# - migrations/env.py (target metadata)

"""
SQLAlchemy Models for Plant Management

Models:
- RoomModel: user-defined rooms
- PlantModel: plants with watering frequency and care notes
- WateringHistoryModel: insert-only watering events
"""

from uuid import uuid4

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Uuid,
    func,
)

from flor.shared.config.database import DatabaseBase


def _uuid() -> str:
    return str(uuid4())


# =============================================================================
# ROOM MODEL
# =============================================================================

class RoomModel(DatabaseBase):
    __tablename__ = "rooms"

    id = Column(Uuid(as_uuid=False), primary_key=True, default=_uuid)
    user_id = Column(Uuid(as_uuid=False), nullable=False, index=True, comment="Supabase auth user id")
    name = Column(String(50), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


# =============================================================================
# PLANT MODEL
# =============================================================================

class PlantModel(DatabaseBase):
    """
    Plant owned by one user.

    Watering status is derived from watering_history on read and never stored.
    """
    __tablename__ = "plants"
    __table_args__ = (
        CheckConstraint(
            "watering_frequency_days >= 1 AND watering_frequency_days <= 365",
            name="watering_frequency_range"
        ),
        Index("ix_plants_user_id_room_id", "user_id", "room_id"),
    )

    id = Column(Uuid(as_uuid=False), primary_key=True, default=_uuid)
    user_id = Column(Uuid(as_uuid=False), nullable=False, index=True, comment="Supabase auth user id")
    name = Column(String(100), nullable=False)
    photo_url = Column(Text, nullable=True)
    watering_frequency_days = Column(Integer, nullable=False)
    room_id = Column(
        Uuid(as_uuid=False),
        ForeignKey("rooms.id", ondelete="SET NULL"),
        nullable=True
    )

    # Care notes (free text, usually AI generated)
    light_requirements = Column(Text, nullable=True)
    fertilizing_tips = Column(Text, nullable=True)
    pruning_tips = Column(Text, nullable=True)
    troubleshooting = Column(Text, nullable=True)

    created_with_ai = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


# =============================================================================
# WATERING HISTORY MODEL
# =============================================================================

class WateringHistoryModel(DatabaseBase):
    __tablename__ = "watering_history"
    __table_args__ = (
        Index("ix_watering_history_plant_id_watered_at", "plant_id", "watered_at"),
    )

    id = Column(Uuid(as_uuid=False), primary_key=True, default=_uuid)
    plant_id = Column(
        Uuid(as_uuid=False),
        ForeignKey("plants.id", ondelete="CASCADE"),
        nullable=False
    )
    watered_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
