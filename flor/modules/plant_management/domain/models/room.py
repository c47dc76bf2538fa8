from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

MAX_ROOM_NAME_LENGTH = 50


class Room(BaseModel):
    """A user-defined place (e.g. "Kitchen") that groups plants."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    name: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
