from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class RoomCreateRequest(BaseModel):
    name: str = Field(..., description="Room name (1-50 characters)", examples=["Living room"])


class RoomUpdateRequest(BaseModel):
    name: str = Field(..., description="New room name (1-50 characters)")


class RoomResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    created_at: datetime


class RoomListResponse(BaseModel):
    rooms: List[RoomResponse]
    count: int
