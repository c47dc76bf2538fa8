from .plant_schemas import (
    NotificationsResponse,
    PlantCreateRequest,
    PlantDetailResponse,
    PlantListResponse,
    PlantResponse,
    PlantUpdateRequest,
    WateringHistoryListResponse,
    WateringHistoryResponse,
    WaterPlantRequest,
    WaterPlantResponse,
)
from .room_schemas import RoomCreateRequest, RoomListResponse, RoomResponse, RoomUpdateRequest

__all__ = [
    "PlantCreateRequest",
    "PlantUpdateRequest",
    "PlantResponse",
    "PlantListResponse",
    "PlantDetailResponse",
    "WateringHistoryResponse",
    "WateringHistoryListResponse",
    "WaterPlantRequest",
    "WaterPlantResponse",
    "NotificationsResponse",
    "RoomCreateRequest",
    "RoomUpdateRequest",
    "RoomResponse",
    "RoomListResponse",
]
