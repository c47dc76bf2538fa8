# 📄 File: flor/modules/plant_management/presentation/dependencies.py
# 🧭 Purpose (Layman Explanation):
# Hands each plant, room and watering endpoint the helpers it needs, all sharing the same
# database conversation for that request.
# 🧪 Purpose (Technical Summary):
# FastAPI dependency factories wiring request-scoped SQLAlchemy repositories and photo
# storage into the plant management domain services.
# 🔗 Dependencies:
# FastAPI Depends, flor.shared.infrastructure.database.session, repository implementations
# 🔄 Connected Modules / Calls From:
# flor.modules.plant_management.presentation.api.v1.*, flor.modules.ai_assistant dependencies

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from flor.shared.infrastructure.database.session import get_db_session
from flor.shared.infrastructure.storage.photo_storage import PlantPhotoStorage, get_photo_storage

from ..domain.repositories import PlantRepository, RoomRepository, WateringRepository
from ..domain.services import PlantService, RoomService, WateringService
from ..infrastructure.database import PlantRepositoryImpl, RoomRepositoryImpl, WateringRepositoryImpl


# =========================================================================
# REPOSITORIES
# =========================================================================

def get_plant_repository(session: AsyncSession = Depends(get_db_session)) -> PlantRepository:
    return PlantRepositoryImpl(session)


def get_room_repository(session: AsyncSession = Depends(get_db_session)) -> RoomRepository:
    return RoomRepositoryImpl(session)


def get_watering_repository(session: AsyncSession = Depends(get_db_session)) -> WateringRepository:
    return WateringRepositoryImpl(session)


# =========================================================================
# SERVICES
# =========================================================================

def get_plant_service(
    plant_repository: PlantRepository = Depends(get_plant_repository),
    room_repository: RoomRepository = Depends(get_room_repository),
    watering_repository: WateringRepository = Depends(get_watering_repository),
    photo_storage: PlantPhotoStorage = Depends(get_photo_storage),
) -> PlantService:
    return PlantService(plant_repository, room_repository, watering_repository, photo_storage=photo_storage)


def get_room_service(
    room_repository: RoomRepository = Depends(get_room_repository),
    plant_repository: PlantRepository = Depends(get_plant_repository),
) -> RoomService:
    return RoomService(room_repository, plant_repository)


def get_watering_service(
    plant_repository: PlantRepository = Depends(get_plant_repository),
    watering_repository: WateringRepository = Depends(get_watering_repository),
) -> WateringService:
    return WateringService(plant_repository, watering_repository)
