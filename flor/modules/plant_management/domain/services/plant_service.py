# 📄 File: flor/modules/plant_management/domain/services/plant_service.py
# 🧭 Purpose (Layman Explanation):
# The rules for a user's plants: checking names and watering schedules, making sure people
# only touch their own plants, and building the "what needs water" lists.
# 🧪 Purpose (Technical Summary):
# Domain service for plant CRUD with validation and ownership checks, enrichment with
# derived watering status and room names, photo replacement and notification queries.
# 🔗 Dependencies:
# Plant domain models, plant/room/watering repositories, watering_calculator,
# PlantPhotoStorage, flor.shared.core.exceptions
# 🔄 Connected Modules / Calls From:
# Plant and notification API endpoints, AIPlantService (AI plant creation)

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional
from uuid import uuid4

from flor.shared.core.exceptions import DatabaseError, NotFoundError, ValidationError
from flor.shared.infrastructure.storage.photo_storage import PlantPhotoStorage

from ..models.plant import (
    MAX_PLANT_NAME_LENGTH,
    MAX_WATERING_FREQUENCY_DAYS,
    MIN_WATERING_FREQUENCY_DAYS,
    Plant,
    PlantChanges,
    PlantDetails,
    PlantDraft,
    PlantNeedingWater,
    PlantSortOption,
    PlantWithWatering,
)
from ..repositories.plant_repository import PlantRepository
from ..repositories.room_repository import RoomRepository
from ..repositories.watering_repository import WateringRepository
from .watering_calculator import calculate_watering_status, sort_by_next_watering

logger = logging.getLogger(__name__)

PLANT_NOT_FOUND = "Plant not found or unauthorized"
DETAIL_HISTORY_LIMIT = 10


def validate_plant_name(name: Optional[str]) -> str:
    """Return the trimmed name or raise ValidationError."""
    trimmed = name.strip() if isinstance(name, str) else ""
    if not trimmed:
        raise ValidationError("Plant name is required", field="name")
    if len(trimmed) > MAX_PLANT_NAME_LENGTH:
        raise ValidationError(
            f"Plant name must be {MAX_PLANT_NAME_LENGTH} characters or less",
            field="name"
        )
    return trimmed


def validate_watering_frequency(days: Optional[int]) -> int:
    if days is None or not MIN_WATERING_FREQUENCY_DAYS <= days <= MAX_WATERING_FREQUENCY_DAYS:
        raise ValidationError(
            "Watering frequency must be between 1 and 365 days",
            field="watering_frequency_days",
            value=days
        )
    return days


class PlantService:
    """
    Domain service for plant management business logic.
    """

    def __init__(
        self,
        plant_repository: PlantRepository,
        room_repository: RoomRepository,
        watering_repository: WateringRepository,
        photo_storage: Optional[PlantPhotoStorage] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.plant_repository = plant_repository
        self.room_repository = room_repository
        self.watering_repository = watering_repository
        self.photo_storage = photo_storage
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    # =========================================================================
    # COMMANDS
    # =========================================================================

    async def create_plant(self, user_id: str, data: PlantDraft, created_with_ai: bool = False) -> Plant:
        """
        Create a plant for ``user_id``.

        Raises:
            ValidationError: If the name or watering frequency is invalid
            NotFoundError: If ``room_id`` is not one of the user's rooms
        """
        name = validate_plant_name(data.name)
        frequency = validate_watering_frequency(data.watering_frequency_days)
        if data.room_id:
            await self._ensure_room_owned(data.room_id, user_id)

        now = self._clock()
        plant = Plant(
            id=str(uuid4()),
            user_id=user_id,
            name=name,
            watering_frequency_days=frequency,
            room_id=data.room_id or None,
            light_requirements=data.light_requirements or None,
            fertilizing_tips=data.fertilizing_tips or None,
            pruning_tips=data.pruning_tips or None,
            troubleshooting=data.troubleshooting or None,
            created_with_ai=created_with_ai,
            created_at=now,
            updated_at=now,
        )

        created = await self.plant_repository.create(plant)
        logger.info(f"Plant {created.id} created for user {user_id} (ai={created_with_ai})")
        return created

    async def update_plant(self, plant_id: str, user_id: str, changes: PlantChanges) -> Plant:
        """
        Apply a partial update to an owned plant.

        Only fields explicitly present in ``changes`` are validated and written.
        """
        await self.get_owned_plant(plant_id, user_id)

        values: Dict[str, Any] = changes.model_dump(exclude_unset=True)
        if "name" in values:
            values["name"] = validate_plant_name(values["name"])
        if "watering_frequency_days" in values:
            values["watering_frequency_days"] = validate_watering_frequency(values["watering_frequency_days"])
        if values.get("room_id"):
            await self._ensure_room_owned(values["room_id"], user_id)

        values["updated_at"] = self._clock()
        updated = await self.plant_repository.update(plant_id, values)
        logger.info(f"Plant {plant_id} updated: {sorted(values)}")
        return updated

    async def delete_plant(self, plant_id: str, user_id: str) -> None:
        """Delete an owned plant and, best effort, its stored photo."""
        plant = await self.get_owned_plant(plant_id, user_id)

        if plant.photo_url and self.photo_storage is not None:
            await self.photo_storage.delete(plant.photo_url, user_id)

        await self.plant_repository.delete(plant_id)
        logger.info(f"Plant {plant_id} deleted by user {user_id}")

    async def replace_photo(self, plant_id: str, user_id: str, image_data: bytes) -> Plant:
        """Upload a new photo for an owned plant and drop the previous one."""
        plant = await self.get_owned_plant(plant_id, user_id)
        if self.photo_storage is None:
            raise RuntimeError("Photo storage is not configured")

        photo_url = await self.photo_storage.upload(user_id, image_data)
        updated = await self.plant_repository.update(
            plant_id, {"photo_url": photo_url, "updated_at": self._clock()}
        )

        if plant.photo_url:
            await self.photo_storage.delete(plant.photo_url, user_id)

        return updated

    # =========================================================================
    # QUERIES
    # =========================================================================

    async def get_user_plants(
        self,
        user_id: str,
        room_id: Optional[str] = None,
        now: Optional[datetime] = None,
        sort: PlantSortOption = PlantSortOption.WATERING,
    ) -> List[PlantWithWatering]:
        """List plants with watering status, soonest watering first or alphabetically."""
        plants = await self.plant_repository.list_by_user(user_id, room_id=room_id)
        enriched = await self._enrich(plants, now or self._clock())
        if sort == PlantSortOption.NAME:
            return sorted(enriched, key=lambda plant: plant.name.casefold())
        return sort_by_next_watering(enriched)

    async def get_plant(self, plant_id: str, user_id: str, now: Optional[datetime] = None) -> PlantDetails:
        """
        Get one owned plant with its latest watering history.

        Raises:
            NotFoundError: If the plant is missing or owned by someone else
        """
        plant = await self.get_owned_plant(plant_id, user_id)
        [enriched] = await self._enrich([plant], now or self._clock())
        history = await self.watering_repository.list_for_plant(plant_id, limit=DETAIL_HISTORY_LIMIT)
        return PlantDetails(**enriched.model_dump(), watering_history=history)

    async def get_plants_needing_water(self, user_id: str, now: Optional[datetime] = None) -> List[PlantNeedingWater]:
        """
        Plants due today or overdue.

        Read failures return an empty list so the notification badge never
        breaks the page.
        """
        try:
            plants = await self.get_user_plants(user_id, now=now)
        except DatabaseError as e:
            logger.error(f"Failed to load plants needing water for {user_id}: {e}")
            return []

        return [
            PlantNeedingWater(
                plant_id=plant.id,
                plant_name=plant.name,
                photo_url=plant.photo_url,
                last_watered=plant.last_watered_date,
                next_watering=plant.next_watering_date,
                days_overdue=max(0, -plant.days_until_watering),
            )
            for plant in plants
            if plant.days_until_watering is not None and plant.days_until_watering <= 0
        ]

    # =========================================================================
    # HELPERS
    # =========================================================================

    async def get_owned_plant(self, plant_id: str, user_id: str) -> Plant:
        """Raises NotFoundError unless ``user_id`` owns the plant."""
        plant = await self.plant_repository.get_by_id(plant_id)
        if plant is None or plant.user_id != user_id:
            raise NotFoundError(PLANT_NOT_FOUND, resource_type="plant", resource_id=plant_id)
        return plant

    async def _ensure_room_owned(self, room_id: str, user_id: str) -> None:
        room = await self.room_repository.get_for_user(room_id, user_id)
        if room is None:
            raise NotFoundError("Room not found", resource_type="room", resource_id=room_id)

    async def _enrich(self, plants: List[Plant], now: datetime) -> List[PlantWithWatering]:
        if not plants:
            return []

        last_watered = await self.watering_repository.last_watered_at([p.id for p in plants])
        room_ids = {p.room_id for p in plants if p.room_id}
        room_names = await self.room_repository.get_names(room_ids) if room_ids else {}

        enriched = []
        for plant in plants:
            last = last_watered.get(plant.id)
            status = calculate_watering_status(plant.watering_frequency_days, last, now=now)
            enriched.append(
                PlantWithWatering(
                    **plant.model_dump(),
                    room_name=room_names.get(plant.room_id) if plant.room_id else None,
                    last_watered_date=last,
                    next_watering_date=status.next_watering_date,
                    days_until_watering=status.days_until_watering,
                    is_overdue=status.is_overdue,
                )
            )
        return enriched
