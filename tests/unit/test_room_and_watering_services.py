from datetime import timedelta

import pytest

from flor.modules.plant_management.domain.models import PlantDraft
from flor.shared.core.exceptions import ConflictError, NotFoundError, ValidationError

from ..conftest import NOW, OTHER_USER_ID, USER_ID


class TestRoomService:

    async def test_create_and_list_sorted_by_name(self, room_service):
        await room_service.create_room(USER_ID, "  Living Room ")
        await room_service.create_room(USER_ID, "Bedroom")
        await room_service.create_room(OTHER_USER_ID, "Attic")

        rooms = await room_service.list_rooms(USER_ID)

        assert [r.name for r in rooms] == ["Bedroom", "Living Room"]

    @pytest.mark.parametrize("name", ["", "  ", "x" * 51])
    async def test_invalid_names_rejected(self, room_service, name):
        with pytest.raises(ValidationError):
            await room_service.create_room(USER_ID, name)

    async def test_rename(self, room_service):
        room = await room_service.create_room(USER_ID, "Kitchen")

        renamed = await room_service.rename_room(room.id, USER_ID, "Balcony")

        assert renamed.name == "Balcony"

    async def test_cannot_touch_other_users_room(self, room_service):
        room = await room_service.create_room(OTHER_USER_ID, "Kitchen")

        with pytest.raises(NotFoundError):
            await room_service.rename_room(room.id, USER_ID, "Mine")
        with pytest.raises(NotFoundError):
            await room_service.delete_room(room.id, USER_ID)

    async def test_delete_room_with_plants_conflicts(self, room_service, plant_service, store):
        room = await room_service.create_room(USER_ID, "Kitchen")
        for name in ("Basil", "Mint"):
            await plant_service.create_plant(USER_ID, PlantDraft(name=name, watering_frequency_days=2, room_id=room.id))

        with pytest.raises(ConflictError) as exc_info:
            await room_service.delete_room(room.id, USER_ID)

        assert exc_info.value.message == "Cannot delete room with 2 plants. Move plants to another room first."
        assert room.id in store.rooms.rooms

    async def test_delete_empty_room(self, room_service, store):
        room = await room_service.create_room(USER_ID, "Kitchen")

        await room_service.delete_room(room.id, USER_ID)

        assert store.rooms.rooms == {}


class TestWateringService:

    async def test_record_defaults_to_now(self, watering_service, plant_service):
        plant = await plant_service.create_plant(USER_ID, PlantDraft(name="Fern", watering_frequency_days=3))

        entry = await watering_service.record_watering(plant.id, USER_ID)

        assert entry.plant_id == plant.id
        assert entry.watered_at == NOW

    async def test_record_with_explicit_time(self, watering_service, plant_service):
        plant = await plant_service.create_plant(USER_ID, PlantDraft(name="Fern", watering_frequency_days=3))
        yesterday = NOW - timedelta(days=1)

        entry = await watering_service.record_watering(plant.id, USER_ID, watered_at=yesterday)

        assert entry.watered_at == yesterday
        assert entry.created_at == NOW

    async def test_record_for_foreign_plant_is_not_found(self, watering_service, plant_service, store):
        plant = await plant_service.create_plant(OTHER_USER_ID, PlantDraft(name="Fern", watering_frequency_days=3))

        with pytest.raises(NotFoundError):
            await watering_service.record_watering(plant.id, USER_ID)

        assert store.waterings.entries == []

    async def test_history_is_newest_first_and_limited(self, watering_service, plant_service):
        plant = await plant_service.create_plant(USER_ID, PlantDraft(name="Fern", watering_frequency_days=3))
        for days_ago in range(5):
            await watering_service.record_watering(plant.id, USER_ID, watered_at=NOW - timedelta(days=days_ago))

        history = await watering_service.get_watering_history(plant.id, USER_ID, limit=3)

        assert [h.watered_at for h in history] == [NOW - timedelta(days=d) for d in range(3)]

    async def test_history_of_foreign_plant_is_empty(self, watering_service, plant_service):
        plant = await plant_service.create_plant(OTHER_USER_ID, PlantDraft(name="Fern", watering_frequency_days=3))
        await watering_service.record_watering(plant.id, OTHER_USER_ID)

        assert await watering_service.get_watering_history(plant.id, USER_ID) == []

    async def test_watering_resets_status(self, watering_service, plant_service):
        plant = await plant_service.create_plant(USER_ID, PlantDraft(name="Fern", watering_frequency_days=3))
        await watering_service.record_watering(plant.id, USER_ID, watered_at=NOW - timedelta(days=5))
        assert (await plant_service.get_plant(plant.id, USER_ID)).is_overdue is True

        await watering_service.record_watering(plant.id, USER_ID)

        details = await plant_service.get_plant(plant.id, USER_ID)
        assert details.is_overdue is False
        assert details.days_until_watering == 3
