from datetime import timedelta

import pytest

from flor.modules.plant_management.domain.models import (
    Plant,
    PlantChanges,
    PlantDraft,
    PlantSortOption,
    Room,
    WateringHistory,
)
from flor.shared.core.exceptions import NotFoundError, ValidationError

from ..conftest import NOW, OTHER_USER_ID, USER_ID, make_image

KITCHEN_ID = "0b6f8e2a-9c1d-4f3e-8a7b-6c5d4e3f2a1b"


async def water(store, plant_id, days_ago):
    at = NOW - timedelta(days=days_ago)
    await store.waterings.add(WateringHistory(id=f"w-{plant_id}-{days_ago}", plant_id=plant_id, watered_at=at))


async def add_room(store, room_id=KITCHEN_ID, user_id=USER_ID, name="Kitchen"):
    await store.rooms.create(Room(id=room_id, user_id=user_id, name=name))


class TestCreatePlant:

    async def test_trims_name_and_stores_plant(self, plant_service, store):
        plant = await plant_service.create_plant(USER_ID, PlantDraft(name="  Pothos  ", watering_frequency_days=7))

        assert plant.name == "Pothos"
        assert plant.user_id == USER_ID
        assert plant.created_with_ai is False
        assert plant.created_at == NOW
        assert store.plants.plants[plant.id] == plant

    @pytest.mark.parametrize("name", ["", "   "])
    async def test_blank_name_rejected(self, plant_service, name):
        with pytest.raises(ValidationError, match="Plant name is required"):
            await plant_service.create_plant(USER_ID, PlantDraft(name=name, watering_frequency_days=7))

    async def test_name_longer_than_100_rejected(self, plant_service):
        with pytest.raises(ValidationError, match="100 characters or less"):
            await plant_service.create_plant(USER_ID, PlantDraft(name="x" * 101, watering_frequency_days=7))

    @pytest.mark.parametrize("days", [0, 366, -4])
    async def test_frequency_out_of_range_rejected(self, plant_service, days):
        with pytest.raises(ValidationError, match="between 1 and 365 days"):
            await plant_service.create_plant(USER_ID, PlantDraft(name="Fern", watering_frequency_days=days))

    @pytest.mark.parametrize("days", [1, 365])
    async def test_frequency_bounds_accepted(self, plant_service, days):
        plant = await plant_service.create_plant(USER_ID, PlantDraft(name="Fern", watering_frequency_days=days))

        assert plant.watering_frequency_days == days

    async def test_room_of_another_user_rejected(self, plant_service, store):
        await add_room(store, user_id=OTHER_USER_ID)

        with pytest.raises(NotFoundError, match="Room not found"):
            await plant_service.create_plant(
                USER_ID, PlantDraft(name="Fern", watering_frequency_days=3, room_id=KITCHEN_ID)
            )


class TestOwnership:

    async def test_other_users_plant_is_not_found(self, plant_service):
        plant = await plant_service.create_plant(OTHER_USER_ID, PlantDraft(name="Cactus", watering_frequency_days=21))

        with pytest.raises(NotFoundError, match="Plant not found or unauthorized"):
            await plant_service.get_plant(plant.id, USER_ID)
        with pytest.raises(NotFoundError):
            await plant_service.update_plant(plant.id, USER_ID, PlantChanges(name="Mine now"))
        with pytest.raises(NotFoundError):
            await plant_service.delete_plant(plant.id, USER_ID)


class TestUpdatePlant:

    async def test_only_given_fields_change(self, plant_service):
        plant = await plant_service.create_plant(
            USER_ID, PlantDraft(name="Monstera", watering_frequency_days=7, light_requirements="Bright")
        )

        updated = await plant_service.update_plant(plant.id, USER_ID, PlantChanges(watering_frequency_days=10))

        assert updated.watering_frequency_days == 10
        assert updated.name == "Monstera"
        assert updated.light_requirements == "Bright"

    async def test_explicit_null_room_unassigns(self, plant_service, store):
        await add_room(store)
        plant = await plant_service.create_plant(
            USER_ID, PlantDraft(name="Monstera", watering_frequency_days=7, room_id=KITCHEN_ID)
        )

        updated = await plant_service.update_plant(plant.id, USER_ID, PlantChanges(room_id=None))

        assert updated.room_id is None

    async def test_invalid_new_name_rejected(self, plant_service):
        plant = await plant_service.create_plant(USER_ID, PlantDraft(name="Monstera", watering_frequency_days=7))

        with pytest.raises(ValidationError):
            await plant_service.update_plant(plant.id, USER_ID, PlantChanges(name=" "))


class TestQueries:

    async def test_list_is_enriched_and_sorted(self, plant_service, store):
        await add_room(store)
        overdue = await plant_service.create_plant(
            USER_ID, PlantDraft(name="Overdue", watering_frequency_days=7, room_id=KITCHEN_ID)
        )
        fresh = await plant_service.create_plant(USER_ID, PlantDraft(name="Fresh", watering_frequency_days=7))
        never = await plant_service.create_plant(USER_ID, PlantDraft(name="Never", watering_frequency_days=7))
        await water(store, overdue.id, days_ago=10)
        await water(store, fresh.id, days_ago=1)

        plants = await plant_service.get_user_plants(USER_ID)

        assert [p.name for p in plants] == ["Overdue", "Fresh", "Never"]
        assert plants[0].room_name == "Kitchen"
        assert plants[0].days_until_watering == -3
        assert plants[0].is_overdue is True
        assert plants[1].days_until_watering == 6
        assert plants[2].last_watered_date is None
        assert plants[2].next_watering_date is None
        assert never.id == plants[2].id

    async def test_name_sort_ignores_case(self, plant_service, store):
        fern = await plant_service.create_plant(USER_ID, PlantDraft(name="fern", watering_frequency_days=7))
        await plant_service.create_plant(USER_ID, PlantDraft(name="Aloe", watering_frequency_days=7))
        await plant_service.create_plant(USER_ID, PlantDraft(name="basil", watering_frequency_days=7))
        await water(store, fern.id, days_ago=30)

        plants = await plant_service.get_user_plants(USER_ID, sort=PlantSortOption.NAME)

        assert [p.name for p in plants] == ["Aloe", "basil", "fern"]

    async def test_room_filter(self, plant_service, store):
        await add_room(store)
        await plant_service.create_plant(USER_ID, PlantDraft(name="In kitchen", watering_frequency_days=7, room_id=KITCHEN_ID))
        await plant_service.create_plant(USER_ID, PlantDraft(name="Elsewhere", watering_frequency_days=7))

        plants = await plant_service.get_user_plants(USER_ID, room_id=KITCHEN_ID)

        assert [p.name for p in plants] == ["In kitchen"]

    async def test_details_include_latest_history_first(self, plant_service, store):
        plant = await plant_service.create_plant(USER_ID, PlantDraft(name="Pothos", watering_frequency_days=7))
        for days_ago in (1, 15, 8):
            await water(store, plant.id, days_ago)

        details = await plant_service.get_plant(plant.id, USER_ID)

        assert [h.watered_at for h in details.watering_history] == [
            NOW - timedelta(days=1),
            NOW - timedelta(days=8),
            NOW - timedelta(days=15),
        ]
        assert details.last_watered_date == NOW - timedelta(days=1)

    async def test_plants_needing_water(self, plant_service, store):
        due_today = await plant_service.create_plant(USER_ID, PlantDraft(name="Today", watering_frequency_days=7))
        overdue = await plant_service.create_plant(USER_ID, PlantDraft(name="Late", watering_frequency_days=7))
        fine = await plant_service.create_plant(USER_ID, PlantDraft(name="Fine", watering_frequency_days=7))
        await plant_service.create_plant(USER_ID, PlantDraft(name="Never", watering_frequency_days=7))
        await water(store, due_today.id, days_ago=7)
        await water(store, overdue.id, days_ago=9)
        await water(store, fine.id, days_ago=2)

        needing = await plant_service.get_plants_needing_water(USER_ID)

        assert [(p.plant_name, p.days_overdue) for p in needing] == [("Late", 2), ("Today", 0)]
        assert needing[0].next_watering == NOW - timedelta(days=2)

    async def test_plants_needing_water_is_empty_on_read_failure(self, plant_service, store):
        store.plants.fail_reads = True

        assert await plant_service.get_plants_needing_water(USER_ID) == []


class TestPhotos:

    async def test_replace_photo_uploads_and_removes_previous(self, plant_service, store):
        plant = await plant_service.create_plant(USER_ID, PlantDraft(name="Pothos", watering_frequency_days=7))

        first = await plant_service.replace_photo(plant.id, USER_ID, make_image())
        second = await plant_service.replace_photo(plant.id, USER_ID, make_image("JPEG"))

        assert second.photo_url != first.photo_url
        assert second.photo_url.startswith(store.bucket.public_base + f"/{USER_ID}/")
        assert len(store.bucket.objects) == 1
        assert store.bucket.removed == [first.photo_url.split("plant-photos/")[1]]

    async def test_delete_plant_removes_photo(self, plant_service, store):
        plant = await plant_service.create_plant(USER_ID, PlantDraft(name="Pothos", watering_frequency_days=7))
        plant = await plant_service.replace_photo(plant.id, USER_ID, make_image())

        await plant_service.delete_plant(plant.id, USER_ID)

        assert plant.id not in store.plants.plants
        assert store.bucket.objects == {}

    async def test_delete_plant_leaves_other_users_photos_alone(self, plant_service, store):
        victim_path = f"{OTHER_USER_ID}/abc.jpg"
        store.bucket.objects[victim_path] = b"jpeg"
        plant = Plant(
            id="legacy-plant",
            user_id=USER_ID,
            name="Pothos",
            watering_frequency_days=7,
            photo_url=f"{store.bucket.public_base}/{victim_path}",
        )
        store.plants.plants[plant.id] = plant

        await plant_service.delete_plant(plant.id, USER_ID)

        assert plant.id not in store.plants.plants
        assert store.bucket.removed == []
        assert victim_path in store.bucket.objects

    async def test_delete_plant_survives_storage_failure(self, plant_service, store):
        plant = await plant_service.create_plant(USER_ID, PlantDraft(name="Pothos", watering_frequency_days=7))
        plant = await plant_service.replace_photo(plant.id, USER_ID, make_image())
        store.bucket.fail_remove = True

        await plant_service.delete_plant(plant.id, USER_ID)

        assert plant.id not in store.plants.plants
