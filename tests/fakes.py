"""
In-memory stand-ins for repositories, storage and AI clients used by the tests.
"""

from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from flor.modules.ai_assistant.domain.models import AIFeedback
from flor.modules.ai_assistant.domain.repository import AIFeedbackRepository
from flor.modules.plant_management.domain.models import Plant, Room, WateringHistory
from flor.modules.plant_management.domain.repositories import (
    PlantRepository,
    RoomRepository,
    WateringRepository,
)
from flor.modules.usage_limits.domain.repository import UsageLimitRepository
from flor.shared.core.exceptions import DatabaseError, NotFoundError


class InMemoryPlantRepository(PlantRepository):
    def __init__(self):
        self.plants: Dict[str, Plant] = {}
        self.fail_reads = False

    async def create(self, plant: Plant) -> Plant:
        self.plants[plant.id] = plant
        return plant

    async def get_by_id(self, plant_id: str) -> Optional[Plant]:
        return self.plants.get(plant_id)

    async def list_by_user(self, user_id: str, room_id: Optional[str] = None) -> List[Plant]:
        if self.fail_reads:
            raise DatabaseError("connection refused", operation="select", table="plants")
        plants = [
            p for p in self.plants.values()
            if p.user_id == user_id and (room_id is None or p.room_id == room_id)
        ]
        return sorted(plants, key=lambda p: p.updated_at, reverse=True)

    async def update(self, plant_id: str, values: Dict[str, Any]) -> Plant:
        plant = self.plants.get(plant_id)
        if plant is None:
            raise NotFoundError("Plant not found", resource_type="plant", resource_id=plant_id)
        updated = plant.model_copy(update=values)
        self.plants[plant_id] = updated
        return updated

    async def delete(self, plant_id: str) -> None:
        self.plants.pop(plant_id, None)

    async def count_by_user(self, user_id: str) -> int:
        return sum(1 for p in self.plants.values() if p.user_id == user_id)

    async def count_in_room(self, room_id: str, user_id: str) -> int:
        return sum(1 for p in self.plants.values() if p.room_id == room_id and p.user_id == user_id)


class InMemoryRoomRepository(RoomRepository):
    def __init__(self):
        self.rooms: Dict[str, Room] = {}

    async def create(self, room: Room) -> Room:
        self.rooms[room.id] = room
        return room

    async def get_for_user(self, room_id: str, user_id: str) -> Optional[Room]:
        room = self.rooms.get(room_id)
        return room if room is not None and room.user_id == user_id else None

    async def list_by_user(self, user_id: str) -> List[Room]:
        return sorted((r for r in self.rooms.values() if r.user_id == user_id), key=lambda r: r.name)

    async def get_names(self, room_ids: Iterable[str]) -> Dict[str, str]:
        return {room_id: self.rooms[room_id].name for room_id in room_ids if room_id in self.rooms}

    async def rename(self, room_id: str, name: str) -> Room:
        room = self.rooms[room_id].model_copy(update={"name": name})
        self.rooms[room_id] = room
        return room

    async def delete(self, room_id: str) -> None:
        self.rooms.pop(room_id, None)


class InMemoryWateringRepository(WateringRepository):
    def __init__(self):
        self.entries: List[WateringHistory] = []

    async def add(self, entry: WateringHistory) -> WateringHistory:
        self.entries.append(entry)
        return entry

    async def list_for_plant(self, plant_id: str, limit: int = 10) -> List[WateringHistory]:
        entries = [e for e in self.entries if e.plant_id == plant_id]
        return sorted(entries, key=lambda e: e.watered_at, reverse=True)[:limit]

    async def last_watered_at(self, plant_ids: Iterable[str]) -> Dict[str, Optional[datetime]]:
        result: Dict[str, Optional[datetime]] = {plant_id: None for plant_id in plant_ids}
        for entry in self.entries:
            if entry.plant_id in result:
                current = result[entry.plant_id]
                if current is None or entry.watered_at > current:
                    result[entry.plant_id] = entry.watered_at
        return result


class InMemoryUsageRepository(UsageLimitRepository):
    """Monthly counters keyed by (user_id, month); plant counts come from the plant repository."""

    def __init__(self, plant_repository: InMemoryPlantRepository):
        self.plant_repository = plant_repository
        self.counters: Dict[tuple, int] = {}
        self.fail_reads = False
        self.fail_writes = False
        self.read_error: Optional[BaseException] = None

    async def get_ai_generations(self, user_id: str, month_year: str) -> int:
        if self.read_error is not None:
            raise self.read_error
        if self.fail_reads:
            raise DatabaseError("usage store unavailable", operation="select", table="usage_limits")
        return self.counters.get((user_id, month_year), 0)

    async def increment_ai_generations(self, user_id: str, month_year: str) -> int:
        if self.fail_writes:
            raise DatabaseError("usage store unavailable", operation="upsert", table="usage_limits")
        key = (user_id, month_year)
        self.counters[key] = self.counters.get(key, 0) + 1
        return self.counters[key]

    async def count_plants(self, user_id: str) -> int:
        if self.read_error is not None:
            raise self.read_error
        if self.fail_reads:
            raise DatabaseError("usage store unavailable", operation="count", table="plants")
        return await self.plant_repository.count_by_user(user_id)


class InMemoryFeedbackRepository(AIFeedbackRepository):
    def __init__(self):
        self.items: List[AIFeedback] = []
        self.fail = False

    async def add(self, feedback: AIFeedback) -> AIFeedback:
        if self.fail:
            raise DatabaseError("insert failed", operation="insert", table="ai_feedback")
        self.items.append(feedback)
        return feedback


class FakeBucket:
    """Mimics the supabase storage bucket calls used by PlantPhotoStorage."""

    public_base = "https://project.supabase.co/storage/v1/object/public/plant-photos"

    def __init__(self):
        self.objects: Dict[str, bytes] = {}
        self.removed: List[str] = []
        self.fail_upload = False
        self.fail_remove = False

    def upload(self, path: str, file: bytes, file_options: Optional[Dict[str, str]] = None):
        if self.fail_upload:
            raise RuntimeError("bucket unavailable")
        self.objects[path] = file
        return {"Key": f"plant-photos/{path}"}

    def get_public_url(self, path: str) -> str:
        return f"{self.public_base}/{path}"

    def remove(self, paths: List[str]):
        if self.fail_remove:
            raise RuntimeError("bucket unavailable")
        for path in paths:
            self.objects.pop(path, None)
            self.removed.append(path)
        return paths


class ScriptedCall:
    """
    Async callable that replays a script of results and exceptions.

    Each call consumes the next item; exceptions are raised, anything else
    is returned.
    """

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = 0

    async def __call__(self, *args, **kwargs):
        self.calls += 1
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


class ScriptedIdentifier:
    def __init__(self, *outcomes):
        self.identify = ScriptedCall(*outcomes)


class ScriptedCareGenerator:
    def __init__(self, *outcomes):
        self.generate = ScriptedCall(*outcomes)
