# 📄 File: flor/modules/plant_management/domain/services/watering_calculator.py
# 🧭 Purpose (Layman Explanation):
# Works out when each plant should be watered next and turns that into friendly text
# such as "Water today", "Tomorrow" or "3 days overdue".
# 🧪 Purpose (Technical Summary):
# Pure functions deriving WateringStatus from a watering frequency and the last watering
# timestamp, formatting it for display, and ordering plants by next watering date.
# 🔗 Dependencies:
# datetime, math, WateringStatus model
# 🔄 Connected Modules / Calls From:
# plant_service.py (plant lists, details, notifications)

import math
from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional, TypeVar

from ..models.watering import WateringStatus

SECONDS_PER_DAY = 24 * 60 * 60

P = TypeVar("P")


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def calculate_watering_status(
    watering_frequency_days: int,
    last_watered_at: Optional[datetime],
    now: Optional[datetime] = None,
) -> WateringStatus:
    """
    Derive the watering status of a plant.

    A plant that was never watered has no next date and is not overdue.
    Otherwise the next date is the last watering plus the frequency, and
    ``days_until_watering`` is the ceiling of the remaining time in days.
    Zero means due today; only negative values are overdue.
    """
    if last_watered_at is None:
        return WateringStatus(next_watering_date=None, days_until_watering=None, is_overdue=False)

    now = as_utc(now) if now is not None else datetime.now(timezone.utc)
    next_watering_date = as_utc(last_watered_at) + timedelta(days=watering_frequency_days)
    days_until = math.ceil((next_watering_date - now).total_seconds() / SECONDS_PER_DAY)

    return WateringStatus(
        next_watering_date=next_watering_date,
        days_until_watering=days_until,
        is_overdue=days_until < 0,
    )


def format_watering_status(days_until_watering: Optional[int]) -> str:
    if days_until_watering is None:
        return "Not yet watered"
    if days_until_watering < 0:
        return f"{abs(days_until_watering)} days overdue"
    if days_until_watering == 0:
        return "Water today"
    if days_until_watering == 1:
        return "Tomorrow"
    return f"In {days_until_watering} days"


def sort_by_next_watering(plants: Iterable[P]) -> List[P]:
    """
    Order plants soonest-first by ``next_watering_date``.

    Plants without a next date keep their relative order at the end.
    """
    plants = list(plants)
    scheduled = [p for p in plants if getattr(p, "next_watering_date", None) is not None]
    unscheduled = [p for p in plants if getattr(p, "next_watering_date", None) is None]
    scheduled.sort(key=lambda p: as_utc(p.next_watering_date))
    return scheduled + unscheduled
