"""Saturday and Sunday slots only, for the week after today."""

from booker.schedule import (
    DEFAULT_WEEKLY_PATTERN,
    ReservationEntry,
    expand_weekly_schedule,
    next_week,
)

WEEKEND_PATTERN = [slot for slot in DEFAULT_WEEKLY_PATTERN if slot.weekday >= 5]


def build_schedule() -> list[ReservationEntry]:
    start, end = next_week()
    return expand_weekly_schedule(WEEKEND_PATTERN, start, end)
