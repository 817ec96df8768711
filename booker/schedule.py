"""
Reservation entries and the weekly booking pattern.

This is the default schedule module: schedule_loader calls build_schedule()
to get the ordered list of entries for a run. Other schedules live next to
it as ``<name>_schedule.py`` and expose the same function.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta

GIL_EANES = "Praça Gil Eanes"
INFANTE = "Praça do Infante"
GAVETO_LUZ = "Gaveto da rua da Praia e rua José da Conceição Conde, Luz"
PESCADORES_LUZ = "Avenida dos Pescadores, Luz - Zona 2"

WEEKDAY_NAMES = (
    "Segunda-feira",
    "Terça-feira",
    "Quarta-feira",
    "Quinta-feira",
    "Sexta-feira",
    "Sábado",
    "Domingo",
)

# Monday is 0, as in date.weekday()
WEEKDAYS = {
    "monday": 0,
    "tuesday": 1,
    "wednesday": 2,
    "thursday": 3,
    "friday": 4,
    "saturday": 5,
    "sunday": 6,
    "segunda": 0,
    "terca": 1,
    "terça": 1,
    "quarta": 2,
    "quinta": 3,
    "sexta": 4,
    "sabado": 5,
    "sábado": 5,
    "domingo": 6,
    "ponedeljak": 0,
    "utorak": 1,
    "sreda": 2,
    "cetvrtak": 3,
    "petak": 4,
    "subota": 5,
    "nedelja": 6,
}


@dataclass(frozen=True)
class ReservationEntry:
    """One time slot at one location on one day."""

    date: str  # DD-MM-YYYY
    location: str
    time_slot: str  # "17:30 18:00"

    def __str__(self) -> str:
        return f"{self.date} at {self.location} ({self.time_slot})"

    @property
    def day(self) -> date:
        return datetime.strptime(self.date, "%d-%m-%Y").date()


@dataclass(frozen=True)
class WeeklySlot:
    weekday: int
    location: str
    time_slot: str


def parse_weekday(name: str) -> int:
    """
    Resolve a day name (English, Portuguese or Serbian) to a weekday index.

    Raises:
        ValueError: If the name is unknown
    """
    key = name.strip().lower().removesuffix("-feira")
    if key not in WEEKDAYS:
        raise ValueError(f"Unknown day name: {name!r}")
    return WEEKDAYS[key]


def weekday_name(weekday: int) -> str:
    return WEEKDAY_NAMES[weekday]


def format_portal_date(day: date) -> str:
    return day.strftime("%d-%m-%Y")


def _slots(day: str, location: str, *time_slots: str) -> list[WeeklySlot]:
    weekday = parse_weekday(day)
    return [WeeklySlot(weekday, location, slot) for slot in time_slots]


DEFAULT_WEEKLY_PATTERN: list[WeeklySlot] = [
    *_slots("segunda", GIL_EANES, "12:30 13:00", "13:00 13:30"),
    *_slots("segunda", INFANTE, "13:30 14:00", "14:00 14:30"),
    *_slots("segunda", GAVETO_LUZ, "17:00 17:30", "17:30 18:00"),
    *_slots("segunda", PESCADORES_LUZ, "18:00 18:30", "18:30 19:00"),
    *_slots("terca", GIL_EANES, "12:30 13:00", "13:00 13:30"),
    *_slots("terca", INFANTE, "13:30 14:00", "14:00 14:30"),
    *_slots("terca", GAVETO_LUZ, "17:00 17:30", "17:30 18:00"),
    *_slots("terca", PESCADORES_LUZ, "18:00 18:30", "18:30 19:00"),
    *_slots("quarta", GIL_EANES, "14:00 14:30", "14:30 15:00"),
    *_slots("quarta", GAVETO_LUZ, "17:00 17:30", "17:30 18:00"),
    *_slots("quarta", PESCADORES_LUZ, "18:00 18:30", "18:30 19:00"),
    *_slots("quinta", GIL_EANES, "12:30 13:30"),
    *_slots("quinta", INFANTE, "13:30 14:30"),
    *_slots("sexta", GIL_EANES, "12:00 12:30", "12:30 13:00"),
    *_slots("sexta", INFANTE, "13:00 13:30", "13:30 14:00"),
    *_slots("sexta", GAVETO_LUZ, "14:00 14:30", "14:30 15:00"),
    *_slots("sabado", GIL_EANES, "12:30 13:30"),
    *_slots("sabado", INFANTE, "13:30 14:30"),
    *_slots("sabado", GAVETO_LUZ, "17:00 17:30", "17:30 18:00"),
    *_slots("sabado", PESCADORES_LUZ, "18:00 18:30", "18:30 19:00"),
    *_slots("domingo", GIL_EANES, "17:00 17:30", "17:30 18:00"),
    *_slots("domingo", PESCADORES_LUZ, "18:00 18:30", "18:30 19:00"),
]


def expand_weekly_schedule(
    pattern: list[WeeklySlot], start: date, end: date
) -> list[ReservationEntry]:
    """
    Expand a weekly pattern into dated entries.

    Args:
        pattern: Slots per weekday, in the order they should be booked
        start: First day (inclusive)
        end: Last day (inclusive)

    Returns:
        Entries ordered by date, then by pattern order
    """
    entries = []
    day = start
    while day <= end:
        for slot in pattern:
            if slot.weekday == day.weekday():
                entries.append(
                    ReservationEntry(
                        date=format_portal_date(day),
                        location=slot.location,
                        time_slot=slot.time_slot,
                    )
                )
        day += timedelta(days=1)
    return entries


def next_week(today: date | None = None) -> tuple[date, date]:
    """Monday and Sunday of the week after the given day."""
    today = today or date.today()
    monday = today + timedelta(days=7 - today.weekday())
    return monday, monday + timedelta(days=6)


def build_schedule() -> list[ReservationEntry]:
    start, end = next_week()
    return expand_weekly_schedule(DEFAULT_WEEKLY_PATTERN, start, end)
