"""
Schedule loader that supports multiple schedule files.

This module allows loading different schedules for different booking periods.
A schedule file is ``booker/<name>_schedule.py`` exposing ``build_schedule()``.
"""

import importlib.util
import logging
from pathlib import Path
from types import ModuleType

from booker.exceptions import ScheduleError
from booker.schedule import ReservationEntry

logger = logging.getLogger(__name__)

SCHEDULE_DIR = Path(__file__).parent


def load_schedule_module(schedule_name: str | None = None) -> ModuleType:
    """
    Load a schedule module by name.

    Args:
        schedule_name: Name of the schedule (file ``<name>_schedule.py``),
            or None for the default schedule

    Returns:
        The loaded schedule module

    Raises:
        ScheduleError: If the schedule file doesn't exist or can't be imported
    """
    if schedule_name is None:
        from booker import schedule

        return schedule

    schedule_path = SCHEDULE_DIR / f"{schedule_name}_schedule.py"

    if not schedule_path.exists():
        raise ScheduleError(f"Schedule file not found: {schedule_path}")

    spec = importlib.util.spec_from_file_location(
        f"booker.{schedule_name}_schedule", schedule_path
    )
    if spec is None or spec.loader is None:
        raise ScheduleError(f"Could not load schedule from {schedule_path}")

    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        raise ScheduleError(f"Could not load schedule from {schedule_path}: {e}") from e

    return module


def get_schedule(schedule_name: str | None = None) -> list[ReservationEntry]:
    """
    Build the reservation entries of the specified schedule.

    Raises:
        ScheduleError: If the module has no build_schedule() or it returns
            something other than reservation entries
    """
    module = load_schedule_module(schedule_name)

    build = getattr(module, "build_schedule", None)
    if not callable(build):
        raise ScheduleError(
            f"Schedule '{schedule_name or 'default'}' has no build_schedule()"
        )

    entries = list(build())
    for entry in entries:
        if not isinstance(entry, ReservationEntry):
            raise ScheduleError(
                f"Schedule '{schedule_name or 'default'}' returned {entry!r}, "
                "expected ReservationEntry"
            )
    return entries


def list_available_schedules() -> list[str]:
    """
    List all available schedule names.

    Returns:
        "schedule" for the default plus the names of ``*_schedule.py`` files
    """
    names = []

    if (SCHEDULE_DIR / "schedule.py").exists():
        names.append("schedule")

    for schedule_file in SCHEDULE_DIR.glob("*_schedule.py"):
        names.append(schedule_file.stem.removesuffix("_schedule"))

    return sorted(names)


def validate_schedule(schedule_name: str | None = None) -> bool:
    """
    Validate that a schedule loads and builds.

    Returns:
        True if schedule is valid, False otherwise
    """
    try:
        entries = get_schedule(schedule_name)
    except ScheduleError as e:
        logger.error(f"Schedule validation failed: {e}")
        return False

    logger.info(f"Schedule '{schedule_name or 'default'}' has {len(entries)} entries")
    return True
