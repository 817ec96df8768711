"""
Command line entry point for the Animalagos booking client.

Credentials come from ANIMALAGOS_EMAIL / ANIMALAGOS_PASSWORD (environment or
booker/.env). Schedules are picked by name, see schedule_loader.
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from booker.auth import Authenticator, Credentials
from booker.client import PortalClient
from booker.config import ApplicantDetails, LoginDetails, PortalDetails, RunSettings
from booker.debug import DebugRecorder
from booker.exceptions import AuthenticationError, ScheduleError
from booker.locations import discover_locations, unmatched_locations
from booker.registration import RegistrationService
from booker.schedule import ReservationEntry, weekday_name
from booker.schedule_loader import (
    get_schedule,
    list_available_schedules,
    validate_schedule,
)
from booker.scheduler import ReservationScheduler

logger = logging.getLogger(__name__)


def load_credentials() -> Credentials | None:
    try:
        return Credentials.from_settings(LoginDetails())
    except ValidationError:
        print("❌ Missing ANIMALAGOS_EMAIL and/or ANIMALAGOS_PASSWORD")
        return None


def load_applicant(credentials: Credentials) -> ApplicantDetails:
    applicant = ApplicantDetails()
    if not applicant.artist_email:
        applicant = applicant.model_copy(update={"artist_email": credentials.email})
    return applicant


async def run_schedule(
    entries: list[ReservationEntry],
    credentials: Credentials,
    settings: RunSettings,
) -> bool:
    """
    Log in and submit the given entries.

    Returns:
        True if every entry was submitted successfully
    """
    portal = PortalDetails()
    recorder = DebugRecorder(settings.debug_dir)

    async with PortalClient() as client:
        authenticator = Authenticator(client, portal, recorder=recorder)
        registration = RegistrationService(
            client, load_applicant(credentials), portal, recorder=recorder
        )
        scheduler = ReservationScheduler(
            authenticator,
            registration,
            entries,
            delay_seconds=settings.request_delay_seconds,
        )

        try:
            summary = await scheduler.run(credentials)
        except AuthenticationError as e:
            print(f"❌ {e}")
            return False

    print(f"📊 Success: {summary.succeeded}, Failures: {summary.failed}")
    return summary.failed == 0


async def check_session(credentials: Credentials, settings: RunSettings) -> bool:
    recorder = DebugRecorder(settings.debug_dir)
    async with PortalClient() as client:
        authenticator = Authenticator(client, recorder=recorder)
        try:
            if not await authenticator.login(credentials):
                print("❌ Login failed")
                return False
        except AuthenticationError as e:
            print(f"❌ {e}")
            return False

        is_valid = await authenticator.validate_session()
        print(f"{'✅' if is_valid else '❌'} Session is {'valid' if is_valid else 'invalid'}")
        return is_valid


async def show_locations(
    credentials: Credentials,
    settings: RunSettings,
    date: str,
    place: str,
    entries: list[ReservationEntry] | None = None,
) -> bool:
    """
    Log in, list the locations of the timeline page and flag schedule
    locations the page does not offer.

    Returns:
        True if locations were found and every schedule location matches one
    """
    recorder = DebugRecorder(settings.debug_dir)
    async with PortalClient() as client:
        authenticator = Authenticator(client, recorder=recorder)
        try:
            if not await authenticator.login(credentials):
                print("❌ Login failed")
                return False
        except AuthenticationError as e:
            print(f"❌ {e}")
            return False

        locations = await discover_locations(client, date, place, recorder=recorder)

    if not locations:
        print("⚠️  No locations discoverable")
        return False

    print(f"📍 {len(locations)} locations:")
    for location in locations:
        print(f"  {location.id:>4}  {location.name}")

    missing = unmatched_locations(locations, [entry.location for entry in entries or []])
    for name in missing:
        print(f"⚠️  Schedule location not on the page: {name}")
    return not missing


def print_entries(entries: list[ReservationEntry]) -> None:
    print(f"📋 {len(entries)} reservations:")
    for index, entry in enumerate(entries, start=1):
        print(f"  {index:>3}. {weekday_name(entry.day.weekday()):<14} {entry}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Animalagos street artist slot booking",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                              # Book the default weekly schedule
  %(prog)s --schedule weekend           # Use booker/weekend_schedule.py
  %(prog)s --dry-run                    # Show the entries without booking
  %(prog)s --list-schedules             # List available schedules
  %(prog)s --check-session              # Log in and validate the session
  %(prog)s --discover 31-03-2025 "Praça Gil Eanes"
  %(prog)s --discover 31-03-2025 "Praça Gil Eanes" --schedule weekend
                                        # ...and flag weekend locations not listed
        """,
    )

    parser.add_argument("--schedule", type=str, help="Schedule name to book")
    parser.add_argument(
        "--list-schedules", action="store_true", help="List all available schedules"
    )
    parser.add_argument("--validate", type=str, help="Validate a schedule by name")
    parser.add_argument(
        "--dry-run", action="store_true", help="Print the entries without booking"
    )
    parser.add_argument(
        "--check-session", action="store_true", help="Log in and validate the session"
    )
    parser.add_argument(
        "--discover",
        nargs=2,
        metavar=("DATE", "PLACE"),
        help=(
            "List the locations on the timeline page for DATE (DD-MM-YYYY); "
            "with --schedule, also flag schedule locations not on the page"
        ),
    )
    parser.add_argument(
        "--delay", type=float, help="Seconds to wait between reservations"
    )
    parser.add_argument(
        "--debug-dir", type=Path, help="Write request/response snapshots here"
    )
    parser.add_argument("--log-level", type=str, help="Logging level")
    return parser


def schedule_name_arg(name: str | None) -> str | None:
    return name if name != "schedule" else None


def main(argv: list[str] | None = None) -> int:
    """Main entry point with argument parsing."""
    args = build_parser().parse_args(argv)

    settings = RunSettings()
    updates = {
        key: value
        for key, value in {
            "request_delay_seconds": args.delay,
            "debug_dir": args.debug_dir,
            "log_level": args.log_level,
        }.items()
        if value is not None
    }
    settings = settings.model_copy(update=updates)

    logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))

    if args.list_schedules:
        print("📋 Available schedules:")
        for name in list_available_schedules():
            status = "✅" if validate_schedule(schedule_name_arg(name)) else "❌"
            print(f"  {status} {name}")
        return 0

    if args.validate:
        is_valid = validate_schedule(schedule_name_arg(args.validate))
        print(f"{'✅' if is_valid else '❌'} Schedule '{args.validate}' is {'valid' if is_valid else 'invalid'}")
        return 0 if is_valid else 1

    entries = []
    # --discover only checks locations against a schedule that was asked for
    if not (args.check_session or (args.discover and not args.schedule)):
        try:
            entries = get_schedule(schedule_name_arg(args.schedule))
        except ScheduleError as e:
            print(f"❌ {e}")
            return 1

        if args.dry_run and not args.discover:
            print_entries(entries)
            return 0

    credentials = load_credentials()
    if credentials is None:
        return 1

    try:
        if args.check_session:
            ok = asyncio.run(check_session(credentials, settings))
        elif args.discover:
            date, place = args.discover
            ok = asyncio.run(show_locations(credentials, settings, date, place, entries))
        else:
            print(f"📋 Using schedule: {args.schedule or 'default'} ({len(entries)} entries)")
            ok = asyncio.run(run_schedule(entries, credentials, settings))
    except KeyboardInterrupt:
        print("\n👋 Cancelled by user")
        return 1

    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
