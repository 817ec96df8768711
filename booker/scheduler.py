"""
Sequential reservation runner.

Logs in once, then submits every entry of the schedule in order with a fixed
pause between submissions. One entry failing does not stop the run; failing
to log in does.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime

import httpx

from booker.auth import Authenticator, Credentials
from booker.config import BookingConstants
from booker.exceptions import AuthenticationError, RegistrationError
from booker.registration import RegistrationService
from booker.schedule import ReservationEntry

logger = logging.getLogger(__name__)


@dataclass
class SchedulingResult:
    """Outcome of one submission."""

    entry: ReservationEntry
    success: bool
    status_code: int | None = None
    timestamp: datetime = field(default_factory=datetime.now)
    error: str | None = None


@dataclass
class ScheduleSummary:
    results: list[SchedulingResult] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if not r.success)


class ReservationScheduler:
    """Runs a schedule of reservation entries against the portal."""

    def __init__(
        self,
        authenticator: Authenticator,
        registration: RegistrationService,
        entries: list[ReservationEntry],
        *,
        delay_seconds: float = BookingConstants.REQUEST_DELAY_SECONDS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.authenticator = authenticator
        self.registration = registration
        self.entries = list(entries)
        self.delay_seconds = delay_seconds
        self.sleep = sleep

    async def submit_entry(self, entry: ReservationEntry) -> SchedulingResult:
        """
        Submit one entry and classify the outcome.

        HTTP 200 is a success; any other status or any error raised while
        building or sending the form is a failure. Nothing is raised.
        """
        try:
            response = await self.registration.submit(entry)
        except (httpx.HTTPError, RegistrationError) as e:
            logger.error(f"Error processing reservation {entry}: {e}")
            return SchedulingResult(entry=entry, success=False, error=str(e))
        except Exception as e:
            logger.exception(f"Unexpected error processing reservation {entry}: {e}")
            return SchedulingResult(entry=entry, success=False, error=str(e))

        if response.status_code == 200:
            logger.info(f"✅ Successfully reserved: {entry}")
            return SchedulingResult(
                entry=entry, success=True, status_code=response.status_code
            )

        logger.warning(
            f"❌ Failed to reserve: {entry}. Status: {response.status_code}"
        )
        return SchedulingResult(
            entry=entry,
            success=False,
            status_code=response.status_code,
            error=f"HTTP {response.status_code}",
        )

    async def process_schedule(self) -> ScheduleSummary:
        """Submit all entries in order, pausing between consecutive ones."""
        summary = ScheduleSummary()
        total = len(self.entries)
        logger.info(f"Processing {total} reservations...")

        for index, entry in enumerate(self.entries):
            if index > 0:
                logger.info(
                    f"Waiting {self.delay_seconds:.1f}s before next reservation..."
                )
                await self.sleep(self.delay_seconds)

            logger.info(f"Processing reservation {index + 1}/{total}: {entry}")
            summary.results.append(await self.submit_entry(entry))

        return summary

    async def run(self, credentials: Credentials) -> ScheduleSummary:
        """
        Log in and process the whole schedule.

        Args:
            credentials: Portal login

        Returns:
            Summary of all submissions

        Raises:
            AuthenticationError: If login fails; no entry is submitted then
        """
        logger.info("Starting reservation scheduler...")

        if not await self.authenticator.login(credentials):
            logger.error("Unable to login. Stopping scheduler.")
            raise AuthenticationError("Login was not accepted by the portal")

        summary = await self.process_schedule()
        log_schedule_summary(summary)
        return summary


def log_schedule_summary(summary: ScheduleSummary) -> None:
    logger.info("Reservation Summary:")
    logger.info(f"  Successful: {summary.succeeded}")
    logger.info(f"  Failed: {summary.failed}")

    for result in summary.results:
        if not result.success:
            logger.warning(f"  Failed {result.entry}: {result.error}")
