"""Artist registration form submission."""

from __future__ import annotations

import logging

import httpx

from booker.client import PortalClient
from booker.config import ApplicantDetails, BookingConstants, PortalDetails
from booker.debug import DebugRecorder, snapshot_name
from booker.encoding import build_form_data
from booker.exceptions import RegistrationError
from booker.schedule import ReservationEntry

logger = logging.getLogger(__name__)

# Fields the registration handler decodes as ISO-8859-1
LATIN1_FIELDS = frozenset({"c"})


class RegistrationService:
    """Submits one registration form per reservation entry."""

    def __init__(
        self,
        client: PortalClient,
        applicant: ApplicantDetails,
        portal: PortalDetails | None = None,
        *,
        recorder: DebugRecorder | None = None,
    ) -> None:
        self.client = client
        self.applicant = applicant
        self.portal = portal or PortalDetails()
        self.recorder = recorder or DebugRecorder()

    def build_payload(self, entry: ReservationEntry) -> dict[str, str]:
        """
        Build the registration form fields for an entry.

        Raises:
            RegistrationError: If the applicant has no email to register with
        """
        if not self.applicant.artist_email:
            raise RegistrationError("Artist email is not configured")

        return {
            "nomecomercial": self.applicant.commercial_name,
            "tabela": self.applicant.table,
            "a": self.applicant.artist_name,
            "b": self.applicant.artist_email,
            "g": entry.date,
            "c": entry.location,
            "i": entry.time_slot,
        }

    def headers(self) -> dict[str, str]:
        return {
            "Content-Type": BookingConstants.LATIN1_FORM_CONTENT_TYPE,
            "Referer": self.portal.timeline_url,
            "Origin": self.portal.origin,
            "Accept-Charset": BookingConstants.ACCEPT_CHARSET,
            "Cache-Control": "no-cache",
            "Pragma": "no-cache",
        }

    async def submit(self, entry: ReservationEntry) -> httpx.Response:
        """
        Submit the registration form for one entry.

        Args:
            entry: Date, location and time slot to register

        Returns:
            The portal's response; callers decide success from the status

        Raises:
            httpx.HTTPError: If the request fails
        """
        form_body = build_form_data(self.build_payload(entry), LATIN1_FIELDS)
        logger.debug(f"Submitting form with mixed encoding: {form_body}")

        name = snapshot_name("registration", entry.date, entry.location, entry.time_slot)
        try:
            response = await self.client.post(
                self.portal.registration_url,
                content=form_body,
                headers=self.headers(),
            )
        except httpx.HTTPError as e:
            self.recorder.save_error(name, self.portal.registration_url, e)
            raise

        self.recorder.save_response(name, response, request_body=form_body)
        return response
