"""
Login flow for the portal's artist area.

The portal gives no positive confirmation of a login (no token, no profile
payload), so success is inferred from where the login POST ends up. The
inference lives behind LoginSuccessCheck / SessionCheck so it can be swapped
once a better signal is known.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Protocol

import httpx
from bs4 import BeautifulSoup

from booker.client import PortalClient
from booker.config import BookingConstants, LoginDetails, PortalDetails
from booker.debug import DebugRecorder
from booker.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

HIDDEN_FIELDS = ("__VIEWSTATE", "__VIEWSTATEGENERATOR", "__EVENTVALIDATION")


@dataclass(frozen=True)
class Credentials:
    email: str
    password: str

    @classmethod
    def from_settings(cls, settings: LoginDetails) -> Credentials:
        return cls(
            email=settings.animalagos_email, password=settings.animalagos_password
        )

    def __repr__(self) -> str:
        return f"Credentials(email={self.email!r}, password='***')"


class AuthState(enum.Enum):
    UNAUTHENTICATED = "unauthenticated"
    LOGIN_PAGE_FETCHED = "login-page-fetched"
    FORM_SUBMITTED = "form-submitted"
    AUTHENTICATED = "authenticated"
    FAILED = "failed"


class LoginSuccessCheck(Protocol):
    """Decides whether a login POST response means we are logged in."""

    def __call__(self, response: httpx.Response) -> bool: ...


class SessionCheck(Protocol):
    """Decides whether a non-redirected login page request means we are logged in."""

    def __call__(self, response: httpx.Response) -> bool: ...


def is_login_url(url: str | httpx.URL) -> bool:
    return "login" in str(url).lower()


def final_url_check(response: httpx.Response) -> bool:
    """Logged in if the POST ended on a 200 page that is not a login page."""
    return response.status_code == 200 and not is_login_url(response.url)


def redirect_session_check(response: httpx.Response) -> bool:
    """Logged in if the login page redirects us away, or is not a login page."""
    if response.status_code == 302:
        return True
    return response.status_code == 200 and not is_login_url(response.url)


def extract_hidden_fields(html: str) -> dict[str, str]:
    """
    Extract the ASP.NET hidden state fields from a form page.

    Args:
        html: Login page markup

    Returns:
        Field name to value for every field found; missing fields are omitted
    """
    soup = BeautifulSoup(html, "html.parser")
    fields = {}
    for name in HIDDEN_FIELDS:
        element = soup.find(id=name)
        if element is not None and element.get("value") is not None:
            fields[name] = element["value"]
    return fields


class Authenticator:
    """Drives the login state machine against one PortalClient."""

    def __init__(
        self,
        client: PortalClient,
        portal: PortalDetails | None = None,
        *,
        success_check: LoginSuccessCheck = final_url_check,
        session_check: SessionCheck = redirect_session_check,
        recorder: DebugRecorder | None = None,
    ) -> None:
        self.client = client
        self.portal = portal or PortalDetails()
        self.success_check = success_check
        self.session_check = session_check
        self.recorder = recorder or DebugRecorder()
        self.state = AuthState.UNAUTHENTICATED

    async def fetch_login_page(self) -> dict[str, str]:
        """
        Load the login pages to pick up session cookies and hidden fields.

        Returns:
            Hidden fields found on the artist login page

        Raises:
            httpx.HTTPError: If either page cannot be fetched
        """
        logger.info(f"Accessing login page {self.portal.login_url}...")
        await self.client.get(self.portal.login_url)

        response = await self.client.get(self.portal.artist_login_url)
        self.recorder.save_response("login_page", response)

        hidden_fields = extract_hidden_fields(response.text)
        logger.info(
            f"Login page status: {response.status_code}, "
            f"hidden fields: {sorted(hidden_fields) or 'none'}, "
            f"cookies: {self.client.session.names()}"
        )

        self.state = AuthState.LOGIN_PAGE_FETCHED
        return hidden_fields

    async def submit_login_form(
        self, credentials: Credentials, hidden_fields: dict[str, str] | None = None
    ) -> bool:
        """
        Post the artist login form.

        Args:
            credentials: Email and password
            hidden_fields: Hidden fields echoed back to the server

        Returns:
            True if the success check accepts the final response

        Raises:
            httpx.HTTPError: If the request fails
        """
        logger.info("Submitting login form...")
        form = {
            "email": credentials.email,
            "password": credentials.password,
            "remember": "on",
            "terms": "on",
            **(hidden_fields or {}),
        }
        headers = {
            "Referer": self.portal.artist_login_url,
            "Origin": self.portal.origin,
        }

        response = await self.client.post(
            self.portal.artist_login_url,
            data=form,
            headers=headers,
            max_redirects=BookingConstants.MAX_REDIRECTS,
        )
        self.state = AuthState.FORM_SUBMITTED
        self.recorder.save_response("login_response", response)

        logger.info(
            f"Login submission to {response.url}, status: {response.status_code}"
        )

        if self.success_check(response):
            self.state = AuthState.AUTHENTICATED
            logger.info("Login successful!")
            return True

        self.state = AuthState.FAILED
        logger.warning(
            f"Login failed - ended on {response.url} with status {response.status_code}"
        )
        return False

    async def login(self, credentials: Credentials) -> bool:
        """
        Run the full login flow from a clean session.

        Args:
            credentials: Email and password

        Returns:
            True if logged in, False if the portal did not accept the login

        Raises:
            AuthenticationError: If the flow fails on a transport error
        """
        logger.info(f"Login attempt for: {credentials.email}")
        self.client.session.clear()
        self.state = AuthState.UNAUTHENTICATED

        try:
            hidden_fields = await self.fetch_login_page()
            return await self.submit_login_form(credentials, hidden_fields)
        except httpx.HTTPError as e:
            self.state = AuthState.FAILED
            self.recorder.save_error("login", self.portal.artist_login_url, e)
            logger.error(f"Authentication error: {e}")
            raise AuthenticationError(f"Authentication failed: {e}") from e

    async def validate_session(self) -> bool:
        """
        Check whether the current cookies still carry a logged-in session.

        Returns:
            True if the session check accepts the raw login page response
        """
        logger.info("Validating session...")
        try:
            response = await self.client.get(
                self.portal.artist_login_url, max_redirects=0
            )
        except httpx.HTTPError as e:
            logger.error(f"Session validation error: {e}")
            return False

        is_valid = self.session_check(response)
        logger.info(
            f"Session validation {'successful' if is_valid else 'failed'} "
            f"(status {response.status_code})"
        )
        return is_valid
