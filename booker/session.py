"""
Cookie jar for the portal session.

The store is the only holder of session cookies: PortalClient reads the
Cookie header from it before each request and feeds every response back
into it, redirect hops included.
"""

from __future__ import annotations

import logging

import httpx

logger = logging.getLogger(__name__)


class SessionStore:
    """Holds the session cookies keyed by name, domain and path."""

    def __init__(self) -> None:
        self.cookies = httpx.Cookies()

    @property
    def jar(self):
        return self.cookies.jar

    def __len__(self) -> int:
        return len(self.jar)

    def names(self) -> list[str]:
        return [cookie.name for cookie in self.jar]

    def set(self, set_cookie_header: str, url: str) -> bool:
        """
        Store a single Set-Cookie header line.

        Attribute parsing, expiry and domain/path rules are left to the
        cookie jar; a cookie that is already expired removes the stored one.

        Args:
            set_cookie_header: Raw header value, one cookie
            url: URL of the response that carried the header

        Returns:
            True if the jar now holds the cookie, False if it was skipped
        """
        name, sep, _ = set_cookie_header.split(";", 1)[0].partition("=")
        name = name.strip()
        if not sep or not name:
            logger.warning(f"Skipping malformed cookie {set_cookie_header!r}")
            return False

        response = httpx.Response(
            200,
            headers=[("set-cookie", set_cookie_header)],
            request=httpx.Request("GET", url),
        )
        self.cookies.extract_cookies(response)

        if name not in self.names():
            logger.debug(f"Cookie '{name}' was not stored (expired or rejected)")
            return False

        logger.debug(f"Stored cookie '{name}' from {url}")
        return True

    def update_from_response(self, response: httpx.Response) -> int:
        """
        Store every Set-Cookie line of a response.

        Returns:
            Number of cookies stored
        """
        stored = 0
        for header in response.headers.get_list("set-cookie"):
            if self.set(header, str(response.url)):
                stored += 1
        return stored

    def get(self, url: str) -> str:
        """Return the Cookie header value that applies to the given URL."""
        request = httpx.Request("GET", url)
        self.cookies.set_cookie_header(request)
        return request.headers.get("Cookie", "")

    def clear(self) -> None:
        logger.info(f"Clearing {len(self)} session cookies")
        self.cookies.clear()
