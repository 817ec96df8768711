"""
HTTP client for the Animalagos portal.

Wraps httpx.AsyncClient with the browser header set, the fixed timeout and
the SessionStore. Redirects are followed here rather than by httpx so that
every hop goes through the store and the hop limit can be chosen per call.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import httpx

from booker.config import BookingConstants
from booker.session import SessionStore

logger = logging.getLogger(__name__)


def default_headers() -> dict[str, str]:
    return {
        "User-Agent": BookingConstants.USER_AGENT,
        "Accept-Language": BookingConstants.ACCEPT_LANGUAGE,
        "Accept-Encoding": BookingConstants.ACCEPT_ENCODING,
        "Connection": BookingConstants.CONNECTION,
        "Accept": BookingConstants.ACCEPT,
    }


class PortalClient:
    """Persistent HTTP client sharing one cookie session across requests."""

    def __init__(
        self,
        session: SessionStore | None = None,
        *,
        timeout: float = BookingConstants.DEFAULT_TIMEOUT,
        max_redirects: int = BookingConstants.MAX_REDIRECTS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.session = session if session is not None else SessionStore()
        self.max_redirects = max_redirects
        self.final_url: str | None = None
        self._client = httpx.AsyncClient(
            headers=default_headers(),
            timeout=timeout,
            follow_redirects=False,
            transport=transport,
        )

    async def __aenter__(self) -> PortalClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    async def aclose(self) -> None:
        if not self._client.is_closed:
            await self._client.aclose()

    def _attach_cookies(self, request: httpx.Request) -> None:
        # The store, not httpx's own jar, decides what is sent
        request.headers.pop("Cookie", None)
        cookie_header = self.session.get(str(request.url))
        if cookie_header:
            request.headers["Cookie"] = cookie_header

    async def request(
        self,
        method: str,
        url: str,
        *,
        params: Mapping[str, str] | None = None,
        data: Mapping[str, str] | None = None,
        content: str | bytes | None = None,
        headers: Mapping[str, str] | None = None,
        max_redirects: int | None = None,
    ) -> httpx.Response:
        """
        Send a request and follow redirects up to the given limit.

        Args:
            method: HTTP method
            url: Absolute URL
            params: Query string parameters
            data: Form fields, urlencoded by httpx
            content: Pre-serialized body, sent as-is
            headers: Extra headers for this request only
            max_redirects: Hop limit for this call (0 returns the raw 30x)

        Returns:
            The last response; ``response.url`` is the final URL and
            ``response.history`` holds the redirect responses

        Raises:
            httpx.HTTPError: On transport failures
        """
        limit = self.max_redirects if max_redirects is None else max_redirects

        request = self._client.build_request(
            method,
            url,
            params=params,
            data=data,
            content=content,
            headers=headers,
        )

        history: list[httpx.Response] = []
        while True:
            self._attach_cookies(request)
            response = await self._client.send(request, follow_redirects=False)
            self.session.update_from_response(response)

            logger.debug(
                f"{request.method} {request.url} -> {response.status_code}"
            )

            if response.next_request is None or len(history) >= limit:
                break

            history.append(response)
            request = response.next_request

        response.history = history
        self.final_url = str(response.url)

        if history:
            logger.info(
                f"Followed {len(history)} redirect(s) to {self.final_url}"
            )
        return response

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("GET", url, **kwargs)

    async def post(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("POST", url, **kwargs)
