import httpx
import pytest

from booker.client import PortalClient
from booker.config import ApplicantDetails, PortalDetails

LOGIN_PAGE_HTML = """
<html><body>
<form method="post" action="/web/artista/login">
  <input type="hidden" name="__VIEWSTATE" id="__VIEWSTATE" value="dDwtMTA4MTg5NzA7Oz4=" />
  <input type="hidden" name="__VIEWSTATEGENERATOR" id="__VIEWSTATEGENERATOR" value="C2EE9ABB" />
  <input type="hidden" name="__EVENTVALIDATION" id="__EVENTVALIDATION" value="/wEWBAKc" />
  <input type="email" name="email" />
  <input type="password" name="password" />
</form>
</body></html>
"""


@pytest.fixture()
def portal():
    return PortalDetails()


@pytest.fixture()
def login_page_html():
    return LOGIN_PAGE_HTML


@pytest.fixture()
def applicant():
    return ApplicantDetails(
        commercial_name="anilagos",
        table="inscricoes",
        artist_name="Test Artist",
        artist_email="artist@example.com",
    )


@pytest.fixture()
def make_client():
    """Build a PortalClient whose requests are answered by `handler`."""

    def _make(handler):
        return PortalClient(transport=httpx.MockTransport(handler))

    return _make


@pytest.fixture()
def portal_handler():
    """
    A fake portal that accepts the login and records every request.

    Returns (handler, requests). The login POST redirects to the artist area
    unless `accept_login` is set to False on the handler.
    """
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        path = request.url.path

        if path == "/web/login":
            return httpx.Response(
                200,
                headers={"Set-Cookie": "ASP.NET_SessionId=sess123; path=/; HttpOnly"},
                text="<html>login</html>",
            )
        if path == "/web/artista/login" and request.method == "GET":
            return httpx.Response(200, text=LOGIN_PAGE_HTML)
        if path == "/web/artista/login" and request.method == "POST":
            if not handler.accept_login:
                return httpx.Response(200, text="<html>invalid login</html>")
            return httpx.Response(
                302,
                headers={
                    "Location": "/web/artista/",
                    "Set-Cookie": ".ASPXAUTH=authtoken; path=/; HttpOnly",
                },
            )
        if path == "/web/artista/":
            return httpx.Response(200, text="<html>dashboard</html>")
        if path == "/web/artista/inscricao-artista":
            return httpx.Response(200, text="<html>ok</html>")
        return httpx.Response(404)

    handler.accept_login = True
    return handler, requests
