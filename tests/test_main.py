"""Tests for the command line entry point (portal faked with MockTransport)."""

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from booker import main as cli
from booker.auth import Credentials
from booker.client import PortalClient
from booker.config import RunSettings
from booker.schedule import GIL_EANES, INFANTE, ReservationEntry


@pytest.fixture(autouse=True)
def no_env(monkeypatch):
    for name in ("ANIMALAGOS_EMAIL", "ANIMALAGOS_PASSWORD", "BOOKER_DEBUG_DIR"):
        monkeypatch.delenv(name, raising=False)


class TestMain:
    def test_dry_run_prints_entries(self, capsys):
        """--dry-run lists the schedule and never asks for credentials."""
        with patch.object(cli, "load_credentials") as load_credentials:
            assert cli.main(["--dry-run", "--schedule", "weekend"]) == 0

        load_credentials.assert_not_called()
        out = capsys.readouterr().out
        assert "reservations:" in out
        assert "Praça Gil Eanes" in out
        assert "Sábado" in out
        assert "Domingo" in out

    def test_list_schedules(self, capsys):
        assert cli.main(["--list-schedules"]) == 0
        out = capsys.readouterr().out
        assert "schedule" in out
        assert "weekend" in out

    def test_validate_unknown_schedule(self, capsys):
        assert cli.main(["--validate", "nope"]) == 1
        assert "invalid" in capsys.readouterr().out

    def test_validate_default_schedule(self):
        assert cli.main(["--validate", "schedule"]) == 0

    def test_unknown_schedule_fails(self, capsys):
        assert cli.main(["--schedule", "nope"]) == 1
        assert "not found" in capsys.readouterr().out

    def test_missing_credentials(self, capsys):
        login_details = cli.LoginDetails
        with patch.object(cli, "LoginDetails", lambda: login_details(_env_file=None)):
            assert cli.main(["--check-session"]) == 1
        assert "Missing ANIMALAGOS_EMAIL" in capsys.readouterr().out

    def test_run_passes_delay_override(self):
        credentials = Credentials(email="artist@example.com", password="s3cret")
        run = AsyncMock(return_value=True)

        with patch.object(cli, "load_credentials", return_value=credentials), patch.object(
            cli, "run_schedule", run
        ):
            assert cli.main(["--schedule", "weekend", "--delay", "0.5"]) == 0

        entries, passed_credentials, settings = run.call_args.args
        assert entries
        assert passed_credentials is credentials
        assert settings.request_delay_seconds == 0.5

    def test_failed_run_exit_code(self):
        credentials = Credentials(email="artist@example.com", password="s3cret")

        with patch.object(cli, "load_credentials", return_value=credentials), patch.object(
            cli, "run_schedule", AsyncMock(return_value=False)
        ):
            assert cli.main([]) == 1

    def test_discover_skips_schedule(self):
        credentials = Credentials(email="artist@example.com", password="s3cret")
        show = AsyncMock(return_value=True)

        with patch.object(cli, "load_credentials", return_value=credentials), patch.object(
            cli, "show_locations", show
        ), patch.object(cli, "get_schedule") as get_schedule:
            assert cli.main(["--discover", "31-03-2025", "Praça Gil Eanes"]) == 0

        get_schedule.assert_not_called()
        assert show.call_args.args[2:] == ("31-03-2025", "Praça Gil Eanes", [])

    def test_discover_with_schedule_passes_entries(self):
        credentials = Credentials(email="artist@example.com", password="s3cret")
        show = AsyncMock(return_value=True)

        with patch.object(cli, "load_credentials", return_value=credentials), patch.object(
            cli, "show_locations", show
        ):
            args = ["--discover", "31-03-2025", "Praça Gil Eanes", "--schedule", "weekend"]
            assert cli.main(args) == 0

        entries = show.call_args.args[4]
        assert entries
        assert all(entry.day.weekday() >= 5 for entry in entries)


class TestLoadApplicant:
    def test_falls_back_to_login_email(self, monkeypatch):
        monkeypatch.delenv("ANIMALAGOS_ARTIST_EMAIL", raising=False)
        applicant_details = cli.ApplicantDetails
        with patch.object(cli, "ApplicantDetails", lambda: applicant_details(_env_file=None)):
            applicant = cli.load_applicant(Credentials(email="login@example.com", password="x"))
        assert applicant.artist_email == "login@example.com"

    def test_configured_email_wins(self, monkeypatch):
        monkeypatch.setenv("ANIMALAGOS_ARTIST_EMAIL", "artist@example.com")
        applicant = cli.load_applicant(Credentials(email="login@example.com", password="x"))
        assert applicant.artist_email == "artist@example.com"


class TestShowLocations:
    TIMELINE = (
        '<select name="nomerua"><option value="">Todos</option>'
        '<option value="1">Pra&ccedil;a Gil Eanes</option></select>'
    )

    @pytest.fixture()
    def portal_client(self, portal_handler):
        login_handler, _ = portal_handler

        def handler(request):
            if request.url.path == "/web/artista/timeline":
                return httpx.Response(200, text=self.TIMELINE)
            return login_handler(request)

        return lambda: PortalClient(transport=httpx.MockTransport(handler))

    @pytest.mark.asyncio
    async def test_flags_schedule_locations_missing_from_page(self, portal_client, capsys):
        """Schedule locations the timeline does not offer are reported."""
        entries = [
            ReservationEntry("05-04-2025", GIL_EANES, "12:30 13:30"),
            ReservationEntry("05-04-2025", INFANTE, "13:30 14:30"),
        ]
        credentials = Credentials(email="artist@example.com", password="s3cret")

        with patch.object(cli, "PortalClient", portal_client):
            ok = await cli.show_locations(
                credentials, RunSettings(), "05-04-2025", GIL_EANES, entries
            )

        out = capsys.readouterr().out
        assert ok is False
        assert "1 locations" in out
        assert f"not on the page: {INFANTE}" in out
        assert f"not on the page: {GIL_EANES}" not in out

    @pytest.mark.asyncio
    async def test_all_schedule_locations_present(self, portal_client):
        entries = [ReservationEntry("05-04-2025", GIL_EANES, "12:30 13:30")]
        credentials = Credentials(email="artist@example.com", password="s3cret")

        with patch.object(cli, "PortalClient", portal_client):
            assert await cli.show_locations(
                credentials, RunSettings(), "05-04-2025", GIL_EANES, entries
            )
