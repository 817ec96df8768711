"""
Location discovery from the artist timeline page.

Locations are read from the street dropdown when the page renders one. Some
versions of the page fill the dropdown from script instead, so script bodies
are scanned as a second pass.
"""

from __future__ import annotations

import logging
import re
import unicodedata
from dataclasses import dataclass

import httpx
from bs4 import BeautifulSoup

from booker.auth import is_login_url
from booker.client import PortalClient
from booker.config import PortalDetails
from booker.debug import DebugRecorder, snapshot_name

logger = logging.getLogger(__name__)

# Candidate `name` attributes of the location <select>, in priority order
LOCATION_FIELD_NAMES = ("nomerua", "c", "rua", "local", "localizacao")

PLACEHOLDER_LABELS = frozenset(
    {"", "todos", "todas", "all", "selecione", "seleccione", "escolha", "-"}
)

LOCATION_KEYWORDS = (
    "praça",
    "praca",
    "rua",
    "avenida",
    "largo",
    "gaveto",
    "zona",
    "travessa",
    "praia",
    "marina",
    "jardim",
)

# UTF-8 bytes that were decoded as Latin-1 / cp1252 by the portal
MIS_ENCODINGS = {
    "Ã§": "ç",
    "Ã‡": "Ç",
    "Ã£": "ã",
    "Ã¡": "á",
    "Ã\xa0": "à",
    "Ã¢": "â",
    "Ã©": "é",
    "Ãª": "ê",
    "Ã\xad": "í",
    "Ã³": "ó",
    "Ã´": "ô",
    "Ãµ": "õ",
    "Ãº": "ú",
    "Ã¼": "ü",
    "Ã±": "ñ",
    "â€“": "–",
    "Âº": "º",
    "Âª": "ª",
}

_JS_OPTION_RE = re.compile(
    r"""\{\s*["']?value["']?\s*:\s*["']?(?P<value>[^"',}]*)["']?\s*,"""
    r"""\s*["']?text["']?\s*:\s*(?P<q>["'])(?P<text>.*?)(?P=q)\s*\}""",
    re.DOTALL,
)
_JS_ARRAY_RE = re.compile(r"\[([^\[\]]*)\]", re.DOTALL)
_JS_STRING_RE = re.compile(r"""(["'])((?:(?!\1).)+)\1""")


@dataclass(frozen=True)
class Location:
    """A selectable location on the timeline page."""

    id: str
    name: str


def fix_mis_encoding(text: str) -> str:
    """Repair known Latin-1/UTF-8 mix-ups and collapse whitespace."""
    for broken, fixed in MIS_ENCODINGS.items():
        text = text.replace(broken, fixed)
    return " ".join(text.split())


def _is_placeholder(label: str) -> bool:
    return label.strip().strip("-").strip().lower() in PLACEHOLDER_LABELS


def _looks_like_location(text: str) -> bool:
    lowered = text.lower()
    return any(keyword in lowered for keyword in LOCATION_KEYWORDS)


def _dedupe(locations: list[Location]) -> list[Location]:
    seen = set()
    unique = []
    for location in locations:
        if location.name not in seen:
            seen.add(location.name)
            unique.append(location)
    return unique


def extract_from_select(html: str) -> list[Location]:
    """
    Extract locations from the first known location dropdown.

    Args:
        html: Page markup

    Returns:
        Locations in page order, placeholders excluded
    """
    soup = BeautifulSoup(html, "html.parser")

    for field_name in LOCATION_FIELD_NAMES:
        select = soup.find("select", attrs={"name": field_name})
        if select is None:
            continue

        locations = []
        for option in select.find_all("option"):
            value = (option.get("value") or "").strip()
            # Only the option's own text; an unclosed <option> nests the next ones
            name = fix_mis_encoding("".join(option.find_all(string=True, recursive=False)))
            if not value or _is_placeholder(name):
                continue
            locations.append(Location(id=value, name=name))

        logger.debug(f"Select '{field_name}' yielded {len(locations)} locations")
        if locations:
            return _dedupe(locations)

    return []


def extract_from_scripts(html: str) -> list[Location]:
    """
    Extract locations from inline script arrays.

    Looks for ``{value: ..., text: ...}`` literals first, then for arrays of
    quoted strings that read like street or square names. Ids are numbered
    from 1 when the script does not carry any.
    """
    soup = BeautifulSoup(html, "html.parser")
    scripts = [s.get_text() for s in soup.find_all("script")]

    locations = []
    for script in scripts:
        for match in _JS_OPTION_RE.finditer(script):
            name = fix_mis_encoding(match.group("text"))
            if _is_placeholder(name):
                continue
            locations.append(Location(id=match.group("value").strip(), name=name))
    if locations:
        numbered = [
            loc if loc.id else Location(id=str(i), name=loc.name)
            for i, loc in enumerate(locations, start=1)
        ]
        return _dedupe(numbered)

    names = []
    for script in scripts:
        for array in _JS_ARRAY_RE.findall(script):
            for _, text in _JS_STRING_RE.findall(array):
                name = fix_mis_encoding(text)
                if _looks_like_location(name) and name not in names:
                    names.append(name)

    return [Location(id=str(i), name=name) for i, name in enumerate(names, start=1)]


def extract_locations(html: str) -> list[Location]:
    """
    Extract locations with the dropdown first and scripts as fallback.

    Never raises; an empty list means no locations could be found.
    """
    try:
        locations = extract_from_select(html)
        if locations:
            return locations
        logger.info("No location dropdown found, scanning scripts")
        return extract_from_scripts(html)
    except Exception as e:
        logger.exception(f"Location extraction failed: {e}")
        return []


def normalize_name(name: str) -> str:
    """Lowercase and strip accents, for matching names typed by hand."""
    decomposed = unicodedata.normalize("NFKD", fix_mis_encoding(name))
    stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
    return stripped.replace("–", "-").casefold()


def find_location(locations: list[Location], name: str) -> Location | None:
    target = normalize_name(name)
    for location in locations:
        if normalize_name(location.name) == target:
            return location
    return None


def unmatched_locations(locations: list[Location], names: list[str]) -> list[str]:
    """Names (in first-seen order) that match none of the discovered locations."""
    missing = []
    for name in names:
        if name not in missing and find_location(locations, name) is None:
            missing.append(name)
    return missing


async def fetch_timeline_page(
    client: PortalClient,
    date: str,
    place: str,
    portal: PortalDetails | None = None,
) -> httpx.Response:
    """
    Fetch the timeline page for a date and place.

    Args:
        client: Logged-in portal client
        date: Date in DD-MM-YYYY format
        place: Location name

    Raises:
        httpx.HTTPError: If the request fails
    """
    portal = portal or PortalDetails()
    response = await client.get(
        portal.timeline_url,
        params={"g": date, "c": place},
        headers={"Referer": portal.artist_home_url},
    )

    if is_login_url(response.url):
        logger.warning(
            f"Timeline request was redirected to {response.url} - session is not logged in"
        )
    return response


async def discover_locations(
    client: PortalClient,
    date: str,
    place: str,
    *,
    portal: PortalDetails | None = None,
    recorder: DebugRecorder | None = None,
) -> list[Location]:
    """
    Fetch the timeline page and extract its locations.

    Returns:
        Discovered locations, or an empty list if none could be found
    """
    portal = portal or PortalDetails()
    recorder = recorder or DebugRecorder()
    name = snapshot_name("timeline", date, place)

    try:
        response = await fetch_timeline_page(client, date, place, portal)
    except httpx.HTTPError as e:
        logger.error(f"Error fetching timeline data: {e}")
        recorder.save_error(name, portal.timeline_url, e)
        return []

    recorder.save_response(name, response)
    locations = extract_locations(response.text)
    logger.info(f"Discovered {len(locations)} locations for {date} / {place}")
    return locations
