"""
Form body encoding for the portal's legacy form handler.

The registration handler decodes the location field as ISO-8859-1 while the
other fields are read as UTF-8, so the body is built by hand instead of
letting httpx urlencode it.
"""

from __future__ import annotations

import unicodedata
from collections.abc import Collection, Mapping
from urllib.parse import quote

# Same safe set as JavaScript's encodeURIComponent
URI_COMPONENT_SAFE = "-_.!~*'()"

LATIN1_TABLE = {
    "ç": "%E7",
    "á": "%E1",
    "à": "%E0",
    "ã": "%E3",
    "â": "%E2",
    "é": "%E9",
    "ê": "%EA",
    "í": "%ED",
    "ó": "%F3",
    "ô": "%F4",
    "õ": "%F5",
    "ú": "%FA",
    "ü": "%FC",
    "ñ": "%F1",
    " ": "%20",
}

_LATIN1_TRANSLATION = str.maketrans(LATIN1_TABLE)


def latin_encode(value: str) -> str:
    """
    Percent-encode the accented letters of a value as Latin-1 bytes.

    Only characters listed in LATIN1_TABLE are substituted; anything else is
    passed through unmodified.

    Args:
        value: Text to encode

    Returns:
        The encoded text
    """
    if not value:
        return ""
    return unicodedata.normalize("NFC", value).translate(_LATIN1_TRANSLATION)


def uri_component(value: str) -> str:
    return quote(value, safe=URI_COMPONENT_SAFE, encoding="utf-8")


def build_form_data(
    data: Mapping[str, str], latin_fields: Collection[str] = ()
) -> str:
    """
    Build a urlencoded form body with per-field encoding.

    Args:
        data: Field name to value, in submission order
        latin_fields: Names of the fields encoded with latin_encode

    Returns:
        The form body, e.g. ``g=31-03-2025&c=Pra%E7a%20Gil%20Eanes``
    """
    params = []
    for name, value in data.items():
        if name in latin_fields:
            encoded = latin_encode(value)
        else:
            encoded = uri_component(value)
        params.append(f"{uri_component(name)}={encoded}")
    return "&".join(params)
