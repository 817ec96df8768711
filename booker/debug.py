"""Request/response snapshots for operator inspection."""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Any

import httpx

logger = logging.getLogger(__name__)

BODY_PREVIEW_CHARS = 1000


def snapshot_name(*parts: str) -> str:
    """Build a filesystem-safe snapshot name, e.g. ``timeline_31-03-2025_Praca``."""
    joined = "_".join(p for p in parts if p)
    return re.sub(r"[^\w.-]+", "_", joined).strip("_")


class DebugRecorder:
    """
    Writes JSON and HTML snapshots into a directory.

    A recorder without a directory does nothing. Write failures are logged
    and never raised, so recording cannot change the outcome of a request.
    """

    def __init__(self, directory: Path | str | None = None) -> None:
        self.directory = Path(directory) if directory else None

    @property
    def enabled(self) -> bool:
        return self.directory is not None

    def _write(self, filename: str, text: str) -> Path | None:
        if self.directory is None:
            return None
        path = self.directory / filename
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
        except OSError as e:
            logger.warning(f"Could not write debug file {path}: {e}")
            return None
        logger.debug(f"Saved debug file {path}")
        return path

    def save_json(self, name: str, payload: dict[str, Any]) -> Path | None:
        return self._write(f"{name}.json", json.dumps(payload, indent=2, default=str))

    def save_html(self, name: str, html: str) -> Path | None:
        return self._write(f"{name}.html", html)

    def save_response(
        self,
        name: str,
        response: httpx.Response,
        *,
        request_body: str | None = None,
    ) -> None:
        """Save response metadata as JSON and the full body as HTML."""
        if not self.enabled:
            return

        text = response.text
        self.save_json(
            name,
            {
                "requestUrl": str(response.request.url),
                "requestMethod": response.request.method,
                "requestBody": request_body,
                "recordedAt": datetime.now().isoformat(),
                "status": response.status_code,
                "reason": response.reason_phrase,
                "headers": dict(response.headers),
                "redirects": [str(r.url) for r in response.history],
                "finalUrl": str(response.url),
                "data": text[:BODY_PREVIEW_CHARS],
            },
        )
        if text:
            self.save_html(name, text)

    def save_error(self, name: str, url: str, error: Exception) -> None:
        if not self.enabled:
            return
        self.save_json(
            f"{name}_error",
            {
                "requestUrl": url,
                "recordedAt": datetime.now().isoformat(),
                "error": {"type": type(error).__name__, "message": str(error)},
            },
        )
