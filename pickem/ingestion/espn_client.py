"""ESPN HTTP client for fetching the NFL scoreboard."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urlencode

import requests

from pickem.errors import FeedFetchError
from pickem.settings import Settings, get_settings

logger = logging.getLogger(__name__)
SCOREBOARD_PATH = "/apis/site/v2/sports/football/nfl/scoreboard"
DEFAULT_USER_AGENT = "pickem-tracker/1.0 (+https://example.local)"
MAX_BODY_SNIPPET = 300


def build_scoreboard_url(
    base_url: str,
    season: int,
    season_type: int,
    week: int | None = None,
) -> str:
    params: dict[str, str] = {
        "dates": str(season),
        "seasontype": str(season_type),
    }
    if week is not None:
        params["week"] = str(week)
    return f"{base_url.rstrip('/')}{SCOREBOARD_PATH}?{urlencode(params)}"


def fetch_scoreboard(week: int | None, settings: Settings | None = None) -> dict[str, Any]:
    """Fetch the scoreboard for a week of the configured season.

    Raises FeedFetchError on transport failure, non-200 status or a body
    that is not a JSON object. There is no retry.
    """
    settings = settings or get_settings()
    url = build_scoreboard_url(
        settings.espn_base_url,
        settings.season,
        settings.season_type,
        week,
    )
    headers = {
        "User-Agent": DEFAULT_USER_AGENT,
        "Accept": "application/json",
    }

    logger.info("Fetching ESPN scoreboard url=%s", url)
    try:
        response = requests.get(url, headers=headers, timeout=settings.feed_timeout_seconds)
    except requests.RequestException as exc:
        logger.error("ESPN scoreboard request failed url=%s error=%s", url, exc)
        raise FeedFetchError(f"Failed to fetch ESPN scoreboard: {exc}") from exc

    if response.status_code != 200:
        body_snippet = (response.text or "")[:MAX_BODY_SNIPPET]
        logger.error(
            "ESPN scoreboard non-200 status=%s body=%s",
            response.status_code,
            body_snippet,
        )
        raise FeedFetchError(f"ESPN returned non-200 response: {response.status_code}")

    try:
        payload = response.json()
    except ValueError as exc:
        raise FeedFetchError("ESPN returned a non-JSON response") from exc
    if not isinstance(payload, dict):
        raise FeedFetchError("ESPN response was not a JSON object")
    return payload
