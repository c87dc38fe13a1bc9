"""High-level Strava API client.

All requests go through :meth:`StravaClient._request`, which retries
with exponential backoff on HTTP 429 and maps failures onto the
``strava_client.exceptions`` hierarchy.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Optional

import requests

from strava_client.exceptions import (
    StravaAPIError,
    StravaAuthError,
    StravaRateLimitError,
)

logger = logging.getLogger(__name__)

API_BASE = "https://www.strava.com/api/v3"
_MAX_RETRIES = 3
_BASE_BACKOFF_S = 2
_TIMEOUT_S = 30
_MAX_PER_PAGE = 200


class StravaClient:
    """Facade for the Strava activity endpoints used by the import."""

    def __init__(
        self,
        access_token: str,
        session: Optional[requests.Session] = None,
        api_base: str = API_BASE,
    ) -> None:
        if not access_token:
            raise StravaAuthError("An access token is required")
        self._session = session or requests.Session()
        self._api_base = api_base.rstrip("/")
        self._headers = {"Authorization": f"Bearer {access_token}"}

    # ------------------------------------------------------------------
    # Athlete
    # ------------------------------------------------------------------

    def get_athlete(self) -> dict[str, Any]:
        return self._request("GET", "/athlete") or {}

    # ------------------------------------------------------------------
    # Activities
    # ------------------------------------------------------------------

    def get_activities(
        self,
        page: int = 1,
        per_page: int = 30,
        after: int | None = None,
        before: int | None = None,
    ) -> list[dict[str, Any]]:
        """One page of the athlete's activities, newest first.

        *after* and *before* are Unix timestamps.
        """
        params: dict[str, Any] = {
            "page": max(1, int(page)),
            "per_page": min(max(1, int(per_page)), _MAX_PER_PAGE),
        }
        if after:
            params["after"] = int(after)
        if before:
            params["before"] = int(before)
        data = self._request("GET", "/athlete/activities", params=params)
        if not isinstance(data, list):
            logger.warning("Unexpected activities payload: %r", type(data).__name__)
            return []
        return data

    def iter_activities(
        self,
        after: int | None = None,
        before: int | None = None,
        per_page: int = 100,
        max_pages: int = 10,
    ) -> list[dict[str, Any]]:
        """Collect pages until a short page or *max_pages*."""
        result: list[dict[str, Any]] = []
        for page in range(1, max_pages + 1):
            batch = self.get_activities(page=page, per_page=per_page, after=after, before=before)
            result.extend(batch)
            if len(batch) < per_page:
                break
        return result

    def get_activity(self, activity_id: int | str) -> dict[str, Any]:
        """Detailed representation of one activity."""
        return self._request(
            "GET",
            f"/activities/{activity_id}",
            params={"include_all_efforts": "true"},
        ) or {}

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Send a request, retrying on 429 with exponential backoff."""
        url = f"{self._api_base}{path}"
        for attempt in range(_MAX_RETRIES):
            try:
                resp = self._session.request(
                    method,
                    url,
                    headers=self._headers,
                    params=params,
                    timeout=_TIMEOUT_S,
                )
            except requests.RequestException as exc:
                raise StravaAPIError(f"{method} {path} failed: {exc}") from exc

            if resp.status_code == 429:
                wait = _BASE_BACKOFF_S * (2 ** attempt)
                logger.warning(
                    "Rate limited (attempt %d/%d), retrying in %ds",
                    attempt + 1,
                    _MAX_RETRIES,
                    wait,
                )
                time.sleep(wait)
                continue
            if resp.status_code == 401:
                raise StravaAuthError(f"Unauthorized for {path}")
            if resp.status_code >= 400:
                raise StravaAPIError(
                    f"{method} {path} returned HTTP {resp.status_code}",
                    status_code=resp.status_code,
                )
            return resp.json()

        raise StravaRateLimitError(f"Rate limited after {_MAX_RETRIES} retries on {path}")
