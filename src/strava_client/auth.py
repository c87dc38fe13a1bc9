"""Strava OAuth token handling.

The authorization-code exchange happens outside this package; tokens
arrive already issued and are refreshed here when close to expiry.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Mapping, Optional

import requests

from strava_client.exceptions import StravaAuthError

logger = logging.getLogger(__name__)

TOKEN_URL = "https://www.strava.com/oauth/token"
REFRESH_BUFFER_S = 60
_TIMEOUT_S = 30


@dataclass(frozen=True)
class StravaTokens:
    """Access/refresh token pair; ``expires_at`` is a Unix timestamp."""

    access_token: str
    refresh_token: str
    expires_at: int
    athlete_id: str | None = None

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> StravaTokens:
        """Accept both our camelCase profile keys and Strava's snake_case."""
        access = raw.get("accessToken") or raw.get("access_token")
        refresh = raw.get("refreshToken") or raw.get("refresh_token")
        expires = raw.get("expiresAt") or raw.get("expires_at")
        if not access or not refresh or not expires:
            raise StravaAuthError("Incomplete Strava token data")
        athlete = raw.get("athleteId") or (raw.get("athlete") or {}).get("id")
        return cls(
            access_token=str(access),
            refresh_token=str(refresh),
            expires_at=int(expires),
            athlete_id=str(athlete) if athlete is not None else None,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "accessToken": self.access_token,
            "refreshToken": self.refresh_token,
            "expiresAt": self.expires_at,
            "athleteId": self.athlete_id,
        }

    def needs_refresh(self, now: float | None = None) -> bool:
        """True when the access token expires within the refresh buffer."""
        now = time.time() if now is None else now
        return self.expires_at <= now + REFRESH_BUFFER_S


def refresh_tokens(
    tokens: StravaTokens,
    client_id: str,
    client_secret: str,
    session: Optional[requests.Session] = None,
) -> StravaTokens:
    """Exchange the refresh token for a new token pair.

    Raises ``StravaAuthError`` when credentials are missing, the request
    fails, or the response lacks any token field.
    """
    if not client_id or not client_secret:
        raise StravaAuthError("Strava client credentials are not configured")

    http = session or requests.Session()
    try:
        resp = http.post(
            TOKEN_URL,
            json={
                "client_id": client_id,
                "client_secret": client_secret,
                "refresh_token": tokens.refresh_token,
                "grant_type": "refresh_token",
            },
            timeout=_TIMEOUT_S,
        )
    except requests.RequestException as exc:
        raise StravaAuthError(f"Token refresh failed: {exc}") from exc

    if resp.status_code >= 400:
        raise StravaAuthError(f"Token refresh failed: HTTP {resp.status_code}")

    data = resp.json()
    if not data.get("access_token") or not data.get("refresh_token") or not data.get("expires_at"):
        raise StravaAuthError("Invalid response from Strava token refresh")

    logger.info("Refreshed Strava token for athlete %s", tokens.athlete_id)
    return StravaTokens(
        access_token=data["access_token"],
        refresh_token=data["refresh_token"],
        expires_at=int(data["expires_at"]),
        athlete_id=tokens.athlete_id,
    )


def ensure_fresh_tokens(
    tokens: StravaTokens,
    client_id: str,
    client_secret: str,
    session: Optional[requests.Session] = None,
    now: float | None = None,
) -> tuple[StravaTokens, bool]:
    """Return ``(tokens, refreshed)``, refreshing only when about to expire."""
    if not tokens.needs_refresh(now):
        return tokens, False
    return refresh_tokens(tokens, client_id, client_secret, session=session), True
