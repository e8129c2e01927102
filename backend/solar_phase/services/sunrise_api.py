"""sunrise-sunset.org API client.

Fetches sunrise and sunset times for a latitude/longitude on a relative day
("today" or "tomorrow").  Failures are returned as values rather than raised
so the caller can fall back to the empty reading and keep the page up.

API docs: https://sunrise-sunset.org/api
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from ..config import settings

logger = logging.getLogger(__name__)

USER_AGENT = "solar-phase (+https://sunrise-sunset.org/api)"


@dataclass
class FetchResult:
    """Outcome of a single API request."""
    day: str
    payload: Optional[dict[str, Any]] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.payload is not None


class SunriseSunsetClient:
    """Thin synchronous wrapper around the sunrise-sunset.org JSON endpoint."""

    def __init__(
        self,
        latitude: float = settings.latitude,
        longitude: float = settings.longitude,
        base_url: str = settings.sunrise_api_url,
        timeout: float = settings.request_timeout,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.latitude = latitude
        self.longitude = longitude
        self.base_url = base_url
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.Client:
        return httpx.Client(
            headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
            timeout=self.timeout,
            follow_redirects=True,
            transport=self._transport,
        )

    def fetch_day(self, day: str) -> FetchResult:
        """Fetch the raw payload for ``day``.

        Args:
            day: Relative date understood by the API, "today" or "tomorrow".

        Returns:
            FetchResult holding the decoded JSON object, or the reason the
            request failed (network error, non-200 status, malformed JSON).
        """
        params = {
            "lat": self.latitude,
            "lng": self.longitude,
            "date": day,
            "formatted": 0,
        }
        try:
            with self._client() as client:
                resp = client.get(self.base_url, params=params)
        except httpx.HTTPError as exc:
            logger.warning("Sunrise API request for %s failed: %s", day, exc)
            return FetchResult(day=day, error=str(exc))

        if resp.status_code != 200:
            logger.warning(
                "Sunrise API returned HTTP %d for %s", resp.status_code, day,
            )
            return FetchResult(day=day, error=f"HTTP {resp.status_code}")

        try:
            data = resp.json()
        except ValueError as exc:
            logger.warning("Sunrise API returned malformed JSON for %s: %s", day, exc)
            return FetchResult(day=day, error="malformed JSON")

        if not isinstance(data, dict):
            logger.warning("Sunrise API returned a non-object body for %s", day)
            return FetchResult(day=day, error="unexpected body")

        return FetchResult(day=day, payload=data)
