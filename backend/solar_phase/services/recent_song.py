"""Last.fm recently played track.

Fetches the newest scrobble for the configured user and caches it for three
minutes.  Missing keys, HTTP failures, and empty histories all produce the
blank song so the page can still render.

API docs: https://www.last.fm/api/show/user.getRecentTracks
"""

import json
import logging
from dataclasses import asdict, dataclass
from typing import Any, Optional

import httpx

from ..config import settings
from .transients import TransientCache

logger = logging.getLogger(__name__)

DEFAULT_IMAGE = "compact-disc-solid.svg"


@dataclass
class Song:
    """A single scrobbled track."""
    track: str = ""
    artist: str = ""
    image: str = DEFAULT_IMAGE
    current: bool = False  # True while the track is still playing

    def __post_init__(self):
        if not self.image:
            self.image = DEFAULT_IMAGE


def parse_recent_tracks(data: Any) -> Optional[Song]:
    """Build a Song from a user.getrecenttracks response.

    Last.fm's JSON is converted from XML, so text nodes live under "#text"
    and attributes under "@attr".

    Returns:
        The newest track, or None when the payload has no usable track.
    """
    if not isinstance(data, dict):
        return None
    recent = data.get("recenttracks")
    if not isinstance(recent, dict):
        return None
    tracks = recent.get("track")
    if isinstance(tracks, dict):
        # a single scrobble comes back as an object rather than a list
        tracks = [tracks]
    if not tracks or not isinstance(tracks[0], dict):
        return None

    first = tracks[0]
    name = first.get("name")
    if not name:
        return None

    artist = first.get("artist") or {}
    images = first.get("image") or []
    image = images[0].get("#text", "") if images and isinstance(images[0], dict) else ""
    attrs = first.get("@attr") or {}

    return Song(
        track=name,
        artist=artist.get("#text", "") if isinstance(artist, dict) else str(artist),
        image=image,
        current=attrs.get("nowplaying") == "true",
    )


class RecentSongService:
    """Fetches and caches the most recent Last.fm scrobble."""

    def __init__(
        self,
        cache: TransientCache,
        api_key: str = settings.lastfm_api_key,
        user: str = settings.lastfm_user,
        base_url: str = settings.lastfm_api_url,
        timeout: float = settings.request_timeout,
        cache_key: str = settings.song_cache_key,
        ttl: int = settings.song_cache_ttl_sec,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.cache = cache
        self.cache_key = cache_key
        self.ttl = ttl
        self.api_key = api_key
        self.user = user
        self.base_url = base_url
        self.timeout = timeout
        self._transport = transport

    def _fetch(self) -> Optional[Song]:
        params = {
            "api_key": self.api_key,
            "method": "user.getrecenttracks",
            "user": self.user,
            "format": "json",
        }
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                resp = client.get(self.base_url, params=params)
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPError as exc:
            logger.warning("Last.fm request failed: %s", exc)
            return None
        except ValueError as exc:
            logger.warning("Last.fm returned malformed JSON: %s", exc)
            return None

        song = parse_recent_tracks(data)
        if song is None:
            logger.warning("Last.fm response for %s had no recent track", self.user)
        return song

    def get_song(self) -> Song:
        cached = self.cache.get(self.cache_key)
        if cached is not None:
            try:
                return Song(**json.loads(cached))
            except (ValueError, TypeError) as exc:
                logger.warning("Discarding unreadable cached song: %s", exc)

        if not self.api_key:
            logger.debug("No Last.fm API key configured")
            return Song()

        song = self._fetch() or Song()
        self.cache.set(self.cache_key, json.dumps(asdict(song)), self.ttl)
        return song
