"""Tests for the Last.fm recent track service."""

import httpx

from solar_phase.services.recent_song import (
    DEFAULT_IMAGE,
    RecentSongService,
    Song,
    parse_recent_tracks,
)
from solar_phase.services.transients import MemoryTransientCache

RECENT = {
    "recenttracks": {
        "track": [
            {
                "name": "Running Up That Hill",
                "artist": {"#text": "Kate Bush", "mbid": ""},
                "image": [
                    {"#text": "https://lastfm.example/small.png", "size": "small"},
                    {"#text": "https://lastfm.example/large.png", "size": "large"},
                ],
                "@attr": {"nowplaying": "true"},
            },
            {"name": "Older", "artist": {"#text": "Someone"}, "image": []},
        ],
    },
}


def _service(handler, cache=None, api_key="secret") -> RecentSongService:
    return RecentSongService(
        cache or MemoryTransientCache(),
        api_key=api_key,
        user="ddkees",
        transport=httpx.MockTransport(handler),
    )


class TestParseRecentTracks:
    def test_first_track(self):
        song = parse_recent_tracks(RECENT)
        assert song == Song(
            track="Running Up That Hill",
            artist="Kate Bush",
            image="https://lastfm.example/small.png",
            current=True,
        )

    def test_not_now_playing(self):
        data = {"recenttracks": {"track": [{"name": "A", "artist": {"#text": "B"}}]}}
        song = parse_recent_tracks(data)
        assert song.current is False
        assert song.image == DEFAULT_IMAGE

    def test_single_track_object(self):
        data = {"recenttracks": {"track": {"name": "A", "artist": {"#text": "B"}}}}
        assert parse_recent_tracks(data).track == "A"

    def test_no_tracks(self):
        assert parse_recent_tracks({"recenttracks": {"track": []}}) is None
        assert parse_recent_tracks({"error": 6, "message": "User not found"}) is None
        assert parse_recent_tracks([]) is None


class TestRecentSongService:
    def test_fetch_and_cache(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, json=RECENT)

        service = _service(handler)
        first = service.get_song()
        second = service.get_song()
        assert first == second
        assert first.artist == "Kate Bush"
        assert len(calls) == 1
        assert calls[0].url.params["method"] == "user.getrecenttracks"
        assert calls[0].url.params["user"] == "ddkees"

    def test_http_error_gives_blank_song(self):
        song = _service(lambda request: httpx.Response(500)).get_song()
        assert song == Song()
        assert song.image == DEFAULT_IMAGE

    def test_malformed_json_gives_blank_song(self):
        song = _service(lambda request: httpx.Response(200, text="nope")).get_song()
        assert song == Song()

    def test_no_api_key_skips_request(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, json=RECENT)

        assert _service(handler, api_key="").get_song() == Song()
        assert calls == []
