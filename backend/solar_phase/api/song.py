"""GET /api/song - Most recent Last.fm scrobble."""

from fastapi import APIRouter, Depends

from ..schemas.song import SongResponse
from ..services.recent_song import RecentSongService
from .dependencies import get_song_service

router = APIRouter()


def current_song(service: RecentSongService) -> SongResponse:
    song = service.get_song()
    return SongResponse(
        track=song.track,
        artist=song.artist,
        image=song.image,
        current=song.current,
    )


@router.get("/song", response_model=SongResponse)
def get_song(service: RecentSongService = Depends(get_song_service)):
    return current_song(service)
