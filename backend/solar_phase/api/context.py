"""GET /api/context - Site-wide template context (year, time of day, song)."""

from datetime import datetime
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends

from ..config import settings
from ..schemas.context import SiteContextResponse
from ..services.recent_song import RecentSongService
from ..services.time_of_day import TimeOfDayCalculator
from .dependencies import get_calculator, get_song_service
from .song import current_song
from .time_of_day import current_time_of_day

router = APIRouter()


@router.get("/context", response_model=SiteContextResponse)
def get_context(
    calculator: TimeOfDayCalculator = Depends(get_calculator),
    song_service: RecentSongService = Depends(get_song_service),
):
    """Values shared by every page of the site."""
    return SiteContextResponse(
        year=datetime.now(ZoneInfo(settings.local_timezone)).year,
        time=current_time_of_day(calculator),
        song=current_song(song_service),
    )
