"""Shared service instances for the API routers.

main.py builds the services during lifespan startup and registers them here;
endpoints pull them in through FastAPI's Depends().  Tests swap them with
app.dependency_overrides.
"""

from ..services.recent_song import RecentSongService
from ..services.time_of_day import TimeOfDayCalculator

_calculator: TimeOfDayCalculator | None = None
_song_service: RecentSongService | None = None


def set_services(calculator: TimeOfDayCalculator, song_service: RecentSongService) -> None:
    global _calculator, _song_service
    _calculator = calculator
    _song_service = song_service


def get_calculator() -> TimeOfDayCalculator:
    if _calculator is None:
        raise RuntimeError("Time-of-day calculator not initialised; is the app running?")
    return _calculator


def get_song_service() -> RecentSongService:
    if _song_service is None:
        raise RuntimeError("Recent song service not initialised; is the app running?")
    return _song_service
