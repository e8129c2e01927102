"""Pydantic schemas for the site-wide context API."""

from pydantic import BaseModel

from .song import SongResponse
from .time_of_day import TimeOfDayResponse


class SiteContextResponse(BaseModel):
    year: int
    time: TimeOfDayResponse
    song: SongResponse
