"""Pydantic schemas for the recent song API."""

from pydantic import BaseModel


class SongResponse(BaseModel):
    track: str
    artist: str
    image: str
    current: bool
