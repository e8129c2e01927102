"""Top-level API router aggregation."""

from fastapi import APIRouter

from . import time_of_day, song, context

api_router = APIRouter(prefix="/api")

api_router.include_router(time_of_day.router)
api_router.include_router(song.router)
api_router.include_router(context.router)
