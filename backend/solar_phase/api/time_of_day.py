"""GET /api/time-of-day - Solar time of day for theming."""

import logging
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends

from ..config import settings
from ..schemas.time_of_day import DayPhase, TimeOfDayResponse
from ..services.time_of_day import PhaseComputationError, TimeOfDayCalculator
from .dependencies import get_calculator

logger = logging.getLogger(__name__)
router = APIRouter()


def format_instant(ts: int) -> str:
    """Format a UTC epoch timestamp in the site's local timezone."""
    if not ts:
        return "--"
    local = datetime.fromtimestamp(ts, tz=timezone.utc).astimezone(
        ZoneInfo(settings.local_timezone)
    )
    return local.strftime(settings.time_format)


def current_time_of_day(calculator: TimeOfDayCalculator) -> TimeOfDayResponse:
    """Compute the current phase, degrading to the no-data phase on bad data."""
    try:
        phase = calculator.get_current_phase()
    except PhaseComputationError as e:
        logger.error("Time of day computation failed: %s", e)
        phase = DayPhase.empty()

    return TimeOfDayResponse(
        sunrise=format_instant(phase.sunrise),
        sunset=format_instant(phase.sunset),
        tomorrow=format_instant(phase.next_sunrise),
        time_of_day_number=phase.numeric_phase,
        time_of_day=phase.phase_label,
    )


@router.get("/time-of-day", response_model=TimeOfDayResponse)
def get_time_of_day(calculator: TimeOfDayCalculator = Depends(get_calculator)):
    """Return sunrise, sunset, tomorrow's sunrise and the current phase."""
    return current_time_of_day(calculator)
