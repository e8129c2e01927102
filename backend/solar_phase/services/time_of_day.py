"""Solar time of day for the site's fixed location.

Sunrise/sunset data come from sunrise-sunset.org and are cached for a day.
The current moment is placed on a 0-200 scale: 0-100 is the share of
daylight elapsed (sunrise to sunset), 100-200 is the share of the night
elapsed (sunset to tomorrow's sunrise) plus 100.  That number picks one of
six labels used for theming.

When cached data are stale the night-time share overshoots 200 (it is
already past tomorrow's sunrise).  That triggers a single forced refetch;
whatever comes back is clamped to the 0-200 scale.
"""

import logging
import time
from decimal import Decimal, ROUND_HALF_UP
from typing import Callable, Optional

from pydantic import ValidationError

from ..config import settings
from ..schemas.time_of_day import DayPhase, MAX_PHASE, MIN_PHASE, label_for
from .solar_reading import EMPTY_READING, SolarReading
from .sunrise_api import SunriseSunsetClient
from .transients import TransientCache

logger = logging.getLogger(__name__)

# Forced refetches allowed per calculation when the phase overshoots 200.
MAX_REFETCHES = 1


class PhaseComputationError(ValueError):
    """Raised when the sunrise/sunset interval is empty or reversed."""


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(Decimal(repr(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def elapsed_percent(now: int, start: int, end: int) -> int:
    """Percent of the interval [start, end] elapsed at ``now``.

    Not bounded to 0-100: a ``now`` outside the interval gives a negative
    value or one above 100.

    Raises:
        PhaseComputationError: if ``end`` is not after ``start``.
    """
    if end <= start:
        raise PhaseComputationError(
            f"Degenerate interval: start={start} end={end}"
        )
    return round_half_up((now - start) / (end - start) * 100)


def is_night(now: int, sunset: int) -> bool:
    return now > sunset


def numeric_phase(now: int, reading: SolarReading) -> int:
    """Unclamped position of ``now`` on the 0-200 day/night scale.

    The empty reading yields 0.

    Raises:
        PhaseComputationError: on a zero-length or reversed day or night.
    """
    if reading.is_empty:
        return 0
    if reading.sunset <= reading.sunrise:
        raise PhaseComputationError(
            f"Sunset ({reading.sunset}) is not after sunrise ({reading.sunrise})"
        )
    if is_night(now, reading.sunset):
        return elapsed_percent(now, reading.sunset, reading.next_sunrise) + 100
    return elapsed_percent(now, reading.sunrise, reading.sunset)


def build_phase(reading: SolarReading, number: int) -> DayPhase:
    """Clamp ``number`` to 0-200 and wrap it with its label."""
    if reading.is_empty:
        return DayPhase.empty()
    clamped = min(max(number, MIN_PHASE), MAX_PHASE)
    if clamped != number:
        logger.warning(
            "Numeric time of day %d out of range; clamped to %d", number, clamped,
        )
    return DayPhase(
        sunrise=reading.sunrise,
        sunset=reading.sunset,
        next_sunrise=reading.next_sunrise,
        numeric_phase=clamped,
        phase_label=label_for(clamped),
    )


def reading_from_phase(phase: DayPhase) -> SolarReading:
    return SolarReading(
        sunrise=phase.sunrise,
        sunset=phase.sunset,
        next_sunrise=phase.next_sunrise,
    )


class TimeOfDayCalculator:
    """Computes the current DayPhase, caching fetched data in a transient."""

    def __init__(
        self,
        client: SunriseSunsetClient,
        cache: TransientCache,
        cache_key: str = settings.cache_key,
        ttl: int = settings.cache_ttl_sec,
        clock: Callable[[], float] = time.time,
    ):
        self.client = client
        self.cache = cache
        self.cache_key = cache_key
        self.ttl = ttl
        self._clock = clock

    def _now(self) -> int:
        return int(self._clock())

    def fetch_reading(self) -> SolarReading:
        """Fetch today's and tomorrow's data; empty reading unless both succeed."""
        today = self.client.fetch_day("today")
        tomorrow = self.client.fetch_day("tomorrow")
        if not (today.ok and tomorrow.ok):
            logger.warning(
                "Sunrise data unavailable (today: %s, tomorrow: %s); using empty reading",
                today.error or "ok", tomorrow.error or "ok",
            )
            return EMPTY_READING
        return SolarReading.from_payloads(today.payload, tomorrow.payload)

    def _cached_phase(self) -> Optional[DayPhase]:
        raw = self.cache.get(self.cache_key)
        if raw is None:
            return None
        try:
            return DayPhase.model_validate_json(raw)
        except ValidationError as exc:
            logger.warning("Discarding unreadable cached time of day: %s", exc)
            self.cache.delete(self.cache_key)
            return None

    def get_or_compute(self, force_refresh: bool = False) -> DayPhase:
        """Return the cached DayPhase, or fetch, compute and cache a new one.

        Args:
            force_refresh: Skip the cache and always hit the API.
        """
        if not force_refresh:
            cached = self._cached_phase()
            if cached is not None:
                return cached

        reading = self.fetch_reading()
        try:
            number = numeric_phase(self._now(), reading)
        except PhaseComputationError:
            # hold the no-data phase for a TTL instead of refetching every request
            self.cache.set(self.cache_key, DayPhase.empty().model_dump_json(), self.ttl)
            raise
        phase = build_phase(reading, number)
        self.cache.set(self.cache_key, phase.model_dump_json(), self.ttl)
        logger.info(
            "Solar time refreshed: sunrise=%d sunset=%d next_sunrise=%d (%s)",
            phase.sunrise, phase.sunset, phase.next_sunrise, phase.phase_label,
        )
        return phase

    def get_current_phase(self) -> DayPhase:
        """DayPhase for the current moment.

        Uses the cached instants and recomputes the number against the clock.
        An overshoot past 200 forces up to MAX_REFETCHES fresh fetches.
        """
        now = self._now()
        reading = reading_from_phase(self.get_or_compute())
        number = numeric_phase(now, reading)

        refetches = 0
        while number > MAX_PHASE and refetches < MAX_REFETCHES:
            refetches += 1
            logger.info(
                "Numeric time of day %d exceeds %d; refetching sunrise data",
                number, MAX_PHASE,
            )
            reading = reading_from_phase(self.get_or_compute(force_refresh=True))
            number = numeric_phase(now, reading)

        return build_phase(reading, number)
