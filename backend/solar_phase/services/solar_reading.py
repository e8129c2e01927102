"""Sunrise/sunset readings parsed from sunrise-sunset.org payloads.

The API answers ``{"results": {"sunrise": "...", "sunset": "..."}}`` with
ISO-8601 timestamps when queried with ``formatted=0``.  Anything missing or
unparsable becomes instant 0 (the epoch) so the arithmetic downstream never
has to deal with an absent value; a reading whose instants are all zero is
the "no data" reading.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DayTimes:
    """Sunrise and sunset for a single day, plus the fields that were absent."""
    sunrise: int = 0
    sunset: int = 0
    missing: tuple[str, ...] = ()

    @property
    def complete(self) -> bool:
        return not self.missing


@dataclass(frozen=True)
class SolarReading:
    """Today's sunrise/sunset and tomorrow's sunrise, as UTC epoch seconds."""
    sunrise: int = 0
    sunset: int = 0
    next_sunrise: int = 0

    @property
    def is_empty(self) -> bool:
        return self.sunrise == 0 and self.sunset == 0 and self.next_sunrise == 0

    @classmethod
    def from_payloads(
        cls,
        today: Optional[Any],
        tomorrow: Optional[Any],
    ) -> "SolarReading":
        """Combine today's sunrise/sunset with tomorrow's sunrise."""
        day = parse_day(today)
        next_day = parse_day(tomorrow)
        if day.missing:
            logger.warning(
                "Today's sunrise data missing %s; using 0", ", ".join(day.missing),
            )
        if "sunrise" in next_day.missing:
            logger.warning("Tomorrow's sunrise missing; using 0")
        return cls(
            sunrise=day.sunrise,
            sunset=day.sunset,
            next_sunrise=next_day.sunrise,
        )


EMPTY_READING = SolarReading()


def parse_instant(value: Any) -> Optional[int]:
    """Convert an ISO-8601 string to UTC epoch seconds.

    Naive timestamps are taken to be UTC, which is what the API returns.

    Returns:
        Epoch seconds, or None if the value is not a parsable timestamp.
    """
    if not isinstance(value, str) or not value:
        return None
    try:
        dt = datetime.fromisoformat(value)
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(dt.timestamp())


def parse_day(payload: Optional[Any]) -> DayTimes:
    """Extract sunrise/sunset from one decoded API payload.

    Args:
        payload: Decoded JSON body, or None if the request failed.

    Returns:
        DayTimes with 0 for any field that was absent or malformed; the names
        of those fields are listed in ``missing``.
    """
    results = payload.get("results") if isinstance(payload, dict) else None
    if not isinstance(results, dict):
        return DayTimes(missing=("sunrise", "sunset"))

    values: dict[str, int] = {}
    missing: list[str] = []
    for name in ("sunrise", "sunset"):
        instant = parse_instant(results.get(name))
        if instant is None:
            missing.append(name)
            instant = 0
        values[name] = instant

    return DayTimes(
        sunrise=values["sunrise"],
        sunset=values["sunset"],
        missing=tuple(missing),
    )
