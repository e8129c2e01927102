"""Pydantic schemas for the time-of-day calculation and API."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

PhaseLabel = Literal["morning", "day", "evening", "twilight", "night", "dawn"]

# Upper bound (inclusive) of each label on the 0-200 scale, checked in order.
# 0-100 runs sunrise to sunset, 100-200 runs sunset to the next sunrise.
PHASE_THRESHOLDS: list[tuple[int, PhaseLabel]] = [
    (25, "morning"),
    (75, "day"),
    (100, "evening"),
    (125, "twilight"),
    (175, "night"),
    (200, "dawn"),
]

MIN_PHASE = 0
MAX_PHASE = 200

# Label used when there are no sunrise/sunset data at all.
NO_DATA_LABEL: PhaseLabel = "night"


def label_for(numeric_phase: int) -> PhaseLabel:
    """Map a numeric phase (0-200) to its label.

    Raises:
        ValueError: if the number is outside 0-200.
    """
    if numeric_phase < MIN_PHASE:
        raise ValueError(f"Invalid numeric time of day: {numeric_phase}")
    for upper, label in PHASE_THRESHOLDS:
        if numeric_phase <= upper:
            return label
    raise ValueError(f"Invalid numeric time of day: {numeric_phase}")


class DayPhase(BaseModel):
    """Where the current moment falls in the day/night cycle.

    Instants are UTC epoch seconds; 0 means unknown.  The label must agree
    with the number, except for the no-data phase (every instant 0), which
    is number 0 labelled "night".
    """

    model_config = ConfigDict(frozen=True)

    sunrise: int = 0
    sunset: int = 0
    next_sunrise: int = 0
    numeric_phase: int = Field(ge=MIN_PHASE, le=MAX_PHASE)
    phase_label: PhaseLabel

    @property
    def is_empty(self) -> bool:
        return self.sunrise == 0 and self.sunset == 0 and self.next_sunrise == 0

    @model_validator(mode="after")
    def _label_matches_number(self) -> "DayPhase":
        if self.is_empty and self.numeric_phase == 0 and self.phase_label == NO_DATA_LABEL:
            return self
        expected = label_for(self.numeric_phase)
        if self.phase_label != expected:
            raise ValueError(
                f"Label {self.phase_label!r} does not match numeric time of day "
                f"{self.numeric_phase} (expected {expected!r})"
            )
        return self

    @classmethod
    def empty(cls) -> "DayPhase":
        return cls(numeric_phase=0, phase_label=NO_DATA_LABEL)


class TimeOfDayResponse(BaseModel):
    sunrise: str
    sunset: str
    tomorrow: str
    time_of_day_number: int
    time_of_day: PhaseLabel
