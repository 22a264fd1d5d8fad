"""
Time slot value and the Pydantic models used on the wire.

``TimeSlotJSON`` is the request body accepted by every
``/availability`` route.  It is purely a serialization surface: the
validator turns it into a ``TimeSlot`` and it is never stored.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta

from pydantic import BaseModel, ConfigDict, Field, StrictStr


@dataclass(frozen=True)
class TimeSlot:
    """An interval defined by a start instant and a positive duration.

    Two slots are equal when both ``start`` (compared as instants) and
    ``duration`` are equal.  Duration positivity is checked by the
    validator, not here.
    """

    start: datetime
    duration: timedelta

    @property
    def end(self) -> datetime:
        return self.start + self.duration

    def overlaps(self, other: "TimeSlot") -> bool:
        """Return True if ``other`` shares any boundary or interior instant.

        A shared start or a shared end counts as overlap, as does any
        boundary of one slot lying strictly inside the other.  Slots that
        only touch end-to-start do not overlap.
        """
        end = self.end
        other_end = other.end
        return (
            self.start == other.start
            or end == other_end
            or other.start < self.start < other_end
            or self.start < other.start < end
            or other.start < end < other_end
            or self.start < other_end < end
        )


class TimeSlotJSON(BaseModel):
    """Request body describing a time slot."""

    model_config = ConfigDict(extra="ignore")

    # Missing fields default to empty strings and are rejected by the
    # validator with the matching field message.
    start: StrictStr = Field("", description="RFC3339 start timestamp", examples=["2030-01-01T09:00:00Z"])
    duration: StrictStr = Field("", description="Duration expression such as 1h30m", examples=["1h30m"])


class AvailabilityRead(BaseModel):
    available: bool


class ErrorRead(BaseModel):
    err: str
