from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator

DAY_LABELS: tuple[str, ...] = ("월", "화", "수", "목", "금", "토")

DayLabel = Literal["월", "화", "수", "목", "금", "토"]


def validate_slot_range(value: tuple[int, ...]) -> tuple[int, ...]:
    if not value:
        raise ValueError("range must contain at least one slot")
    for previous, current in zip(value, value[1:]):
        if current != previous + 1:
            raise ValueError("range must be a contiguous ascending run of slots")
    return value


class Lecture(BaseModel):
    """One catalog row. Immutable once loaded."""

    id: str = Field(min_length=1)
    title: str
    credits: str
    grade: int
    major: str
    schedule: str = ""

    model_config = {"frozen": True}

    @field_validator("credits", mode="before")
    @classmethod
    def coerce_credits(cls, value: str | int) -> str:
        if isinstance(value, bool):
            raise ValueError("credits must be a string or integer")
        if isinstance(value, int):
            return str(value)
        return value

    @field_validator("schedule", mode="before")
    @classmethod
    def default_schedule(cls, value: str | None) -> str:
        return value or ""


class ScheduleSession(BaseModel):
    """A parsed (day, range, room) triple from a lecture's schedule string."""

    day: DayLabel
    range: tuple[int, ...]
    room: str = ""

    model_config = {"frozen": True}

    @field_validator("range")
    @classmethod
    def validate_range(cls, value: tuple[int, ...]) -> tuple[int, ...]:
        return validate_slot_range(value)


class ScheduleEntry(BaseModel):
    """A lecture session placed on a table.

    Position updates go through ``shifted`` and never mutate the instance,
    so entries can be shared between snapshots and duplicated tables.
    """

    day: DayLabel
    range: tuple[int, ...]
    room: str = ""
    lecture: Lecture

    model_config = {"frozen": True}

    @field_validator("range")
    @classmethod
    def validate_range(cls, value: tuple[int, ...]) -> tuple[int, ...]:
        return validate_slot_range(value)

    @classmethod
    def from_session(cls, session: ScheduleSession, lecture: Lecture) -> "ScheduleEntry":
        return cls(day=session.day, range=session.range, room=session.room, lecture=lecture)

    @property
    def start(self) -> int:
        return self.range[0]

    @property
    def size(self) -> int:
        return len(self.range)

    def covers(self, day: str, time: int) -> bool:
        return self.day == day and time in self.range

    def shifted(self, new_day: str, time_offset: int) -> "ScheduleEntry":
        # Adding a constant keeps the range contiguous, so skip re-validation.
        return self.model_copy(
            update={"day": new_day, "range": tuple(slot + time_offset for slot in self.range)}
        )
