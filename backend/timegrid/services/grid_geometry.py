from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from timegrid.core.config import Settings
from timegrid.core.exceptions import UnknownDayError
from timegrid.schemas.schedule import DAY_LABELS


@dataclass(frozen=True)
class TimeSlot:
    index: int
    start_minutes: int
    end_minutes: int

    @property
    def duration_minutes(self) -> int:
        return self.end_minutes - self.start_minutes

    @property
    def label(self) -> str:
        return f"{format_minutes(self.start_minutes)}~{format_minutes(self.end_minutes)}"


@dataclass(frozen=True)
class CellSize:
    width: int
    height: int


@dataclass(frozen=True)
class PixelRect:
    left: int
    top: int
    width: int
    height: int


def format_minutes(minutes: int) -> str:
    hours, rest = divmod(minutes, 60)
    return f"{hours:02d}:{rest:02d}"


def build_time_slots(
    *,
    day_start_minutes: int = 9 * 60,
    regular_count: int = 18,
    regular_length: int = 30,
    evening_count: int = 6,
    evening_length: int = 50,
    evening_stride: int = 55,
) -> tuple[TimeSlot, ...]:
    """Daytime slots are back to back; evening slots keep a short break between them."""
    slots: list[TimeSlot] = []
    for offset in range(regular_count):
        start = day_start_minutes + offset * regular_length
        slots.append(TimeSlot(len(slots) + 1, start, start + regular_length))

    evening_start = day_start_minutes + regular_count * regular_length
    for offset in range(evening_count):
        start = evening_start + offset * evening_stride
        slots.append(TimeSlot(len(slots) + 1, start, start + evening_length))
    return tuple(slots)


TIME_SLOTS = build_time_slots()


@dataclass(frozen=True)
class GridGeometry:
    """Maps (day, slot range) grid coordinates to pixel rectangles.

    Holds no mutable state; one instance can be shared by every reader.
    """

    cell_width: int = 80
    cell_height: int = 30
    header_column_width: int = 120
    header_row_height: int = 40
    day_labels: tuple[str, ...] = DAY_LABELS
    time_slots: tuple[TimeSlot, ...] = field(default=TIME_SLOTS)

    @classmethod
    def from_settings(cls, settings: Settings) -> "GridGeometry":
        return cls(
            cell_width=settings.cell_width,
            cell_height=settings.cell_height,
            header_column_width=settings.header_column_width,
            header_row_height=settings.header_row_height,
        )

    @property
    def cell_size(self) -> CellSize:
        return CellSize(self.cell_width, self.cell_height)

    @property
    def slot_count(self) -> int:
        return len(self.time_slots)

    @property
    def day_count(self) -> int:
        return len(self.day_labels)

    @property
    def grid_width(self) -> int:
        return self.header_column_width + self.cell_width * self.day_count

    @property
    def grid_height(self) -> int:
        return self.header_row_height + self.cell_height * self.slot_count

    def day_index_of(self, day: str) -> int | None:
        try:
            return self.day_labels.index(day)
        except ValueError:
            return None

    def day_at(self, index: int) -> str | None:
        if 0 <= index < self.day_count:
            return self.day_labels[index]
        return None

    def slot_label(self, slot: int) -> str | None:
        if 1 <= slot <= self.slot_count:
            return self.time_slots[slot - 1].label
        return None

    def to_pixel_rect(self, day: str, slot_range: Sequence[int]) -> PixelRect:
        day_index = self.day_index_of(day)
        if day_index is None:
            raise UnknownDayError(day)
        if not slot_range:
            raise ValueError("slot range must not be empty")
        # 1px inset on width/height so adjacent entries don't draw double borders.
        return PixelRect(
            left=self.header_column_width + self.cell_width * day_index,
            top=self.header_row_height + self.cell_height * (slot_range[0] - 1),
            width=self.cell_width - 1,
            height=self.cell_height * len(slot_range) - 1,
        )
