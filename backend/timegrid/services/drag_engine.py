from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
import logging
from threading import Lock
from typing import Protocol

from timegrid.core.exceptions import DragConflictError, DragNotActiveError, EntryIndexError
from timegrid.services.grid_geometry import GridGeometry
from timegrid.services.schedule_store import ScheduleStore

logger = logging.getLogger(__name__)


class BoundingRect(Protocol):
    left: float
    top: float
    right: float
    bottom: float


@dataclass(frozen=True)
class Rect:
    left: float
    top: float
    right: float
    bottom: float


@dataclass(frozen=True)
class DragOffset:
    x: float
    y: float


@dataclass
class DragSession:
    table_id: str
    entry_index: int
    start_day: str
    offset: DragOffset | None = None

    @property
    def key(self) -> str:
        return drag_key(self.table_id, self.entry_index)


@dataclass(frozen=True)
class DragResult:
    table_id: str
    entry_index: int
    committed: bool
    day: str
    time_offset: int = 0
    reason: str | None = None


def drag_key(table_id: str, entry_index: int) -> str:
    return f"{table_id}:{entry_index}"


def parse_drag_key(key: str) -> tuple[str, int]:
    table_id, sep, raw_index = key.rpartition(":")
    if not sep or not table_id:
        raise ValueError(f"Invalid drag key {key!r}")
    try:
        return table_id, int(raw_index)
    except ValueError:
        raise ValueError(f"Invalid drag key {key!r}") from None


def round_half_away(value: float) -> int:
    """Round to nearest integer; exact halves go away from zero (-0.5 -> -1)."""
    return int(Decimal(value).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def snap(delta: float, cell: float) -> float:
    return round_half_away(delta / cell) * cell


def clamp(value: float, low: float, high: float) -> float:
    # High bound wins when the window is inverted (element larger than the free area).
    return min(max(value, low), high)


class DragRepositionEngine:
    """Tracks in-flight drags and turns the final pointer delta into a store move.

    Moves only compute the snapped, clamped visual offset; the store is
    written once, on ``end``. Each entry (``table_id:index``) can have at most
    one drag at a time; drags on different entries never wait on each other.
    """

    def __init__(self, store: ScheduleStore, geometry: GridGeometry) -> None:
        self._store = store
        self._actions = store.actions
        self._geometry = geometry
        self._sessions: dict[str, DragSession] = {}
        self._lock = Lock()

    def start(self, table_id: str, entry_index: int) -> DragSession:
        entries = self._store.table(table_id)
        if not 0 <= entry_index < len(entries):
            raise EntryIndexError(table_id, entry_index, len(entries))
        session = DragSession(table_id=table_id, entry_index=entry_index, start_day=entries[entry_index].day)
        with self._lock:
            if session.key in self._sessions:
                raise DragConflictError(session.key)
            self._sessions[session.key] = session
        return session

    def move(self, key: str, dx: float, dy: float, element: BoundingRect, container: BoundingRect) -> DragOffset:
        session = self._session(key)
        geometry = self._geometry

        min_x = container.left - element.left + geometry.header_column_width + 1
        min_y = container.top - element.top + geometry.header_row_height + 1
        max_x = container.right - element.right
        max_y = container.bottom - element.bottom

        offset = DragOffset(
            x=clamp(snap(dx, geometry.cell_width), min_x, max_x),
            y=clamp(snap(dy, geometry.cell_height), min_y, max_y),
        )
        session.offset = offset
        return offset

    def end(self, key: str, dx: float | None = None, dy: float | None = None) -> DragResult:
        with self._lock:
            session = self._sessions.pop(key, None)
        if session is None:
            raise DragNotActiveError(key)

        geometry = self._geometry
        if session.offset is not None:
            final_x, final_y = session.offset.x, session.offset.y
        else:
            final_x = snap(dx or 0, geometry.cell_width)
            final_y = snap(dy or 0, geometry.cell_height)

        day_delta = round_half_away(final_x / geometry.cell_width)
        time_delta = round_half_away(final_y / geometry.cell_height)

        start_index = geometry.day_index_of(session.start_day)
        new_day = None if start_index is None else geometry.day_at(start_index + day_delta)
        if new_day is None:
            logger.debug("Discarding drag %s: day delta %d leaves the grid", key, day_delta)
            return DragResult(
                table_id=session.table_id,
                entry_index=session.entry_index,
                committed=False,
                day=session.start_day,
                reason="out_of_range",
            )

        # TODO: reject or clamp moves that push the range past the last slot once the product decides which.
        self._actions.update_entry_position(session.table_id, session.entry_index, new_day, time_delta)
        return DragResult(
            table_id=session.table_id,
            entry_index=session.entry_index,
            committed=True,
            day=new_day,
            time_offset=time_delta,
        )

    def cancel(self, key: str) -> bool:
        with self._lock:
            return self._sessions.pop(key, None) is not None

    def is_dragging(self, key: str) -> bool:
        with self._lock:
            return key in self._sessions

    def active_keys(self) -> list[str]:
        with self._lock:
            return list(self._sessions)

    def _session(self, key: str) -> DragSession:
        with self._lock:
            session = self._sessions.get(key)
        if session is None:
            raise DragNotActiveError(key)
        return session
