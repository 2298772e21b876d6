from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
import itertools
import logging
from threading import Lock
from types import MappingProxyType
from typing import Literal

from timegrid.core.exceptions import EntryIndexError, LastTableError, UnknownDayError, UnknownTableError
from timegrid.schemas.schedule import DAY_LABELS, ScheduleEntry

logger = logging.getLogger(__name__)

TableEntries = tuple[ScheduleEntry, ...]
TableMap = Mapping[str, TableEntries]
ChangeKind = Literal["created", "updated", "removed"]

LECTURE_COLORS = ("#fdd", "#ffd", "#dff", "#ddf", "#fdf", "#dfd")


@dataclass(frozen=True)
class TableChange:
    kind: ChangeKind
    table_id: str
    entries: TableEntries
    version: int


Subscriber = Callable[[TableChange], None]
IdGenerator = Callable[[], str]


def counter_id_generator(prefix: str = "schedule-", start: int = 1) -> IdGenerator:
    counter = itertools.count(start)

    def generate() -> str:
        return f"{prefix}{next(counter)}"

    return generate


def lecture_colors(entries: Iterable[ScheduleEntry]) -> dict[str, str]:
    """Colour per lecture id, assigned by first appearance in the table."""
    colors: dict[str, str] = {}
    for entry in entries:
        lecture_id = entry.lecture.id
        if lecture_id not in colors:
            colors[lecture_id] = LECTURE_COLORS[len(colors) % len(LECTURE_COLORS)]
    return colors


class ScheduleStore:
    """Authoritative table id -> entries mapping.

    Reads return an immutable snapshot. Writes go through ``actions`` and are
    serialized on one lock; each write swaps in a new mapping, so a reader
    holding an older snapshot never sees a half-applied change.
    """

    def __init__(
        self,
        initial: Mapping[str, Iterable[ScheduleEntry]] | None = None,
        *,
        seed_table_ids: Iterable[str] | None = None,
        id_generator: IdGenerator | None = None,
    ) -> None:
        tables: dict[str, TableEntries] = {}
        if initial is not None:
            tables = {table_id: tuple(entries) for table_id, entries in initial.items()}
        elif seed_table_ids is not None:
            tables = {table_id: () for table_id in seed_table_ids}
        if not tables:
            raise ValueError("ScheduleStore requires at least one table")

        self._tables: TableMap = MappingProxyType(tables)
        self._issued_ids: set[str] = set(tables)
        self._id_generator = id_generator or counter_id_generator()
        self._version = 0
        self._write_lock = Lock()
        self._subscriber_lock = Lock()
        self._subscribers: dict[str | None, list[Subscriber]] = defaultdict(list)
        self._actions = ScheduleActions(self)

    # -- read channel --------------------------------------------------

    def snapshot(self) -> TableMap:
        return self._tables

    def table(self, table_id: str) -> TableEntries:
        tables = self._tables
        if table_id not in tables:
            raise UnknownTableError(table_id)
        return tables[table_id]

    def table_ids(self) -> list[str]:
        return list(self._tables)

    def has_table(self, table_id: str) -> bool:
        return table_id in self._tables

    @property
    def version(self) -> int:
        return self._version

    def subscribe(self, callback: Subscriber, table_id: str | None = None) -> Callable[[], None]:
        """Register a read-channel callback.

        With ``table_id`` the callback only fires for changes to that table;
        without it, it fires for every change. Returns an unsubscribe function.
        """
        with self._subscriber_lock:
            self._subscribers[table_id].append(callback)

        def unsubscribe() -> None:
            with self._subscriber_lock:
                callbacks = self._subscribers.get(table_id)
                if callbacks and callback in callbacks:
                    callbacks.remove(callback)
                    if not callbacks:
                        self._subscribers.pop(table_id, None)

        return unsubscribe

    # -- write channel -------------------------------------------------

    @property
    def actions(self) -> "ScheduleActions":
        return self._actions

    def _new_table_id(self) -> str:
        while True:
            candidate = self._id_generator()
            if candidate not in self._issued_ids:
                self._issued_ids.add(candidate)
                return candidate
            logger.debug("Id generator returned already issued table id %s", candidate)

    def _commit(self, mutate: Callable[[dict[str, TableEntries]], dict[str, ChangeKind]]) -> None:
        with self._write_lock:
            tables = dict(self._tables)
            # mutate raises before anything is published, leaving the old mapping in place.
            changed = mutate(tables)
            if not changed:
                return
            self._tables = MappingProxyType(tables)
            self._version += 1
            version = self._version
            changes = [
                TableChange(kind=kind, table_id=table_id, entries=tables.get(table_id, ()), version=version)
                for table_id, kind in changed.items()
            ]
        self._notify(changes)

    def _notify(self, changes: list[TableChange]) -> None:
        for change in changes:
            with self._subscriber_lock:
                callbacks = list(self._subscribers.get(change.table_id, ())) + list(
                    self._subscribers.get(None, ())
                )
            for callback in callbacks:
                try:
                    callback(change)
                except Exception:
                    logger.warning(
                        "Schedule subscriber failed for table %s (version %d)",
                        change.table_id,
                        change.version,
                        exc_info=True,
                    )


class ScheduleActions:
    """Write capability of a ``ScheduleStore``.

    One instance per store, handed out unchanged for the store's lifetime, so
    holders of it are never invalidated by data changes.
    """

    def __init__(self, store: ScheduleStore) -> None:
        self._store = store

    def add_entries(self, table_id: str, entries: Iterable[ScheduleEntry]) -> None:
        new_entries = tuple(entries)

        def mutate(tables: dict[str, TableEntries]) -> dict[str, ChangeKind]:
            current = _require_table(tables, table_id)
            if not new_entries:
                return {}
            tables[table_id] = current + new_entries
            return {table_id: "updated"}

        self._store._commit(mutate)

    def remove_entry(self, table_id: str, day: str, time: int) -> int:
        removed = 0

        def mutate(tables: dict[str, TableEntries]) -> dict[str, ChangeKind]:
            nonlocal removed
            current = _require_table(tables, table_id)
            kept = tuple(entry for entry in current if not entry.covers(day, time))
            removed = len(current) - len(kept)
            if not removed:
                return {}
            tables[table_id] = kept
            return {table_id: "updated"}

        self._store._commit(mutate)
        return removed

    def duplicate_table(self, source_table_id: str) -> str:
        new_table_id = ""

        def mutate(tables: dict[str, TableEntries]) -> dict[str, ChangeKind]:
            nonlocal new_table_id
            source = _require_table(tables, source_table_id)
            new_table_id = self._store._new_table_id()
            # Entries are frozen, so copying the tuple is a full value copy.
            tables[new_table_id] = tuple(source)
            return {new_table_id: "created"}

        self._store._commit(mutate)
        logger.info("Duplicated table %s as %s", source_table_id, new_table_id)
        return new_table_id

    def remove_table(self, table_id: str) -> None:
        def mutate(tables: dict[str, TableEntries]) -> dict[str, ChangeKind]:
            _require_table(tables, table_id)
            if len(tables) == 1:
                raise LastTableError(table_id)
            del tables[table_id]
            return {table_id: "removed"}

        self._store._commit(mutate)
        logger.info("Removed table %s", table_id)

    def update_entry_position(self, table_id: str, entry_index: int, new_day: str, time_offset: int) -> None:
        """Move one entry. Only the day label and the index are checked; slot bounds are the caller's concern."""
        if new_day not in DAY_LABELS:
            raise UnknownDayError(new_day)

        def mutate(tables: dict[str, TableEntries]) -> dict[str, ChangeKind]:
            current = _require_table(tables, table_id)
            if not 0 <= entry_index < len(current):
                raise EntryIndexError(table_id, entry_index, len(current))
            entry = current[entry_index]
            moved = entry.shifted(new_day, time_offset)
            if moved == entry:
                return {}
            tables[table_id] = current[:entry_index] + (moved,) + current[entry_index + 1 :]
            return {table_id: "updated"}

        self._store._commit(mutate)

    def replace_table(self, table_id: str, entries: Iterable[ScheduleEntry]) -> None:
        new_entries = tuple(entries)

        def mutate(tables: dict[str, TableEntries]) -> dict[str, ChangeKind]:
            if _require_table(tables, table_id) == new_entries:
                return {}
            tables[table_id] = new_entries
            return {table_id: "updated"}

        self._store._commit(mutate)


def _require_table(tables: Mapping[str, TableEntries], table_id: str) -> TableEntries:
    if table_id not in tables:
        raise UnknownTableError(table_id)
    return tables[table_id]


class TableScheduleView:
    """Store operations bound to a single table."""

    def __init__(self, store: ScheduleStore, table_id: str) -> None:
        if not store.has_table(table_id):
            raise UnknownTableError(table_id)
        self._store = store
        self._actions = store.actions
        self.table_id = table_id

    @property
    def entries(self) -> TableEntries:
        return self._store.table(self.table_id)

    @property
    def colors(self) -> dict[str, str]:
        return lecture_colors(self.entries)

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        return self._store.subscribe(callback, table_id=self.table_id)

    def add_entries(self, entries: Iterable[ScheduleEntry]) -> None:
        self._actions.add_entries(self.table_id, entries)

    def remove_entry(self, day: str, time: int) -> int:
        return self._actions.remove_entry(self.table_id, day, time)

    def update_entry_position(self, entry_index: int, new_day: str, time_offset: int) -> None:
        self._actions.update_entry_position(self.table_id, entry_index, new_day, time_offset)
