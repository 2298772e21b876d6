from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from collections.abc import Callable

from fastapi import WebSocket

from timegrid.services.schedule_store import ScheduleStore, TableChange

logger = logging.getLogger(__name__)

ALL_TABLES = "*"


def change_to_event_payload(change: TableChange) -> dict:
    return {
        "event": f"table.{change.kind}",
        "table_id": change.table_id,
        "version": change.version,
        "entries": [entry.model_dump(mode="json") for entry in change.entries],
    }


class TableEventHub:
    """Forwards store read-channel changes to websocket subscribers.

    Sockets subscribe to one table id, or to ``ALL_TABLES``.
    """

    def __init__(self) -> None:
        self._connections: dict[str, set[WebSocket]] = defaultdict(set)
        self._lock = asyncio.Lock()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._unsubscribe: Callable[[], None] | None = None

    def attach(self, store: ScheduleStore, loop: asyncio.AbstractEventLoop) -> None:
        self.detach()
        self._loop = loop
        self._unsubscribe = store.subscribe(self._on_change)

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._loop = None

    async def connect(self, table_id: str, websocket: WebSocket) -> None:
        await websocket.accept()
        async with self._lock:
            self._connections[table_id].add(websocket)

    async def disconnect(self, table_id: str, websocket: WebSocket) -> None:
        async with self._lock:
            sockets = self._connections.get(table_id)
            if not sockets:
                return
            sockets.discard(websocket)
            if not sockets:
                self._connections.pop(table_id, None)

    async def publish(self, table_id: str, payload: dict) -> None:
        async with self._lock:
            targets = [
                (key, websocket)
                for key in (table_id, ALL_TABLES)
                for websocket in self._connections.get(key, set())
            ]

        if not targets:
            return

        stale: list[tuple[str, WebSocket]] = []
        for key, websocket in targets:
            try:
                await websocket.send_json(payload)
            except Exception:  # pragma: no cover - network/runtime dependent
                stale.append((key, websocket))

        if stale:
            async with self._lock:
                for key, socket in stale:
                    active = self._connections.get(key, set())
                    active.discard(socket)
                    if not active:
                        self._connections.pop(key, None)
            logger.debug("Removed %d stale table websocket(s) for table %s", len(stale), table_id)

    def _on_change(self, change: TableChange) -> None:
        # Store writes may run on a worker thread; hop onto the loop that owns the sockets.
        loop = self._loop
        if loop is None or loop.is_closed():
            return
        payload = change_to_event_payload(change)
        asyncio.run_coroutine_threadsafe(self.publish(change.table_id, payload), loop)
