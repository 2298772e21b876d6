from __future__ import annotations

import logging
import re

from timegrid.schemas.schedule import DAY_LABELS, ScheduleSession
from timegrid.services.grid_geometry import TIME_SLOTS

logger = logging.getLogger(__name__)

SESSION_SEPARATOR = re.compile(r"<p>", re.IGNORECASE)
SESSION_PATTERN = re.compile(
    r"^\s*(?P<day>\S)\s*(?P<start>\d{1,4})\s*(?:~\s*(?P<end>\d{1,4}))?\s*(?:\((?P<room>[^)]*)\))?\s*$"
)


def parse_session(raw: str, slot_count: int = len(TIME_SLOTS)) -> ScheduleSession | None:
    """Parse one ``<day><start>[~<end>][(<room>)]`` chunk, e.g. ``월1~3(C-101)``.

    Ranges that do not fit inside ``1..slot_count`` are malformed.
    """
    match = SESSION_PATTERN.match(raw)
    if not match:
        return None
    day = match.group("day")
    if day not in DAY_LABELS:
        return None
    start = int(match.group("start"))
    end = int(match.group("end") or start)
    if start < 1 or end < start or end > slot_count:
        return None
    room = (match.group("room") or "").strip()
    return ScheduleSession(day=day, range=tuple(range(start, end + 1)), room=room)


def parse_schedule(raw: str | None) -> list[ScheduleSession]:
    """Expand a catalog schedule string into sessions.

    Malformed chunks are dropped and logged at debug level, never raised.
    """
    if not raw:
        return []
    sessions: list[ScheduleSession] = []
    for chunk in SESSION_SEPARATOR.split(raw):
        if not chunk.strip():
            continue
        session = parse_session(chunk)
        if session is None:
            logger.debug("Skipping malformed schedule chunk %r", chunk)
            continue
        sessions.append(session)
    return sessions
