from __future__ import annotations

from dataclasses import asdict
import logging

from fastapi import APIRouter, Depends, Query, Response, status

from timegrid.api.deps import get_actions, get_catalog_cache, get_geometry, get_store
from timegrid.core.exceptions import ResourceNotFoundError, UnknownTableError
from timegrid.schemas.schedule import DayLabel, ScheduleEntry
from timegrid.schemas.table import (
    AddEntriesRequest,
    EntryOut,
    PixelRectOut,
    PositionUpdate,
    RemovedEntriesOut,
    TableCreatedOut,
    TableOut,
    TablesOut,
)
from timegrid.services.catalog_cache import CatalogCache
from timegrid.services.grid_geometry import GridGeometry
from timegrid.services.schedule_parser import parse_schedule
from timegrid.services.schedule_store import ScheduleActions, ScheduleStore, TableEntries, lecture_colors

logger = logging.getLogger(__name__)

router = APIRouter()


def table_to_out(table_id: str, entries: TableEntries, geometry: GridGeometry) -> TableOut:
    colors = lecture_colors(entries)
    return TableOut(
        table_id=table_id,
        entries=[
            EntryOut(
                index=index,
                day=entry.day,
                range=list(entry.range),
                room=entry.room,
                lecture=entry.lecture,
                color=colors[entry.lecture.id],
                rect=PixelRectOut(**asdict(geometry.to_pixel_rect(entry.day, entry.range))),
            )
            for index, entry in enumerate(entries)
        ],
    )


@router.get("", response_model=TablesOut)
def list_tables(
    store: ScheduleStore = Depends(get_store),
    geometry: GridGeometry = Depends(get_geometry),
) -> TablesOut:
    version = store.version
    snapshot = store.snapshot()
    return TablesOut(
        version=version,
        tables=[table_to_out(table_id, entries, geometry) for table_id, entries in snapshot.items()],
        can_remove=len(snapshot) > 1,
    )


@router.get("/{table_id}", response_model=TableOut)
def read_table(
    table_id: str,
    store: ScheduleStore = Depends(get_store),
    geometry: GridGeometry = Depends(get_geometry),
) -> TableOut:
    return table_to_out(table_id, store.table(table_id), geometry)


@router.post("/{table_id}/duplicate", response_model=TableCreatedOut, status_code=status.HTTP_201_CREATED)
def duplicate_table(table_id: str, actions: ScheduleActions = Depends(get_actions)) -> TableCreatedOut:
    return TableCreatedOut(table_id=actions.duplicate_table(table_id))


@router.delete("/{table_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_table(table_id: str, actions: ScheduleActions = Depends(get_actions)) -> Response:
    actions.remove_table(table_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{table_id}/entries", response_model=TableOut, status_code=status.HTTP_201_CREATED)
async def add_lecture(
    table_id: str,
    payload: AddEntriesRequest,
    store: ScheduleStore = Depends(get_store),
    cache: CatalogCache = Depends(get_catalog_cache),
    geometry: GridGeometry = Depends(get_geometry),
) -> TableOut:
    if not store.has_table(table_id):
        raise UnknownTableError(table_id)

    lecture = payload.lecture
    if lecture is None:
        lectures = await cache.fetch_all()
        lecture = next((item for item in lectures if item.id == payload.lecture_id), None)
        if lecture is None:
            raise ResourceNotFoundError("Lecture", payload.lecture_id)

    sessions = parse_schedule(lecture.schedule)
    if not sessions:
        logger.info("Lecture %s has no parseable sessions; nothing added to %s", lecture.id, table_id)
    store.actions.add_entries(table_id, [ScheduleEntry.from_session(session, lecture) for session in sessions])
    return table_to_out(table_id, store.table(table_id), geometry)


@router.delete("/{table_id}/entries", response_model=RemovedEntriesOut)
def remove_entries(
    table_id: str,
    day: DayLabel = Query(),
    time: int = Query(ge=1),
    actions: ScheduleActions = Depends(get_actions),
) -> RemovedEntriesOut:
    return RemovedEntriesOut(removed=actions.remove_entry(table_id, day, time))


@router.patch("/{table_id}/entries/{entry_index}/position", response_model=TableOut)
def update_entry_position(
    table_id: str,
    entry_index: int,
    payload: PositionUpdate,
    store: ScheduleStore = Depends(get_store),
    geometry: GridGeometry = Depends(get_geometry),
) -> TableOut:
    store.actions.update_entry_position(table_id, entry_index, payload.day, payload.time_offset)
    return table_to_out(table_id, store.table(table_id), geometry)
