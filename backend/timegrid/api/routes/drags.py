from fastapi import APIRouter, Depends, status

from timegrid.api.deps import get_drag_engine
from timegrid.core.exceptions import DragNotActiveError
from timegrid.schemas.drag import (
    DragEndRequest,
    DragMoveRequest,
    DragOffsetOut,
    DragResultOut,
    DragSessionOut,
)
from timegrid.services.drag_engine import DragRepositionEngine, drag_key

router = APIRouter()


@router.get("", response_model=list[str])
def list_active_drags(engine: DragRepositionEngine = Depends(get_drag_engine)) -> list[str]:
    return engine.active_keys()


@router.post("/{table_id}/{entry_index}", response_model=DragSessionOut, status_code=status.HTTP_201_CREATED)
def start_drag(
    table_id: str,
    entry_index: int,
    engine: DragRepositionEngine = Depends(get_drag_engine),
) -> DragSessionOut:
    session = engine.start(table_id, entry_index)
    return DragSessionOut(
        key=session.key,
        table_id=session.table_id,
        entry_index=session.entry_index,
        start_day=session.start_day,
    )


@router.post("/{table_id}/{entry_index}/move", response_model=DragOffsetOut)
def move_drag(
    table_id: str,
    entry_index: int,
    payload: DragMoveRequest,
    engine: DragRepositionEngine = Depends(get_drag_engine),
) -> DragOffsetOut:
    offset = engine.move(drag_key(table_id, entry_index), payload.dx, payload.dy, payload.element, payload.container)
    return DragOffsetOut(x=offset.x, y=offset.y)


@router.post("/{table_id}/{entry_index}/end", response_model=DragResultOut)
def end_drag(
    table_id: str,
    entry_index: int,
    payload: DragEndRequest | None = None,
    engine: DragRepositionEngine = Depends(get_drag_engine),
) -> DragResultOut:
    payload = payload or DragEndRequest()
    result = engine.end(drag_key(table_id, entry_index), payload.dx, payload.dy)
    return DragResultOut(
        table_id=result.table_id,
        entry_index=result.entry_index,
        committed=result.committed,
        day=result.day,
        time_offset=result.time_offset,
        reason=result.reason,
    )


@router.delete("/{table_id}/{entry_index}", status_code=status.HTTP_204_NO_CONTENT)
def cancel_drag(
    table_id: str,
    entry_index: int,
    engine: DragRepositionEngine = Depends(get_drag_engine),
) -> None:
    key = drag_key(table_id, entry_index)
    if not engine.cancel(key):
        raise DragNotActiveError(key)
