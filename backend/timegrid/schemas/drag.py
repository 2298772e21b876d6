from __future__ import annotations

from pydantic import BaseModel, model_validator


class RectIn(BaseModel):
    left: float
    top: float
    right: float
    bottom: float

    @model_validator(mode="after")
    def validate_edges(self) -> "RectIn":
        if self.right < self.left or self.bottom < self.top:
            raise ValueError("right/bottom must not be smaller than left/top")
        return self


class DragMoveRequest(BaseModel):
    dx: float
    dy: float
    element: RectIn
    container: RectIn


class DragEndRequest(BaseModel):
    dx: float | None = None
    dy: float | None = None


class DragSessionOut(BaseModel):
    key: str
    table_id: str
    entry_index: int
    start_day: str


class DragOffsetOut(BaseModel):
    x: float
    y: float


class DragResultOut(BaseModel):
    table_id: str
    entry_index: int
    committed: bool
    day: str
    time_offset: int
    reason: str | None = None
