from __future__ import annotations

from pydantic import BaseModel, Field, model_validator

from timegrid.schemas.schedule import DayLabel, Lecture


class PixelRectOut(BaseModel):
    left: int
    top: int
    width: int
    height: int


class EntryOut(BaseModel):
    index: int
    day: str
    range: list[int]
    room: str
    lecture: Lecture
    color: str
    rect: PixelRectOut


class TableOut(BaseModel):
    table_id: str
    entries: list[EntryOut]


class TablesOut(BaseModel):
    version: int
    tables: list[TableOut]
    can_remove: bool


class TableCreatedOut(BaseModel):
    table_id: str


class AddEntriesRequest(BaseModel):
    lecture_id: str | None = Field(default=None, min_length=1)
    lecture: Lecture | None = None

    @model_validator(mode="after")
    def require_one_source(self) -> "AddEntriesRequest":
        if (self.lecture_id is None) == (self.lecture is None):
            raise ValueError("Provide exactly one of lecture_id or lecture")
        return self


class PositionUpdate(BaseModel):
    day: DayLabel
    time_offset: int


class RemovedEntriesOut(BaseModel):
    removed: int
