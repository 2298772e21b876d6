from __future__ import annotations

from pydantic import BaseModel, Field

from timegrid.schemas.schedule import DayLabel, Lecture


class SearchQuery(BaseModel):
    query: str = ""
    grades: list[int] = Field(default_factory=list)
    days: list[DayLabel] = Field(default_factory=list)
    times: list[int] = Field(default_factory=list)
    majors: list[str] = Field(default_factory=list)
    credits: int | None = Field(default=None, ge=0)

    @classmethod
    def for_cell(cls, day: str | None = None, time: int | None = None) -> "SearchQuery":
        """Query pre-filled from a clicked grid cell."""
        return cls(days=[day] if day else [], times=[time] if time else [])


class SearchPage(BaseModel):
    total: int
    page: int
    last_page: int
    page_size: int
    items: list[Lecture]
