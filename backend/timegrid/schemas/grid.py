from pydantic import BaseModel


class TimeSlotOut(BaseModel):
    index: int
    label: str
    duration_minutes: int


class GridOut(BaseModel):
    day_labels: list[str]
    time_slots: list[TimeSlotOut]
    cell_width: int
    cell_height: int
    header_column_width: int
    header_row_height: int
    width: int
    height: int
