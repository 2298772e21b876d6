from fastapi import APIRouter, Depends

from timegrid.api.deps import get_geometry
from timegrid.schemas.grid import GridOut, TimeSlotOut
from timegrid.services.grid_geometry import GridGeometry

router = APIRouter()


@router.get("/grid", response_model=GridOut)
def read_grid(geometry: GridGeometry = Depends(get_geometry)) -> GridOut:
    return GridOut(
        day_labels=list(geometry.day_labels),
        time_slots=[
            TimeSlotOut(index=slot.index, label=slot.label, duration_minutes=slot.duration_minutes)
            for slot in geometry.time_slots
        ],
        cell_width=geometry.cell_width,
        cell_height=geometry.cell_height,
        header_column_width=geometry.header_column_width,
        header_row_height=geometry.header_row_height,
        width=geometry.grid_width,
        height=geometry.grid_height,
    )
