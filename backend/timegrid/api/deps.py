from fastapi import Request

from timegrid.core.config import Settings
from timegrid.services.catalog_cache import CatalogCache
from timegrid.services.drag_engine import DragRepositionEngine
from timegrid.services.grid_geometry import GridGeometry
from timegrid.services.schedule_store import ScheduleActions, ScheduleStore


def get_settings_state(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> ScheduleStore:
    return request.app.state.store


def get_actions(request: Request) -> ScheduleActions:
    # Write-only handle; the same object for the life of the store.
    return request.app.state.store.actions


def get_geometry(request: Request) -> GridGeometry:
    return request.app.state.geometry


def get_drag_engine(request: Request) -> DragRepositionEngine:
    return request.app.state.drag_engine


def get_catalog_cache(request: Request) -> CatalogCache:
    return request.app.state.catalog_cache
