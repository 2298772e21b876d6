import asyncio
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from timegrid.api.routes import (
    catalog,
    drags,
    events,
    grid,
    health,
    tables,
)
from timegrid.core.config import Settings, get_settings
from timegrid.core.exceptions import AppError
from timegrid.services.catalog_cache import CatalogCache
from timegrid.services.catalog_source import CatalogSource, HttpCatalogSource
from timegrid.services.drag_engine import DragRepositionEngine
from timegrid.services.grid_geometry import GridGeometry
from timegrid.services.schedule_store import ScheduleStore
from timegrid.services.table_events import TableEventHub

logger = logging.getLogger(__name__)


async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message, "details": exc.details},
    )


def create_app(settings: Settings | None = None, *, catalog_source: CatalogSource | None = None) -> FastAPI:
    settings = settings or get_settings()
    logging.getLogger("timegrid").setLevel(settings.log_level.upper())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # One set of services per application run.
        owned_source = None
        source = catalog_source
        if source is None:
            source = owned_source = HttpCatalogSource.from_settings(settings)

        store = ScheduleStore(seed_table_ids=settings.seed_table_ids)
        geometry = GridGeometry.from_settings(settings)
        event_hub = TableEventHub()
        event_hub.attach(store, asyncio.get_running_loop())

        app.state.settings = settings
        app.state.store = store
        app.state.geometry = geometry
        app.state.drag_engine = DragRepositionEngine(store, geometry)
        app.state.catalog_cache = CatalogCache(source)
        app.state.event_hub = event_hub
        logger.info("Timegrid ready with tables %s", ", ".join(store.table_ids()))
        try:
            yield
        finally:
            event_hub.detach()
            if owned_source is not None:
                await owned_source.aclose()

    app = FastAPI(title=settings.project_name, lifespan=lifespan)
    app.add_exception_handler(AppError, app_error_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router, prefix=settings.api_prefix, tags=["health"])
    app.include_router(grid.router, prefix=settings.api_prefix, tags=["grid"])
    app.include_router(tables.router, prefix=f"{settings.api_prefix}/tables", tags=["tables"])
    app.include_router(drags.router, prefix=f"{settings.api_prefix}/drags", tags=["drags"])
    app.include_router(catalog.router, prefix=f"{settings.api_prefix}/catalog", tags=["catalog"])
    app.include_router(events.router, prefix=settings.api_prefix, tags=["events"])
    return app


app = create_app()
