from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from timegrid.api.deps import get_catalog_cache, get_store
from timegrid.services.catalog_cache import CatalogCache
from timegrid.services.schedule_store import ScheduleStore

router = APIRouter()


@router.get("/health")
def health() -> dict:
    return {"status": "ok"}


@router.get("/health/live")
def health_live() -> dict:
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


@router.get("/health/ready")
def health_ready(
    store: ScheduleStore = Depends(get_store),
    cache: CatalogCache = Depends(get_catalog_cache),
) -> dict:
    # The store always holds at least one table and the catalog loads lazily,
    # so readiness only reports state; it never fails the probe.
    cache_status = cache.status()
    resources = {name: cache_status.get(name, "not_loaded") for name in cache.resource_names}
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "store": {
            "tables": len(store.table_ids()),
            "version": store.version,
        },
        "catalog": {
            "resources": resources,
            "ready": all(state == "ready" for state in resources.values()),
        },
    }
