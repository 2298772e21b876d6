from fastapi import APIRouter, Depends, Query

from timegrid.api.deps import get_catalog_cache, get_settings_state
from timegrid.core.config import Settings
from timegrid.schemas.schedule import DayLabel
from timegrid.schemas.search import SearchPage, SearchQuery
from timegrid.services.catalog_cache import CatalogCache
from timegrid.services.search import SearchSession, all_majors

router = APIRouter()


@router.get("/lectures", response_model=SearchPage)
async def search_lectures(
    query: str = Query(default=""),
    grades: list[int] = Query(default=[]),
    days: list[DayLabel] = Query(default=[]),
    times: list[int] = Query(default=[]),
    majors: list[str] = Query(default=[]),
    credits: int | None = Query(default=None, ge=0),
    page: int = Query(default=1, ge=1),
    cache: CatalogCache = Depends(get_catalog_cache),
    settings: Settings = Depends(get_settings_state),
) -> SearchPage:
    # Fetch failures propagate as CatalogFetchError (502), never as an empty page.
    lectures = await cache.fetch_all()
    session = SearchSession(
        lectures,
        SearchQuery(query=query, grades=grades, days=days, times=times, majors=majors, credits=credits),
        page_size=settings.search_page_size,
    )
    session.go_to(page)
    return SearchPage(
        total=session.total,
        page=session.page,
        last_page=session.last_page,
        page_size=session.page_size,
        items=session.visible,
    )


@router.get("/majors", response_model=list[str])
async def list_majors(cache: CatalogCache = Depends(get_catalog_cache)) -> list[str]:
    return all_majors(await cache.fetch_all())
