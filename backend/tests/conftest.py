import pytest
from fastapi.testclient import TestClient

from timegrid.core.config import Settings
from timegrid.main import create_app
from timegrid.schemas.schedule import Lecture, ScheduleEntry
from timegrid.services.catalog_source import StaticCatalogSource


MAJOR_ROWS = [
    {
        "id": "502001",
        "title": "자료구조",
        "credits": "3",
        "grade": 2,
        "major": "컴퓨터공학과",
        "schedule": "월1~3(C-101)<p>수4~5(C-102)",
    },
    {
        "id": "502002",
        "title": "운영체제",
        "credits": "3",
        "grade": 3,
        "major": "컴퓨터공학과",
        "schedule": "화5~7(C-201)",
    },
    {
        "id": "601001",
        "title": "회계원리",
        "credits": "2",
        "grade": 1,
        "major": "경영학과",
        "schedule": "목19~20(B-301)",
    },
]

LIBERAL_ARTS_ROWS = [
    {
        "id": "900100",
        "title": "Academic English",
        "credits": "2",
        "grade": 1,
        "major": "교양",
        "schedule": "금2~3(L-101)",
    },
    {
        "id": "900200",
        "title": "Broken Row",
        "credits": "1",
        "grade": 4,
        "major": "교양",
        "schedule": "???",
    },
]


def make_lecture(**overrides) -> Lecture:
    data = dict(MAJOR_ROWS[0])
    data.update(overrides)
    return Lecture(**data)


def make_entry(day: str = "월", slots=(1, 2, 3), room: str = "C-101", **lecture_overrides) -> ScheduleEntry:
    return ScheduleEntry(day=day, range=tuple(slots), room=room, lecture=make_lecture(**lecture_overrides))


@pytest.fixture()
def catalog_source():
    return StaticCatalogSource({"majors": MAJOR_ROWS, "liberal-arts": LIBERAL_ARTS_ROWS})


@pytest.fixture()
def settings():
    return Settings(
        catalog_resources={"majors": "/majors.json", "liberal-arts": "/liberal-arts.json"},
        seed_table_ids=["schedule-1"],
        search_page_size=2,
    )


@pytest.fixture()
def client(settings, catalog_source):
    app = create_app(settings, catalog_source=catalog_source)
    # Context manager keeps one event loop for the whole test, so cached fetch tasks stay valid.
    with TestClient(app) as test_client:
        yield test_client
