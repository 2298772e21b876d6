from __future__ import annotations

from collections.abc import Iterable, Sequence
import math
import re

from timegrid.schemas.schedule import Lecture, ScheduleSession
from timegrid.schemas.search import SearchQuery
from timegrid.services.schedule_parser import parse_schedule

DEFAULT_PAGE_SIZE = 100

_LEADING_INT = re.compile(r"^\s*(\d+)")


def credit_value(credits: str) -> int | None:
    match = _LEADING_INT.match(credits)
    return int(match.group(1)) if match else None


def all_majors(lectures: Iterable[Lecture]) -> list[str]:
    return list(dict.fromkeys(lecture.major for lecture in lectures))


def filter_lectures(lectures: Iterable[Lecture], query: SearchQuery) -> list[Lecture]:
    """Apply every filter in ``query``; dimensions AND together, values within one OR."""
    text = query.query.strip().lower()
    grades = set(query.grades)
    majors = set(query.majors)
    days = set(query.days)
    times = set(query.times)

    matched: list[Lecture] = []
    for lecture in lectures:
        if text and text not in lecture.title.lower() and text not in lecture.id.lower():
            continue
        if grades and lecture.grade not in grades:
            continue
        if majors and lecture.major not in majors:
            continue
        if query.credits is not None and credit_value(lecture.credits) != query.credits:
            continue
        if days or times:
            sessions = parse_schedule(lecture.schedule)
            if days and not any(session.day in days for session in sessions):
                continue
            if times and not _overlaps_times(sessions, times):
                continue
        matched.append(lecture)
    return matched


def _overlaps_times(sessions: Sequence[ScheduleSession], times: set[int]) -> bool:
    return any(slot in times for session in sessions for slot in session.range)


class SearchSession:
    """Filtered catalog view with a growing page window.

    Any change to the query or the catalog re-derives the results and
    resets the window to the first page.
    """

    def __init__(
        self,
        lectures: Iterable[Lecture] = (),
        query: SearchQuery | None = None,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        if page_size <= 0:
            raise ValueError("page_size must be positive")
        self.page_size = page_size
        self._lectures = list(lectures)
        self._query = query or SearchQuery()
        self.page = 1
        self._filtered = filter_lectures(self._lectures, self._query)

    @property
    def query(self) -> SearchQuery:
        return self._query

    @property
    def lectures(self) -> list[Lecture]:
        return list(self._lectures)

    @property
    def filtered(self) -> list[Lecture]:
        return list(self._filtered)

    @property
    def total(self) -> int:
        return len(self._filtered)

    @property
    def last_page(self) -> int:
        return math.ceil(len(self._filtered) / self.page_size)

    @property
    def visible(self) -> list[Lecture]:
        return self._filtered[: self.page * self.page_size]

    @property
    def majors(self) -> list[str]:
        return all_majors(self._lectures)

    def set_query(self, query: SearchQuery) -> None:
        self._query = query
        self._rederive()

    def update(self, **fields) -> None:
        self.set_query(SearchQuery.model_validate({**self._query.model_dump(), **fields}))

    def set_lectures(self, lectures: Iterable[Lecture]) -> None:
        self._lectures = list(lectures)
        self._rederive()

    def load_more(self) -> int:
        """Grow the window by one page, never past the last page."""
        self.page = max(1, min(self.last_page, self.page + 1))
        return self.page

    def go_to(self, page: int) -> int:
        self.page = max(1, min(self.last_page, page))
        return self.page

    def _rederive(self) -> None:
        self._filtered = filter_lectures(self._lectures, self._query)
        self.page = 1
