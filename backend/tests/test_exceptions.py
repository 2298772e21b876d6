from timegrid.core.exceptions import (
    AppError,
    CatalogFetchError,
    DragConflictError,
    EntryIndexError,
    InvariantViolationError,
    LastTableError,
    ResourceNotFoundError,
    UnknownDayError,
    UnknownTableError,
)


def test_app_error_defaults():
    err = AppError("Generic error")
    assert err.status_code == 500
    assert err.details == {}


def test_unknown_table_is_a_not_found_error():
    err = UnknownTableError("schedule-9")
    assert isinstance(err, ResourceNotFoundError)
    assert err.status_code == 404
    assert err.details["resource_id"] == "schedule-9"


def test_invariant_errors_map_to_conflict():
    assert LastTableError("schedule-1").status_code == 409
    assert isinstance(LastTableError("schedule-1"), InvariantViolationError)
    assert DragConflictError("schedule-1:0").status_code == 409


def test_entry_index_error_is_also_an_index_error():
    err = EntryIndexError("schedule-1", 4, 2)
    assert isinstance(err, IndexError)
    assert err.status_code == 404
    assert err.details == {"table_id": "schedule-1", "entry_index": 4, "size": 2}


def test_unknown_day_error_is_a_value_error():
    err = UnknownDayError("일")
    assert isinstance(err, ValueError)
    assert err.status_code == 422


def test_catalog_fetch_error_keeps_resource_and_reason():
    err = CatalogFetchError("majors", "HTTP 503")
    assert err.status_code == 502
    assert err.resource == "majors"
    assert err.reason == "HTTP 503"
    assert "majors" in err.message
