import pytest
from pydantic import ValidationError

from timegrid.core.config import Settings


def test_defaults_match_reference_grid():
    settings = Settings(_env_file=None)
    assert settings.cell_width == 80
    assert settings.cell_height == 30
    assert settings.header_column_width == 120
    assert settings.header_row_height == 40
    assert settings.search_page_size == 100
    assert settings.seed_table_ids == ["schedule-1"]


def test_list_values_from_environment(monkeypatch):
    monkeypatch.setenv("TIMEGRID_SEED_TABLE_IDS", "a, b")
    monkeypatch.setenv("TIMEGRID_CORS_ORIGINS", '["http://example.test"]')
    settings = Settings(_env_file=None)
    assert settings.seed_table_ids == ["a", "b"]
    assert settings.cors_origins == ["http://example.test"]


@pytest.mark.parametrize(
    "overrides",
    [
        {"seed_table_ids": []},
        {"seed_table_ids": ["a", "a"]},
        {"search_page_size": 0},
        {"cell_width": -1},
    ],
)
def test_invalid_settings_are_rejected(overrides):
    with pytest.raises(ValidationError):
        Settings(_env_file=None, **overrides)
