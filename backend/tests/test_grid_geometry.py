import pytest

from timegrid.core.exceptions import UnknownDayError
from timegrid.services.grid_geometry import TIME_SLOTS, GridGeometry, PixelRect


def test_reference_grid_dimensions():
    geometry = GridGeometry()
    assert geometry.day_labels == ("월", "화", "수", "목", "금", "토")
    assert geometry.slot_count == 24
    assert geometry.day_count == 6
    assert geometry.cell_size.width == 80
    assert geometry.cell_size.height == 30
    assert geometry.grid_width == 120 + 80 * 6
    assert geometry.grid_height == 40 + 30 * 24


def test_time_slots_have_irregular_evening_durations():
    assert TIME_SLOTS[0].label == "09:00~09:30"
    assert TIME_SLOTS[17].label == "17:30~18:00"
    assert TIME_SLOTS[18].label == "18:00~18:50"
    assert TIME_SLOTS[19].label == "18:55~19:45"
    assert TIME_SLOTS[23].label == "22:35~23:25"
    assert {slot.duration_minutes for slot in TIME_SLOTS[:18]} == {30}
    assert {slot.duration_minutes for slot in TIME_SLOTS[18:]} == {50}
    assert [slot.index for slot in TIME_SLOTS] == list(range(1, 25))


def test_to_pixel_rect_uses_slot_index_not_wall_time():
    geometry = GridGeometry()
    assert geometry.to_pixel_rect("월", [1, 2, 3]) == PixelRect(left=120, top=40, width=79, height=89)
    assert geometry.to_pixel_rect("수", [4, 5]) == PixelRect(left=120 + 160, top=40 + 90, width=79, height=59)
    # Evening slots are longer in real time but take the same cell height.
    assert geometry.to_pixel_rect("토", [19]) == PixelRect(left=120 + 400, top=40 + 540, width=79, height=29)


def test_to_pixel_rect_rejects_unknown_day():
    with pytest.raises(UnknownDayError):
        GridGeometry().to_pixel_rect("일", [1])


def test_day_lookup_is_bounded():
    geometry = GridGeometry()
    assert geometry.day_index_of("월") == 0
    assert geometry.day_index_of("토") == 5
    assert geometry.day_index_of("Monday") is None
    assert geometry.day_at(0) == "월"
    assert geometry.day_at(5) == "토"
    assert geometry.day_at(-1) is None
    assert geometry.day_at(6) is None


def test_slot_label_out_of_range():
    geometry = GridGeometry()
    assert geometry.slot_label(1) == "09:00~09:30"
    assert geometry.slot_label(0) is None
    assert geometry.slot_label(25) is None


def test_from_settings_overrides_cell_size(settings):
    settings.cell_width = 100
    geometry = GridGeometry.from_settings(settings)
    assert geometry.cell_width == 100
    assert geometry.to_pixel_rect("화", [2]).left == 120 + 100
