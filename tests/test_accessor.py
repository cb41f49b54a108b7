import pytest

from buildingmap.accessor import RenderAttributeAccessor
from buildingmap.constants import DEFAULT_ELEVATION, env_flag
from buildingmap.derive import derive
from buildingmap.models import DerivedAttributes, StyleResult
from buildingmap.style import DEFAULT_STYLE


@pytest.fixture
def accessor(buildings_table) -> RenderAttributeAccessor:
    return RenderAttributeAccessor(derive(buildings_table, scale=9), buildings_table.num_rows)


def test_lookups_by_row_index(accessor) -> None:
    assert [accessor.elevation_at(i) for i in range(3)] == [18.0, 45.0, 0.0]
    assert accessor.style_at(0).alpha == 255
    assert accessor.style_at(1) == DEFAULT_STYLE
    assert accessor.style_at(2).alpha == 160
    assert accessor.fill_color_at(2) == [180, 48, 150, 160]


def test_every_row_has_a_value(accessor) -> None:
    for i in range(len(accessor)):
        assert isinstance(accessor.elevation_at(i), float)
        assert isinstance(accessor.style_at(i), StyleResult)


def test_missing_categories_use_default_style(buildings_table) -> None:
    table = buildings_table.drop_columns(["Period_con"])
    accessor = RenderAttributeAccessor(derive(table), table.num_rows)
    assert [accessor.style_at(i) for i in range(table.num_rows)] == [DEFAULT_STYLE] * 3


def test_missing_elevations_are_flat() -> None:
    accessor = RenderAttributeAccessor(DerivedAttributes(), row_count=2)
    assert accessor.elevation_at(0) == DEFAULT_ELEVATION
    assert accessor.elevation_at(1) == DEFAULT_ELEVATION


@pytest.mark.parametrize("index", [-1, 3, 100])
def test_strict_accessor_rejects_out_of_range(accessor, index) -> None:
    with pytest.raises(IndexError):
        accessor.elevation_at(index)
    with pytest.raises(IndexError):
        accessor.style_at(index)


def test_lenient_accessor_returns_defaults(buildings_table) -> None:
    accessor = RenderAttributeAccessor(derive(buildings_table), buildings_table.num_rows, strict=False)
    assert accessor.elevation_at(-1) == DEFAULT_ELEVATION
    assert accessor.style_at(3) == DEFAULT_STYLE


@pytest.mark.parametrize("raw, expected", [
    ("False", False), ("NO", False), ("0", False),
    ("True", True), ("yes", True), (" On ", True),
    ("", True), ("maybe", True),
])
def test_env_flag_is_case_insensitive(monkeypatch, raw, expected) -> None:
    monkeypatch.setenv("BUILDINGMAP_STRICT_ROW_INDEX", raw)
    assert env_flag("BUILDINGMAP_STRICT_ROW_INDEX", True) is expected
