from pathlib import Path

import pyarrow as pa
import pytest
from shapely.geometry import LineString, MultiPolygon, Point, Polygon, box

from buildingmap.constants import MIN_SLAB_HEIGHT
from buildingmap.geometry import extrude, to_shapely, transform_polygon, utm_transformer
from buildingmap.loader import build_dataset
from buildingmap.render import build_scene, generate_glb

from conftest import footprint, parquet_bytes


def test_to_shapely_reads_wkb_and_wkt() -> None:
    assert to_shapely(footprint(0)).geom_type == "Polygon"
    assert to_shapely("POLYGON ((0 0, 1 0, 1 1, 0 0))").area == pytest.approx(0.5)
    assert to_shapely(None) is None


def test_to_shapely_reads_geoarrow_polygons() -> None:
    square = [[[0, 0], [10, 0], [10, 10], [0, 10], [0, 0]]]
    polygon = to_shapely(square)
    assert isinstance(polygon, Polygon)
    assert polygon.area == pytest.approx(100)

    structs = [[{"x": 0, "y": 0}, {"x": 4, "y": 0}, {"x": 4, "y": 4}, {"x": 0, "y": 0}]]
    assert to_shapely(structs).area == pytest.approx(8)


def test_to_shapely_reads_geoarrow_multipolygons() -> None:
    square = [[[0, 0], [10, 0], [10, 10], [0, 10], [0, 0]]]
    shifted = [[[20, 0], [30, 0], [30, 10], [20, 10], [20, 0]]]
    multi = to_shapely([square, shifted])
    assert isinstance(multi, MultiPolygon)
    assert len(multi.geoms) == 2


def test_extrude_is_y_up_and_colored() -> None:
    mesh = extrude(box(0, 0, 10, 20), 27.0, color=[180, 48, 150, 255])
    assert mesh.bounds[1][1] == pytest.approx(27.0)
    assert mesh.bounds[1][2] == pytest.approx(20.0)
    assert mesh.visual.face_colors[0].tolist() == [180, 48, 150, 255]


def test_scene_uses_accessor_per_row(buildings_parquet) -> None:
    dataset = build_dataset(buildings_parquet)
    scene = build_scene(dataset)

    assert sorted(scene.geometry) == ["building_0", "building_1", "building_2"]
    tallest = scene.geometry["building_1"]
    assert tallest.bounds[1][1] - tallest.bounds[0][1] == pytest.approx(45.0)
    flat = scene.geometry["building_2"]
    assert flat.bounds[1][1] - flat.bounds[0][1] == pytest.approx(MIN_SLAB_HEIGHT)

    assert scene.geometry["building_0"].visual.face_colors[0].tolist() == [180, 48, 150, 255]
    assert scene.geometry["building_1"].visual.face_colors[0].tolist() == [180, 48, 150, 20]


def test_scene_skips_rows_without_geometry(buildings_table) -> None:
    geometry = pa.array([footprint(0), None, footprint(2)], type=pa.binary())
    table = buildings_table.set_column(4, "GEOMETRY", geometry)
    scene = build_scene(build_dataset(parquet_bytes(table)))
    assert sorted(scene.geometry) == ["building_0", "building_2"]


def test_scene_skips_points_and_lines(buildings_table) -> None:
    geometry = pa.array([
        footprint(0),
        Point(-9.1397, 38.7501).wkb,
        LineString([(-9.1394, 38.7500), (-9.1392, 38.7502)]).wkb,
    ], type=pa.binary())
    table = buildings_table.set_column(4, "GEOMETRY", geometry)
    scene = build_scene(build_dataset(parquet_bytes(table)))
    assert sorted(scene.geometry) == ["building_0"]


def test_transform_polygon_ignores_non_polygons() -> None:
    transformer = utm_transformer(-9.14, 38.75)
    assert transform_polygon(Point(-9.14, 38.75), transformer) is None
    assert transform_polygon(LineString([(-9.14, 38.75), (-9.13, 38.76)]), transformer) is None


def test_scene_requires_geometry_field(buildings_table) -> None:
    dataset = build_dataset(parquet_bytes(buildings_table.drop_columns(["GEOMETRY"])))
    with pytest.raises(ValueError):
        build_scene(dataset)


def test_generate_glb_writes_file(buildings_parquet, tmp_path: Path) -> None:
    output = tmp_path / "lisboa.glb"
    path = generate_glb(build_dataset(buildings_parquet), str(output))
    assert Path(path) == output
    assert output.read_bytes()[:4] == b"glTF"
