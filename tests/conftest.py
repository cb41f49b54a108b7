import io
from pathlib import Path

import pyarrow as pa
import pyarrow.parquet as pq
import pytest
from shapely.geometry import box


def parquet_bytes(table: pa.Table) -> bytes:
    sink = io.BytesIO()
    pq.write_table(table, sink)
    return sink.getvalue()


def footprint(col: int) -> bytes:
    """A ~20 m square footprint in central Lisbon, as WKB."""
    west = -9.1400 + col * 0.0003
    return box(west, 38.7500, west + 0.0002, 38.7502).wkb


@pytest.fixture
def buildings_table() -> pa.Table:
    return pa.table({
        "Name": ["Torre A", "Casa B", "Armazem C"],
        "floors_ag": pa.array([2, 5, 0], type=pa.int32()),
        "Period_con": ["antes de 1919", "NA", "1971-1980"],
        "tipologia": ["residential", "residential", "industrial"],
        "GEOMETRY": pa.array([footprint(0), footprint(1), footprint(2)], type=pa.binary()),
    })


@pytest.fixture
def buildings_parquet(buildings_table: pa.Table) -> bytes:
    return parquet_bytes(buildings_table)


@pytest.fixture
def buildings_path(tmp_path: Path, buildings_parquet: bytes) -> Path:
    path = tmp_path / "buildings.parquet"
    path.write_bytes(buildings_parquet)
    return path
