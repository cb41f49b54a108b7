"""Decode compressed tabular payloads (Parquet or Arrow IPC) into Arrow tables."""

import logging
from typing import Iterable, List, Optional, Tuple

import pyarrow as pa
import pyarrow.parquet as pq

from .constants import GEOMETRY_FIELD, FLOORS_FIELD, PERIOD_FIELD
from .errors import DecodeError

logger = logging.getLogger(__name__)

PARQUET_MAGIC = b"PAR1"
ARROW_FILE_MAGIC = b"ARROW1"


def sniff_format(data: bytes) -> str:
    """Guess the container format from its magic bytes."""
    if data[:4] == PARQUET_MAGIC:
        return "parquet"
    if data[:6] == ARROW_FILE_MAGIC:
        return "arrow-file"
    return "arrow-stream"


def _projection(names: List[str], columns: Optional[Iterable[str]]) -> Optional[List[str]]:
    """Columns to read, in source order, or None for all of them.

    Names absent from the payload are ignored; the geometry and
    derivation fields are always kept.
    """
    if columns is None:
        return None
    wanted = set(columns) | {GEOMETRY_FIELD, FLOORS_FIELD, PERIOD_FIELD}
    return [name for name in names if name in wanted]


def decode(data: bytes, columns: Optional[Iterable[str]] = None) -> pa.Table:
    """Decode *data* into a ``pyarrow.Table``.

    Values are exposed exactly as stored; the geometry column in
    particular is passed through untouched. Raises ``DecodeError`` for
    truncated, corrupt or inconsistent payloads; no partial table is
    ever returned.
    """
    if not data:
        raise DecodeError("Empty payload")

    fmt = sniff_format(data)
    try:
        buf = pa.py_buffer(data)
        if fmt == "parquet":
            parquet_file = pq.ParquetFile(pa.BufferReader(buf))
            keep = _projection(parquet_file.schema_arrow.names, columns)
            table = parquet_file.read(columns=keep)
        else:
            if fmt == "arrow-file":
                table = pa.ipc.open_file(pa.BufferReader(buf)).read_all()
            else:
                table = pa.ipc.open_stream(buf).read_all()
            keep = _projection(table.schema.names, columns)
            if keep is not None:
                table = table.select(keep)
        table.validate()
    except (pa.ArrowException, OSError, ValueError) as e:
        raise DecodeError(f"Could not decode {fmt} payload ({len(data)} bytes): {e}") from e

    logger.info(f"Decoded {fmt} payload: {table.num_rows} rows, "
                f"{table.num_columns} columns")
    return table


def describe(table: pa.Table) -> List[Tuple[str, str]]:
    """Return ``(name, type)`` pairs in schema order."""
    return [(f.name, str(f.type)) for f in table.schema]
