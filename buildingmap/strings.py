"""Decode variable-length binary columns into per-row strings.

Arrow stores a string column as one shared data buffer plus an offsets
buffer with N+1 entries; row ``i`` is the byte range
``[offsets[i], offsets[i + 1])``.  Rows are decoded one by one, in row
order, so the result can be indexed with the same row numbers as the
table it came from.  Repeated values are kept.
"""

import logging
from typing import List, Optional, Union

import numpy as np
import pyarrow as pa

from .constants import TEXT_DECODE_ERRORS
from .errors import DecodeError
from .models import BinaryColumn

logger = logging.getLogger(__name__)

ColumnLike = Union[BinaryColumn, pa.Array, pa.ChunkedArray]


def is_binary_like(data_type: pa.DataType) -> bool:
    """True for types whose values are variable-length byte ranges."""
    if pa.types.is_dictionary(data_type):
        return is_binary_like(data_type.value_type)
    return (pa.types.is_string(data_type) or pa.types.is_large_string(data_type)
            or pa.types.is_binary(data_type) or pa.types.is_large_binary(data_type))


def binary_column(array: Union[pa.Array, pa.ChunkedArray]) -> BinaryColumn:
    """Read the offsets and data buffers of a string/binary array.

    Offsets are rebased to zero so that sliced arrays satisfy the
    ``BinaryColumn`` invariants.
    """
    if isinstance(array, pa.ChunkedArray):
        array = array.combine_chunks()

    data_type = array.type
    if pa.types.is_string(data_type) or pa.types.is_binary(data_type):
        offset_dtype = np.int32
    elif pa.types.is_large_string(data_type) or pa.types.is_large_binary(data_type):
        offset_dtype = np.int64
    else:
        raise DecodeError(f"Expected a binary or string column, got {data_type}")

    if len(array) == 0:
        return BinaryColumn(b"", np.zeros(1, dtype=np.int64))

    _validity, offsets_buf, data_buf = array.buffers()
    itemsize = np.dtype(offset_dtype).itemsize
    try:
        offsets = np.frombuffer(offsets_buf, dtype=offset_dtype,
                                count=len(array) + 1,
                                offset=array.offset * itemsize).astype(np.int64)
    except (TypeError, ValueError) as e:
        raise DecodeError(f"Offsets buffer too short for {len(array)} rows: {e}") from e

    start, end = int(offsets[0]), int(offsets[-1])
    if data_buf is None:
        raw = b""
    else:
        if end > data_buf.size:
            raise DecodeError(f"Offset {end} runs past the {data_buf.size}-byte data buffer")
        raw = data_buf.slice(start, end - start).to_pybytes()
    return BinaryColumn(raw, offsets - start)


def _null_mask(array: Union[pa.Array, pa.ChunkedArray]) -> Optional[np.ndarray]:
    if array.null_count == 0:
        return None
    return np.array(array.is_null().to_pylist(), dtype=bool)


def extract_strings(column: ColumnLike, errors: Optional[str] = None) -> List[str]:
    """Decode every row of *column* as UTF-8 text.

    Always returns exactly one string per row.  Empty byte ranges and
    null rows yield ``""``.  Malformed bytes follow the *errors* policy
    (``TEXT_DECODE_ERRORS`` by default, i.e. replacement characters);
    with ``errors="strict"`` a malformed row raises ``DecodeError``.
    """
    errors = errors or TEXT_DECODE_ERRORS

    if isinstance(column, (pa.Array, pa.ChunkedArray)):
        if pa.types.is_dictionary(column.type):
            return _extract_dictionary(column, errors)
        strings = extract_strings(binary_column(column), errors)
        nulls = _null_mask(column)
        if nulls is not None:
            for i in np.flatnonzero(nulls):
                strings[i] = ""
        return strings

    raw = column.raw_bytes
    offsets = column.value_offsets.tolist()
    try:
        return [raw[offsets[i]:offsets[i + 1]].decode('utf-8', errors)
                for i in range(len(column))]
    except UnicodeDecodeError as e:
        raise DecodeError(f"Malformed UTF-8 in string column: {e}") from e


def _extract_dictionary(column, errors: str) -> List[str]:
    """Dictionary-encoded strings: decode the dictionary once, then index it."""
    chunks = column.chunks if isinstance(column, pa.ChunkedArray) else [column]
    strings: List[str] = []
    for chunk in chunks:
        dictionary = extract_strings(chunk.dictionary, errors)
        for idx in chunk.indices.to_pylist():
            strings.append("" if idx is None else dictionary[idx])
    return strings
