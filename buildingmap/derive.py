"""Derive row-aligned elevation and category arrays from a decoded table."""

import logging

import numpy as np
import pyarrow as pa

from .constants import FLOORS_FIELD, PERIOD_FIELD, EXTRUSION_SCALE
from .models import DerivedAttributes
from .strings import extract_strings, is_binary_like

logger = logging.getLogger(__name__)


def _numeric_values(column: pa.ChunkedArray) -> np.ndarray:
    """Dense float64 values across all chunks, nulls read as 0."""
    if column.null_count:
        column = column.fill_null(0)
    if column.num_chunks == 0:
        return np.empty(0, dtype=np.float64)
    return np.concatenate([
        chunk.to_numpy(zero_copy_only=False).astype(np.float64)
        for chunk in column.chunks
    ])


def derive_elevations(table: pa.Table, field_name: str = FLOORS_FIELD,
                      scale: float = EXTRUSION_SCALE) -> np.ndarray:
    """``raw[i] * scale`` for every row, or an empty array if the field is unusable."""
    if field_name not in table.schema.names:
        logger.warning(f"Field '{field_name}' not in schema - extrusion disabled")
        return np.empty(0, dtype=np.float64)

    column = table.column(field_name)
    if not (pa.types.is_integer(column.type) or pa.types.is_floating(column.type)):
        logger.warning(f"Field '{field_name}' is {column.type}, not numeric - "
                       f"extrusion disabled")
        return np.empty(0, dtype=np.float64)

    return _numeric_values(column) * scale


def derive_categories(table: pa.Table, field_name: str = PERIOD_FIELD,
                      errors=None) -> tuple:
    """One decoded label per row, or an empty tuple if the field is unusable."""
    if field_name not in table.schema.names:
        logger.warning(f"Field '{field_name}' not in schema - using default style")
        return ()

    column = table.column(field_name)
    if not is_binary_like(column.type):
        logger.warning(f"Field '{field_name}' is {column.type}, not a string "
                       f"column - using default style")
        return ()

    return tuple(extract_strings(column, errors))


def derive(table: pa.Table, numeric_field: str = FLOORS_FIELD,
           categorical_field: str = PERIOD_FIELD,
           scale: float = EXTRUSION_SCALE, errors=None) -> DerivedAttributes:
    """Compute both derived arrays from the same table."""
    derived = DerivedAttributes(
        elevations=derive_elevations(table, numeric_field, scale),
        categories=derive_categories(table, categorical_field, errors),
    )
    logger.info(f"Derived attributes for {table.num_rows} rows "
                f"(elevations: {len(derived.elevations)}, "
                f"categories: {len(derived.categories)})")
    return derived
