"""Data classes and path management."""

import pathlib
from dataclasses import dataclass, field
from enum import Enum
from typing import NamedTuple, Tuple

import numpy as np

from .constants import OUTPUT_DIR
from .errors import DecodeError


class PathManager:
    """Manage paths relative to the project directory."""

    @staticmethod
    def get_output_path(filename: str) -> pathlib.Path:
        """Get the output file path."""
        return OUTPUT_DIR / filename


class LoadState(str, Enum):
    unloaded = "unloaded"
    loading = "loading"
    loaded = "loaded"
    failed = "failed"


class StyleResult(NamedTuple):
    color: Tuple[int, int, int]
    alpha: int

    def rgba(self) -> list:
        """Fill color as ``[r, g, b, a]``."""
        return [self.color[0], self.color[1], self.color[2], self.alpha]


@dataclass(frozen=True, eq=False)
class BinaryColumn:
    """Physical layout of a variable-length column.

    Row ``i`` occupies ``raw_bytes[value_offsets[i]:value_offsets[i + 1]]``.
    """
    raw_bytes: bytes
    value_offsets: np.ndarray

    def __post_init__(self):
        offsets = np.asarray(self.value_offsets, dtype=np.int64)
        if offsets.ndim != 1 or len(offsets) == 0:
            raise DecodeError("value offsets must hold at least one entry")
        if offsets[0] != 0:
            raise DecodeError(f"value offsets must start at 0, got {offsets[0]}")
        if offsets[-1] != len(self.raw_bytes):
            raise DecodeError(
                f"last value offset {offsets[-1]} does not match "
                f"{len(self.raw_bytes)} data bytes")
        if len(offsets) > 1 and (np.diff(offsets) < 0).any():
            raise DecodeError("value offsets are not non-decreasing")
        offsets.setflags(write=False)
        object.__setattr__(self, 'value_offsets', offsets)

    def __len__(self) -> int:
        return len(self.value_offsets) - 1


@dataclass(frozen=True, eq=False)
class DerivedAttributes:
    """Per-row render attributes, index-aligned with the table rows.

    Either sequence is empty when its source field was missing.
    """
    elevations: np.ndarray = field(default_factory=lambda: np.empty(0))
    categories: Tuple[str, ...] = ()

    def __post_init__(self):
        elevations = np.array(self.elevations, dtype=np.float64)
        elevations.setflags(write=False)
        object.__setattr__(self, 'elevations', elevations)
        object.__setattr__(self, 'categories', tuple(self.categories))

    @property
    def has_elevations(self) -> bool:
        return len(self.elevations) > 0

    @property
    def has_categories(self) -> bool:
        return len(self.categories) > 0
