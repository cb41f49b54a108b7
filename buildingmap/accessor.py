"""Row-index lookups used by the renderer for every drawn building."""

import logging

from .constants import DEFAULT_ELEVATION, STRICT_ROW_INDEX
from .models import DerivedAttributes, StyleResult
from .style import style_for, DEFAULT_STYLE

logger = logging.getLogger(__name__)


class RenderAttributeAccessor:
    """Read-only view over ``DerivedAttributes`` keyed by row index.

    ``row_count`` is the row count of the table the attributes were
    derived from.  Every lookup is a direct index into the derived
    arrays.
    """

    def __init__(self, derived: DerivedAttributes, row_count: int,
                 strict: bool = STRICT_ROW_INDEX):
        self._elevations = derived.elevations
        self._categories = derived.categories
        self._row_count = row_count
        self.strict = strict

    def __len__(self) -> int:
        return self._row_count

    def _in_range(self, i: int) -> bool:
        if 0 <= i < self._row_count:
            return True
        if self.strict:
            raise IndexError(f"Row index {i} out of range for {self._row_count} rows")
        logger.warning(f"Row index {i} out of range for {self._row_count} rows - "
                       f"using defaults")
        return False

    def elevation_at(self, i: int) -> float:
        if not self._in_range(i) or len(self._elevations) == 0:
            return DEFAULT_ELEVATION
        return float(self._elevations[i])

    def style_at(self, i: int) -> StyleResult:
        if not self._in_range(i) or not self._categories:
            return DEFAULT_STYLE
        return style_for(self._categories[i])

    def fill_color_at(self, i: int) -> list:
        """``[r, g, b, a]`` for row *i*."""
        return self.style_at(i).rgba()
