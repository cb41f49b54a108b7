"""Load lifecycle: fetch -> decode -> derive, published once as a dataset.

A ``DatasetLoader`` moves through ``unloaded -> loading -> loaded | failed``.
Only an explicit ``load()`` starts work; calling it again while a load is
in flight joins that load, and calling it once loaded returns the
published dataset without touching the byte source.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

import pyarrow as pa

from .accessor import RenderAttributeAccessor
from .constants import (PARQUET_DATA_URL, FLOORS_FIELD, PERIOD_FIELD,
                        GEOMETRY_FIELD, EXTRUSION_SCALE, POPUP_FIELDS)
from .decoder import decode
from .derive import derive
from .errors import BuildingMapError
from .fetch import fetch_bytes
from .models import DerivedAttributes, LoadState

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class BuildingDataset:
    """A decoded table and the attributes derived from it, published together."""
    table: pa.Table
    derived: DerivedAttributes
    accessor: RenderAttributeAccessor
    source: str = ""

    @property
    def num_rows(self) -> int:
        return self.table.num_rows

    def row_fields(self, i: int, fields: Optional[Iterable[str]] = POPUP_FIELDS) -> dict:
        """Named field values of row *i* (geometry excluded).

        ``fields=None`` returns every non-geometry column.
        """
        if not 0 <= i < self.table.num_rows:
            raise IndexError(f"Row index {i} out of range for {self.table.num_rows} rows")
        names = self.table.schema.names
        if fields is None:
            fields = names
        row = self.table.slice(i, 1)
        return {
            name: row.column(name)[0].as_py()
            for name in fields
            if name in names and name != GEOMETRY_FIELD
        }


def build_dataset(data: bytes, source: str = "",
                  numeric_field: str = FLOORS_FIELD,
                  categorical_field: str = PERIOD_FIELD,
                  scale: float = EXTRUSION_SCALE,
                  columns: Optional[Iterable[str]] = None,
                  decoder: Callable = decode) -> BuildingDataset:
    """Decode *data* and derive its render attributes in one step."""
    table = decoder(data, columns=columns)
    derived = derive(table, numeric_field, categorical_field, scale)
    accessor = RenderAttributeAccessor(derived, table.num_rows)
    return BuildingDataset(table=table, derived=derived, accessor=accessor, source=str(source))


class DatasetLoader:
    def __init__(self, source: str = PARQUET_DATA_URL,
                 numeric_field: str = FLOORS_FIELD,
                 categorical_field: str = PERIOD_FIELD,
                 scale: float = EXTRUSION_SCALE,
                 columns: Optional[Iterable[str]] = None,
                 fetcher: Callable[[str], bytes] = fetch_bytes,
                 decoder: Callable = decode) -> None:
        self.source = str(source)
        self.numeric_field = numeric_field
        self.categorical_field = categorical_field
        self.scale = scale
        self.columns = list(columns) if columns is not None else None
        self._fetcher = fetcher
        self._decoder = decoder

        self._state = LoadState.unloaded
        self._dataset: Optional[BuildingDataset] = None
        self._error: Optional[BaseException] = None
        self._task: Optional[asyncio.Future] = None
        self.decode_count = 0

    @property
    def state(self) -> LoadState:
        return self._state

    @property
    def dataset(self) -> Optional[BuildingDataset]:
        return self._dataset

    @property
    def error(self) -> Optional[BaseException]:
        return self._error

    def _load_blocking(self) -> BuildingDataset:
        data = self._fetcher(self.source)
        self.decode_count += 1
        return build_dataset(data, self.source, self.numeric_field,
                             self.categorical_field, self.scale,
                             self.columns, self._decoder)

    def _publish(self, dataset: BuildingDataset) -> BuildingDataset:
        self._dataset = dataset
        self._state = LoadState.loaded
        logger.info(f"Loaded {dataset.num_rows} buildings from {self.source}")
        return dataset

    def _fail(self, exc: BaseException) -> None:
        if isinstance(exc, BuildingMapError):
            logger.error(f"Loading {self.source} failed: {exc}")
        else:
            logger.exception(f"Unexpected error loading {self.source}")
        self._error = exc
        self._state = LoadState.failed

    def _check_settled(self) -> Optional[BuildingDataset]:
        if self._state == LoadState.loaded:
            logger.info(f"Table is already loaded ({self._dataset.num_rows} rows)")
            return self._dataset
        if self._state == LoadState.failed:
            raise self._error
        return None

    async def _run(self) -> BuildingDataset:
        try:
            dataset = await asyncio.to_thread(self._load_blocking)
        except Exception as exc:
            self._fail(exc)
            raise
        return self._publish(dataset)

    async def load(self) -> BuildingDataset:
        """Load the dataset once; later calls reuse the published result."""
        dataset = self._check_settled()
        if dataset is not None:
            return dataset
        if self._task is None:
            self._state = LoadState.loading
            self._task = asyncio.ensure_future(self._run())
        return await asyncio.shield(self._task)

    def load_sync(self) -> BuildingDataset:
        """Blocking variant of ``load`` for scripts and the CLI."""
        dataset = self._check_settled()
        if dataset is not None:
            return dataset
        if self._state == LoadState.loading:
            raise RuntimeError("A load is already in flight")
        self._state = LoadState.loading
        try:
            dataset = self._load_blocking()
        except Exception as exc:
            self._fail(exc)
            raise
        return self._publish(dataset)

    def reset(self) -> None:
        """Drop the published dataset (or recorded failure) and return to unloaded."""
        if self._state == LoadState.loading:
            raise RuntimeError("Cannot reset while a load is in flight")
        self._state = LoadState.unloaded
        self._dataset = None
        self._error = None
        self._task = None
