"""buildingmap package: building footprints with period-styled extrusion
from columnar (Parquet / Arrow) attribute data.

Import constants FIRST so logging and .env configuration are in place
before any other module logs.
"""

from buildingmap import constants as _constants  # noqa: F401

from buildingmap.accessor import RenderAttributeAccessor
from buildingmap.decoder import decode
from buildingmap.derive import derive
from buildingmap.errors import BuildingMapError, DecodeError, FetchError
from buildingmap.loader import BuildingDataset, DatasetLoader
from buildingmap.models import BinaryColumn, DerivedAttributes, LoadState, StyleResult
from buildingmap.strings import extract_strings
from buildingmap.style import style_for
