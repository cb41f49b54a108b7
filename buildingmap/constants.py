"""Configuration constants, paths, field names and period styling."""

import os
import pathlib
import logging

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def env_flag(name: str, default: bool) -> bool:
    """Read a yes/no environment toggle such as ``1``, ``true`` or ``No``."""
    value = os.environ.get(name, "").strip().lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off"):
        return False
    return default


# ── Data source ──────────────────────────────────────────────────────────
PARQUET_DATA_URL = os.environ.get(
    "BUILDINGMAP_DATA_URL",
    "https://devseed.s3.amazonaws.com/tecnico/lx_buildings_augmented.parquet",
)
REQUEST_TIMEOUT = float(os.environ.get("BUILDINGMAP_REQUEST_TIMEOUT", "60"))

# ── Schema field names ──────────────────────────────────────────────────
# Changing the source dataset's schema means updating these.
GEOMETRY_FIELD = os.environ.get("BUILDINGMAP_GEOMETRY_FIELD", "GEOMETRY")
FLOORS_FIELD = os.environ.get("BUILDINGMAP_FLOORS_FIELD", "floors_ag")
PERIOD_FIELD = os.environ.get("BUILDINGMAP_PERIOD_FIELD", "Period_con")

# Columns shown for a selected building
POPUP_FIELDS = ['Name', 'floors_ag', 'tipologia']

# Columns worth keeping when projecting the decoded table
COLUMNS_TO_RETURN = [
    'Name',
    'CdgPstl',
    'Period_con',
    'archetype',
    'tipologia',
    '_ineTEDIF',
    '%_heating_',
    '%_heatin_1',
    '%_heatin_2',
]

# ── Derivation ──────────────────────────────────────────────────────────
EXTRUSION_SCALE = 9.0     # metres per floor
DEFAULT_ELEVATION = 0.0   # flat, no extrusion

# UTF-8 error policy for string columns ("replace", "strict", "ignore", ...)
TEXT_DECODE_ERRORS = os.environ.get("BUILDINGMAP_TEXT_DECODE_ERRORS", "replace")

# Out-of-range row indices raise when strict, otherwise fall back to defaults
STRICT_ROW_INDEX = env_flag("BUILDINGMAP_STRICT_ROW_INDEX", True)

# ── Period styling ──────────────────────────────────────────────────────
# Older construction periods are drawn more opaque.
BASE_COLOR = (180, 48, 150)
PERIOD_ALPHAS = {
    'antes de 1919': 255,
    '1919-1945': 220,
    '1946-1960': 200,
    '1961-1970': 180,
    '1971-1980': 160,
    '1981-1990': 140,
    '1991-1995': 120,
    '1996-2000': 100,
    '2001-2005': 80,
    '2006-2011': 80,
}
FALLBACK_ALPHA = 20  # "NA" and anything unrecognised

# ── Rendering ───────────────────────────────────────────────────────────
MIN_SLAB_HEIGHT = 0.5  # metres, for buildings without extrusion

# Configure base paths
BASE_DIR = pathlib.Path(__file__).parent.parent.absolute()
OUTPUT_DIR = BASE_DIR / "output"

# Configure logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)
