import os
import pathlib

from buildingmap import constants as _constants

BASE_DIR = pathlib.Path(__file__).parent.parent.absolute()
OUTPUT_DIR = _constants.OUTPUT_DIR

# Dataset served by the API; override with BUILDINGMAP_DATA_URL
DATA_URL = _constants.PARQUET_DATA_URL

# Set BUILDINGMAP_LOAD_ON_STARTUP=1 to start decoding as soon as the app boots
LOAD_ON_STARTUP = _constants.env_flag("BUILDINGMAP_LOAD_ON_STARTUP", False)

CORS_ORIGINS = [
    origin.strip()
    for origin in os.environ.get(
        "BUILDINGMAP_CORS_ORIGINS",
        "http://localhost:5174,http://127.0.0.1:5174",
    ).split(",")
    if origin.strip()
]
