"""Process-wide dataset loader shared by all routers."""

from buildingmap import DatasetLoader
from buildingmap.constants import COLUMNS_TO_RETURN

from backend import config

# Singleton instance used across the application
loader = DatasetLoader(config.DATA_URL, columns=COLUMNS_TO_RETURN)


def get_loader() -> DatasetLoader:
    return loader
