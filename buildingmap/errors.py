"""Exceptions raised while loading a building dataset."""


class BuildingMapError(Exception):
    """Base class for load failures."""


class FetchError(BuildingMapError):
    """The byte source was unreachable or answered with a non-success status."""


class DecodeError(BuildingMapError):
    """The payload is truncated, corrupt, or internally inconsistent."""
