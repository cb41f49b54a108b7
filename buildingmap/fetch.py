"""Byte source: read a dataset from an HTTP(S) URL or a local path."""

import logging
import pathlib

import requests

from .constants import REQUEST_TIMEOUT
from .errors import FetchError

logger = logging.getLogger(__name__)


def is_url(source: str) -> bool:
    return str(source).startswith(("http://", "https://"))


def fetch_bytes(source, timeout: float = REQUEST_TIMEOUT) -> bytes:
    """Return the full payload behind *source* or raise ``FetchError``."""
    if is_url(source):
        return _fetch_url(source, timeout)
    return _read_path(pathlib.Path(source))


def _fetch_url(url: str, timeout: float) -> bytes:
    logger.info(f"Fetching {url}")
    try:
        response = requests.get(url, timeout=timeout)
    except requests.RequestException as e:
        raise FetchError(f"Failed to fetch {url}: {e}") from e

    if not response.ok:
        raise FetchError(f"Failed to fetch {url}. Status: {response.status_code}")

    logger.info(f"Fetched {len(response.content) / 1024 / 1024:.1f} MB from {url}")
    return response.content


def _read_path(path: pathlib.Path) -> bytes:
    try:
        data = path.read_bytes()
    except OSError as e:
        raise FetchError(f"Failed to read {path}: {e}") from e
    logger.info(f"Read {len(data)} bytes from {path}")
    return data
