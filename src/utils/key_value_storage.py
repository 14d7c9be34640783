"""File-backed key-value storage for the local fallback store.

Each key maps to one file holding a serialized string, mirroring the
getItem/setItem/removeItem contract of browser local storage.
"""

import logging
import os
from pathlib import Path
from typing import Optional

from core.exceptions import PersistenceError

logger = logging.getLogger(__name__)


class JsonFileStorage:
    """Stores each key as ``<directory>/<key>.json``."""

    def __init__(self, directory: Path):
        """Initialize JsonFileStorage.

        Args:
            directory: Directory holding one file per key. Created if missing.
        """
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get_item(self, key: str) -> Optional[str]:
        """Return the stored string for ``key``, or None if never written.

        Raises:
            PersistenceError: If the file exists but cannot be read.
        """
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            raise PersistenceError(f"Failed to read '{key}': {e}") from e

    def set_item(self, key: str, value: str) -> None:
        """Replace the stored string for ``key``.

        The value is written to a temporary file first and renamed over the
        old one, so readers never see a half-written blob.

        Raises:
            PersistenceError: If the file cannot be written.
        """
        path = self._path(key)
        tmp_path = path.with_name(path.name + ".tmp")
        try:
            tmp_path.write_text(value, encoding="utf-8")
            os.replace(tmp_path, path)
        except OSError as e:
            raise PersistenceError(f"Failed to write '{key}': {e}") from e
        logger.debug("Wrote %d bytes to %s", len(value), path)

    def remove_item(self, key: str) -> None:
        try:
            self._path(key).unlink(missing_ok=True)
        except OSError as e:
            raise PersistenceError(f"Failed to remove '{key}': {e}") from e
