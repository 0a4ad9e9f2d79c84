import json
import logging
import os
import tempfile

logger = logging.getLogger(__name__)


class JsonStorage:
    """Durable key-value store: one JSON snapshot file per key.

    If the data directory cannot be created the storage runs in-memory only for
    the session: loads return their default and saves report failure.
    """

    def __init__(self, directory):
        self.directory = directory
        self.available = True
        try:
            os.makedirs(directory, exist_ok=True)
        except OSError as e:
            logger.warning(f"Storage directory {directory!r} unavailable, running in-memory: {e}")
            self.available = False

    def _path(self, key):
        return os.path.join(self.directory, f"{key}.json")

    def load(self, key, default=None):
        if not self.available:
            return default
        path = self._path(key)
        if not os.path.exists(path):
            return default
        try:
            with open(path, encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read snapshot {key!r}, using default: {e}")
            return default

    def save(self, key, value):
        """Write a whole-collection snapshot. Returns True on success."""
        if not self.available:
            return False
        try:
            fd, tmp_path = tempfile.mkstemp(suffix=".json", dir=self.directory)
        except OSError as e:
            logger.warning(f"Could not persist {key!r}: {e}")
            return False
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(value, f, ensure_ascii=False)
            os.replace(tmp_path, self._path(key))
            return True
        except (OSError, TypeError, ValueError) as e:
            logger.warning(f"Could not persist {key!r}: {e}")
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            return False
