"""
JSON File Store
===============
File-backed store that survives process restarts.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional, Union

import structlog

logger = structlog.get_logger(__name__)


class JsonFileStore:
    """
    Persists every key in a single JSON object on disk.

    The file is re-read on each access so writes from another process
    are picked up, and replaced atomically on each write.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _load(self) -> Dict[str, str]:
        try:
            with self.path.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            logger.warning("Unreadable store file, starting empty", path=str(self.path), error=str(e))
            return {}

        if not isinstance(data, dict):
            logger.warning("Store file is not a JSON object, starting empty", path=str(self.path))
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def _dump(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=str(self.path.parent), prefix=".store-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, sort_keys=True)
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def get(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._dump(data)

    def remove(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._dump(data)
