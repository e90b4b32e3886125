"""JSON-file-backed key-value store.

The whole store is one JSON object on disk. Every write rewrites the file
through a temporary sibling and an atomic rename.
"""

import json
import os
from pathlib import Path

from loguru import logger

from coachlink.core.errors import StorageAccessError


class JsonFileStore:
    """Persistent store kept in a single JSON file."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StorageAccessError(f"Failed to read store file {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageAccessError(f"Store file {self.path} does not contain a JSON object")
        return {str(k): str(v) for k, v in data.items()}

    def _save(self, data: dict[str, str]) -> None:
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise StorageAccessError(f"Failed to write store file {self.path}: {e}") from e
        logger.debug("Store file written", path=str(self.path), key_count=len(data))

    def get_item(self, key: str) -> str | None:
        return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def remove_item(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._save(data)

    def keys(self) -> list[str]:
        return list(self._load())
