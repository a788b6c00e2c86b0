"""Durable storage backed by a single JSON document on disk."""

import json
import os
import tempfile
from pathlib import Path

from checkout.storage.port import StorageError, StoragePort


class JsonFileStorage(StoragePort):
    """Stores every key in one JSON object; writes replace the file atomically."""

    def __init__(self, path: str | os.PathLike) -> None:
        self.path = Path(path)

    def get(self, key: str) -> str | None:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        values = self._read()
        values[key] = value
        self._write(values)

    def remove(self, key: str) -> None:
        values = self._read()
        if key in values:
            del values[key]
            self._write(values)

    def _read(self) -> dict[str, str]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except (OSError, UnicodeDecodeError) as exc:
            raise StorageError(f"Cannot read {self.path}: {exc}") from exc

        try:
            values = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise StorageError(f"{self.path} is not valid JSON") from exc
        if not isinstance(values, dict):
            raise StorageError(f"{self.path} does not hold a JSON object")
        return values

    def _write(self, values: dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.")
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(values, handle)
            os.replace(tmp_name, self.path)
        except OSError as exc:
            raise StorageError(f"Cannot write {self.path}: {exc}") from exc
