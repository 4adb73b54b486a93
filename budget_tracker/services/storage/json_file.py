"""
JSON File Storage Implementation

DESIGN DECISION: A single JSON object on disk maps every key to its
string value. This is the Python stand-in for browser local storage:
1. No database setup required
2. Users can open and inspect the file directly
3. Easy to back up (copy one file)

TRADEOFFS:
- Every write rewrites the whole file (fine for personal data volumes)
- No locking: the last process to write wins
- Writes go to a temporary file first and are moved into place with
  os.replace, so a crash mid-write never leaves a half-written file

A file that cannot be parsed is moved aside to `<name>.corrupt` and the
store starts empty (fail closed).
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Iterator, Optional, Union

import structlog

from budget_tracker.services.storage.interface import (
    KeyValueStore,
    StorageError,
    StorageWriteError,
)


logger = structlog.get_logger(__name__)


class JsonFileKeyValueStore(KeyValueStore):
    """
    Keyed string store persisted as one JSON file.

    The whole file is loaded once at construction; reads are served
    from memory and every mutation is written through immediately.
    """

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path).expanduser()
        self._data: dict[str, str] = self._load()

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, str]:
        """Read the file, falling back to an empty store if unusable."""
        if not self._path.exists():
            return {}

        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Cannot read storage file {self._path}: {e}")

        if not raw.strip():
            return {}

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            self._quarantine(str(e))
            return {}

        if not isinstance(data, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in data.items()
        ):
            self._quarantine("top-level value is not a string-to-string object")
            return {}

        return data

    def _quarantine(self, reason: str) -> None:
        """Move an unreadable file out of the way so it is not overwritten."""
        corrupt_path = self._path.with_name(self._path.name + ".corrupt")
        logger.warning(
            "storage_file_unreadable",
            path=str(self._path),
            moved_to=str(corrupt_path),
            reason=reason,
        )
        try:
            os.replace(self._path, corrupt_path)
        except OSError as e:
            raise StorageError(
                f"Storage file {self._path} is unreadable and could not be moved aside: {e}"
            )

    def _flush(self) -> None:
        """Atomically write the in-memory state to disk."""
        directory = self._path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=directory,
                prefix=f".{self._path.name}.",
                suffix=".tmp",
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    json.dump(self._data, fh, ensure_ascii=False, indent=2)
                os.replace(tmp_name, self._path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            raise StorageWriteError(f"Failed to write {self._path}: {e}")

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        previous = self._data.get(key)
        self._data[key] = value
        try:
            self._flush()
        except StorageWriteError:
            # Keep memory consistent with what is on disk
            if previous is None:
                self._data.pop(key, None)
            else:
                self._data[key] = previous
            raise

    def delete(self, key: str) -> None:
        if key not in self._data:
            return
        previous = self._data.pop(key)
        try:
            self._flush()
        except StorageWriteError:
            self._data[key] = previous
            raise

    def keys(self) -> Iterator[str]:
        return iter(list(self._data))
