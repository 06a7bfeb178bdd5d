"""Byte stores — where serialized saves live."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Protocol

from clickfluencer.engine.errors import StorageError

SAVE_DIR = Path.home() / ".clickfluencer"

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class ByteStore(Protocol):
    """Minimal key/value byte store."""

    def get(self, key: str) -> bytes | None: ...

    def set(self, key: str, data: bytes) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryStore:
    """In-process store; nothing survives the process."""

    def __init__(self) -> None:
        self._data: dict[str, bytes] = {}

    def get(self, key: str) -> bytes | None:
        return self._data.get(key)

    def set(self, key: str, data: bytes) -> None:
        self._data[key] = bytes(data)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class FileStore:
    """One file per key inside a directory (``~/.clickfluencer`` by default)."""

    def __init__(self, directory: Path | str | None = None) -> None:
        self.directory = Path(directory) if directory is not None else SAVE_DIR

    def _path(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise StorageError(f"Invalid store key: {key!r}")
        return self.directory / f"{key}.json"

    def get(self, key: str) -> bytes | None:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return path.read_bytes()
        except OSError as exc:
            raise StorageError(f"Could not read {path}: {exc}") from exc

    def set(self, key: str, data: bytes) -> None:
        path = self._path(key)
        tmp = path.with_suffix(".tmp")
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            tmp.write_bytes(data)
            tmp.replace(path)
        except OSError as exc:
            raise StorageError(f"Could not write {path}: {exc}") from exc

    def delete(self, key: str) -> None:
        path = self._path(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            raise StorageError(f"Could not delete {path}: {exc}") from exc
