"""Key-value media the local store persists its collections to."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from loguru import logger

from ..config import StorageConfig
from ..errors import StorageUnavailable


class KeyValueBackend(ABC):
    """String-to-string storage with whole-value reads and writes."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the value stored under ``key`` or None."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Replace the value stored under ``key``."""

    @abstractmethod
    def remove(self, key: str) -> None:
        """Drop ``key``; missing keys are ignored."""

    @abstractmethod
    def keys(self) -> list[str]:
        """Return the stored keys in sorted order."""


class MemoryBackend(KeyValueBackend):
    """Values live as long as the process."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._data)


class DirectoryBackend(KeyValueBackend):
    """One ``<key>.json`` file per key under ``root``."""

    SUFFIX = ".json"

    def __init__(self, root: Path) -> None:
        self.root = root
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageUnavailable(f"Cannot create storage directory {root}: {exc}") from exc

    def _path(self, key: str) -> Path:
        return self.root / f"{key}{self.SUFFIX}"

    def get(self, key: str) -> str | None:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise StorageUnavailable(f"Cannot read {path}: {exc}") from exc

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        tmp_path = path.with_name(path.name + ".tmp")
        try:
            tmp_path.write_text(value, encoding="utf-8")
            tmp_path.replace(path)
        except OSError as exc:
            try:
                tmp_path.unlink(missing_ok=True)
            except OSError:
                logger.warning("Could not remove temporary file {}", tmp_path)
            raise StorageUnavailable(f"Cannot write {path}: {exc}") from exc
        logger.debug("Wrote {} bytes into {}", len(value), path)

    def remove(self, key: str) -> None:
        path = self._path(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            raise StorageUnavailable(f"Cannot remove {path}: {exc}") from exc
        logger.debug("Removed {}", path)

    def keys(self) -> list[str]:
        if not self.root.exists():
            return []
        return sorted(path.stem for path in self.root.glob(f"*{self.SUFFIX}"))


def create_backend(config: StorageConfig) -> KeyValueBackend:
    """Instantiate the backend named in the storage config."""
    if config.backend == "memory":
        return MemoryBackend()
    return DirectoryBackend(config.data_dir)


__all__ = [
    "DirectoryBackend",
    "KeyValueBackend",
    "MemoryBackend",
    "create_backend",
]
