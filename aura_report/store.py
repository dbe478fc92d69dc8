"""Report store: the durable collection of saved comparison reports.

The whole collection lives as one JSON array under a single key of a
key/value storage backend. Every write re-serializes the full collection, so
appends must not interleave: await or finish one before issuing the next.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import ValidationError

from aura_report.config import Settings, settings
from aura_report.errors import StorageCorruptionError
from aura_report.ids import IdGenerator, UuidIdGenerator
from aura_report.json_renderer import build_json_dict
from aura_report.report_data import ReportDraft, SavedReport

logger = logging.getLogger(__name__)


class StorageBackend(ABC):
    """Minimal string key/value storage."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored string, or None when the key is absent."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store a string under key, replacing any previous value."""


class InMemoryStorage(StorageBackend):
    def __init__(self, initial: Optional[dict[str, str]] = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileStorage(StorageBackend):
    """All keys in one JSON object file, replaced atomically on each write."""

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    def get(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, ensure_ascii=False)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _read_all(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except ValueError as exc:
            logger.warning("Storage file %s is not valid JSON, treating as empty: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Storage file %s does not hold a JSON object, treating as empty", self.path)
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}


class ReportStore:
    """Load, append to and clear the persisted report collection."""

    def __init__(
        self,
        backend: StorageBackend,
        key: Optional[str] = None,
        id_generator: Optional[IdGenerator] = None,
    ) -> None:
        self.backend = backend
        self.key = key or settings.storage_key
        self.id_generator = id_generator or UuidIdGenerator()

    @classmethod
    def from_settings(cls, config: Settings = settings, id_generator: Optional[IdGenerator] = None) -> "ReportStore":
        """File-backed store when a storage path is configured, in-memory otherwise."""
        if config.storage_path:
            backend: StorageBackend = JsonFileStorage(config.storage_path)
        else:
            backend = InMemoryStorage()
        return cls(backend, key=config.storage_key, id_generator=id_generator)

    def load_all(self) -> list[SavedReport]:
        """Return every saved report in append order.

        Corrupt data is logged and replaced by an empty collection; it is
        never reported to the caller. Entries that do not validate are left
        out of the result but stay in storage.
        """
        reports: list[SavedReport] = []
        for index, entry in enumerate(self._load_entries()):
            try:
                reports.append(SavedReport.model_validate(entry))
            except ValidationError as exc:
                logger.warning(
                    "Skipping unreadable report at index %d of %r (%d errors)",
                    index, self.key, exc.error_count(),
                )
        return reports

    def append(self, report: ReportDraft) -> SavedReport:
        """Give the report a fresh id and add it to the end of the collection."""
        entries = self._load_entries()
        saved = report.with_id(self.id_generator.next())
        entries.append(build_json_dict(saved))
        self._write(entries)
        logger.info("Report saved: id=%s title=%r (%d in collection)", saved.id, saved.title, len(entries))
        return saved

    def clear(self) -> None:
        """Drop every saved report."""
        self._write([])
        logger.info("Report collection %r cleared", self.key)

    def _load_entries(self) -> list[Any]:
        # Raw decoded entries; rewriting them as-is keeps unreadable ones intact.
        raw = self.backend.get(self.key)
        if raw is None:
            return []
        try:
            return _decode_collection(raw)
        except StorageCorruptionError as exc:
            logger.warning("Resetting report collection %r: %s", self.key, exc)
            self._write([])
            return []

    def _write(self, entries: list[Any]) -> None:
        self.backend.set(self.key, json.dumps(entries, ensure_ascii=False))


def _decode_collection(raw: str) -> list[Any]:
    try:
        data = json.loads(raw)
    except ValueError as exc:
        raise StorageCorruptionError(f"stored value is not valid JSON ({exc})") from exc
    if not isinstance(data, list):
        raise StorageCorruptionError(f"expected a JSON array, found {type(data).__name__}")
    return data
