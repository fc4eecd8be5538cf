"""
File-based Repository Implementation.

Persists one entry kind as a single JSON array of serialized entries.
Every operation reads the whole file and every write replaces it, so a
single logical update is atomic but each call costs O(n). Concurrent
writers are not supported: callers must serialize access to one file.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ...domain.catalog.entities import CatalogEntry
from ...domain.catalog.repositories import CatalogRepository, StatusVocabulary
from ...domain.catalog.value_objects import EntryKind
from ...exceptions import HydrationError, StorageConsistencyError, ValidationError

logger = logging.getLogger(__name__)


class JsonFileCatalogRepository(CatalogRepository):
    """JSON file implementation of CatalogRepository for one entry kind."""

    def __init__(
        self,
        file_path: Path,
        vocabulary: StatusVocabulary,
        kind: EntryKind = EntryKind.BOOK,
    ):
        super().__init__(kind, vocabulary)
        self.file_path = Path(file_path)
        if not self.file_path.exists():
            self._write_data([])
            logger.info(f"Created library file {self.file_path}")

    @classmethod
    def in_directory(
        cls, data_dir: Path, vocabulary: StatusVocabulary, kind: EntryKind = EntryKind.BOOK
    ) -> "JsonFileCatalogRepository":
        """Create a repository using the conventional ``<kind>s.json`` file name."""
        kind = EntryKind.parse(kind)
        return cls(Path(data_dir) / f"{kind.value}s.json", vocabulary, kind)

    def find_all(self, filters: Optional[Mapping[str, Any]] = None) -> List[CatalogEntry]:
        """Find all entries, newest first. Invalid records are skipped and logged."""
        status = self._status_filter(filters)
        allowed = self.allowed_statuses()
        if status is not None and status not in allowed:
            logger.warning(f"Filter on unknown {self.kind.value} status '{status}', returning no entries")
            return []

        entries = []
        for index, record in enumerate(self._read_data()):
            try:
                entry = self._hydrate(record, allowed)
            except HydrationError as e:
                logger.warning(f"Skipping invalid {self.kind.value} record #{index} in {self.file_path}: {e}")
                continue
            if status is None or entry.has_status(status):
                entries.append(entry)

        entries.sort(key=lambda e: e.key)
        entries.sort(key=lambda e: e.added_timestamp, reverse=True)
        return entries

    def find_by_key(self, key: str) -> Optional[CatalogEntry]:
        """Find an entry by key. A corrupt matching record raises StorageConsistencyError."""
        for record in self._read_data():
            if self._record_key(record) != key:
                continue
            try:
                return self._hydrate(record, self.allowed_statuses())
            except HydrationError as e:
                logger.error(f"Stored {self.kind.value} '{key}' in {self.file_path} is invalid: {e}")
                raise StorageConsistencyError(
                    f"Failed to load {self.kind.value} '{key}' due to inconsistent data: {e}"
                ) from e
        return None

    def save(self, entry: CatalogEntry) -> None:
        """Replace the record with the same key, or append a new one."""
        if entry.kind != self.kind:
            raise ValidationError(
                f"Cannot save a {entry.kind.value} entry in the {self.kind.value} repository."
            )

        allowed = self.allowed_statuses()
        for name in entry.user_statuses:
            if name not in allowed:
                logger.error(f"Refused save of {self.kind.value} '{entry.key}' to {self.file_path}")
                raise StorageConsistencyError(
                    f"Invalid status name '{name}' for {self.kind.value} '{entry.key}'. "
                    "Not found in the status vocabulary."
                )

        records = self._read_data()
        serialized = entry.to_dict()
        for index, record in enumerate(records):
            if self._record_key(record) == entry.key:
                records[index] = serialized
                break
        else:
            records.append(serialized)

        self._write_data(records)
        logger.info(f"Saved {self.kind.value} '{entry.key}' to {self.file_path}")

    def delete_by_key(self, key: str) -> bool:
        records = self._read_data()
        remaining = [r for r in records if self._record_key(r) != key]
        if len(remaining) == len(records):
            return False

        self._write_data(remaining)
        logger.info(f"Deleted {self.kind.value} '{key}' from {self.file_path}")
        return True

    def count(self) -> int:
        return len(self._read_data())

    @staticmethod
    def _record_key(record: Any) -> Optional[str]:
        if not isinstance(record, dict):
            return None
        key = record.get("key") or record.get("isbn")
        return str(key).strip() if key is not None else None

    def _hydrate(self, record: Any, allowed: Sequence[str]) -> CatalogEntry:
        try:
            return CatalogEntry.from_dict(record, allowed, kind=self.kind)
        except ValidationError as e:
            raise HydrationError(str(e)) from e

    def _read_data(self) -> List[Dict[str, Any]]:
        """Load every record from the library file."""
        try:
            with open(self.file_path, 'r', encoding='utf-8') as f:
                text = f.read()
        except OSError as e:
            raise StorageConsistencyError(f"Library file is not readable: {self.file_path}: {e}") from e

        if not text.strip():
            return []

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise StorageConsistencyError(
                f"Error decoding JSON from library file {self.file_path}: {e}"
            ) from e

        if not isinstance(data, list):
            raise StorageConsistencyError(
                f"Library file {self.file_path} must contain a JSON array, got {type(data).__name__}"
            )
        return data

    def _write_data(self, records: List[Dict[str, Any]]) -> None:
        """Replace the library file with the given records."""
        try:
            self.file_path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.file_path.name}.", suffix=".tmp", dir=self.file_path.parent
            )
            try:
                with os.fdopen(fd, 'w', encoding='utf-8') as f:
                    json.dump(records, f, indent=2, ensure_ascii=False)
                os.replace(tmp_name, self.file_path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except (OSError, TypeError, ValueError) as e:
            raise StorageConsistencyError(f"Failed to write library file {self.file_path}: {e}") from e
