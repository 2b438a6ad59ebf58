"""High-level storage for scan history and settings.

Every operation is best-effort: storage or decoding failures are logged and
absorbed, and callers get an empty history or default settings back instead
of an exception.
"""

import dataclasses
import json
import logging
from pathlib import Path
from typing import Iterable, List, Optional

from ..exceptions import RecordFormatError, StorageError
from ..history.models import ScanRecord
from .database import KeyValueStore
from .settings import AppSettings

logger = logging.getLogger(__name__)

# Attributes callers may replace through update_record
RECORD_ATTRIBUTES = frozenset(f.name for f in dataclasses.fields(ScanRecord))

HISTORY_KEY = "@scanner_pro:history"
SETTINGS_KEY = "@scanner_pro:settings"


class ScanStore:
    """
    Scan history and settings on top of a KeyValueStore.

    History is kept newest first. Saved records survive ``clear_history``.
    """

    def __init__(
        self,
        store: Optional[KeyValueStore] = None,
        db_path: Optional[Path] = None,
    ):
        """
        Initialize ScanStore.

        Args:
            store: Optional key/value store (for testing/dependency injection)
            db_path: Database path used when no store is given

        Raises:
            StorageError: If the default store cannot be opened
        """
        self.store = store if store else KeyValueStore(db_path)
        logger.info(f"ScanStore initialized with database: {self.store.db_path}")

    # History

    def load_history(self) -> List[ScanRecord]:
        """
        Load all scan records.

        Returns:
            Records newest first; empty on any storage failure. Malformed
            records are skipped.
        """
        try:
            raw = self.store.get_item(HISTORY_KEY)
            if not raw:
                return []
            data = json.loads(raw)
        except (StorageError, ValueError) as e:
            logger.warning(f"Failed to load scan history: {e}")
            return []

        if not isinstance(data, list):
            logger.warning(f"Scan history has unexpected type {type(data).__name__}, ignoring")
            return []

        records = []
        for item in data:
            try:
                records.append(ScanRecord.from_dict(item))
            except RecordFormatError as e:
                logger.warning(f"Skipping scan record: {e}")
        return records

    def save_history(self, records: Iterable[ScanRecord]) -> bool:
        """
        Replace the stored history.

        Returns:
            True on success, False if the write failed (the failure is logged)
        """
        records = list(records)
        try:
            payload = json.dumps([record.to_dict() for record in records], ensure_ascii=False)
            self.store.set_item(HISTORY_KEY, payload)
        except (StorageError, TypeError, ValueError) as e:
            logger.warning(f"Failed to save scan history: {e}")
            return False

        logger.debug(f"Saved {len(records)} scan records")
        return True

    def add_record(self, record: ScanRecord) -> List[ScanRecord]:
        """
        Prepend a record to the history.

        Returns:
            Updated history
        """
        updated = [record] + self.load_history()
        self.save_history(updated)
        logger.info(f"Added {record.type.value} scan {record.id}: {record.title[:50]}")
        return updated

    def update_record(self, record_id: str, **changes) -> List[ScanRecord]:
        """
        Apply attribute changes to the record with ``record_id``.

        Args:
            record_id: ID of the record to update
            **changes: ScanRecord attributes to replace (e.g. ``is_saved=True``)

        Returns:
            Updated history (unchanged if no record matches)
        """
        updated = []
        for record in self.load_history():
            if record.id == record_id:
                for name, value in changes.items():
                    if name not in RECORD_ATTRIBUTES:
                        logger.warning(f"Ignoring unknown record attribute '{name}'")
                        continue
                    setattr(record, name, value)
            updated.append(record)

        self.save_history(updated)
        return updated

    def toggle_saved(self, record_id: str) -> Optional[ScanRecord]:
        """
        Flip the saved flag of a record.

        Returns:
            The updated record, or None if it was not found
        """
        target = self.get_record(record_id)
        if target is None:
            return None

        history = self.update_record(record_id, is_saved=not target.is_saved)
        logger.debug(f"Toggled saved for scan {record_id}")
        return next((record for record in history if record.id == record_id), None)

    def get_record(self, record_id: str) -> Optional[ScanRecord]:
        """Find a record by ID."""
        return next((r for r in self.load_history() if r.id == record_id), None)

    def delete_record(self, record_id: str) -> List[ScanRecord]:
        """Delete one record; returns the remaining history."""
        return self.delete_records([record_id])

    def delete_records(self, record_ids: Iterable[str]) -> List[ScanRecord]:
        """Delete several records; returns the remaining history."""
        ids = set(record_ids)
        existing = self.load_history()
        updated = [record for record in existing if record.id not in ids]
        self.save_history(updated)
        logger.info(f"Deleted {len(existing) - len(updated)} scan records")
        return updated

    def clear_history(self) -> List[ScanRecord]:
        """
        Remove every record that is not saved.

        Returns:
            The saved records that remain
        """
        saved = [record for record in self.load_history() if record.is_saved]
        self.save_history(saved)
        logger.info(f"Cleared scan history, kept {len(saved)} saved records")
        return saved

    # Settings

    def load_settings(self) -> AppSettings:
        """Load settings; defaults when absent or corrupt."""
        try:
            raw = self.store.get_item(SETTINGS_KEY)
            if not raw:
                return AppSettings()
            return AppSettings.from_dict(json.loads(raw))
        except (StorageError, ValueError) as e:
            logger.warning(f"Failed to load settings, using defaults: {e}")
            return AppSettings()

    def save_settings(self, settings: AppSettings) -> bool:
        """
        Persist settings.

        Returns:
            True on success, False if the write failed (the failure is logged)
        """
        try:
            self.store.set_item(SETTINGS_KEY, json.dumps(settings.to_dict()))
        except StorageError as e:
            logger.warning(f"Failed to save settings: {e}")
            return False

        logger.info("Settings saved")
        return True
