"""Scan-completion handling: turn decoded text into stored scan records."""

import logging
import threading
import time
from typing import Callable, Optional

from .history.models import ScanRecord
from .payload.classifier import classify
from .persistence.scan_store import ScanStore
from .persistence.settings import AppSettings

logger = logging.getLogger(__name__)

SCAN_COOLDOWN_MS = 2000


class ScanHandler:
    """
    Receives decoded strings from the camera pipeline.

    A scan is ignored while the cooldown after the previous scan is running,
    and when it repeats the last scanned text (until ``reset``).

    Thread-safe: ``handle`` may be called from the decoder thread while the
    UI calls ``reset``.
    """

    def __init__(
        self,
        store: Optional[ScanStore] = None,
        settings: Optional[AppSettings] = None,
        cooldown_ms: int = SCAN_COOLDOWN_MS,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize ScanHandler.

        Args:
            store: Where records are persisted (None keeps nothing)
            settings: Scan settings; loaded from ``store`` when omitted
            cooldown_ms: Minimum delay between two accepted scans
            clock: Monotonic clock in seconds (injectable for tests)
        """
        self.store = store
        if settings is None:
            settings = store.load_settings() if store else AppSettings()
        self.settings = settings
        self.cooldown_ms = cooldown_ms
        self._clock = clock

        self._lock = threading.Lock()
        self._last_data: Optional[str] = None
        self._busy_until: Optional[float] = None

    def handle(self, raw: str) -> Optional[ScanRecord]:
        """
        Classify a decoded string and record it.

        Args:
            raw: Decoded text

        Returns:
            The new ScanRecord, or None if the scan was ignored
        """
        with self._lock:
            now = self._clock()
            if self._busy_until is not None and now < self._busy_until:
                logger.debug("Scan ignored: cooldown active")
                return None
            if raw == self._last_data:
                logger.debug("Scan ignored: same data as last scan")
                return None

            self._last_data = raw
            self._busy_until = now + self.cooldown_ms / 1000.0

        record = ScanRecord.from_payload(raw, classify(raw))
        logger.info(f"Scanned {record.type.value}: {record.title[:50]}")

        if self.store and self.settings.save_history:
            self.store.add_record(record)

        return record

    def reset(self) -> None:
        """Forget the last scanned data and end any cooldown."""
        with self._lock:
            self._last_data = None
            self._busy_until = None
