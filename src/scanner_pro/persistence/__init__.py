"""Persistence layer for scan history and settings."""

from .database import KeyValueStore
from .settings import AppSettings
from .scan_store import HISTORY_KEY, SETTINGS_KEY, ScanStore

__all__ = [
    "KeyValueStore",
    "AppSettings",
    "ScanStore",
    "HISTORY_KEY",
    "SETTINGS_KEY",
]
