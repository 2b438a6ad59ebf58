"""Shared pytest fixtures for Scanner Pro tests."""

import pytest
from datetime import datetime, timedelta

from scanner_pro.history.models import ScanRecord
from scanner_pro.payload.classifier import classify
from scanner_pro.persistence.database import KeyValueStore
from scanner_pro.persistence.scan_store import ScanStore


@pytest.fixture(autouse=True)
def isolated_home(monkeypatch, tmp_path):
    """Isolate tests from real config and data by using a temp HOME."""
    monkeypatch.setenv("HOME", str(tmp_path))
    for var in ("SCANNER_PRO_DB_PATH", "SCANNER_PRO_COOLDOWN_MS", "SCANNER_PRO_RECENT_LIMIT"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def temp_db_path(tmp_path):
    """Temporary database path."""
    return tmp_path / "data" / "test.db"


@pytest.fixture
def kv_store(temp_db_path):
    """Initialized key/value store."""
    return KeyValueStore(temp_db_path)


@pytest.fixture
def scan_store(kv_store):
    """ScanStore over a temporary database."""
    return ScanStore(store=kv_store)


@pytest.fixture
def now():
    """Fixed reference time: Friday 2026-03-20 14:30 local."""
    return datetime(2026, 3, 20, 14, 30, 0)


def make_record(raw: str, timestamp: datetime, record_id: str, is_saved: bool = False) -> ScanRecord:
    record = ScanRecord.from_payload(raw, classify(raw), record_id=record_id, timestamp=timestamp)
    record.is_saved = is_saved
    return record


@pytest.fixture
def sample_records(now):
    """Newest-first history spanning today, yesterday and older days."""
    return [
        make_record("https://www.example.com/a", now - timedelta(minutes=5), "r1"),
        make_record("WIFI:S:HomeNet;T:WPA;P:secret;;", now - timedelta(hours=2), "r2", is_saved=True),
        make_record("tel:+1 555 0100", now - timedelta(days=1), "r3"),
        make_record("hello world", datetime(2026, 3, 10, 9, 0), "r4", is_saved=True),
        make_record("geo:37.7749,-122.4194", datetime(2026, 3, 2, 18, 0), "r5"),
    ]
