"""Tests for scan history models."""

import time
from datetime import datetime, timedelta, timezone

import pytest

from scanner_pro.exceptions import RecordFormatError
from scanner_pro.history.models import DateGroup, ScanRecord, parse_timestamp
from scanner_pro.payload.classifier import classify
from scanner_pro.payload.types import ScanPayloadType


def _local(instant: datetime) -> datetime:
    return instant.astimezone().replace(tzinfo=None)


@pytest.fixture
def set_timezone(monkeypatch):
    """Switch the process time zone; restored after the test."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset not available on this platform")

    def _set(name):
        monkeypatch.setenv("TZ", name)
        time.tzset()

    yield _set
    monkeypatch.undo()
    time.tzset()


def test_from_payload_stamps_id_and_time():
    before = datetime.now()
    record = ScanRecord.from_payload("tel:123", classify("tel:123"))
    after = datetime.now()

    assert record.type is ScanPayloadType.PHONE
    assert record.raw_data == "tel:123"
    assert record.fields == {"number": "123"}
    assert record.title == "123"
    assert record.is_saved is False
    assert len(record.id) == 36
    assert before <= record.timestamp <= after


def test_from_payload_ids_are_unique():
    payload = classify("hello")
    ids = {ScanRecord.from_payload("hello", payload).id for _ in range(20)}
    assert len(ids) == 20


def test_fields_are_copied():
    payload = classify("WIFI:S:Net;;")
    record = ScanRecord.from_payload("WIFI:S:Net;;", payload)
    record.fields["ssid"] = "Changed"
    assert payload.fields["ssid"] == "Net"


def test_payload_property_round_trips_classification():
    raw = "mailto:a@b.com?subject=Hi"
    record = ScanRecord.from_payload(raw, classify(raw))
    assert record.payload == classify(raw)


def test_to_dict_shape():
    ts = _local(datetime(2026, 3, 20, 10, 15, tzinfo=timezone.utc))
    record = ScanRecord.from_payload("hello", classify("hello"), record_id="abc", timestamp=ts)
    assert record.to_dict() == {
        "id": "abc",
        "type": "Text",
        "rawData": "hello",
        "parsedData": {"text": "hello"},
        "timestamp": "2026-03-20T10:15:00.000Z",
        "isSaved": False,
        "title": "hello",
        "subtitle": "hello",
    }


def test_from_dict_restores_record():
    ts = datetime(2026, 3, 20, 10, 15, 0)
    record = ScanRecord.from_payload("geo:1,2", classify("geo:1,2"), record_id="g1", timestamp=ts)
    record.is_saved = True
    assert ScanRecord.from_dict(record.to_dict()) == record


def test_from_dict_accepts_utc_iso_string():
    data = {
        "id": "x",
        "type": "URL",
        "rawData": "https://a.io",
        "parsedData": {"url": "https://a.io"},
        "timestamp": "2026-03-20T10:15:00.000Z",
        "isSaved": False,
        "title": "a.io",
        "subtitle": "https://a.io",
    }
    record = ScanRecord.from_dict(data)
    expected = _local(datetime(2026, 3, 20, 10, 15, tzinfo=timezone.utc))
    assert record.timestamp == expected
    assert record.timestamp.tzinfo is None


def test_instant_survives_time_zone_change(set_timezone):
    data = {
        "id": "x",
        "type": "Text",
        "rawData": "hi",
        "timestamp": "2026-03-20T10:00:00.000Z",
    }

    set_timezone("IST-5:30")
    record = ScanRecord.from_dict(data)
    assert record.timestamp == datetime(2026, 3, 20, 15, 30)
    saved = record.to_dict()
    assert saved["timestamp"] == "2026-03-20T10:00:00.000Z"

    set_timezone("UTC0")
    reloaded = ScanRecord.from_dict(saved)
    assert reloaded.timestamp == datetime(2026, 3, 20, 10, 0)
    assert reloaded.to_dict()["timestamp"] == "2026-03-20T10:00:00.000Z"


def test_to_dict_converts_aware_timestamp_to_utc():
    ts = datetime(2026, 3, 20, 12, 0, 0, 250000, tzinfo=timezone(timedelta(hours=2)))
    record = ScanRecord.from_payload("hi", classify("hi"), timestamp=ts)
    assert record.to_dict()["timestamp"] == "2026-03-20T10:00:00.250Z"


@pytest.mark.parametrize("data", [
    None,
    [],
    {"id": "x"},
    {"id": "x", "type": "Bogus", "rawData": "", "timestamp": "2026-03-20T10:00:00"},
    {"id": "x", "type": "Text", "rawData": "", "timestamp": "yesterday"},
    {"id": "x", "type": "Text", "rawData": "", "timestamp": "2026-03-20T10:00:00", "parsedData": "oops"},
])
def test_from_dict_rejects_malformed(data):
    with pytest.raises(RecordFormatError):
        ScanRecord.from_dict(data)


def test_parse_timestamp_offset():
    parsed = parse_timestamp("2026-03-20T10:00:00+02:00")
    expected = _local(datetime(2026, 3, 20, 8, 0, tzinfo=timezone.utc))
    assert parsed == expected


def test_date_group_defaults():
    group = DateGroup(label="TODAY")
    assert group.records == []
    assert DateGroup(label="TODAY", records=[]) == group
