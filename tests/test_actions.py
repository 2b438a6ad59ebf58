"""Tests for per-type action targets."""

from scanner_pro.payload.actions import action_target, contact_name_parts, copy_value
from scanner_pro.payload.classifier import classify


def _target(raw):
    return action_target(classify(raw), raw)


def test_url_opens_url():
    assert _target("https://example.com/x") == "https://example.com/x"


def test_email_opens_raw():
    assert _target("mailto:a@b.com?subject=Hi") == "mailto:a@b.com?subject=Hi"


def test_phone_dials_number():
    assert _target("tel:+1 555 0100") == "tel:+15550100"


def test_sms_body_encoded():
    assert _target("smsto:555:Hi there!") == "sms:555?body=Hi%20there!"
    assert _target("sms:555") == "sms:555"


def test_geo_opens_maps():
    assert _target("geo:1.5,2.5") == "https://maps.google.com/?q=1.5,2.5"


def test_types_without_open_action():
    assert _target("WIFI:S:Net;;") is None
    assert _target("plain text") is None
    assert _target("upi://pay?pa=a@b") is None


def test_copy_value():
    raw = "WIFI:S:Net;T:WPA;P:pw;;"
    assert copy_value(classify(raw), raw) == "pw"
    raw = "upi://pay?pa=shop@upi"
    assert copy_value(classify(raw), raw) == "shop@upi"
    assert copy_value(classify("hello"), "hello") == "hello"
    raw = "WIFI:S:Open;;"
    assert copy_value(classify(raw), raw) == ""


def test_contact_name_parts():
    raw = "BEGIN:VCARD\nN:Doe;Jane\nEND:VCARD"
    assert contact_name_parts(classify(raw)) == ("Jane", "Doe")
    raw = "BEGIN:VCARD\nFN:Mary Ann Smith\nEND:VCARD"
    assert contact_name_parts(classify(raw)) == ("Mary", "Ann Smith")
    assert contact_name_parts(classify("BEGIN:VCARD\nEND:VCARD")) == ("", "")
