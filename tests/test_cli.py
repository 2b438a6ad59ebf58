"""Tests for CLI functionality."""

import io
import json
from unittest.mock import patch

import pytest

from scanner_pro.__main__ import main
from scanner_pro.persistence.scan_store import ScanStore


@pytest.fixture
def db_args(temp_db_path):
    """Arguments pointing the CLI at a temporary database."""
    return ["--db", str(temp_db_path)]


def test_cli_help():
    """Test CLI help output."""
    with patch('sys.argv', ['scanner-pro', '--help']):
        with pytest.raises(SystemExit) as excinfo:
            main()
        assert excinfo.value.code == 0


def test_cli_version():
    """Test CLI version output."""
    with pytest.raises(SystemExit) as excinfo:
        main(['--version'])
    assert excinfo.value.code == 0


def test_cli_requires_command():
    with pytest.raises(SystemExit) as excinfo:
        main([])
    assert excinfo.value.code == 2


def test_classify_text_output(capsys):
    assert main(['classify', 'WIFI:S:HomeNet;T:WPA;P:secret123;;']) == 0
    out = capsys.readouterr().out
    assert "Wi-Fi: HomeNet" in out
    assert "WPA · Password protected" in out
    assert "  password: secret123" in out


def test_classify_json_output(capsys):
    assert main(['classify', '--json', 'geo:37.7749,-122.4194']) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["type"] == "Geo"
    assert data["title"] == "37.7749, -122.4194"


def test_classify_reads_stdin(capsys):
    with patch('sys.stdin', io.StringIO("tel:+1 555 0100\n")):
        assert main(['classify', '-']) == 0
    assert "Phone: +15550100" in capsys.readouterr().out


def test_scan_and_history(db_args, temp_db_path, capsys):
    assert main(db_args + ['scan', 'https://www.example.com/a']) == 0
    assert main(db_args + ['scan', 'hello world']) == 0
    capsys.readouterr()

    records = ScanStore(db_path=temp_db_path).load_history()
    assert [r.title for r in records] == ["hello world", "example.com"]

    assert main(db_args + ['history']) == 0
    out = capsys.readouterr().out
    assert out.startswith("TODAY\n")
    assert "[URL] example.com" in out

    assert main(db_args + ['history', '--type', 'URL']) == 0
    out = capsys.readouterr().out
    assert "example.com" in out
    assert "hello world" not in out


def test_history_empty(db_args, capsys):
    assert main(db_args + ['history']) == 0
    assert capsys.readouterr().out.strip() == "No scan history"

    assert main(db_args + ['history', '--search', 'zzz']) == 0
    assert capsys.readouterr().out.strip() == "No results found"


def test_save_delete_clear(db_args, temp_db_path, capsys):
    main(db_args + ['scan', 'keep me'])
    main(db_args + ['scan', 'drop me'])
    store = ScanStore(db_path=temp_db_path)
    drop, keep = store.load_history()

    assert main(db_args + ['save', keep.id]) == 0
    assert f"{keep.id} saved" in capsys.readouterr().out

    assert main(db_args + ['clear']) == 0
    assert "1 saved scans kept" in capsys.readouterr().out
    assert [r.id for r in store.load_history()] == [keep.id]

    assert main(db_args + ['delete', keep.id]) == 0
    assert "Deleted 1 scans" in capsys.readouterr().out
    assert store.load_history() == []


def test_save_unknown_id(db_args, capsys):
    assert main(db_args + ['save', 'missing']) == 1
    assert "Scan not found" in capsys.readouterr().err


def test_settings(db_args, temp_db_path, capsys):
    assert main(db_args + ['settings']) == 0
    assert "saveHistory: on" in capsys.readouterr().out

    assert main(db_args + ['settings', '--set', 'saveHistory=off', '--set', 'beep_on_scan=yes']) == 0
    out = capsys.readouterr().out
    assert "saveHistory: off" in out
    assert "beepOnScan: on" in out

    # History disabled: scans are not stored
    main(db_args + ['scan', 'not stored'])
    assert ScanStore(db_path=temp_db_path).load_history() == []


def test_settings_invalid(db_args, capsys):
    assert main(db_args + ['settings', '--set', 'darkMode=on']) == 1
    assert main(db_args + ['settings', '--set', 'saveHistory=perhaps']) == 1
    assert main(db_args + ['settings', '--set', 'saveHistory']) == 1


def test_auto_open_prints_target(db_args, capsys):
    main(db_args + ['settings', '--set', 'autoOpenURLs=on'])
    capsys.readouterr()
    assert main(db_args + ['scan', 'https://example.com']) == 0
    assert "Open: https://example.com" in capsys.readouterr().out


def test_storage_error_exit_code(tmp_path, capsys):
    blocker = tmp_path / "file"
    blocker.write_text("x")
    assert main(['--db', str(blocker / "sub" / "db.sqlite"), 'history']) == 1
    assert "Error:" in capsys.readouterr().err
