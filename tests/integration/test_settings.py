"""
Tests for settings persistence, logging setup and small UI helpers.
"""

import logging
from datetime import date, datetime

import pytest
from modules import settings, storage
from modules.logging_config import setup_logging
from modules.storage import JsonKeyValueStore
from modules.utils import format_timestamp, parse_iso_date


@pytest.fixture
def store(tmp_path, monkeypatch):
    kv = JsonKeyValueStore(tmp_path / "store.json")
    monkeypatch.setattr(storage, "_store", kv)
    settings.load_settings.clear()
    yield kv
    settings.load_settings.clear()


class TestSettings:
    """load_settings / save_settings."""

    def test_defaults(self, store):
        assert settings.load_settings() == settings.DEFAULT_SETTINGS

    def test_save_and_reload(self, store):
        settings.save_settings({"display_mode": "Dark", "show_barcode_text": False})
        loaded = settings.load_settings()
        assert loaded["display_mode"] == "Dark"
        assert loaded["show_barcode_text"] is False
        assert loaded["datamatrix_size_px"] == 200
        assert store.get("settings.display_mode") == "Dark"

    def test_unknown_key(self, store):
        with pytest.raises(KeyError):
            settings.save_settings({"colour": "red", "display_mode": "Dark"})
        assert store.get("settings.display_mode") is None

    def test_stored_values_are_coerced(self, store):
        store.set("settings.datamatrix_size_px", "240")
        store.set("settings.show_barcode_text", "false")
        store.set("settings.barcode_module_height", "tall")
        loaded = settings.load_settings()
        assert loaded["datamatrix_size_px"] == 240
        assert loaded["show_barcode_text"] is False
        assert loaded["barcode_module_height"] == 15.0

    def test_int_height_saved_as_float(self, store):
        settings.save_settings({"barcode_module_height": 20})
        assert settings.load_settings()["barcode_module_height"] == 20.0


class TestUtils:
    """Date and timestamp helpers."""

    @pytest.mark.parametrize("value, expected", [
        ("2025-03-07", date(2025, 3, 7)),
        ("", None),
        ("07/03/2025", None),
        ("2025-02-30", None),
    ])
    def test_parse_iso_date(self, value, expected):
        assert parse_iso_date(value) == expected

    def test_format_timestamp(self):
        ms = 1_700_000_000_000
        expected = datetime.fromtimestamp(ms / 1000).strftime("%Y-%m-%d %H:%M:%S")
        assert format_timestamp(ms) == expected


class TestLogging:
    """setup_logging idempotency."""

    @pytest.fixture(autouse=True)
    def restore_root(self):
        root = logging.getLogger()
        level = root.level
        yield
        for handler in list(root.handlers):
            if (handler.get_name() or "").startswith("rx_barcode"):
                root.removeHandler(handler)
                handler.close()
        root.setLevel(level)

    def test_repeated_calls_add_one_handler(self):
        setup_logging("DEBUG", "")
        setup_logging("DEBUG", "")
        named = [h for h in logging.getLogger().handlers if h.get_name() == "rx_barcode"]
        assert len(named) == 1
        assert logging.getLogger().level == logging.DEBUG

    def test_log_file(self, tmp_path):
        root = logging.getLogger()
        log_file = tmp_path / "logs" / "app.log"
        setup_logging("INFO", str(log_file))
        logging.getLogger("rx_barcode.test").info("hello")
        for handler in root.handlers:
            handler.flush()
        assert "hello" in log_file.read_text(encoding="utf-8")
