# tests/test_settings.py
"""Tests for codelingo.config.settings"""

import json
import tempfile
from pathlib import Path

import pytest

from codelingo.config.settings import AppSettings, USER_SETTINGS_KEYS, invalidate_settings_cache
from codelingo.models.types import TargetLanguage


@pytest.fixture(autouse=True)
def clear_settings_cache():
    invalidate_settings_cache()
    yield
    invalidate_settings_cache()


class TestAppSettings:
    """Tests for AppSettings dataclass"""

    def test_default_values(self):
        settings = AppSettings()
        assert settings.chat_base_url == "http://127.0.0.1:8080"
        assert settings.chat_model is None
        assert settings.request_timeout == 120
        assert settings.capability_poll_interval == 0.3
        assert settings.last_target_language == "Python"
        assert settings.target_language == TargetLanguage.PYTHON

    def test_user_settings_keys(self):
        assert USER_SETTINGS_KEYS == {"chat_base_url", "chat_model", "last_target_language"}

    def test_save_and_load(self):
        """Test save/load with the separation model (template + user_settings)"""
        with tempfile.TemporaryDirectory() as tmpdir:
            config_dir = Path(tmpdir)
            settings_path = config_dir / "settings.json"  # Used as base path

            template_path = config_dir / "settings.template.json"
            template_path.write_text(json.dumps({
                "request_timeout": 300,
                "last_target_language": "Python",
            }))

            settings = AppSettings(
                last_target_language="Rust",
                chat_model="qwen2.5-coder",
                request_timeout=999,  # Not a user key, never saved
            )
            settings.save(settings_path)

            user_settings_path = config_dir / "user_settings.json"
            assert user_settings_path.exists()
            saved = json.loads(user_settings_path.read_text(encoding="utf-8"))
            assert set(saved) == USER_SETTINGS_KEYS

            loaded = AppSettings.load(settings_path, use_cache=False)
            assert loaded.last_target_language == "Rust"
            assert loaded.target_language == TargetLanguage.RUST
            assert loaded.chat_model == "qwen2.5-coder"
            # Non-user settings come from the template
            assert loaded.request_timeout == 300

    def test_load_without_files_uses_defaults(self, tmp_path):
        loaded = AppSettings.load(tmp_path / "settings.json")
        assert loaded == AppSettings()

    def test_user_settings_ignore_unknown_keys(self, tmp_path):
        (tmp_path / "user_settings.json").write_text(json.dumps({
            "last_target_language": "Go",
            "request_timeout": 5,
            "bogus": True,
        }))
        loaded = AppSettings.load(tmp_path / "settings.json", use_cache=False)
        assert loaded.last_target_language == "Go"
        assert loaded.request_timeout == 120

    def test_broken_template_is_ignored(self, tmp_path):
        (tmp_path / "settings.template.json").write_text("{not json")
        loaded = AppSettings.load(tmp_path / "settings.json", use_cache=False)
        assert loaded == AppSettings()

    def test_load_uses_cache(self, tmp_path):
        path = tmp_path / "settings.json"
        first = AppSettings.load(path)
        second = AppSettings.load(path)
        assert first is second


class TestSettingsValidation:
    """Tests for AppSettings._validate()"""

    def _load(self, tmp_path, data):
        (tmp_path / "settings.template.json").write_text(json.dumps(data))
        return AppSettings.load(tmp_path / "settings.json", use_cache=False)

    def test_unknown_language_reset(self, tmp_path):
        loaded = self._load(tmp_path, {"last_target_language": "COBOL"})
        assert loaded.last_target_language == "Python"

    def test_timeout_range(self, tmp_path):
        assert self._load(tmp_path, {"request_timeout": 1}).request_timeout == 120
        assert self._load(tmp_path, {"request_timeout": 5000}).request_timeout == 120

    def test_base_url_normalized(self, tmp_path):
        assert self._load(tmp_path, {"chat_base_url": "http://localhost:11434/"}).chat_base_url \
            == "http://localhost:11434"
        assert self._load(tmp_path, {"chat_base_url": "ftp://x"}).chat_base_url \
            == "http://127.0.0.1:8080"

    def test_poll_settings(self, tmp_path):
        loaded = self._load(tmp_path, {
            "capability_poll_interval": 0.001,
            "capability_poll_backoff": 0.5,
            "capability_poll_max_interval": 0.1,
        })
        assert loaded.capability_poll_interval == 0.3
        assert loaded.capability_poll_backoff == 1.0
        assert loaded.capability_poll_max_interval == 0.3

    def test_blank_model_means_auto(self, tmp_path):
        assert self._load(tmp_path, {"chat_model": "  "}).chat_model is None

    def test_temperature_range(self, tmp_path):
        assert self._load(tmp_path, {"chat_temperature": 5}).chat_temperature == 0.2
