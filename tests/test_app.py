# tests/test_app.py
"""
Tests for CodeLingoApp wiring (no page rendered).
Uses pytest-asyncio for the background startup path.
"""

import asyncio
import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock, patch

import pytest

from codelingo.config.settings import AppSettings, invalidate_settings_cache
from codelingo.models.types import ConversionPhase, TargetLanguage
from codelingo.ui.app import CodeLingoApp


@pytest.fixture(autouse=True)
def clear_settings_cache():
    invalidate_settings_cache()
    yield
    invalidate_settings_cache()


@pytest.fixture
def settings_path(tmp_path):
    return tmp_path / "config" / "settings.json"


@pytest.fixture
def app(settings_path):
    settings = AppSettings(
        last_target_language="Go",
        capability_poll_interval=0.01,
        capability_poll_backoff=1.0,
        capability_poll_max_interval=0.01,
    )
    return CodeLingoApp(settings=settings, settings_path=settings_path)


def _attach_fake_page(app: CodeLingoApp) -> None:
    """Stand-in elements so _refresh() runs without a NiceGUI client"""
    for name in (
        '_language_select', '_convert_button', '_reset_button', '_input_editor',
        '_output_editor', '_output_title', '_copy_button', '_feedback_label', '_status_label',
    ):
        setattr(app, name, Mock())


class TestCodeLingoAppInit:
    """Tests for construction"""

    def test_state_uses_saved_language(self, app):
        assert app.state.target_language == TargetLanguage.GO

    def test_starts_not_ready(self, app):
        assert app.state.ai_ready is False
        assert app.monitor.ready is False
        assert app.runtime.ai is None

    def test_monitor_uses_settings_intervals(self, app):
        assert app.monitor.poll_interval == 0.01
        assert app.monitor.backoff_factor == 1.0

    def test_refresh_without_page_is_noop(self, app):
        app._refresh()


class TestHandlers:
    """Tests for event handlers"""

    def test_source_change(self, app):
        app._on_source_change("x = 1")
        assert app.state.source_text == "x = 1"
        app._on_source_change(None)
        assert app.state.source_text == ""

    def test_target_change_persists(self, app, settings_path):
        app._on_target_change("Rust")

        assert app.state.target_language == TargetLanguage.RUST
        saved = json.loads((settings_path.parent / "user_settings.json").read_text(encoding="utf-8"))
        assert saved["last_target_language"] == "Rust"

    def test_target_change_updates_output_pane(self, app):
        _attach_fake_page(app)

        app._on_target_change("Rust")

        app._output_title.set_text.assert_called_with('Converted Code (Rust)')
        app._output_editor.set_language.assert_called_with('Rust')

    def test_target_change_refreshes_when_save_fails(self, app):
        _attach_fake_page(app)

        with patch.object(app.settings, "save", side_effect=PermissionError("read-only")):
            app._on_target_change("C++")

        assert app.state.target_language == TargetLanguage.CPP
        app._output_title.set_text.assert_called_with('Converted Code (C++)')
        app._output_editor.set_language.assert_called_with('C++')

    def test_target_change_refreshes_before_unexpected_save_error(self, app):
        _attach_fake_page(app)

        with patch.object(app.settings, "save", side_effect=TypeError("not serializable")):
            with pytest.raises(TypeError):
                app._on_target_change("Java")

        app._output_title.set_text.assert_called_with('Converted Code (Java)')

    def test_unknown_target_ignored(self, app, settings_path):
        app._on_target_change("COBOL")
        assert app.state.target_language == TargetLanguage.GO
        assert not (settings_path.parent / "user_settings.json").exists()

    def test_reset_skipped_while_converting(self, app):
        app.state.source_text = "x = 1"
        app.state.begin_conversion()
        app._reset()
        assert app.state.source_text == "x = 1"
        assert app.state.phase == ConversionPhase.CONVERTING


class TestBackgroundStartup:
    """Tests for start_background_tasks()/shutdown()"""

    @pytest.mark.asyncio
    async def test_readiness_reaches_state(self, app):
        chat = AsyncMock(return_value="fn main() {}")

        async def fake_load(max_attempts=None):
            await asyncio.sleep(0.03)
            app.runtime.ai = SimpleNamespace(chat=chat)
            return app.runtime.ai

        app.runtime.load = fake_load
        app.start_background_tasks()

        await asyncio.wait_for(app.monitor.wait_ready(), timeout=1.0)

        assert app.state.ai_ready is True
        assert app.state.can_convert() is True

        result = await app.controller.convert("let x = 1;")
        assert result.ok is True
        assert app.state.result_text == "fn main() {}"

        await app.shutdown()
        assert app.monitor.is_running is False

    @pytest.mark.asyncio
    async def test_shutdown_cancels_pending_load(self, app):
        started = asyncio.Event()

        async def never_loads(max_attempts=None):
            started.set()
            await asyncio.sleep(10)

        app.runtime.load = never_loads
        app.start_background_tasks()
        await started.wait()

        await app.shutdown()

        assert app.monitor.is_running is False
        assert app.state.ai_ready is False
