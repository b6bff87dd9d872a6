# codelingo/ui/app.py
"""
CodeLingo - NiceGUI application.

Startup:
1. ChatRuntime.load() probes the AI server in the background
2. CapabilityMonitor polls runtime.ai.chat and flips readiness once
3. The page renders immediately; Convert stays disabled until ready
"""
from __future__ import annotations

import asyncio
import logging
import os
import threading
from pathlib import Path
from typing import Optional

from codelingo.config.settings import (
    AppSettings,
    get_default_prompts_dir,
    get_default_settings_path,
)
from codelingo.models.types import ChatCallable, TargetLanguage
from codelingo.services.capability_monitor import CapabilityMonitor
from codelingo.services.chat_client import ChatRuntime
from codelingo.services.conversion_controller import ConversionController
from codelingo.services.prompt_builder import PromptBuilder
from codelingo.ui.state import AppState

# Module logger
logger = logging.getLogger(__name__)


class CodeLingoApp:
    """Main application - wires state, services and the page together"""

    def __init__(self, settings: Optional[AppSettings] = None, settings_path: Optional[Path] = None):
        self._settings_path = settings_path or get_default_settings_path()
        self.settings = settings or AppSettings.load(self._settings_path)

        self.state = AppState(target_language=self.settings.target_language)
        self.runtime = ChatRuntime(self.settings)
        self.monitor = CapabilityMonitor(
            lambda: self.runtime,
            poll_interval=self.settings.capability_poll_interval,
            backoff_factor=self.settings.capability_poll_backoff,
            max_interval=self.settings.capability_poll_max_interval,
            on_ready=self._on_ai_ready,
        )
        self.controller = ConversionController(
            self.state,
            self.monitor,
            prompt_builder=PromptBuilder(get_default_prompts_dir()),
            on_change=self._refresh,
        )

        self._runtime_task: Optional[asyncio.Task] = None

        # UI references (set in create_ui)
        self._client = None
        self._client_lock = threading.Lock()
        self._language_select = None
        self._convert_button = None
        self._reset_button = None
        self._input_editor = None
        self._output_editor = None
        self._output_title = None
        self._copy_button = None
        self._feedback_label = None
        self._status_label = None
        self._last_notified = None

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def start_background_tasks(self) -> None:
        """Start loading the AI runtime and watching for the chat capability."""
        if self._runtime_task is None or self._runtime_task.done():
            self._runtime_task = asyncio.create_task(self.runtime.load(), name="codelingo-runtime-load")
            self._runtime_task.add_done_callback(self._on_runtime_task_done)
        self.monitor.start()

    def _on_runtime_task_done(self, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error("AI runtime failed to load: %s", error)

    async def shutdown(self) -> None:
        """Stop polling and cancel the runtime probe."""
        self.monitor.stop()
        task = self._runtime_task
        self._runtime_task = None
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        logger.info("CodeLingo background tasks stopped")

    def _on_ai_ready(self, _handle: ChatCallable) -> None:
        self.state.mark_ai_ready()
        self._refresh()

    # =========================================================================
    # Event handlers
    # =========================================================================

    def _on_source_change(self, value: str) -> None:
        self.state.source_text = value or ""

    def _on_target_change(self, value: str) -> None:
        try:
            self.state.target_language = TargetLanguage.from_label(value)
        except ValueError:
            logger.warning("Ignoring unknown target language: %s", value)
            return
        self._refresh()

        self.settings.last_target_language = value
        try:
            self.settings.save(self._settings_path)
        except OSError as e:
            logger.warning("Failed to save settings: %s", e)

    async def _convert(self) -> None:
        await self.controller.convert()

    def _reset(self) -> None:
        if not self.state.can_reset():
            return
        self.controller.reset()
        if self._input_editor is not None:
            self._input_editor.set_value(self.state.source_text)

    async def _copy(self) -> None:
        from codelingo.ui.utils import NiceGUIClipboard

        with self._client_lock:
            client = self._client
        await self.controller.copy_result(NiceGUIClipboard(client))

    # =========================================================================
    # Rendering
    # =========================================================================

    def _refresh(self) -> None:
        """Push AppState into the page elements."""
        if self._convert_button is None:
            return
        from codelingo.ui.utils import feedback_classes, notify_feedback

        state = self.state
        converting = state.is_converting

        self._convert_button.set_text('Converting...' if converting else 'Convert')
        if converting:
            self._convert_button.props('loading')
        else:
            self._convert_button.props(remove='loading')
        self._convert_button.set_enabled(state.can_convert())
        self._reset_button.set_enabled(state.can_reset())
        self._language_select.set_enabled(not converting)

        self._output_editor.set_value(state.result_text)
        self._output_editor.set_language(state.target_language.value)
        self._output_title.set_text(f'Converted Code ({state.target_language.value})')
        self._copy_button.set_enabled(state.can_copy())

        feedback = state.feedback
        self._feedback_label.set_text(feedback.message if feedback else '')
        self._feedback_label.classes(replace=feedback_classes(feedback))
        self._feedback_label.set_visibility(feedback is not None)
        self._status_label.set_visibility(not state.ai_ready)

        # Toast once per new outcome
        if feedback is not None and feedback is not self._last_notified:
            with self._client_lock:
                client = self._client
            try:
                notify_feedback(feedback, client)
            except RuntimeError as e:
                # Client already disconnected
                logger.debug("Skipping toast: %s", e)
        self._last_notified = feedback

    def create_ui(self) -> None:
        """Build the page"""
        from nicegui import ui

        from codelingo.ui.components.code_panel import (
            create_feedback_line,
            create_input_panel,
            create_output_panel,
            create_toolbar,
        )
        from codelingo.ui.styles import COMPLETE_CSS

        ui.add_css(COMPLETE_CSS)
        ui.dark_mode().enable()

        theme = self.settings.editor_theme
        height = self.settings.editor_height

        with ui.column().classes('w-full min-h-screen items-center justify-center p-6 gap-10'):
            ui.label('AI Code Converter').classes('app-title')

            (
                self._language_select,
                self._convert_button,
                self._reset_button,
            ) = create_toolbar(
                self.state,
                on_target_change=self._on_target_change,
                on_convert=self._convert,
                on_reset=self._reset,
            )

            with ui.grid(columns=2).classes('w-full max-w-7xl gap-8'):
                self._input_editor = create_input_panel(
                    self.state, self._on_source_change, theme=theme, height=height
                )
                (
                    self._output_editor,
                    self._output_title,
                    self._copy_button,
                ) = create_output_panel(self.state, self._copy, theme=theme, height=height)

            self._feedback_label, self._status_label = create_feedback_line(self.state)

        self._refresh()


def create_app() -> CodeLingoApp:
    """Create application instance"""
    return CodeLingoApp()


def run_app(
    host: str = '127.0.0.1',
    port: int = 8766,
    native: bool = False,
):
    """Run the application.

    Args:
        host: Host to bind to
        port: Port to bind to
        native: Use native window mode (pywebview)
    """
    from nicegui import Client as nicegui_Client
    from nicegui import app as nicegui_app
    from nicegui import ui

    codelingo_app = create_app()

    @nicegui_app.on_startup
    async def on_startup():
        """Called when NiceGUI server starts (before clients connect)."""
        codelingo_app.start_background_tasks()

    async def cleanup():
        logger.info("Shutting down CodeLingo...")
        await codelingo_app.shutdown()

    nicegui_app.on_shutdown(cleanup)

    @ui.page('/')
    async def main_page(client: nicegui_Client):
        # Save client reference for async handlers (context.client not available in async tasks)
        with codelingo_app._client_lock:
            codelingo_app._client = client
        codelingo_app.create_ui()

    no_auto_open = os.environ.get("CODELINGO_NO_AUTO_OPEN", "")
    show_browser = no_auto_open.strip().lower() not in ("1", "true", "yes")

    ui.run(
        host=host,
        port=port,
        title="CodeLingo",
        dark=True,
        reload=False,
        native=native,
        show=show_browser,
        reconnect_timeout=30.0,
        uvicorn_logging_level='warning',
    )
