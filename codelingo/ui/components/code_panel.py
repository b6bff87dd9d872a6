# codelingo/ui/components/code_panel.py
"""
Code conversion panels: toolbar, input editor, output editor, feedback line.
Each create_* function returns the elements the app refreshes later.
"""

from typing import Awaitable, Callable

from nicegui import ui

from codelingo.models.types import TargetLanguage
from codelingo.services.feedback import INITIALIZING_MESSAGE
from codelingo.ui.state import AppState
from codelingo.ui.utils import feedback_classes


# Input pane highlighting (the default snippet is JavaScript)
INPUT_LANGUAGE = 'JavaScript'


def create_toolbar(
    state: AppState,
    on_target_change: Callable[[str], None],
    on_convert: Callable[[], Awaitable[None]],
    on_reset: Callable[[], None],
) -> tuple[ui.select, ui.button, ui.button]:
    """Language dropdown with Convert and Reset buttons."""
    with ui.row().classes('gap-4 justify-center items-center'):
        language_select = ui.select(
            TargetLanguage.labels(),
            value=state.target_language.value,
            on_change=lambda e: on_target_change(e.value),
        ).classes('language-select').props('dark outlined dense')

        convert_button = ui.button(
            'Convert',
            icon='play_arrow',
            on_click=on_convert,
        ).classes('convert-btn text-white font-semibold').props('no-caps')
        convert_button.set_enabled(state.can_convert())

        reset_button = ui.button(
            'Reset',
            icon='restart_alt',
            on_click=on_reset,
        ).classes('reset-btn text-white font-semibold').props('no-caps')

    return language_select, convert_button, reset_button


def create_input_panel(
    state: AppState,
    on_source_change: Callable[[str], None],
    theme: str = 'dracula',
    height: int = 420,
) -> ui.codemirror:
    """Editable source code pane."""
    with ui.column().classes('code-card w-full gap-0'):
        with ui.row().classes('code-card-header w-full items-center gap-2'):
            ui.label('Input Code')
        editor = ui.codemirror(
            state.source_text,
            language=INPUT_LANGUAGE,
            theme=theme,
            on_change=lambda e: on_source_change(e.value),
        ).classes('w-full').style(f'height: {height}px')
    return editor


def create_output_panel(
    state: AppState,
    on_copy: Callable[[], Awaitable[None]],
    theme: str = 'dracula',
    height: int = 420,
) -> tuple[ui.codemirror, ui.label, ui.button]:
    """Read-only converted code pane with a Copy button."""
    with ui.column().classes('code-card w-full gap-0'):
        with ui.row().classes('code-card-header w-full items-center justify-between'):
            with ui.row().classes('items-center gap-2'):
                ui.icon('check_circle').classes('text-emerald-400')
                title = ui.label(f'Converted Code ({state.target_language.value})')
            copy_button = ui.button('Copy', icon='content_copy', on_click=on_copy) \
                .props('flat dense no-caps').classes('text-white')
            copy_button.set_enabled(state.can_copy())
        editor = ui.codemirror(
            state.result_text,
            language=state.target_language.value,
            theme=theme,
        ).classes('w-full').style(f'height: {height}px')
        # Output is never edited by the user
        editor.disable()
    return editor, title, copy_button


def create_feedback_line(state: AppState) -> tuple[ui.label, ui.label]:
    """Feedback message and the "initializing" status line."""
    feedback_label = ui.label(state.feedback.message if state.feedback else '') \
        .classes(feedback_classes(state.feedback))
    feedback_label.set_visibility(state.feedback is not None)

    status_label = ui.label(INITIALIZING_MESSAGE).classes('init-status')
    status_label.set_visibility(not state.ai_ready)
    return feedback_label, status_label
