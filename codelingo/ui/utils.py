# codelingo/ui/utils.py
"""
UI utility helpers for CodeLingo.
"""

import logging
from typing import Optional

from nicegui import Client, ui

from codelingo.models.types import Feedback, Severity

logger = logging.getLogger(__name__)

# Tailwind text colour per severity (feedback line under the editors)
SEVERITY_CLASSES: dict[Severity, str] = {
    Severity.INFO: 'text-slate-400',
    Severity.SUCCESS: 'text-emerald-400',
    Severity.WARNING: 'text-amber-400',
    Severity.ERROR: 'text-rose-400',
}


def feedback_classes(feedback: Optional[Feedback]) -> str:
    """CSS classes for the feedback label"""
    base = 'feedback-line text-center font-semibold'
    if feedback is None:
        return base
    return f'{base} {SEVERITY_CLASSES[feedback.severity]}'


class NiceGUIClipboard:
    """Clipboard capability backed by the browser (ui.clipboard)."""

    def __init__(self, client: Optional[Client] = None):
        self._client = client

    async def write_text(self, text: str) -> None:
        if self._client is not None:
            with self._client:
                ui.clipboard.write(text)
        else:
            ui.clipboard.write(text)
        logger.debug("Copied %d chars to clipboard", len(text))


def notify_feedback(feedback: Optional[Feedback], client: Optional[Client] = None) -> None:
    """Show feedback as a toast (used for outcomes that are easy to miss)."""
    if feedback is None:
        return
    if client is not None:
        with client:
            ui.notify(feedback.message, type=feedback.severity.notify_type)
    else:
        ui.notify(feedback.message, type=feedback.severity.notify_type)
