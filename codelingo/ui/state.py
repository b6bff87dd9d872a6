# codelingo/ui/state.py
"""
Application state management for CodeLingo.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from codelingo.models.types import ConversionPhase, Feedback, TargetLanguage
from codelingo.services.exceptions import InvalidPhaseTransition

# Module logger
logger = logging.getLogger(__name__)

DEFAULT_SOURCE_TEXT = 'function helloWorld(){\n  console.log("Hello, world!");\n}'


@dataclass
class AppState:
    """
    Application state.
    Single source of truth for UI state. Nothing is persisted.

    Phase transitions go through begin_conversion()/end_conversion():
    - IDLE -> CONVERTING
    - CONVERTING -> IDLE
    """
    # Input editor
    source_text: str = DEFAULT_SOURCE_TEXT
    target_language: TargetLanguage = field(default_factory=TargetLanguage.default)

    # Output editor (last successful conversion)
    result_text: str = ""

    # Lifecycle
    phase: ConversionPhase = ConversionPhase.IDLE
    feedback: Optional[Feedback] = None

    # AI capability (flips to True once, never back)
    ai_ready: bool = False

    @property
    def is_converting(self) -> bool:
        return self.phase == ConversionPhase.CONVERTING

    def mark_ai_ready(self) -> None:
        if not self.ai_ready:
            logger.debug("AI marked ready")
        self.ai_ready = True

    def begin_conversion(self) -> None:
        """IDLE -> CONVERTING, clearing the previous result and feedback"""
        if self.phase != ConversionPhase.IDLE:
            raise InvalidPhaseTransition(f"Cannot start conversion from {self.phase.value}")
        self.phase = ConversionPhase.CONVERTING
        self.result_text = ""
        self.feedback = None

    def end_conversion(self) -> None:
        """CONVERTING -> IDLE"""
        if self.phase != ConversionPhase.CONVERTING:
            raise InvalidPhaseTransition(f"Cannot finish conversion from {self.phase.value}")
        self.phase = ConversionPhase.IDLE

    def reset(self) -> None:
        """Restore the default snippet and clear output (readiness/phase untouched)"""
        self.source_text = DEFAULT_SOURCE_TEXT
        self.result_text = ""
        self.feedback = None

    def can_convert(self) -> bool:
        """Whether the Convert button should be enabled"""
        return self.ai_ready and not self.is_converting

    def can_reset(self) -> bool:
        return not self.is_converting

    def can_copy(self) -> bool:
        return bool(self.result_text)
