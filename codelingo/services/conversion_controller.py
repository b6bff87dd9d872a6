# codelingo/services/conversion_controller.py
"""
Conversion lifecycle for CodeLingo.

One conversion attempt:
1. Validate input (EmptyInputError) and readiness (NotReadyError)
2. IDLE -> CONVERTING, clear previous result and feedback
3. Send exactly one prompt to the AI chat capability
4. Normalize the reply (EmptyResponseError) or report the request error
5. CONVERTING -> IDLE, always

Errors never escape convert(); they are returned in ConversionResult and
shown through the feedback presenter.
"""

import asyncio
import logging
import time
from typing import Callable, Optional, Union

from codelingo.models.types import Clipboard, ConversionResult, TargetLanguage
from codelingo.services.capability_monitor import CapabilityMonitor
from codelingo.services.exceptions import (
    ConversionBusyError,
    ConversionError,
    EmptyInputError,
    NotReadyError,
    RequestFailureError,
    UnsupportedLanguageError,
)
from codelingo.services.feedback import FeedbackPresenter, Outcome
from codelingo.services.prompt_builder import PromptBuilder
from codelingo.services.response_normalizer import normalize
from codelingo.ui.state import AppState

logger = logging.getLogger(__name__)


class ConversionController:
    """
    Drives AppState through conversion attempts.
    """

    def __init__(
        self,
        state: AppState,
        monitor: CapabilityMonitor,
        prompt_builder: Optional[PromptBuilder] = None,
        presenter: Optional[FeedbackPresenter] = None,
        on_change: Optional[Callable[[], None]] = None,
    ):
        self.state = state
        self.monitor = monitor
        self.prompt_builder = prompt_builder or PromptBuilder()
        self.presenter = presenter or FeedbackPresenter()
        self.on_change = on_change

    def _notify_change(self) -> None:
        if self.on_change is None:
            return
        try:
            self.on_change()
        except Exception as e:
            logger.exception("State change callback failed: %s", e)

    def _check_preconditions(self, source_text: str) -> Optional[ConversionError]:
        if not source_text.strip():
            return EmptyInputError()
        if not self.monitor.ready:
            return NotReadyError()
        self.state.mark_ai_ready()
        if self.state.is_converting:
            return ConversionBusyError()
        return None

    def _reject(self, error: ConversionError) -> ConversionResult:
        logger.info("Conversion rejected: %s", error)
        self.state.feedback = self.presenter.present_error(error)
        self._notify_change()
        return ConversionResult.failure(error)

    async def convert(
        self,
        source_text: Optional[str] = None,
        target_language: Optional[Union[TargetLanguage, str]] = None,
    ) -> ConversionResult:
        """Run one conversion attempt.

        Args:
            source_text: Code to convert (defaults to state.source_text)
            target_language: Target language (defaults to state.target_language)

        Returns:
            ConversionResult with either the converted code or the error
        """
        if source_text is None:
            source_text = self.state.source_text
        if target_language is None:
            target_language = self.state.target_language

        error = self._check_preconditions(source_text)
        if error is not None:
            return self._reject(error)

        if isinstance(target_language, str):
            try:
                target_language = TargetLanguage.from_label(target_language)
            except ValueError as e:
                return self._reject(UnsupportedLanguageError(str(e)))

        chat = self.monitor.handle
        prompt = self.prompt_builder.build(source_text, target_language)

        self.state.begin_conversion()
        self._notify_change()
        logger.info(
            "Conversion started (target=%s, chars=%d)", target_language.value, len(source_text)
        )

        start_time = time.monotonic()
        try:
            # Yield so the "Converting..." state reaches the UI before the request
            await asyncio.sleep(0)
            try:
                raw = await chat(prompt)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.exception("Conversion request failed: %s", e)
                raise RequestFailureError(str(e) or type(e).__name__) from e

            text = normalize(raw)
        except ConversionError as e:
            elapsed = time.monotonic() - start_time
            self.state.feedback = self.presenter.present_error(e)
            return ConversionResult.failure(e, duration_seconds=elapsed)
        else:
            elapsed = time.monotonic() - start_time
            self.state.result_text = text
            self.state.feedback = self.presenter.present(Outcome.SUCCESS)
            logger.info("Conversion completed in %.2fs (chars=%d)", elapsed, len(text))
            return ConversionResult.success(text, duration_seconds=elapsed)
        finally:
            self.state.end_conversion()
            self._notify_change()

    def reset(self) -> None:
        """Restore the default source and clear result/feedback"""
        self.state.reset()
        self._notify_change()

    async def copy_result(self, clipboard: Clipboard) -> bool:
        """Copy the converted code to the clipboard.

        Returns:
            True if something was copied
        """
        text = self.state.result_text
        if not text:
            return False
        try:
            await clipboard.write_text(text)
        except Exception as e:
            logger.exception("Clipboard write failed: %s", e)
            self.state.feedback = self.presenter.present(Outcome.FAILURE, str(e) or type(e).__name__)
            self._notify_change()
            return False
        self.state.feedback = self.presenter.present(Outcome.COPIED)
        self._notify_change()
        return True
