# tests/test_state.py
"""Tests for codelingo.ui.state"""

import pytest

# Import directly; codelingo.ui.state has no NiceGUI dependency
from codelingo.ui.state import AppState, DEFAULT_SOURCE_TEXT
from codelingo.models.types import ConversionPhase, Feedback, Severity, TargetLanguage
from codelingo.services.exceptions import InvalidPhaseTransition


class TestAppStateDefaults:
    """Tests for AppState default values"""

    def test_default_source_is_snippet(self):
        state = AppState()
        assert state.source_text == DEFAULT_SOURCE_TEXT
        assert "helloWorld" in state.source_text

    def test_default_target_language(self):
        assert AppState().target_language == TargetLanguage.PYTHON

    def test_default_lifecycle(self):
        state = AppState()
        assert state.phase == ConversionPhase.IDLE
        assert state.result_text == ""
        assert state.feedback is None
        assert state.ai_ready is False


class TestPhaseTransitions:
    """Tests for begin_conversion()/end_conversion()"""

    def test_begin_clears_result_and_feedback(self):
        state = AppState(result_text="old", feedback=Feedback("x", Severity.SUCCESS))
        state.begin_conversion()
        assert state.phase == ConversionPhase.CONVERTING
        assert state.is_converting is True
        assert state.result_text == ""
        assert state.feedback is None

    def test_end_returns_to_idle(self):
        state = AppState()
        state.begin_conversion()
        state.end_conversion()
        assert state.phase == ConversionPhase.IDLE

    def test_begin_twice_is_rejected(self):
        state = AppState()
        state.begin_conversion()
        with pytest.raises(InvalidPhaseTransition):
            state.begin_conversion()

    def test_end_from_idle_is_rejected(self):
        with pytest.raises(InvalidPhaseTransition):
            AppState().end_conversion()


class TestAppStateReset:
    """Tests for AppState.reset()"""

    def test_reset_restores_snippet_and_clears_output(self):
        state = AppState(
            source_text="x=1",
            result_text="let x = 1;",
            feedback=Feedback("Conversion successful!", Severity.SUCCESS),
        )
        state.reset()
        assert state.source_text == DEFAULT_SOURCE_TEXT
        assert state.result_text == ""
        assert state.feedback is None

    def test_reset_preserves_readiness_and_language(self):
        state = AppState(ai_ready=True, target_language=TargetLanguage.GO)
        state.reset()
        assert state.ai_ready is True
        assert state.target_language == TargetLanguage.GO
        assert state.phase == ConversionPhase.IDLE


class TestControlAvailability:
    """Tests for can_convert()/can_reset()/can_copy()"""

    def test_convert_requires_ready(self):
        assert AppState(ai_ready=False).can_convert() is False
        assert AppState(ai_ready=True).can_convert() is True

    def test_controls_disabled_while_converting(self):
        state = AppState(ai_ready=True)
        state.begin_conversion()
        assert state.can_convert() is False
        assert state.can_reset() is False

    def test_copy_requires_result(self):
        assert AppState().can_copy() is False
        assert AppState(result_text="code").can_copy() is True

    def test_mark_ai_ready_is_sticky(self):
        state = AppState()
        state.mark_ai_ready()
        state.mark_ai_ready()
        assert state.ai_ready is True
