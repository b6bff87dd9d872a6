"""
Maps conversion outcomes to user-facing status messages.
"""

from enum import Enum
from typing import Optional

from codelingo.models.types import Feedback, Severity
from codelingo.services.exceptions import (
    ConversionBusyError,
    ConversionError,
    EmptyInputError,
    NotReadyError,
)


class Outcome(Enum):
    """Outcome of the last user action"""
    EMPTY_INPUT = "empty_input"
    NOT_READY = "not_ready"
    BUSY = "busy"
    SUCCESS = "success"
    COPIED = "copied"
    FAILURE = "failure"


_MESSAGES: dict[Outcome, tuple[str, Severity]] = {
    Outcome.EMPTY_INPUT: ("Please enter some code to convert.", Severity.WARNING),
    Outcome.NOT_READY: ("AI is not ready yet. Please wait a few seconds.", Severity.WARNING),
    Outcome.BUSY: ("A conversion is already in progress.", Severity.WARNING),
    Outcome.SUCCESS: ("Conversion successful!", Severity.SUCCESS),
    Outcome.COPIED: ("Code copied to clipboard!", Severity.SUCCESS),
}

INITIALIZING_MESSAGE = "Initializing AI... please wait"


def present(outcome: Outcome, reason: Optional[str] = None) -> Feedback:
    """Build the feedback for an outcome.

    Args:
        outcome: What happened
        reason: Failure reason text (only used for Outcome.FAILURE)
    """
    if outcome == Outcome.FAILURE:
        return Feedback(f"Error: {reason or 'Unknown error'}", Severity.ERROR)
    message, severity = _MESSAGES[outcome]
    return Feedback(message, severity)


def outcome_for_error(error: ConversionError) -> Outcome:
    """Precondition errors have dedicated outcomes; everything else is a failure."""
    if isinstance(error, EmptyInputError):
        return Outcome.EMPTY_INPUT
    if isinstance(error, NotReadyError):
        return Outcome.NOT_READY
    if isinstance(error, ConversionBusyError):
        return Outcome.BUSY
    return Outcome.FAILURE


def present_error(error: ConversionError) -> Feedback:
    return present(outcome_for_error(error), str(error))


class FeedbackPresenter:
    """Object wrapper around present() so it can be injected/mocked."""

    def present(self, outcome: Outcome, reason: Optional[str] = None) -> Feedback:
        return present(outcome, reason)

    def present_error(self, error: ConversionError) -> Feedback:
        return present_error(error)
