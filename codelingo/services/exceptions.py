"""
Shared exception types for the conversion pipeline.

This module is intentionally dependency-free so both the controller and the
chat client can import it without pulling in UI modules.
"""


class ConversionError(Exception):
    """Base class for errors reported by a conversion attempt."""

    def __init__(self, message: str = ""):
        super().__init__(message or self.default_message)

    default_message = "Conversion failed"

    @property
    def message(self) -> str:
        return str(self)


class EmptyInputError(ConversionError):
    """Raised when the source code is empty or whitespace only."""

    default_message = "No source code to convert"


class NotReadyError(ConversionError):
    """Raised when the AI chat capability has not been detected yet."""

    default_message = "AI is not ready yet"


class ConversionBusyError(ConversionError):
    """Raised when a conversion is requested while another is in flight."""

    default_message = "A conversion is already in progress"


class UnsupportedLanguageError(ConversionError):
    """Raised when the requested target language label is not offered."""

    default_message = "Unsupported target language"


class EmptyResponseError(ConversionError):
    """Raised when the AI reply contains no usable text."""

    default_message = "Empty response from AI"


class RequestFailureError(ConversionError):
    """Wraps any error raised by the AI chat call (message passed through)."""

    default_message = "Request to AI failed"


class InvalidPhaseTransition(RuntimeError):
    """Raised when the conversion state machine is driven out of order."""

    pass


class ChatClientError(Exception):
    """Raised by the chat client on transport or protocol errors."""

    pass
