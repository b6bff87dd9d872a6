# codelingo/models/types.py
"""
Core data types for CodeLingo code conversion application.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Optional, Protocol, Union, TYPE_CHECKING

if TYPE_CHECKING:
    from codelingo.services.exceptions import ConversionError


class TargetLanguage(Enum):
    """Languages offered as conversion targets (value = display name)"""
    PYTHON = "Python"
    JAVA = "Java"
    CPP = "C++"
    GO = "Go"
    RUST = "Rust"
    TYPESCRIPT = "TypeScript"

    @classmethod
    def default(cls) -> "TargetLanguage":
        return cls.PYTHON

    @classmethod
    def from_label(cls, label: str) -> "TargetLanguage":
        """Look up a language by its display name.

        Raises:
            ValueError: If the label is not one of the supported languages
        """
        for lang in cls:
            if lang.value == label:
                return lang
        raise ValueError(f"Unsupported target language: {label!r}")

    @classmethod
    def labels(cls) -> list[str]:
        return [lang.value for lang in cls]


class ConversionPhase(Enum):
    """Conversion lifecycle phases"""
    IDLE = "idle"
    CONVERTING = "converting"


class Severity(Enum):
    """Feedback severity"""
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"

    @property
    def notify_type(self) -> str:
        """NiceGUI ui.notify() type for this severity"""
        return {
            Severity.INFO: "info",
            Severity.SUCCESS: "positive",
            Severity.WARNING: "warning",
            Severity.ERROR: "negative",
        }[self]


@dataclass(frozen=True)
class Feedback:
    """
    Short status message shown under the editors.
    """
    message: str
    severity: Severity


# Decoded chat reply variants (see services.response_normalizer)

@dataclass(frozen=True)
class PlainText:
    """Reply was a bare string"""
    text: str

    def render(self) -> str:
        return self.text


@dataclass(frozen=True)
class SingleContent:
    """Reply carried one message with a content field"""
    content: str

    def render(self) -> str:
        return self.content


@dataclass(frozen=True)
class FragmentList:
    """Reply carried a list of message fragments"""
    contents: tuple[str, ...] = field(default_factory=tuple)

    def render(self) -> str:
        return "\n".join(self.contents)


ChatResponse = Union[PlainText, SingleContent, FragmentList]


@dataclass
class ConversionResult:
    """
    Outcome of one conversion attempt.
    Exactly one of `text` / `error` is set.
    """
    text: Optional[str] = None
    error: Optional["ConversionError"] = None
    duration_seconds: float = 0.0

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, text: str, duration_seconds: float = 0.0) -> "ConversionResult":
        return cls(text=text, duration_seconds=duration_seconds)

    @classmethod
    def failure(cls, error: "ConversionError", duration_seconds: float = 0.0) -> "ConversionResult":
        return cls(error=error, duration_seconds=duration_seconds)


class Clipboard(Protocol):
    """System clipboard capability"""

    async def write_text(self, text: str) -> None:
        ...


# Callback types
ChatCallable = Callable[[str], Awaitable[Any]]
