"""
Data models for CodeLingo.
"""

from .types import (
    TargetLanguage,
    ConversionPhase,
    Severity,
    Feedback,
    PlainText,
    SingleContent,
    FragmentList,
    ChatResponse,
    ConversionResult,
    ChatCallable,
    Clipboard,
)

__all__ = [
    'TargetLanguage',
    'ConversionPhase',
    'Severity',
    'Feedback',
    'PlainText',
    'SingleContent',
    'FragmentList',
    'ChatResponse',
    'ConversionResult',
    'ChatCallable',
    'Clipboard',
]
