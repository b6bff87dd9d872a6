# codelingo/services/response_normalizer.py
"""
Normalizes AI chat replies into a single text result.

The chat capability may answer with:
- a plain string
- an object with a single message:      {"message": {"content": "..."}}
- an object with message fragments:     {"message": [{"content": "..."}, ...]}

Shapes are checked in that order and the first match wins, even when a
payload structurally matches more than one shape. Objects may be mappings or
plain objects exposing the same names as attributes.
"""

import logging
from collections.abc import Mapping
from typing import Any, Optional

from codelingo.models.types import ChatResponse, FragmentList, PlainText, SingleContent
from codelingo.services.exceptions import EmptyResponseError

logger = logging.getLogger(__name__)

_MISSING = object()


def _field(obj: Any, name: str) -> Any:
    """Read `name` from a mapping key or an attribute, `_MISSING` if absent."""
    if obj is None:
        return _MISSING
    if isinstance(obj, Mapping):
        return obj.get(name, _MISSING)
    return getattr(obj, name, _MISSING)


def _as_text(value: Any) -> str:
    if value is _MISSING or value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


def _is_fragment_sequence(value: Any) -> bool:
    # Strings and mappings are iterable but are never fragment lists
    return isinstance(value, (list, tuple))


def decode_response(raw: Any) -> Optional[ChatResponse]:
    """Decode a raw chat reply into one of the response variants.

    Returns:
        PlainText, SingleContent or FragmentList, or None if no shape matched
    """
    if isinstance(raw, str):
        return PlainText(raw)

    message = _field(raw, "message")
    if message is _MISSING:
        return None

    content = _field(message, "content")
    if content is not _MISSING and content:
        return SingleContent(_as_text(content))

    if _is_fragment_sequence(message):
        return FragmentList(tuple(_as_text(_field(m, "content")) for m in message))

    return None


def normalize(raw: Any) -> str:
    """Extract the trimmed reply text.

    Raises:
        EmptyResponseError: If no shape matched or the text is blank
    """
    decoded = decode_response(raw)
    text = decoded.render().strip() if decoded is not None else ""
    if not text:
        logger.warning(
            "Empty AI response (shape=%s)",
            type(decoded).__name__ if decoded is not None else type(raw).__name__,
        )
        raise EmptyResponseError("Empty response from AI")
    return text
