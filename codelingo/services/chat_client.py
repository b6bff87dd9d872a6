# codelingo/services/chat_client.py
from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any, Optional

from codelingo.config.settings import AppSettings
from codelingo.services.exceptions import ChatClientError

logger = logging.getLogger(__name__)


def _http_json(
    url: str,
    *,
    payload: Optional[dict[str, Any]] = None,
    timeout_s: float,
) -> dict:
    """GET (payload is None) or POST JSON and decode the JSON reply."""
    import urllib.error
    import urllib.request

    if payload is None:
        req = urllib.request.Request(url, method="GET", headers={"Accept": "application/json"})
    else:
        body = json.dumps(payload, ensure_ascii=False).encode("utf-8")
        req = urllib.request.Request(
            url,
            data=body,
            method="POST",
            headers={
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
        )

    try:
        with urllib.request.urlopen(req, timeout=timeout_s) as resp:
            raw = resp.read()
    except urllib.error.HTTPError as e:
        detail = ""
        try:
            detail = e.read().decode("utf-8", errors="replace")[:200]
        except Exception:
            detail = ""
        raise ChatClientError(f"AI server error (HTTP {e.code}): {detail}".rstrip(": ")) from e
    except urllib.error.URLError as e:
        raise ChatClientError(f"Could not reach AI server: {e.reason}") from e
    except TimeoutError as e:
        raise ChatClientError("AI server timed out") from e
    except OSError as e:
        raise ChatClientError(f"Connection to AI server failed: {e}") from e

    try:
        decoded = json.loads(raw.decode("utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ChatClientError(f"AI server returned invalid JSON: {e}") from e
    if not isinstance(decoded, dict):
        raise ChatClientError("AI server returned an unexpected JSON value")
    return decoded


def _extract_message(payload: dict) -> Any:
    choices = payload.get("choices")
    if not isinstance(choices, list) or not choices:
        raise ChatClientError("Invalid AI response (no choices)")
    first = choices[0]
    if not isinstance(first, dict):
        raise ChatClientError("Invalid AI response (choices[0])")
    message = first.get("message")
    if message is None:
        # Legacy completion servers answer with choices[0].text
        text = first.get("text")
        if isinstance(text, str):
            return {"content": text}
        raise ChatClientError("Invalid AI response (no message)")
    return message


def _extract_first_model_id(models_payload: dict) -> Optional[str]:
    data = models_payload.get("data")
    if not isinstance(data, list) or not data:
        return None
    first = data[0]
    if not isinstance(first, dict):
        return None
    model_id = first.get("id")
    return model_id if isinstance(model_id, str) and model_id else None


def _is_model_list(payload: dict) -> bool:
    return payload.get("object") == "list" and isinstance(payload.get("data"), list)


class ChatClient:
    """AI chat capability backed by an OpenAI-compatible server.

    chat() returns {"message": <choices[0].message>} so replies go through
    the same normalizer as any other chat capability.
    """

    def __init__(self, settings: AppSettings, model_id: Optional[str] = None) -> None:
        self._settings = settings
        self.model_id = model_id or settings.chat_model

    @property
    def base_url(self) -> str:
        return self._settings.chat_base_url.rstrip("/")

    def _build_payload(self, prompt: str) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "messages": [
                {"role": "user", "content": prompt},
            ],
            "stream": False,
            "temperature": float(self._settings.chat_temperature),
        }
        if self.model_id:
            payload["model"] = self.model_id
        return payload

    def chat_sync(self, prompt: str) -> dict[str, Any]:
        response = _http_json(
            f"{self.base_url}/v1/chat/completions",
            payload=self._build_payload(prompt),
            timeout_s=float(self._settings.request_timeout),
        )
        return {"message": _extract_message(response)}

    async def chat(self, prompt: str) -> dict[str, Any]:
        """Send one user prompt and return the assistant message."""
        logger.debug("Chat request to %s (model=%s, chars=%d)", self.base_url, self.model_id, len(prompt))
        return await asyncio.to_thread(self.chat_sync, prompt)


@dataclass(frozen=True)
class AINamespace:
    """What the runtime exposes as `runtime.ai` once it is loaded."""
    chat: Any
    model_id: Optional[str] = None


class ChatRuntime:
    """
    Discoverable root for the chat capability.

    `ai` stays None until load() confirms the server answers /v1/models,
    then becomes an AINamespace whose `chat` is ChatClient.chat.
    """

    def __init__(self, settings: AppSettings) -> None:
        self._settings = settings
        self.ai: Optional[AINamespace] = None
        self.last_error: Optional[str] = None

    def probe(self) -> Optional[str]:
        """Check the server once. Returns the model id to use (or "" if unnamed).

        Raises:
            ChatClientError: If the server is unreachable or not OpenAI-compatible
        """
        payload = _http_json(
            f"{self._settings.chat_base_url.rstrip('/')}/v1/models",
            timeout_s=min(5.0, float(self._settings.request_timeout)),
        )
        if not _is_model_list(payload):
            raise ChatClientError("AI server is not OpenAI-compatible (/v1/models)")
        return self._settings.chat_model or _extract_first_model_id(payload) or ""

    async def load(self, max_attempts: Optional[int] = None) -> AINamespace:
        """Probe until the server answers, then attach the chat capability.

        Args:
            max_attempts: Give up after this many probes (None = keep trying)

        Raises:
            ChatClientError: If max_attempts is reached
        """
        attempt = 0
        while True:
            attempt += 1
            try:
                model_id = await asyncio.to_thread(self.probe)
                break
            except ChatClientError as e:
                if self.last_error != str(e):
                    logger.info("AI server not available yet: %s", e)
                self.last_error = str(e)
                if max_attempts is not None and attempt >= max_attempts:
                    raise
            await asyncio.sleep(self._settings.probe_interval)

        client = ChatClient(self._settings, model_id=model_id or None)
        self.ai = AINamespace(chat=client.chat, model_id=client.model_id)
        self.last_error = None
        logger.info("AI chat runtime loaded (base_url=%s, model=%s)", client.base_url, client.model_id)
        return self.ai
