# codelingo/config/settings.py
"""
Application settings management for CodeLingo.

設定ファイルの分離方式:
- settings.template.json: デフォルト値（開発者が管理、アップデートで上書き）
- user_settings.json: ユーザーが変更した設定のみ保存
- 起動時にtemplateを読み込み、user_settingsで上書き

キャッシュ機構:
- _settings_cache: パスをキーとしてAppSettingsインスタンスをキャッシュ
- load()はキャッシュを優先し、ファイルI/Oを削減
- save()時にキャッシュを更新
- invalidate_settings_cache()で明示的にキャッシュをクリア可能
"""

import json
import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from codelingo.models.types import TargetLanguage

# Module logger
logger = logging.getLogger(__name__)

# Settings cache: path -> (mtime_template, mtime_user, AppSettings)
# mtime is used to detect file changes and invalidate cache
_settings_cache: dict[str, tuple[float, float, "AppSettings"]] = {}
_settings_cache_lock = threading.Lock()

# ユーザーが変更可能な設定項目（user_settings.jsonに保存される）
USER_SETTINGS_KEYS = {
    # AIバックエンド
    "chat_base_url",
    "chat_model",
    # UI状態（自動保存）
    "last_target_language",
}


@dataclass
class AppSettings:
    """Application settings"""

    # AI chat backend (OpenAI-compatible /v1/chat/completions)
    chat_base_url: str = "http://127.0.0.1:8080"
    chat_model: Optional[str] = None        # None = first model listed by /v1/models
    chat_temperature: float = 0.2
    request_timeout: int = 120              # Seconds per conversion request
    probe_interval: float = 2.0             # Seconds between /v1/models probes

    # Capability detection
    capability_poll_interval: float = 0.3   # Initial interval (seconds)
    capability_poll_backoff: float = 1.5    # Interval multiplier after each miss
    capability_poll_max_interval: float = 3.0

    # UI
    last_target_language: str = TargetLanguage.default().value
    editor_theme: str = "dracula"
    editor_height: int = 420                # px

    @classmethod
    def load(cls, path: Path, use_cache: bool = True) -> "AppSettings":
        """Load settings from template and user settings files.

        分離方式:
        1. settings.template.json からデフォルト値を読み込み
        2. user_settings.json でユーザー設定を上書き

        Args:
            path: 設定ファイルのパス（config/settings.json）
                  実際にはtemplateとuser_settingsを探すためのベースパスとして使用
            use_cache: キャッシュを使用するかどうか（デフォルト: True）
        """
        config_dir = path.parent
        template_path = config_dir / "settings.template.json"
        user_settings_path = config_dir / "user_settings.json"

        cache_key = str(path.resolve())

        template_mtime = template_path.stat().st_mtime if template_path.exists() else 0.0
        user_mtime = user_settings_path.stat().st_mtime if user_settings_path.exists() else 0.0

        if use_cache:
            with _settings_cache_lock:
                if cache_key in _settings_cache:
                    cached_template_mtime, cached_user_mtime, cached_settings = _settings_cache[cache_key]
                    if cached_template_mtime == template_mtime and cached_user_mtime == user_mtime:
                        logger.debug("Using cached settings for: %s", path)
                        return cached_settings

        data = {}

        # 1. Load from template (developer defaults)
        if template_path.exists():
            try:
                with open(template_path, 'r', encoding='utf-8-sig') as f:
                    data = json.load(f)
                    logger.debug("Loaded template settings from: %s", template_path)
            except (json.JSONDecodeError, UnicodeDecodeError) as e:
                logger.warning("Failed to load template settings: %s", e)

        # 2. Override with user settings
        if user_settings_path.exists():
            try:
                with open(user_settings_path, 'r', encoding='utf-8-sig') as f:
                    user_data = json.load(f)
                    # Only apply known user settings keys
                    for key in USER_SETTINGS_KEYS:
                        if key in user_data:
                            data[key] = user_data[key]
                    logger.debug("Loaded user settings from: %s", user_settings_path)
            except (json.JSONDecodeError, UnicodeDecodeError) as e:
                logger.warning("Failed to load user settings: %s", e)

        # Filter to only known fields
        known_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered_data = {k: v for k, v in data.items() if k in known_fields}

        settings = cls(**filtered_data)
        settings._validate()

        with _settings_cache_lock:
            _settings_cache[cache_key] = (template_mtime, user_mtime, settings)

        return settings

    def _validate(self) -> None:
        """Validate and normalize setting values for consistency.

        Invalid values are reset to defaults with warnings.
        """
        if not self.chat_base_url or not self.chat_base_url.startswith(("http://", "https://")):
            logger.warning("chat_base_url invalid (%r), resetting to default", self.chat_base_url)
            self.chat_base_url = "http://127.0.0.1:8080"
        self.chat_base_url = self.chat_base_url.rstrip("/")

        if self.chat_model is not None and not str(self.chat_model).strip():
            self.chat_model = None

        if self.chat_temperature < 0.0 or self.chat_temperature > 2.0:
            logger.warning("chat_temperature out of range (%.2f), resetting to 0.2", self.chat_temperature)
            self.chat_temperature = 0.2

        # Timeout constraints
        if self.request_timeout < 10:
            logger.warning("request_timeout too small (%d), resetting to 120", self.request_timeout)
            self.request_timeout = 120
        elif self.request_timeout > 1800:
            logger.warning("request_timeout too large (%d), resetting to 120", self.request_timeout)
            self.request_timeout = 120

        if self.probe_interval <= 0:
            self.probe_interval = 2.0

        # Capability polling
        if self.capability_poll_interval < 0.05:
            logger.warning(
                "capability_poll_interval too small (%.3f), resetting to 0.3",
                self.capability_poll_interval,
            )
            self.capability_poll_interval = 0.3
        if self.capability_poll_backoff < 1.0:
            self.capability_poll_backoff = 1.0
        if self.capability_poll_max_interval < self.capability_poll_interval:
            self.capability_poll_max_interval = self.capability_poll_interval

        if self.last_target_language not in TargetLanguage.labels():
            logger.warning(
                "Unknown last_target_language (%r), resetting to %s",
                self.last_target_language,
                TargetLanguage.default().value,
            )
            self.last_target_language = TargetLanguage.default().value

        if self.editor_height < 100:
            self.editor_height = 420

    @property
    def target_language(self) -> TargetLanguage:
        return TargetLanguage.from_label(self.last_target_language)

    def save(self, path: Path) -> None:
        """Save user settings to user_settings.json.

        ユーザーが変更した設定のみをuser_settings.jsonに保存。
        settings.template.jsonは変更しない。

        Args:
            path: 設定ファイルのパス（config/settings.json）
                  実際にはconfig/user_settings.jsonに保存
        """
        config_dir = path.parent
        user_settings_path = config_dir / "user_settings.json"
        template_path = config_dir / "settings.template.json"

        config_dir.mkdir(parents=True, exist_ok=True)

        data = {}
        for key in USER_SETTINGS_KEYS:
            if hasattr(self, key):
                data[key] = getattr(self, key)

        with open(user_settings_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

        logger.debug("Saved user settings to: %s", user_settings_path)

        cache_key = str(path.resolve())
        template_mtime = template_path.stat().st_mtime if template_path.exists() else 0.0
        user_mtime = user_settings_path.stat().st_mtime if user_settings_path.exists() else 0.0
        with _settings_cache_lock:
            _settings_cache[cache_key] = (template_mtime, user_mtime, self)


def get_default_settings_path() -> Path:
    """Get default settings file path"""
    return Path(__file__).parent.parent.parent / "config" / "settings.json"


def get_default_prompts_dir() -> Path:
    """Get default prompts directory"""
    return Path(__file__).parent.parent.parent / "prompts"


def invalidate_settings_cache(path: Optional[Path] = None) -> None:
    """Invalidate settings cache.

    Args:
        path: 特定のパスのキャッシュのみクリアする場合に指定。
              Noneの場合は全キャッシュをクリア。
    """
    with _settings_cache_lock:
        if path is None:
            _settings_cache.clear()
            logger.debug("Cleared all settings cache")
        else:
            cache_key = str(path.resolve())
            if cache_key in _settings_cache:
                del _settings_cache[cache_key]
                logger.debug("Cleared settings cache for: %s", path)
