from __future__ import annotations

import json
from dataclasses import dataclass
import os
from pathlib import Path

from lrc_transcriber.i18n import DEFAULT_LANG, normalize_lang

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_API_BASE = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_MAX_UPLOAD_MB = 20.0


class ConfigError(ValueError):
    pass


def _config_dir() -> Path:
    xdg = os.getenv("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "lrc-transcriber"
    return Path.home() / ".config" / "lrc-transcriber"


def _config_file() -> Path:
    return _config_dir() / "config.json"


@dataclass(frozen=True)
class AppConfig:
    config_dir: Path

    # Locale
    lang: str

    # Model endpoint
    api_key: str | None
    model: str
    api_base_url: str
    request_timeout_s: float

    # Retry policy
    max_retries: int
    backoff_base_s: float
    jitter_s: float

    # Uploads
    max_upload_bytes: int

    def require_api_key(self) -> str:
        if not self.api_key:
            raise ConfigError("GEMINI_API_KEY is not set")
        return self.api_key


def load_config() -> AppConfig:
    config_dir = _config_dir()
    lang = _load_lang(config_dir)

    api_key = os.getenv("LRC_TRANSCRIBER_API_KEY") or os.getenv("GEMINI_API_KEY") or None

    return AppConfig(
        config_dir=config_dir,
        lang=lang,
        api_key=api_key,
        model=os.getenv("LRC_TRANSCRIBER_MODEL", DEFAULT_MODEL),
        api_base_url=os.getenv("LRC_TRANSCRIBER_API_BASE", DEFAULT_API_BASE),
        request_timeout_s=float(os.getenv("LRC_TRANSCRIBER_TIMEOUT", "120.0")),
        max_retries=int(os.getenv("LRC_TRANSCRIBER_MAX_RETRIES", "5")),
        backoff_base_s=float(os.getenv("LRC_TRANSCRIBER_BACKOFF_BASE", "1.0")),
        jitter_s=float(os.getenv("LRC_TRANSCRIBER_JITTER", "1.0")),
        max_upload_bytes=int(
            float(os.getenv("LRC_TRANSCRIBER_MAX_UPLOAD_MB", str(DEFAULT_MAX_UPLOAD_MB))) * 1024 * 1024
        ),
    )


def _load_lang(config_dir: Path) -> str:
    # Priority: config.json → LRC_TRANSCRIBER_LANG → "EN"
    cfg_path = config_dir / "config.json"
    if cfg_path.exists():
        try:
            data = json.loads(cfg_path.read_text(encoding="utf-8"))
            saved = normalize_lang(data.get("lang"))
            if saved:
                return saved
        except (OSError, ValueError, AttributeError):
            pass
    return normalize_lang(os.getenv("LRC_TRANSCRIBER_LANG")) or DEFAULT_LANG


def save_config_lang(lang: str) -> None:
    code = normalize_lang(lang)
    if code is None:
        raise ConfigError(f"Unsupported language: {lang}")
    cfg_path = _config_file()
    cfg_path.parent.mkdir(parents=True, exist_ok=True)
    data: dict[str, str] = {}
    if cfg_path.exists():
        try:
            data = json.loads(cfg_path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            pass
    data["lang"] = code
    cfg_path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
