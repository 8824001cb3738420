"""
User-facing CLI messages.

Catalogs live next to this module as `<lang>.json`. A key missing from the
active catalog falls back to English, then to the key itself.
"""

from __future__ import annotations

from functools import lru_cache
import json
from importlib.resources import files

SUPPORTED_LANGS = ("EN", "RU")
DEFAULT_LANG = "EN"

_active = DEFAULT_LANG


def normalize_lang(lang: str | None) -> str | None:
    code = (lang or "").strip().upper()
    return code if code in SUPPORTED_LANGS else None


@lru_cache(maxsize=None)
def _catalog(lang: str) -> dict[str, str]:
    try:
        raw = (files(__name__) / f"{lang.lower()}.json").read_text(encoding="utf-8")
        return dict(json.loads(raw))
    except (OSError, ValueError):
        return {}


def set_lang(lang: str | None) -> str:
    global _active
    _active = normalize_lang(lang) or DEFAULT_LANG
    return _active


def current_lang() -> str:
    return _active


def t(key: str, **kwargs: str | int | float) -> str:
    template = _catalog(_active).get(key) or _catalog(DEFAULT_LANG).get(key, key)
    try:
        return template.format(**kwargs) if kwargs else template
    except (KeyError, IndexError):
        return template
