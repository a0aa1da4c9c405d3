"""Choice of interface language."""

from __future__ import annotations

import locale
import os
from dataclasses import dataclass

SUPPORTED_LANGUAGES: tuple[tuple[str, str], ...] = (
    ("en", "English"),
    ("zh-CN", "简体中文"),
)

DEFAULT_LANGUAGE = "en"

_LOCALE_VARIABLES = ("LC_ALL", "LC_MESSAGES", "LANG")


@dataclass
class _LanguageState:
    index: int = 0


_state = _LanguageState()


def current_language() -> str:
    """Code of the language in use."""
    return SUPPORTED_LANGUAGES[_state.index][0]


def get_language_name(code: str) -> str:
    """Display name for a language code, or the code itself if unknown."""
    return next((name for lang, name in SUPPORTED_LANGUAGES if lang == code), code)


def normalize_lang(lang: str) -> str:
    """Map a locale-style code onto a supported language code."""
    lang = lang.replace("_", "-")
    codes = [code for code, _ in SUPPORTED_LANGUAGES]
    if lang in codes:
        return lang
    prefix = lang.split("-", 1)[0]
    return next((code for code in codes if code.startswith(prefix)), DEFAULT_LANGUAGE)


def set_language(lang: str) -> None:
    """Switch to a language; unknown codes fall back to the first supported one."""
    normalized = normalize_lang(lang)
    codes = [code for code, _ in SUPPORTED_LANGUAGES]
    _state.index = codes.index(normalized) if normalized in codes else 0


def init(lang: str) -> None:
    """Set up the language to use."""
    set_language(lang)


def _system_locale() -> str | None:
    for variable in _LOCALE_VARIABLES:
        value = os.environ.get(variable)
        if value:
            return value.split(".", 1)[0].split("@", 1)[0]
    try:
        return locale.getlocale()[0]
    except ValueError:
        return None


def detect_system_lang() -> str:
    """Supported language matching the system locale, or the default."""
    system = _system_locale()
    if system:
        normalized = normalize_lang(system)
        if any(code == normalized for code, _ in SUPPORTED_LANGUAGES):
            return normalized
    return DEFAULT_LANGUAGE