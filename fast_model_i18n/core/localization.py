"""
Localization catalog - Laravel-inspired translations with Rails-style fallback chains.

Core principles:
- Direct module-level state (no unnecessary classes)
- Dot notation for nested keys: 'errors.messages.presence'
- One lookup accepts a whole chain of keys; the first non-blank hit wins
- Context-aware locale switching

Usage:
    from fast_model_i18n.core.localization import __, lookup, set_locale

    __('messages.welcome')                              # Basic translation
    __('messages.greeting', {'name': 'John'})           # With parameters
    __('missing.key', default='Fallback')               # With default
    lookup('a.b', fallbacks=['a', 'b'])                 # Chain lookup, None on miss
    set_locale('es')                                    # Change locale
"""

import json
import logging
from contextvars import ContextVar
from pathlib import Path
from typing import Dict, Any, Iterable, Optional

from fast_model_i18n import config

_translations: Dict[str, Dict[str, Any]] = {}
_LOCALE_DEFAULT = config.LOCALE_DEFAULT
_LOCALE_FALLBACK = config.LOCALE_FALLBACK
_LOCALE_PATH = config.LOCALE_PATH
_current_locale: ContextVar[str] = ContextVar('locale', default=_LOCALE_DEFAULT)


def _get_nested(data: Dict[str, Any], key: str) -> Any:
    """Navigate nested dict with dot notation. Pure function, no side effects."""
    current = data
    for part in key.split('.'):
        if isinstance(current, dict) and part in current:
            current = current[part]
        else:
            return None
    return current


def _deep_merge(target: Dict[str, Any], source: Dict[str, Any]) -> Dict[str, Any]:
    for key, value in source.items():
        if isinstance(value, dict) and isinstance(target.get(key), dict):
            _deep_merge(target[key], value)
        else:
            target[key] = value
    return target


def _load_locale(locale: str) -> Dict[str, Any]:
    """Load and cache translations for a locale. Idempotent."""
    if locale in _translations:
        return _translations[locale]

    locale_file = Path(_LOCALE_PATH) / f"{locale}.json"
    translations = {}

    if locale_file.exists():
        try:
            with locale_file.open(encoding='utf-8') as f:
                translations = json.load(f)
        except (json.JSONDecodeError, OSError) as exc:
            logging.warning(f"Could not load translations from {locale_file}: {exc}")

    _translations[locale] = translations
    return translations


def load_translations(locale: str, data: Dict[str, Any]) -> None:
    """Merge in-memory translations into a locale (on top of its JSON file, if any)."""
    _deep_merge(_load_locale(locale), data)


def _interpolate(translation: str, parameters: Optional[Dict[str, Any]]) -> str:
    if not parameters:
        return translation
    try:
        return translation.format(**parameters)
    except (KeyError, IndexError, ValueError, TypeError, AttributeError):
        # Placeholders that cannot be filled leave the text untouched
        return translation


def _locales_for(locale: Optional[str]) -> list[str]:
    current_locale = locale or _current_locale.get()
    if current_locale != _LOCALE_FALLBACK:
        return [current_locale, _LOCALE_FALLBACK]
    return [current_locale]


def lookup(key: str, parameters: Optional[Dict[str, Any]] = None,
           fallbacks: Iterable[str] = (), locale: Optional[str] = None) -> Optional[str]:
    """
    Resolve the first key of a chain that has a non-blank string translation.

    `key` is tried first, then every entry of `fallbacks` in order, all in the
    current locale; the same chain is then tried in the fallback locale.
    Returns None when nothing in the chain is translated.
    """
    chain = [key, *fallbacks]
    for current_locale in _locales_for(locale):
        translations = _load_locale(current_locale)
        for candidate in chain:
            translation = _get_nested(translations, candidate)
            if isinstance(translation, str) and translation.strip():
                return _interpolate(translation, parameters)
    return None


def __(key: str, parameters: Optional[Dict[str, Any]] = None,
      default: Optional[str] = None, locale: Optional[str] = None,
      fallbacks: Iterable[str] = ()) -> str:
    """
    Translate with Laravel-style elegance.

    Examples:
        __('messages.welcome')                      # Simple translation
        __('greet', {'name': 'John'})               # With parameters
        __('missing', default='Not found')          # With fallback text
        __('a.b', fallbacks=['c.d'])                # With fallback keys
        __('title', locale='es')                    # Force locale
    """
    translation = lookup(key, parameters, fallbacks, locale)
    if translation is None:
        translation = _interpolate(default, parameters) if default is not None else key
    return translation


def set_locale(locale: str) -> None:
    _current_locale.set(locale)


def get_locale() -> str:
    return _current_locale.get()


def clear_cache() -> None:
    """Clear translation cache. Sometimes you need a fresh start."""
    _translations.clear()


def set_locale_path(path: str) -> None:
    global _LOCALE_PATH
    _LOCALE_PATH = path


def set_fallback_locale(locale: str) -> None:
    global _LOCALE_FALLBACK
    _LOCALE_FALLBACK = locale


trans = __


def trans_choice(key: str, count: int, parameters: Optional[Dict[str, Any]] = None) -> str:
    """
    Pluralization: `{key}_plural` for counts other than one, `key` otherwise.
    """
    params = (parameters or {}).copy()
    params['count'] = count

    if count != 1:
        plural_translation = lookup(f"{key}_plural", params)
        if plural_translation is not None:
            return plural_translation

    return __(key, params)


__all__ = [
    "__",
    "trans",
    "trans_choice",
    "lookup",
    "load_translations",
    "set_locale",
    "get_locale",
    "set_locale_path",
    "set_fallback_locale",
    "clear_cache",
]
