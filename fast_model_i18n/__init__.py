"""
fast-model-i18n - Localized validation messages for fast-app style models

This package provides:
- A JSON translation catalog with Rails-style fallback key chains
- Validation helpers (presence, length, format, type, uniqueness, ...) on models
- A message resolver building localization keys from most to least specific
- Localized full error messages and attribute names
- Global identifiers (gid://app/Model/id) and a locator for them
"""

__version__ = "0.1.0"
__author__ = "Patrik Mojzis"
__email__ = "patrikm53@gmail.com"
__license__ = "MIT"
__url__ = "https://github.com/patrikmojzis/fast-model-i18n"

from .contracts import *  # noqa: F401,F403
from .core import *  # noqa: F401,F403
from .core.localization import __, set_locale, get_locale, trans, trans_choice
from .exceptions import *  # noqa: F401,F403
from .app_provider import boot
