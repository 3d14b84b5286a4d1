import logging
import os
from pathlib import Path
from typing import Optional

from fast_model_i18n import config
from fast_model_i18n.core import localization
from fast_model_i18n.utils.env_utils import configure_env
from fast_model_i18n.utils.logging import setup_logging


def boot(*,
    env_file_name: Optional[str] = None,
    log_file_name: Optional[str] = None,
    log_dir: Optional[str | Path] = None,
    locale_path: Optional[str] = None,
    fallback_locale: Optional[str] = None,
) -> None:
    """
    Sets up the application.
    - Loads environment variables (.env, .env.<ENV> or `env_file_name`)
    - Sets up logging
    - Points the translation catalog at the locale directory and fallback locale

    Locale settings not passed explicitly are read from `LOCALE_PATH` and
    `LOCALE_FALLBACK` after the env file is loaded.
    """
    configure_env(env_file_name)
    setup_logging(log_file_name, log_dir=log_dir)

    locale_path = locale_path or os.getenv("LOCALE_PATH", config.LOCALE_PATH)
    fallback_locale = fallback_locale or os.getenv("LOCALE_FALLBACK", config.LOCALE_FALLBACK)

    localization.set_locale_path(locale_path)
    localization.set_fallback_locale(fallback_locale)
    localization.clear_cache()

    logging.debug(f"Translations from {locale_path} (fallback locale `{fallback_locale}`)")
