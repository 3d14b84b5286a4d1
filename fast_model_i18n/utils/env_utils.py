import logging
import os
from typing import Optional

from dotenv import load_dotenv

from fast_model_i18n.exceptions.common_exceptions import EnvMissingException, EnvInvalidException


def configure_env(env_file_name: Optional[str] = None) -> None:
    """
    Configure the application's environment.

    Args:
        env_file_name: Optional environment file name. If None, tries to load from .env.
    """
    if env_file_name is not None:
        load_dotenv(env_file_name, override=True)
        return

    environment = os.getenv("ENV", "debug")

    for env_file in [f".env.{environment}", ".env"]:
        load_dotenv(env_file, override=True)
        if os.getenv("ENV") is not None:
            logging.debug(f"Loaded {env_file} file successfully")
            break

    if os.getenv("ENV") is None:
        logging.warning("Loading env file failed. Create .env (or .env.<environment>) in your project root.")


def get_env_or_fail(name: str) -> str:
    value = os.getenv(name)
    if not value:
        raise EnvMissingException(name)
    return value


def get_env_choice(name: str, choices: list[str], default: Optional[str] = None) -> str:
    value = os.getenv(name, default)
    if value is None:
        raise EnvMissingException(name)
    if value not in choices:
        raise EnvInvalidException(name, value, choices)
    return value
