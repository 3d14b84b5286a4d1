from __future__ import annotations

import logging
import sys

import pytest

from fast_model_i18n.app_provider import boot
from fast_model_i18n.core.localization import __
from fast_model_i18n.utils import logging as logging_utils
from fast_model_i18n.utils.logging import get_log_file_path, setup_logging


@pytest.fixture
def restore_logging(monkeypatch):
    root_logger = logging.getLogger()
    handlers, level = list(root_logger.handlers), root_logger.level
    monkeypatch.setattr(logging_utils, "_logging_configured", False)
    monkeypatch.setattr(logging_utils, "_log_file_path", None)
    monkeypatch.setattr(sys, "excepthook", sys.excepthook)
    yield
    for handler in root_logger.handlers:
        if handler not in handlers:
            handler.close()
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


def test_logging_uses_custom_file_name(tmp_path, monkeypatch, restore_logging):
    monkeypatch.delenv("LOG_FILE_NAME", raising=False)
    monkeypatch.delenv("ENV", raising=False)

    setup_logging("module_x.log", log_dir=tmp_path / "log")

    path = get_log_file_path()
    assert path is not None
    assert path.name == "module_x.log"
    assert path.parent.name == "log"
    assert path.exists()


def test_logging_reads_env(tmp_path, monkeypatch, restore_logging):
    monkeypatch.setenv("LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("LOG_FILE_NAME", "i18n.log")
    monkeypatch.setenv("LOG_LEVEL", "warning")
    monkeypatch.setenv("ENV", "debug")

    setup_logging()

    root_logger = logging.getLogger()
    assert get_log_file_path() == tmp_path / "logs" / "i18n.log"
    assert root_logger.level == logging.WARNING
    assert any(type(handler) is logging.StreamHandler for handler in root_logger.handlers)


def test_boot_configures_logging_and_catalog(tmp_path, monkeypatch, restore_logging):
    lang_dir = tmp_path / "lang"
    lang_dir.mkdir()
    (lang_dir / "sk.json").write_text('{"errors": {"messages": {"presence": "nie je vyplnené"}}}', encoding="utf-8")
    env_file = tmp_path / ".env.testing"
    env_file.write_text(f"LOCALE_PATH={lang_dir}\nLOCALE_FALLBACK=sk\nLOG_FILE_NAME=booted.log\n")
    for name in ("LOCALE_PATH", "LOCALE_FALLBACK", "LOG_FILE_NAME"):
        monkeypatch.setenv(name, "unset")
    monkeypatch.delenv("ENV", raising=False)

    boot(env_file_name=str(env_file), log_dir=tmp_path / "log")

    assert get_log_file_path() == tmp_path / "log" / "booted.log"
    assert __("errors.messages.presence") == "nie je vyplnené"
