"""
Pytest configuration and shared fixtures for fast-model-i18n tests.
"""

import pytest
from faker import Faker

from fast_model_i18n.core import localization
from fast_model_i18n.core.rule_specs import build_default_registry

fake = Faker()


@pytest.fixture(autouse=True)
def isolated_catalog(tmp_path):
    """Every test starts with an empty catalog in English, reading no lang files from the repo."""
    localization.clear_cache()
    localization.set_locale_path(str(tmp_path / "lang"))
    localization.set_fallback_locale("en")
    localization.set_locale("en")
    yield
    localization.clear_cache()


@pytest.fixture
def catalog():
    """Load nested translations into a locale: `catalog({...}, locale="en")`."""
    def _load(data: dict, locale: str = "en") -> None:
        localization.load_translations(locale, data)
    return _load


@pytest.fixture
def registry():
    return build_default_registry()


@pytest.fixture
def sample_data():
    return {
        "name": fake.name(),
        "email": fake.email(),
        "company": fake.company(),
    }


# Configure pytest-asyncio
pytest_plugins = ['pytest_asyncio']
