"""
Basic package tests to ensure fast_model_i18n can be imported and its public names are exposed.
"""

import fast_model_i18n


def test_package_version():
    """Test that package version is accessible."""
    assert hasattr(fast_model_i18n, '__version__')
    assert fast_model_i18n.__version__ == "0.1.0"


def test_package_metadata():
    """Test that all expected metadata is present."""
    assert fast_model_i18n.__author__ == "Patrik Mojzis"
    assert fast_model_i18n.__email__ == "patrikm53@gmail.com"
    assert fast_model_i18n.__license__ == "MIT"
    assert fast_model_i18n.__url__ == "https://github.com/patrikmojzis/fast-model-i18n"


def test_public_api():
    for name in ("Model", "Translator", "MessageResolver", "RuleSpecRegistry", "GlobalId", "Locator", "Errors", "__", "set_locale", "boot"):
        assert hasattr(fast_model_i18n, name), name
