"""Contract classes and abstract interfaces.

These are the building blocks used across the package and are exported so
they can be imported directly from :mod:`fast_model_i18n`.
"""

from .model import Model
from .translator import Translator

__all__ = [
    "Model",
    "Translator",
]
