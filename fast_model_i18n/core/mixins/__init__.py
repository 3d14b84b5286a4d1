from .global_identification import GlobalIdentification
from .validation_helpers import ValidationHelpers

__all__ = [
    "GlobalIdentification",
    "ValidationHelpers",
]
