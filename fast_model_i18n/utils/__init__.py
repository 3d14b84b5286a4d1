from .datetime_utils import now
from .serialisation import humanize, serialise

__all__ = [
    "now",
    "humanize",
    "serialise",
]
