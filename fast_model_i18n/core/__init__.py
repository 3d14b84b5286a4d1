"""Core utilities re-exported for convenient access.

These modules provide the always-on fundamentals of the package.
"""

from .errors import *  # noqa: F401,F403
from .global_id import *  # noqa: F401,F403
from .localization import *  # noqa: F401,F403
from .message_resolver import *  # noqa: F401,F403
from .message_templates import *  # noqa: F401,F403
from .mixins import *  # noqa: F401,F403
from .rule_specs import *  # noqa: F401,F403
