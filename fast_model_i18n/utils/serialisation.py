import re
from datetime import datetime
from typing import Any

from bson import ObjectId


def serialise(val):
    if isinstance(val, ObjectId):
        return str(val)
    if isinstance(val, datetime):
        return val.isoformat()
    elif isinstance(val, (list, tuple)):
        return [serialise(item) for item in val]
    elif isinstance(val, dict):
        return {key: serialise(value) for key, value in val.items()}

    return val


def pascal_case_to_snake_case(pascal: type | str) -> str:
    """
    Convert a class name (CamelCase or PascalCase) to snake_case.

    Args:
        pascal: The class or class name as a string.

    Returns:
        str: The snake_case version of the class name.
    """
    if not isinstance(pascal, str):
        pascal = pascal.__name__
    # Insert underscores before capital letters, except at the start
    s1 = re.sub('(.)([A-Z][a-z]+)', r'\1_\2', pascal)
    snake = re.sub('([a-z0-9])([A-Z])', r'\1_\2', s1).lower()
    return snake


def humanize(name: Any) -> str:
    """
    Turn an attribute name into a human readable label.

    `first_name` -> `First name`, `author_id` -> `Author`.
    """
    text = str(name).strip()
    if text.endswith("_id") and len(text) > 3:
        text = text[:-3]
    text = text.lstrip("_").replace("_", " ").strip()
    return text[:1].upper() + text[1:].lower() if text else ""


def get_exception_error_type(exception: Exception) -> str:
    return pascal_case_to_snake_case(exception.__class__.__name__.lower().replace('exception', ''))
