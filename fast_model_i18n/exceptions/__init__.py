"""Custom exceptions for fast-model-i18n."""

from .common_exceptions import (
    AppException,
    RuleSpecException,
    DatabaseNotInitializedException,
    EnvMissingException,
    EnvInvalidException,
)
from .global_id_exceptions import (
    GlobalIdException,
    InvalidGlobalIdException,
    GlobalIdAppMismatchException,
)
from .http_exceptions import (
    HttpException,
)
from .model_exceptions import (
    ModelException,
    ModelNotFoundException,
    ModelValidationException,
)


__all__ = [
    # common
    "AppException",
    "RuleSpecException",
    "DatabaseNotInitializedException",
    "EnvMissingException",
    "EnvInvalidException",
    # global id
    "GlobalIdException",
    "InvalidGlobalIdException",
    "GlobalIdAppMismatchException",
    # http
    "HttpException",
    # model
    "ModelException",
    "ModelNotFoundException",
    "ModelValidationException",
]
