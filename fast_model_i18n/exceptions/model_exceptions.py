from typing import Optional, TYPE_CHECKING

from fast_model_i18n.exceptions.common_exceptions import AppException
from fast_model_i18n.utils.serialisation import serialise

if TYPE_CHECKING:
    from fast_model_i18n.core.errors import Errors


class ModelException(AppException):
    def __init__(self,
        message: str,
        *,
        http_status_code: Optional[int] = None,
        data: Optional[dict] = None
    ):
        super().__init__(message, http_status_code=http_status_code, data=data)

class ModelNotFoundException(ModelException):
    def __init__(self, model_name: str, ids: Optional[list] = None):
        message = f"Model '{model_name}' not found"
        if ids:
            message += f" (ids: {', '.join(str(i) for i in ids)})"
        super().__init__(message, http_status_code=404)
        self.model_name = model_name
        self.ids = ids or []

class ModelValidationException(ModelException):
    """Raised when saving a model whose validations failed. Carries the model's errors."""

    def __init__(self, model_name: str, errors: 'Errors'):
        full_messages = errors.full_messages()
        super().__init__(
            f"{model_name} is invalid: {'; '.join(full_messages)}",
            http_status_code=422,
            data={"errors": {_error_key(k): serialise(v) for k, v in errors.items()}, "messages": full_messages},
        )
        self.errors = errors


def _error_key(attribute) -> str:
    if isinstance(attribute, (tuple, list)):
        return ",".join(str(a) for a in attribute)
    return str(attribute)
