from fast_model_i18n.exceptions.common_exceptions import AppException


class GlobalIdException(AppException):
    def __init__(self, message: str, *, http_status_code: int = 400) -> None:
        super().__init__(message, http_status_code=http_status_code)


class InvalidGlobalIdException(GlobalIdException):
    def __init__(self, value: str, reason: str = "malformed") -> None:
        super().__init__(f"Invalid global id `{value}` ({reason})")
        self.value = value


class GlobalIdAppMismatchException(GlobalIdException):
    def __init__(self, expected: str, actual: str) -> None:
        super().__init__(f"Global id belongs to app `{actual}`, expected `{expected}`")
        self.expected = expected
        self.actual = actual
