"""Core exceptions for the Demo Users API"""

from typing import Any, Dict, List, Optional, Sequence


class AppException(Exception):
    """Base exception for all application errors"""
    pass


class ConfigError(AppException):
    """An environment value failed its configuration predicate"""

    def __init__(self, key: str, value: Any):
        self.key = key
        self.value = value
        super().__init__(f"Invalid configuration value for {key}: {value}")


class MissingConfigError(AppException):
    """One or more required configuration keys are unset"""

    def __init__(self, keys: Sequence[str]):
        self.keys = list(keys)
        super().__init__(f"Missing required configuration: {', '.join(self.keys)}")


class SchemaError(AppException):
    """Invalid validation schema declaration"""
    pass


class InternalValidationError(AppException):
    """Validator was handed something that is not a key/value payload"""
    pass


class ApiError(AppException):
    """Error rendered as a structured JSON failure response"""

    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        code: Optional[str] = None,
        details: Optional[List[Dict[str, Any]]] = None,
    ):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        if code is not None:
            self.code = code
        self.details = details


class ValidationError(ApiError):
    """Client supplied an invalid value"""

    status_code = 400
    code = "VALIDATION_ERROR"

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None):
        super().__init__(message)
        self.field = field
        self.value = value
