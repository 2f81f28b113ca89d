"""Exception hierarchy for the user service."""

from typing import Any, Dict, Optional


class ServiceError(Exception):
    """Base exception for all service-related errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__.upper()
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary format."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"{self.error_code}: {self.message}"


class MetricsConfigurationError(ServiceError):
    """Raised when the metrics registry cannot be assembled at startup."""

    def __init__(
        self,
        message: str = "Metrics configuration error",
        error_code: str = "METRICS_CONFIGURATION_ERROR",
        details: Optional[Dict[str, Any]] = None,
        metric_name: Optional[str] = None,
    ):
        super().__init__(message, error_code, details)
        if metric_name:
            self.details["metric_name"] = metric_name


class UserAlreadyExistsError(ServiceError):
    """Raised when registering a username that is already taken."""

    def __init__(
        self,
        message: str = "User already exists",
        error_code: str = "USER_ALREADY_EXISTS",
        details: Optional[Dict[str, Any]] = None,
        username: Optional[str] = None,
    ):
        super().__init__(message, error_code, details)
        if username:
            self.details["username"] = username


class InvalidCredentialsError(ServiceError):
    """Raised when a username/password pair does not match a stored user."""

    def __init__(
        self,
        message: str = "Invalid Username and Password",
        error_code: str = "INVALID_CREDENTIALS",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, error_code, details)
