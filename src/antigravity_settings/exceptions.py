"""Custom exceptions for antigravity-settings.

All exceptions inherit from SettingsError, allowing callers to catch every
settings-related failure with a single except clause if desired.

Exception hierarchy:
    SettingsError (base)
    ├── ConfigurationError
    │   └── ValidationError
    ├── PersistenceError
    ├── NotFoundError
    ├── PlatformUnsupportedError
    └── NetworkError
"""

from pathlib import Path
from typing import Any


class SettingsError(Exception):
    """Base exception for all settings errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        """Initialize settings error.

        Args:
            message: Error description.
            details: Optional dictionary with additional context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation."""
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(SettingsError):
    """Raised when configuration is invalid or cannot be interpreted."""

    def __init__(
        self,
        message: str,
        config_file: Path | None = None,
        key: str | None = None,
    ):
        """Initialize configuration error.

        Args:
            message: Error description.
            config_file: Path to the problematic config file.
            key: The configuration key that caused the error.
        """
        details: dict[str, Any] = {}
        if config_file:
            details["config_file"] = str(config_file)
        if key:
            details["key"] = key
        super().__init__(message, details)
        self.config_file = config_file
        self.key = key


class ValidationError(ConfigurationError):
    """Raised when a commit violates a configuration invariant.

    Examples:
        - Upstream proxy enabled without a URL
        - Quota threshold outside 1-100
        - Unsorted circuit breaker backoff steps
    """

    def __init__(
        self,
        message: str,
        field: str,
        value: Any = None,
        expected: str | None = None,
        rule: str | None = None,
    ):
        """Initialize validation error.

        Args:
            message: Error description.
            field: Dotted path of the field that failed validation.
            value: The invalid value (truncated in details if too long).
            expected: Description of the expected value.
            rule: Kind of breach (range, required, ordering, ...).
        """
        super().__init__(message)
        self.details["field"] = field
        if value is not None:
            value_str = str(value)
            self.details["value"] = value_str[:100] + "..." if len(value_str) > 100 else value_str
        if expected:
            self.details["expected"] = expected
        self.field = field
        self.value = value
        self.expected = expected
        self.rule = rule


# =============================================================================
# I/O and Environment Errors
# =============================================================================


class PersistenceError(SettingsError):
    """Raised when reading or writing persisted state fails.

    Examples:
        - Disk full or permission denied while saving
        - Save did not finish within the I/O timeout
    """

    def __init__(
        self,
        message: str,
        path: Path | None = None,
        operation: str | None = None,
    ):
        """Initialize persistence error.

        Args:
            message: Error description.
            path: File or directory involved.
            operation: The operation that failed (load, save, clear, ...).
        """
        details: dict[str, Any] = {}
        if path:
            details["path"] = str(path)
        if operation:
            details["operation"] = operation
        super().__init__(message, details)
        self.path = path
        self.operation = operation


class NotFoundError(SettingsError):
    """Raised when an expected resource is absent.

    Callers treat this as a normal outcome with a defined fallback.
    """

    def __init__(self, message: str, resource: str | None = None):
        """Initialize not-found error.

        Args:
            message: Error description.
            resource: Kind of resource that was looked up.
        """
        details = {"resource": resource} if resource else {}
        super().__init__(message, details)
        self.resource = resource


class PlatformUnsupportedError(SettingsError):
    """Raised when an operation is unavailable on this platform."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        platform: str | None = None,
    ):
        """Initialize platform error.

        Args:
            message: Error description.
            operation: Operation that was attempted.
            platform: Current platform identifier.
        """
        details: dict[str, Any] = {}
        if operation:
            details["operation"] = operation
        if platform:
            details["platform"] = platform
        super().__init__(message, details)
        self.operation = operation
        self.platform = platform


class NetworkError(SettingsError):
    """Raised when a remote request (update check) fails."""

    def __init__(
        self,
        message: str,
        url: str | None = None,
        cause: Exception | None = None,
    ):
        """Initialize network error.

        Args:
            message: Error description.
            url: URL that was requested.
            cause: Underlying exception, if any.
        """
        details = {"url": url} if url else {}
        super().__init__(message, details)
        self.url = url
        self.cause = cause
