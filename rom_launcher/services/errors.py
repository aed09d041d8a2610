"""Error handling module for the ROM launcher.

This module provides:
- Custom exception classes for the failure modes of a launcher run
- User-friendly error message generation with suggested actions
- A centralized error handling service used by the entry point
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

import httpx
import structlog
import yaml

log = structlog.stdlib.get_logger()


class ErrorCategory(Enum):
    """Categories of errors for classification and handling."""
    CONFIGURATION = "configuration"
    FILE_SYSTEM = "file_system"
    MSU_SERVICE = "msu_service"
    LAUNCH = "launch"
    UNEXPECTED = "unexpected"


class ErrorSeverity(Enum):
    """Severity levels for errors."""
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


@dataclass(frozen=True)
class UserFriendlyError:
    """User-friendly error representation with suggested actions."""
    message: str
    category: ErrorCategory
    severity: ErrorSeverity
    suggested_actions: list[str]
    technical_details: str | None = None


class AppError(Exception):
    """Base exception class for application errors."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.UNEXPECTED,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        suggested_actions: list[str] | None = None,
        technical_details: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.category = category
        self.severity = severity
        self.suggested_actions = suggested_actions or []
        self.technical_details = technical_details

    def to_user_friendly(self) -> UserFriendlyError:
        """Convert to user-friendly error representation."""
        return UserFriendlyError(
            message=self.message,
            category=self.category,
            severity=self.severity,
            suggested_actions=self.suggested_actions,
            technical_details=self.technical_details,
        )


class ConfigurationError(AppError):
    """Exception for an unreadable or malformed settings file."""

    def __init__(
        self,
        message: str,
        setting: str | None = None,
        path: str | None = None,
        original_error: Exception | None = None,
    ) -> None:
        technical_details = None
        if path:
            technical_details = f"File: {path}"
        if setting:
            technical_details = (technical_details or "") + f"\nSetting: {setting}"
        if original_error:
            technical_details = (technical_details or "") + f"\nError: {type(original_error).__name__}: {original_error}"

        super().__init__(
            message=message,
            category=ErrorCategory.CONFIGURATION,
            severity=ErrorSeverity.CRITICAL,
            suggested_actions=[
                "Check the YAML syntax of the settings file",
                "Delete the settings file to have a fresh one created",
            ],
            technical_details=technical_details,
        )
        self.setting = setting
        self.path = path
        self.original_error = original_error


class FileSystemError(AppError):
    """Exception for file system-related errors."""

    def __init__(
        self,
        message: str,
        original_error: Exception | None = None,
        path: str | None = None,
        operation: str | None = None,
    ) -> None:
        technical_details = None
        if original_error:
            technical_details = f"{type(original_error).__name__}: {str(original_error)}"
        if path:
            technical_details = f"Path: {path}" + (f"\n{technical_details}" if technical_details else "")

        super().__init__(
            message=message,
            category=ErrorCategory.FILE_SYSTEM,
            severity=ErrorSeverity.ERROR,
            suggested_actions=self._get_suggested_actions(original_error),
            technical_details=technical_details,
        )
        self.original_error = original_error
        self.path = path
        self.operation = operation

    @staticmethod
    def _get_suggested_actions(original_error: Exception | None) -> list[str]:
        """Get suggested actions based on error type."""
        if isinstance(original_error, PermissionError):
            return [
                "Check file/directory permissions",
                "Close any program that still has the rom open",
            ]
        elif isinstance(original_error, FileNotFoundError):
            return [
                "Verify the file path is correct",
                "Check if the file was moved or deleted",
            ]
        return [
            "Check the file path and permissions",
            "Ensure sufficient disk space",
        ]


class MsuServiceError(AppError):
    """Exception for failed calls to the MSU randomizer service."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        url: str | None = None,
        status_code: int | None = None,
        original_error: Exception | None = None,
    ) -> None:
        suggested_actions = [
            "Make sure the MSU randomizer service is running",
            "Check MsuServiceUrl in rom-launcher.yml",
        ]
        if status_code and status_code >= 500:
            suggested_actions = [
                "The MSU randomizer service failed, check its logs",
            ]

        technical_details = None
        if operation:
            technical_details = f"Operation: {operation}"
        if url:
            technical_details = (technical_details or "") + f"\nURL: {url}"
        if status_code:
            technical_details = (technical_details or "") + f"\nStatus: {status_code}"
        if original_error:
            technical_details = (technical_details or "") + f"\nError: {type(original_error).__name__}: {original_error}"

        super().__init__(
            message=message,
            category=ErrorCategory.MSU_SERVICE,
            severity=ErrorSeverity.ERROR,
            suggested_actions=suggested_actions,
            technical_details=technical_details,
        )
        self.operation = operation
        self.url = url
        self.status_code = status_code
        self.original_error = original_error


class LaunchError(AppError):
    """Exception for a launch target that could not be started."""

    def __init__(
        self,
        message: str,
        application: str | None = None,
        original_error: Exception | None = None,
    ) -> None:
        technical_details = None
        if application:
            technical_details = f"Application: {application}"
        if original_error:
            technical_details = (technical_details or "") + f"\nError: {type(original_error).__name__}: {original_error}"

        super().__init__(
            message=message,
            category=ErrorCategory.LAUNCH,
            severity=ErrorSeverity.ERROR,
            suggested_actions=[
                "Check LaunchApplication in rom-launcher.yml",
                "Make sure a program is associated with the rom file type",
            ],
            technical_details=technical_details,
        )
        self.application = application
        self.original_error = original_error


class ErrorHandlingService:
    """Centralized error handling service.

    Converts arbitrary exceptions into AppErrors, logs them with their
    technical details and keeps a short history for diagnostics.
    """

    def __init__(self) -> None:
        self._error_history: list[AppError] = []
        self._max_history_size = 100

    def handle_error(
        self,
        error: Exception,
        operation: str,
        component: str,
        context: dict[str, Any] | None = None,
    ) -> UserFriendlyError:
        """Handle an error and return a user-friendly representation.

        Args:
            error: The exception that occurred
            operation: The operation being performed
            component: The component where the error occurred
            context: Additional context information

        Returns:
            User-friendly error representation
        """
        app_error = self._convert_to_app_error(error, operation, context)
        self._log_error(app_error, error, operation, component, context)

        self._error_history.append(app_error)
        if len(self._error_history) > self._max_history_size:
            self._error_history.pop(0)

        return app_error.to_user_friendly()

    def _convert_to_app_error(
        self,
        error: Exception,
        operation: str,
        context: dict[str, Any] | None,
    ) -> AppError:
        """Convert a standard exception to an AppError."""
        if isinstance(error, AppError):
            return error

        if isinstance(error, httpx.HTTPStatusError):
            return MsuServiceError(
                message="The MSU randomizer service rejected the request.",
                operation=operation,
                url=str(error.request.url),
                status_code=error.response.status_code,
                original_error=error,
            )
        elif isinstance(error, httpx.HTTPError):
            return MsuServiceError(
                message="Unable to reach the MSU randomizer service.",
                operation=operation,
                original_error=error,
            )
        elif isinstance(error, yaml.YAMLError):
            return ConfigurationError(
                message="The settings file could not be parsed.",
                path=context.get("path") if context else None,
                original_error=error,
            )
        elif isinstance(error, FileNotFoundError):
            return FileSystemError(
                message="The file or directory was not found.",
                original_error=error,
                path=context.get("path") if context else None,
                operation=operation,
            )
        elif isinstance(error, OSError):
            return FileSystemError(
                message=f"A file system error occurred: {str(error)}",
                original_error=error,
                path=context.get("path") if context else None,
                operation=operation,
            )

        return AppError(
            message="An unexpected error occurred.",
            category=ErrorCategory.UNEXPECTED,
            severity=ErrorSeverity.CRITICAL,
            technical_details=f"{type(error).__name__}: {str(error)}",
        )

    def _log_error(
        self,
        app_error: AppError,
        original: Exception,
        operation: str,
        component: str,
        context: dict[str, Any] | None,
    ) -> None:
        """Log error with full technical details."""
        log_method = log.warning if app_error.severity == ErrorSeverity.WARNING else log.error

        log_method(
            "Error occurred",
            error_message=app_error.message,
            category=app_error.category.value,
            severity=app_error.severity.value,
            operation=operation,
            component=component,
            technical_details=app_error.technical_details,
            context=context,
            exc_info=original,
        )

    def get_recent_errors(self, count: int = 10) -> list[AppError]:
        """Get recent errors from history."""
        return self._error_history[-count:]

    def create_user_message(
        self,
        error: UserFriendlyError,
        include_suggestions: bool = True,
    ) -> str:
        """Create a formatted user message from an error.

        Args:
            error: The user-friendly error
            include_suggestions: Whether to include suggested actions

        Returns:
            Formatted message string
        """
        parts = [error.message]

        if include_suggestions and error.suggested_actions:
            parts.append("\nSuggested actions:")
            for action in error.suggested_actions[:3]:
                parts.append(f"  • {action}")

        return "\n".join(parts)


_error_service: ErrorHandlingService | None = None


def get_error_service() -> ErrorHandlingService:
    """Get the global error handling service instance."""
    global _error_service
    if _error_service is None:
        _error_service = ErrorHandlingService()
    return _error_service


def handle_error(
    error: Exception,
    operation: str,
    component: str,
    context: dict[str, Any] | None = None,
) -> UserFriendlyError:
    """Convenience function to handle errors using the global service."""
    return get_error_service().handle_error(error, operation, component, context)
