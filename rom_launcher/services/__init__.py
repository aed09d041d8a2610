"""Service layer for the launcher steps and external integrations."""

from .config import SETTINGS_FILE_NAME, SettingsService
from .errors import (
    AppError,
    ConfigurationError,
    ErrorCategory,
    ErrorHandlingService,
    ErrorSeverity,
    FileSystemError,
    LaunchError,
    MsuServiceError,
    UserFriendlyError,
    get_error_service,
    handle_error,
)
from .filesystem import FileSystemService
from .http_client import HttpClientService
from .launcher import LaunchCommand, ProcessLauncher, build_launch_command, split_launch_arguments
from .msu_service import HttpMsuRandomizerService, MsuRandomizerService, shuffle_msus
from .selection import MIN_UNIQUE_TRACKS, MsuSelector

__all__ = [
    "AppError",
    "ConfigurationError",
    "ErrorCategory",
    "ErrorHandlingService",
    "ErrorSeverity",
    "FileSystemError",
    "FileSystemService",
    "HttpClientService",
    "HttpMsuRandomizerService",
    "LaunchCommand",
    "LaunchError",
    "MIN_UNIQUE_TRACKS",
    "MsuRandomizerService",
    "MsuSelector",
    "MsuServiceError",
    "ProcessLauncher",
    "SETTINGS_FILE_NAME",
    "SettingsService",
    "UserFriendlyError",
    "build_launch_command",
    "get_error_service",
    "handle_error",
    "shuffle_msus",
    "split_launch_arguments",
]
