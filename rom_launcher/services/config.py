"""Settings service for creating and loading rom-launcher.yml."""

from pathlib import Path
from typing import Any

import structlog
import yaml

from ..models import Settings
from ..models.settings import DEFAULT_MSU_SERVICE_URL
from .errors import ConfigurationError

log = structlog.stdlib.get_logger()

SETTINGS_FILE_NAME = "rom-launcher.yml"


class SettingsService:
    """Service for managing the launcher settings file."""

    def __init__(self, settings_path: Path | None = None) -> None:
        self.settings_path: Path = settings_path or Path(SETTINGS_FILE_NAME)

    def exists(self) -> bool:
        return self.settings_path.is_file()

    def create_settings_file(self) -> Path:
        """Write a settings file holding the default value of every key.

        Returns:
            Absolute path of the created file
        """
        data = self._settings_to_dict(Settings())
        with open(self.settings_path, "w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, sort_keys=False, allow_unicode=True)

        full_path = self.settings_path.resolve()
        log.info("Created settings file", path=str(full_path))
        return full_path

    def load_settings(self) -> Settings:
        """Load settings from the settings file.

        Unknown keys are ignored and missing keys keep their defaults.

        Raises:
            ConfigurationError: If the file is not valid YAML or a value has the wrong shape
        """
        full_path = self.settings_path.resolve()
        try:
            with open(self.settings_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(
                "The settings file is not valid YAML",
                path=str(full_path),
                original_error=e,
            ) from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                "The settings file must contain a mapping of settings",
                path=str(full_path),
            )

        settings = self._dict_to_settings(data, full_path)
        log.info("Loaded settings file", path=str(full_path))
        return settings

    @staticmethod
    def _settings_to_dict(settings: Settings) -> dict[str, Any]:
        """Convert Settings to the persisted key layout."""
        return {
            "MsuPath": settings.msu_path,
            "TargetPath": settings.target_path,
            "LaunchApplication": settings.launch_application,
            "LaunchArguments": settings.launch_arguments,
            "MsuTypeFilter": settings.msu_type_filter,
            "MsuServiceUrl": settings.msu_service_url,
        }

    def _dict_to_settings(self, data: dict[str, Any], path: Path) -> Settings:
        """Convert the persisted key layout to Settings."""
        type_filter_raw = data.get("MsuTypeFilter")
        msu_type_filter: list[str] | None = None
        if type_filter_raw is not None:
            if not isinstance(type_filter_raw, list):
                raise ConfigurationError(
                    "MsuTypeFilter must be a list of MSU type names",
                    setting="MsuTypeFilter",
                    path=str(path),
                )
            msu_type_filter = [str(item) for item in type_filter_raw]

        return Settings(
            msu_path=self._optional_str(data, "MsuPath", path) or "",
            target_path=self._optional_str(data, "TargetPath", path) or "",
            launch_application=self._optional_str(data, "LaunchApplication", path),
            launch_arguments=self._optional_str(data, "LaunchArguments", path),
            msu_type_filter=msu_type_filter,
            msu_service_url=self._optional_str(data, "MsuServiceUrl", path) or DEFAULT_MSU_SERVICE_URL,
        )

    @staticmethod
    def _optional_str(data: dict[str, Any], key: str, path: Path) -> str | None:
        value = data.get(key)
        if value is None:
            return None
        if isinstance(value, (dict, list)):
            raise ConfigurationError(
                f"{key} must be a single value",
                setting=key,
                path=str(path),
            )
        return str(value)
