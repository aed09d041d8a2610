"""Settings data models."""

from dataclasses import dataclass

from .msu import MsuType

DEFAULT_MSU_SERVICE_URL = "http://127.0.0.1:5000"


@dataclass(frozen=True)
class Settings:
    """Launcher settings as persisted in rom-launcher.yml."""
    msu_path: str = ""
    target_path: str = ""
    launch_application: str | None = None
    launch_arguments: str | None = None  # May contain the %rom% placeholder
    msu_type_filter: list[str] | None = None  # None = every type allowed
    msu_service_url: str = DEFAULT_MSU_SERVICE_URL

    def msu_type_matches(self, msu_type: MsuType) -> bool:
        """Check whether an MSU type passes the configured type filter."""
        return (
            self.msu_type_filter is None
            or msu_type.display_name in self.msu_type_filter
            or msu_type.name in self.msu_type_filter
        )
