"""Main entry point for the ROM launcher.

This module provides the application entry point with:
- Command-line argument parsing
- Application context owning the services and the logging lifecycle
- The launcher run: stage the rom, pick an MSU, shuffle, launch
"""

import argparse
import sys
from pathlib import Path
from types import TracebackType
from typing import TextIO

import structlog

from rom_launcher import __version__
from rom_launcher.models import Settings
from rom_launcher.services.config import SettingsService
from rom_launcher.services.errors import get_error_service, handle_error
from rom_launcher.services.filesystem import FileSystemService
from rom_launcher.services.http_client import HttpClientService
from rom_launcher.services.launcher import ProcessLauncher
from rom_launcher.services.logging import LoggingService, default_log_dir
from rom_launcher.services.msu_service import (
    HttpMsuRandomizerService,
    MsuRandomizerService,
    shuffle_msus,
)
from rom_launcher.services.selection import MsuSelector


log = structlog.stdlib.get_logger()


class ApplicationContext:
    """Container for application services and state.

    Used as a context manager: entering configures logging, leaving closes
    the service connection and flushes the log handlers. Services are
    created lazily and can be passed in explicitly instead.
    """

    def __init__(
        self,
        settings_path: Path | None = None,
        log_level: str = "INFO",
        log_dir: Path | None = None,
        msu_service: MsuRandomizerService | None = None,
        launcher: ProcessLauncher | None = None,
        input_stream: TextIO | None = None,
        configure_logging: bool = True,
    ) -> None:
        """Initialize the application context.

        Args:
            settings_path: Path to the settings file (default: ./rom-launcher.yml)
            log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_dir: Directory for log files (default: local app data)
            msu_service: MSU randomizer service (default: HTTP client from settings)
            launcher: Process launcher
            input_stream: Where menu answers are read from (default: stdin)
            configure_logging: Set up logging on enter
        """
        self._settings_path = settings_path
        self._input_stream = input_stream
        self._logging = LoggingService(log_level=log_level, log_dir=log_dir or default_log_dir())
        self._configure_logging = configure_logging

        self._settings_service: SettingsService | None = None
        self._settings: Settings | None = None
        self._http_client: HttpClientService | None = None
        self._msu_service: MsuRandomizerService | None = msu_service
        self._filesystem: FileSystemService | None = None
        self._selector: MsuSelector | None = None
        self._launcher: ProcessLauncher | None = launcher

    def __enter__(self) -> "ApplicationContext":
        if self._configure_logging:
            self._logging.configure()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.cleanup()

    @property
    def settings_service(self) -> SettingsService:
        if self._settings_service is None:
            self._settings_service = SettingsService(settings_path=self._settings_path)
        return self._settings_service

    @property
    def settings(self) -> Settings:
        """Get the settings, loading them on first access."""
        if self._settings is None:
            self._settings = self.settings_service.load_settings()
        return self._settings

    @property
    def msu_service(self) -> MsuRandomizerService:
        if self._msu_service is None:
            self._http_client = HttpClientService(base_url=self.settings.msu_service_url)
            self._msu_service = HttpMsuRandomizerService(self._http_client)
        return self._msu_service

    @property
    def filesystem(self) -> FileSystemService:
        if self._filesystem is None:
            self._filesystem = FileSystemService()
        return self._filesystem

    @property
    def selector(self) -> MsuSelector:
        if self._selector is None:
            self._selector = MsuSelector(self.msu_service, input_stream=self._input_stream)
        return self._selector

    @property
    def launcher(self) -> ProcessLauncher:
        if self._launcher is None:
            self._launcher = ProcessLauncher()
        return self._launcher

    def cleanup(self) -> None:
        """Close the service connection and flush logging."""
        if self._http_client is not None:
            self._http_client.close()
            self._http_client = None
        if self._configure_logging:
            self._logging.shutdown()


def run_launcher(context: ApplicationContext, rom_path: Path | None) -> int:
    """Run one launcher pass.

    Every expected failure (bad path, invalid menu answer) is logged and
    ends the run early with exit code 0; unexpected faults propagate.

    Args:
        context: Application context with the services to use
        rom_path: The source rom, only optional on the very first run

    Returns:
        Exit code
    """
    settings_service = context.settings_service
    if not settings_service.exists():
        _ = settings_service.create_settings_file()
        return 0

    settings = context.settings

    if rom_path is None:
        log.error("No rom file given")
        return 2

    context.msu_service.initialize()

    staged_rom = context.filesystem.stage_rom(rom_path, settings)
    if staged_rom is None:
        return 0

    msu_type = context.selector.choose_msu_type(settings)
    if msu_type is None:
        return 0

    msus = context.selector.choose_msus(settings, msu_type)
    if msus is None:
        return 0

    if msus:
        shuffle_msus(context.msu_service, msus, msu_type, staged_rom)

    _ = context.launcher.launch(staged_rom, settings.launch_application, settings.launch_arguments)
    context.launcher.detach()
    return 0


class ParsedArgs:
    """Type-safe container for parsed command-line arguments."""

    def __init__(self, rom: Path | None) -> None:
        self.rom: Path | None = rom


def parse_arguments(argv: list[str] | None = None) -> ParsedArgs:
    """Parse command-line arguments.

    Returns:
        Parsed arguments container
    """
    parser = argparse.ArgumentParser(
        prog="rom-launcher",
        description="Copy a rom to the target folder, pair it with a shuffled MSU and launch it",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Settings are read from rom-launcher.yml in the current directory.
The first run only creates that file.
        """
    )

    _ = parser.add_argument(
        "rom",
        type=Path,
        nargs="?",
        default=None,
        help="Path to the rom file to launch",
    )

    ns = parser.parse_args(argv)
    rom_val: Path | None = ns.rom
    return ParsedArgs(rom=rom_val)


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the application."""
    args = parse_arguments(argv)

    with ApplicationContext() as context:
        log.info("Starting ROM launcher", version=__version__)

        try:
            exit_code = run_launcher(context, args.rom)

        except KeyboardInterrupt:
            log.info("Application interrupted by user")
            exit_code = 130

        except Exception as e:
            error = handle_error(e, operation="launch_rom", component="main", context={"rom": str(args.rom)})
            print(f"Fatal error: {get_error_service().create_user_message(error)}", file=sys.stderr)
            exit_code = 1

        log.info("Application exiting", exit_code=exit_code)

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
