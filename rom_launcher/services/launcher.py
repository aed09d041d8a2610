"""Process launcher for starting the configured application on a staged rom."""

import os
import shlex
import subprocess
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import structlog

from .errors import LaunchError

log = structlog.stdlib.get_logger()

ROM_PLACEHOLDER = "%rom%"

# Seconds to keep the launcher alive after spawning. This only gives the
# child a head start; nothing confirms that it actually came up.
HANDOFF_DELAY = 2.0


@dataclass(frozen=True)
class LaunchCommand:
    """What to start: an application and its argument string.

    ``arguments`` is None when the rom is opened through the OS file
    association instead of an explicit application.
    """
    application: str
    arguments: str | None = None

    @property
    def uses_file_association(self) -> bool:
        return self.arguments is None


def build_launch_command(
    rom_path: Path | str,
    application: str | None = None,
    arguments: str | None = None,
) -> LaunchCommand:
    """Build the command line that starts ``rom_path``.

    Without an application the rom itself is the target. With one, the
    quoted rom path is the whole argument string when no template is set,
    replaces ``%rom%`` unquoted when the template has it, and is appended
    quoted otherwise.
    """
    rom = str(rom_path)

    if not application:
        return LaunchCommand(application=rom)

    if not arguments:
        arguments = f'"{rom}"'
    elif ROM_PLACEHOLDER in arguments:
        arguments = arguments.replace(ROM_PLACEHOLDER, rom)
    else:
        arguments = f'{arguments} "{rom}"'

    return LaunchCommand(application=application, arguments=arguments)


def split_launch_arguments(rom_path: Path | str, arguments: str | None = None) -> list[str]:
    """Split an argument template into argv entries for ``rom_path``.

    The template is tokenized before the rom is substituted, so quotes or
    spaces in the rom path never change how the template splits.

    Raises:
        ValueError: If the template itself has unbalanced quotes
    """
    rom = str(rom_path)
    if not arguments:
        return [rom]

    tokens = shlex.split(arguments)
    if ROM_PLACEHOLDER in arguments:
        return [token.replace(ROM_PLACEHOLDER, rom) for token in tokens]
    return [*tokens, rom]


class ProcessLauncher:
    """Starts the launch application and lets it run on its own."""

    def __init__(self, handoff_delay: float = HANDOFF_DELAY) -> None:
        self.handoff_delay = handoff_delay

    def launch(
        self,
        rom_path: Path,
        application: str | None = None,
        arguments: str | None = None,
    ) -> LaunchCommand:
        """Start the application for a staged rom without waiting for it.

        Raises:
            FileNotFoundError: If the staged rom does not exist
            LaunchError: If the process could not be started
        """
        if not rom_path.is_file():
            raise FileNotFoundError(f"{rom_path} not found")

        command = build_launch_command(rom_path, application, arguments)
        log.info(
            "Launching rom",
            application=command.application,
            arguments=command.arguments,
        )

        try:
            if command.uses_file_association:
                self._open_with_association(command.application)
            else:
                self._spawn(command, rom_path, arguments)
        except ValueError as e:
            raise LaunchError(
                "Could not parse LaunchArguments",
                application=command.application,
                original_error=e,
            ) from e
        except OSError as e:
            raise LaunchError(
                "Could not start the launch application",
                application=command.application,
                original_error=e,
            ) from e

        return command

    def detach(self) -> None:
        """Give the spawned process a moment to start before exiting.

        The delay is a heuristic, it does not guarantee the child is up.
        """
        log.debug("Waiting before exit", delay=self.handoff_delay)
        time.sleep(self.handoff_delay)

    @staticmethod
    def _open_with_association(target: str) -> None:
        if sys.platform.startswith("win"):
            os.startfile(target)  # type: ignore[attr-defined]
        elif sys.platform.startswith("darwin"):
            _ = subprocess.Popen(["open", target], **_detached_kwargs())
        else:  # Linux / Unix
            _ = subprocess.Popen(["xdg-open", target], **_detached_kwargs())

    @staticmethod
    def _spawn(command: LaunchCommand, rom_path: Path, template: str | None) -> None:
        if os.name == "nt":
            _ = subprocess.Popen(f'"{command.application}" {command.arguments}', **_detached_kwargs())
        else:
            args = split_launch_arguments(rom_path, template)
            _ = subprocess.Popen([command.application, *args], **_detached_kwargs())


def _detached_kwargs() -> dict[str, Any]:
    """Popen options that keep the child alive after the launcher exits."""
    if os.name == "nt":
        flags = int(getattr(subprocess, "CREATE_NEW_PROCESS_GROUP", 0) or 0)
        return {"creationflags": flags} if flags else {}
    return {"start_new_session": True}
