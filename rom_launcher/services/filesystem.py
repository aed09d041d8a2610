"""File system service for staging rom files."""

import shutil
from pathlib import Path

import structlog

from ..models import Settings

log = structlog.stdlib.get_logger()


class FileSystemService:
    """Service for file system operations with error handling and validation."""

    def ensure_directory(self, path: Path) -> None:
        """Ensure that a directory exists, creating it if necessary.

        Args:
            path: Directory path to ensure exists

        Raises:
            OSError: If directory cannot be created
            PermissionError: If insufficient permissions
        """
        try:
            if path.exists():
                if not path.is_dir():
                    log.error("Path exists but is not a directory", path=str(path))
                    raise OSError(f"Path exists but is not a directory: {path}")
                return

            log.debug("Creating directory", path=str(path))
            path.mkdir(parents=True, exist_ok=True)
            log.info("Directory created successfully", path=str(path))

        except OSError as e:
            log.error("Failed to create directory", path=str(path), error=str(e))
            raise

    def delete_file(self, path: Path) -> None:
        """Delete a file.

        Args:
            path: Path to the file to delete

        Raises:
            FileNotFoundError: If file does not exist
            OSError: If file cannot be deleted
        """
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        if not path.is_file():
            raise OSError(f"Path is not a file: {path}")

        log.debug("Deleting file", path=str(path))
        path.unlink()

    def copy_file(self, source: Path, destination: Path) -> None:
        """Copy a file without ever overwriting the destination.

        Args:
            source: Source file path
            destination: Destination file path

        Raises:
            FileNotFoundError: If source file does not exist
            FileExistsError: If destination already exists
            OSError: If file cannot be copied
        """
        if not source.is_file():
            raise FileNotFoundError(f"Source file not found: {source}")

        if destination.exists():
            raise FileExistsError(f"Destination already exists: {destination}")

        log.debug("Copying file", source=str(source), destination=str(destination))
        shutil.copy2(source, destination)

    def stage_rom(self, source_path: Path, settings: Settings) -> Path | None:
        """Copy a rom into its own folder below the target path.

        The staged rom lives at ``{target}/{rom stem}/{rom name}``. A previous
        copy is deleted first; failing to delete or copy is only a warning,
        the rom counts as staged when a file exists at the staged path
        afterwards.

        Args:
            source_path: The rom file to stage
            settings: Settings whose target path receives the rom folder

        Returns:
            Absolute path of the staged rom, or None when staging failed
        """
        source = source_path.absolute()
        if not source.is_file():
            log.error("File not found", path=str(source))
            return None

        if not settings.target_path:
            log.error("Destination path is not configured")
            return None

        destination = Path(settings.target_path).resolve()
        if not destination.is_dir():
            log.error("Destination path does not exist", path=str(destination))
            return None

        rom_folder = destination / source.stem
        self.ensure_directory(rom_folder)

        staged_rom = rom_folder / source.name
        if staged_rom.exists():
            try:
                self.delete_file(staged_rom)
            except OSError as e:
                log.warning("Could not delete previous rom file", path=str(staged_rom), error=str(e))

        copied = False
        try:
            self.copy_file(source, staged_rom)
            copied = True
            log.info("Copied rom file", path=str(staged_rom))
        except OSError as e:
            log.warning("Could not copy rom file", path=str(staged_rom), error=str(e))

        if not staged_rom.is_file():
            return None

        if not copied:
            # A stale copy survived both the delete and the copy.
            log.warning("Reusing existing staged rom", path=str(staged_rom), source=str(source))
        return staged_rom
