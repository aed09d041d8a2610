"""Console menus for picking an MSU type and the MSUs to shuffle."""

import sys
from pathlib import Path
from typing import TextIO

import structlog

from ..models import Msu, MsuType, Settings
from .msu_service import MsuRandomizerService

log = structlog.stdlib.get_logger()

# MSUs with this many unique tracks or fewer are never offered
MIN_UNIQUE_TRACKS = 10


class MsuSelector:
    """Numbered console prompts backed by the MSU randomizer service.

    Each prompt reads a single line. Anything that is not a listed number
    cancels the run, there is no second attempt.
    """

    def __init__(
        self,
        msu_service: MsuRandomizerService,
        input_stream: TextIO | None = None,
    ) -> None:
        self._msu_service = msu_service
        self._input = input_stream

    def choose_msu_type(self, settings: Settings) -> MsuType | None:
        """Ask the user for the MSU type to build.

        Returns:
            The chosen type, or None for an invalid selection
        """
        msu_types = [t for t in self._msu_service.get_msu_types() if settings.msu_type_matches(t)]

        for i, msu_type in enumerate(msu_types, start=1):
            log.info(f"{i}) {msu_type.display_name}")

        log.info(f"Select an MSU Type (1-{len(msu_types)})")

        index = self._read_index(len(msu_types))
        if index is None:
            return None
        return msu_types[index - 1]

    def choose_msus(self, settings: Settings, msu_type: MsuType) -> list[Msu] | None:
        """Ask the user which MSUs to shuffle.

        Returns:
            One MSU, every listed MSU ("Shuffle All"), an empty list
            ("Vanilla Music") or None for an invalid selection
        """
        if not settings.msu_path:
            log.error("MSU path is not configured")
            return None

        msu_path = Path(settings.msu_path).resolve()
        if not msu_path.is_dir():
            log.error("MSU path does not exist", path=str(msu_path))
            return None

        msus = sorted(
            (
                msu for msu in self._msu_service.lookup_msus(settings.msu_path)
                if msu.num_unique_tracks > MIN_UNIQUE_TRACKS
                and self._msu_service.is_compatible(msu, msu_type)
            ),
            key=lambda msu: msu.display_name.casefold(),
        )

        for i, msu in enumerate(msus, start=1):
            log.info(f"{i}) {msu.display_name} ({msu.num_unique_tracks} Tracks)")

        shuffle_all = len(msus) + 1
        vanilla = len(msus) + 2
        log.info(f"{shuffle_all}) Shuffle All")
        log.info(f"{vanilla}) Vanilla Music")
        log.info(f"Select an MSU (1-{vanilla})")

        index = self._read_index(vanilla)
        if index is None:
            return None
        if index <= len(msus):
            return [msus[index - 1]]
        if index == shuffle_all:
            return msus
        return []

    def _read_index(self, count: int) -> int | None:
        """Read a 1-based menu index, None when it is not in ``[1, count]``."""
        stream = self._input if self._input is not None else sys.stdin
        line = stream.readline()
        try:
            index = int(line.strip())
        except ValueError:
            index = 0

        if index < 1 or index > count:
            log.info("Invalid selection", answer=line.strip())
            return None
        return index
