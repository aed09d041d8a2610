"""MSU-related data models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class MsuType:
    """A family of games/ROM layouts that MSUs can target."""
    name: str
    display_name: str


@dataclass(frozen=True)
class Msu:
    """A collection of audio tracks found by the MSU randomizer service."""
    path: str
    name: str
    display_name: str
    num_unique_tracks: int
    msu_type_name: str | None = None
    compatible_type_names: tuple[str, ...] = ()


@dataclass(frozen=True)
class ShuffleRequest:
    """Request to build a shuffled MSU next to a staged ROM."""
    msus: list[Msu]
    output_msu_type: MsuType
    output_path: str
    empty_folder: bool = True
    open_folder: bool = False
    prev_msu: Msu | None = None
