"""Shared fixtures for the ROM launcher tests."""

from pathlib import Path

import pytest

from rom_launcher.models import Msu, MsuType, Settings, ShuffleRequest


class FakeMsuService:
    """In-memory stand-in for the MSU randomizer service."""

    def __init__(self, msu_types: list[MsuType] | None = None, msus: list[Msu] | None = None) -> None:
        self.msu_types: list[MsuType] = msu_types or []
        self.msus: list[Msu] = msus or []
        self.initialized = False
        self.lookups: list[str] = []
        self.shuffle_requests: list[ShuffleRequest] = []

    def initialize(self) -> None:
        self.initialized = True

    def get_msu_types(self) -> list[MsuType]:
        return list(self.msu_types)

    def lookup_msus(self, path: str) -> list[Msu]:
        self.lookups.append(path)
        return list(self.msus)

    def is_compatible(self, msu: Msu, msu_type: MsuType) -> bool:
        return msu.msu_type_name == msu_type.name or msu_type.name in msu.compatible_type_names

    def create_shuffled_msu(self, request: ShuffleRequest) -> None:
        self.shuffle_requests.append(request)


ALTTP = MsuType(name="alttp", display_name="A Link to the Past")
SMZ3 = MsuType(name="smz3", display_name="SMZ3 Combo Randomizer")
SUPER_METROID = MsuType(name="sm", display_name="Super Metroid")


def make_msu(display_name: str, tracks: int = 30, msu_type: MsuType = ALTTP, compatible: tuple[str, ...] = ()) -> Msu:
    name = display_name.lower().replace(" ", "-")
    return Msu(
        path=f"/msus/{name}/{name}.msu",
        name=name,
        display_name=display_name,
        num_unique_tracks=tracks,
        msu_type_name=msu_type.name,
        compatible_type_names=compatible,
    )


@pytest.fixture
def fake_msu_service() -> FakeMsuService:
    return FakeMsuService(
        msu_types=[ALTTP, SUPER_METROID, SMZ3],
        msus=[
            make_msu("Zelda Orchestral", tracks=61),
            make_msu("Chrono Trigger Remix", tracks=45),
            make_msu("Tiny Pack", tracks=10),
            make_msu("Metroid Prime Tracks", tracks=40, msu_type=SUPER_METROID),
            make_msu("Combo Pack", tracks=90, msu_type=SMZ3, compatible=("alttp", "sm")),
        ],
    )


@pytest.fixture
def source_rom(tmp_path: Path) -> Path:
    rom_dir = tmp_path / "roms"
    rom_dir.mkdir()
    rom = rom_dir / "zelda.sfc"
    rom.write_bytes(b"\x00\x01ROMDATA" * 64)
    return rom


@pytest.fixture
def target_dir(tmp_path: Path) -> Path:
    target = tmp_path / "target"
    target.mkdir()
    return target


@pytest.fixture
def msu_dir(tmp_path: Path) -> Path:
    msus = tmp_path / "msus"
    msus.mkdir()
    return msus


@pytest.fixture
def settings(target_dir: Path, msu_dir: Path) -> Settings:
    return Settings(msu_path=str(msu_dir), target_path=str(target_dir))
