"""Tests for the launcher run from settings to launch."""

import io
import os
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import yaml

from conftest import FakeMsuService
from rom_launcher.main import ApplicationContext, main, parse_arguments, run_launcher
from rom_launcher.models import Settings
from rom_launcher.services import MsuServiceError, ProcessLauncher


def write_settings(path: Path, settings: Settings) -> None:
    path.write_text(
        yaml.safe_dump({
            "MsuPath": settings.msu_path,
            "TargetPath": settings.target_path,
            "LaunchApplication": settings.launch_application,
            "LaunchArguments": settings.launch_arguments,
        }),
        encoding="utf-8",
    )


def make_context(
    tmp_path: Path,
    service: FakeMsuService,
    answers: str,
    launcher: ProcessLauncher | None = None,
) -> ApplicationContext:
    return ApplicationContext(
        settings_path=tmp_path / "rom-launcher.yml",
        log_dir=tmp_path / "logs",
        msu_service=service,
        launcher=launcher or MagicMock(spec=ProcessLauncher),
        input_stream=io.StringIO(answers),
        configure_logging=False,
    )


class TestRunLauncher:
    """Tests for run_launcher."""

    def test_first_run_only_creates_settings(
        self, tmp_path: Path, source_rom: Path, fake_msu_service: FakeMsuService
    ) -> None:
        context = make_context(tmp_path, fake_msu_service, "1\n1\n")

        with context:
            exit_code = run_launcher(context, source_rom)

        assert exit_code == 0
        assert (tmp_path / "rom-launcher.yml").is_file()
        assert not fake_msu_service.initialized
        context.launcher.launch.assert_not_called()

    def test_first_run_works_without_rom(self, tmp_path: Path, fake_msu_service: FakeMsuService) -> None:
        context = make_context(tmp_path, fake_msu_service, "")

        with context:
            assert run_launcher(context, None) == 0

        assert (tmp_path / "rom-launcher.yml").is_file()

    def test_missing_rom_argument_after_setup(
        self, tmp_path: Path, settings: Settings, fake_msu_service: FakeMsuService
    ) -> None:
        write_settings(tmp_path / "rom-launcher.yml", settings)
        context = make_context(tmp_path, fake_msu_service, "")

        with context, patch("rom_launcher.main.log"):
            assert run_launcher(context, None) == 2

    def test_single_msu_is_shuffled_then_launched(
        self,
        tmp_path: Path,
        source_rom: Path,
        target_dir: Path,
        settings: Settings,
        fake_msu_service: FakeMsuService,
    ) -> None:
        write_settings(tmp_path / "rom-launcher.yml", settings)
        # Type 1 (A Link to the Past), then "3) Zelda Orchestral"
        context = make_context(tmp_path, fake_msu_service, "1\n3\n")

        with context:
            assert run_launcher(context, source_rom) == 0

        staged = target_dir.resolve() / "zelda" / "zelda.sfc"
        assert fake_msu_service.initialized
        assert len(fake_msu_service.shuffle_requests) == 1
        request = fake_msu_service.shuffle_requests[0]
        assert [m.display_name for m in request.msus] == ["Zelda Orchestral"]
        assert request.output_msu_type.name == "alttp"
        assert request.output_path == str(staged)
        context.launcher.launch.assert_called_once_with(staged, None, None)
        context.launcher.detach.assert_called_once()

    def test_shuffle_all_passes_every_compatible_msu(
        self, tmp_path: Path, source_rom: Path, settings: Settings, fake_msu_service: FakeMsuService
    ) -> None:
        write_settings(tmp_path / "rom-launcher.yml", settings)
        context = make_context(tmp_path, fake_msu_service, "1\n4\n")

        with context:
            assert run_launcher(context, source_rom) == 0

        request = fake_msu_service.shuffle_requests[0]
        assert [m.display_name for m in request.msus] == [
            "Chrono Trigger Remix",
            "Combo Pack",
            "Zelda Orchestral",
        ]

    def test_vanilla_skips_shuffle_and_launches_staged_copy(
        self,
        tmp_path: Path,
        source_rom: Path,
        target_dir: Path,
        settings: Settings,
        fake_msu_service: FakeMsuService,
    ) -> None:
        launch_settings = Settings(
            msu_path=settings.msu_path,
            target_path=settings.target_path,
            launch_application="emulator",
            launch_arguments="-x %rom%",
        )
        write_settings(tmp_path / "rom-launcher.yml", launch_settings)
        context = make_context(tmp_path, fake_msu_service, "1\n5\n")

        with context:
            assert run_launcher(context, source_rom) == 0

        staged = target_dir.resolve() / "zelda" / "zelda.sfc"
        assert fake_msu_service.shuffle_requests == []
        assert staged.read_bytes() == source_rom.read_bytes()
        context.launcher.launch.assert_called_once_with(staged, "emulator", "-x %rom%")

    def test_vanilla_with_real_launcher_spawns_emulator(
        self,
        tmp_path: Path,
        source_rom: Path,
        target_dir: Path,
        settings: Settings,
        fake_msu_service: FakeMsuService,
    ) -> None:
        launch_settings = Settings(
            msu_path=settings.msu_path,
            target_path=settings.target_path,
            launch_application="emulator",
        )
        write_settings(tmp_path / "rom-launcher.yml", launch_settings)
        context = make_context(tmp_path, fake_msu_service, "1\n5\n", launcher=ProcessLauncher())

        with context, \
                patch("rom_launcher.services.launcher.subprocess.Popen") as mock_popen, \
                patch("rom_launcher.services.launcher.time.sleep") as mock_sleep:
            assert run_launcher(context, source_rom) == 0

        staged = target_dir.resolve() / "zelda" / "zelda.sfc"
        mock_popen.assert_called_once()
        if os.name != "nt":
            assert mock_popen.call_args.args[0] == ["emulator", str(staged)]
        mock_sleep.assert_called_once_with(2.0)

    def test_missing_source_rom_stops_before_menus(
        self, tmp_path: Path, settings: Settings, fake_msu_service: FakeMsuService
    ) -> None:
        write_settings(tmp_path / "rom-launcher.yml", settings)
        context = make_context(tmp_path, fake_msu_service, "1\n1\n")

        with context:
            assert run_launcher(context, tmp_path / "missing.sfc") == 0

        assert fake_msu_service.lookups == []
        assert fake_msu_service.shuffle_requests == []
        context.launcher.launch.assert_not_called()

    @pytest.mark.parametrize("answers", ["0\n", "abc\n", "4\n", ""])
    def test_invalid_type_selection_aborts(
        self,
        tmp_path: Path,
        source_rom: Path,
        settings: Settings,
        fake_msu_service: FakeMsuService,
        answers: str,
    ) -> None:
        write_settings(tmp_path / "rom-launcher.yml", settings)
        context = make_context(tmp_path, fake_msu_service, answers)

        with context:
            assert run_launcher(context, source_rom) == 0

        assert fake_msu_service.lookups == []
        context.launcher.launch.assert_not_called()

    @pytest.mark.parametrize("answers", ["1\n6\n", "1\n-1\n", "1\nvanilla\n"])
    def test_invalid_msu_selection_aborts(
        self,
        tmp_path: Path,
        source_rom: Path,
        settings: Settings,
        fake_msu_service: FakeMsuService,
        answers: str,
    ) -> None:
        write_settings(tmp_path / "rom-launcher.yml", settings)
        context = make_context(tmp_path, fake_msu_service, answers)

        with context:
            assert run_launcher(context, source_rom) == 0

        assert fake_msu_service.shuffle_requests == []
        context.launcher.launch.assert_not_called()

    def test_shuffle_failure_propagates(
        self, tmp_path: Path, source_rom: Path, settings: Settings, fake_msu_service: FakeMsuService
    ) -> None:
        write_settings(tmp_path / "rom-launcher.yml", settings)
        fake_msu_service.create_shuffled_msu = MagicMock(side_effect=MsuServiceError("shuffle failed"))
        context = make_context(tmp_path, fake_msu_service, "1\n1\n")

        with context, pytest.raises(MsuServiceError):
            _ = run_launcher(context, source_rom)

        context.launcher.launch.assert_not_called()


class TestMain:
    """Tests for the command-line entry point."""

    def test_parse_arguments_takes_single_rom(self) -> None:
        assert parse_arguments(["game.sfc"]).rom == Path("game.sfc")
        assert parse_arguments([]).rom is None

    def test_parse_arguments_rejects_flags(self) -> None:
        with pytest.raises(SystemExit):
            _ = parse_arguments(["--log-level", "DEBUG", "game.sfc"])

    def test_bootstrap_run_exits_cleanly(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
        monkeypatch.setenv("LOCALAPPDATA", str(tmp_path / "data"))

        with pytest.raises(SystemExit) as exc_info:
            main(["game.sfc"])

        assert exc_info.value.code == 0
        assert (tmp_path / "rom-launcher.yml").is_file()
        assert (tmp_path / "data" / "RomLauncher" / "rom-launcher.log").is_file()

    def test_broken_settings_exit_with_error(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
        monkeypatch.setenv("LOCALAPPDATA", str(tmp_path / "data"))
        (tmp_path / "rom-launcher.yml").write_text("MsuPath: [oops\n", encoding="utf-8")

        with pytest.raises(SystemExit) as exc_info:
            main(["game.sfc"])

        assert exc_info.value.code == 1
        assert "Fatal error" in capsys.readouterr().err
