"""Tests for the compile / assemble / link / convert commands."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from cc65wrap.assemble import app as assemble_app
from cc65wrap.compile import app as compile_app
from cc65wrap.config import CONFIG_FILENAME
from cc65wrap.convert import app as convert_app
from cc65wrap.link import app as link_app

runner = CliRunner()


def _write_config(tmp_path: Path, home: Path, body: str = "") -> Path:
    path = tmp_path / CONFIG_FILENAME
    path.write_text(f'[toolchain]\nhome = "{home}"\n\n{body}', encoding="utf-8")
    return path


class TestCompileCommand:
    def test_dry_run_uses_config_defaults(self, tmp_path: Path, fake_home: Path) -> None:
        cfg = _write_config(tmp_path, fake_home, '[compiler]\ntarget = "c64"\ndefine = ["BASE"]\n')
        result = runner.invoke(compile_app, ["main.c", "-D", "DEBUG", "-O", "ir", "-c", str(cfg), "-n"])
        assert result.exit_code == 0, result.output
        assert result.output.strip() == (
            f"{fake_home}/bin/cc65 --target c64 -D BASE -D DEBUG -Oir main.c"
        )

    def test_cli_target_overrides_config(self, tmp_path: Path, fake_home: Path) -> None:
        cfg = _write_config(tmp_path, fake_home, '[compiler]\ntarget = "c64"\n')
        result = runner.invoke(compile_app, ["main.c", "-t", "apple2", "-c", str(cfg), "-n"])
        assert "--target apple2" in result.output
        assert "c64" not in result.output

    def test_runs_tool(self, tmp_path: Path, fake_home: Path) -> None:
        cfg = _write_config(tmp_path, fake_home)
        result = runner.invoke(compile_app, ["main.c", "-g", "-o", "main.s", "-c", str(cfg)])
        assert result.exit_code == 0, result.output
        assert "cc65 --debug-info --output-file main.s main.c" in result.output

    def test_json(self, tmp_path: Path, fake_home: Path) -> None:
        cfg = _write_config(tmp_path, fake_home)
        result = runner.invoke(compile_app, ["main.c", "-c", str(cfg), "--json"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["returncode"] == 0
        assert data["stdout"] == "cc65 main.c\n"

    def test_tool_failure_exit_code(
        self, tmp_path: Path, fake_home: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("FAKE_EXIT", "4")
        cfg = _write_config(tmp_path, fake_home)
        result = runner.invoke(compile_app, ["main.c", "-c", str(cfg)])
        assert result.exit_code == 4
        assert "cc65 exited with code 4" in result.output


class TestAssembleCommand:
    def test_features_and_listing(self, tmp_path: Path, fake_home: Path) -> None:
        cfg = _write_config(tmp_path, fake_home, '[assembler]\nfeatures = ["c_comments"]\n')
        result = runner.invoke(
            assemble_app,
            ["crt0.s", "--feature", "dollar_is_pc", "-l", "crt0.lst", "-I", "asminc", "-c", str(cfg), "-n"],
        )
        assert result.exit_code == 0, result.output
        assert result.output.strip() == (
            f"{fake_home}/bin/ca65 --listing crt0.lst -I asminc "
            "--feature c_comments --feature dollar_is_pc crt0.s"
        )


class TestLinkCommand:
    def test_no_positional_files(self, tmp_path: Path, fake_home: Path) -> None:
        cfg = _write_config(tmp_path, fake_home)
        result = runner.invoke(link_app, ["--lib", "c", "--obj", "main.o", "-c", str(cfg), "-n"])
        assert result.exit_code == 0, result.output
        assert result.output.strip() == f"{fake_home}/bin/ld65 --lib c --obj main.o"

    def test_files_and_options(self, tmp_path: Path, fake_home: Path) -> None:
        cfg = _write_config(tmp_path, fake_home, '[linker]\ntarget = "c64"\nlibs = ["c64.lib"]\n')
        result = runner.invoke(
            link_app, ["main.o", "crt0.o", "-o", "game.prg", "-m", "game.map", "-c", str(cfg)]
        )
        assert result.exit_code == 0, result.output
        assert (
            "ld65 --mapfile game.map --output-name game.prg --target c64 --lib c64.lib main.o crt0.o"
            in result.output
        )


class TestConvertCommand:
    def test_dry_run(self, tmp_path: Path, fake_home: Path) -> None:
        cfg = _write_config(tmp_path, fake_home)
        result = runner.invoke(
            convert_app, ["drv.o65", "-m", "cc65-module", "--code-label", "_drv", "-c", str(cfg), "-n"]
        )
        assert result.exit_code == 0, result.output
        assert result.output.strip() == (
            f"{fake_home}/bin/co65 --code-label _drv --o65-model cc65-module drv.o65"
        )

    def test_missing_config_file(self, tmp_path: Path) -> None:
        result = runner.invoke(convert_app, ["drv.o65", "-c", str(tmp_path / "nope.toml")])
        assert result.exit_code == 1
        assert "Config not found" in result.output

    def test_bad_config_value(self, tmp_path: Path, fake_home: Path) -> None:
        cfg = _write_config(tmp_path, fake_home, '[objtool]\no65-model = "lunix"\n\n[linker]\nobjs = 7\n')
        result = runner.invoke(convert_app, ["drv.o65", "-c", str(cfg), "-n"])
        assert result.exit_code == 1
        assert "Invalid value in [linker]" in result.output
