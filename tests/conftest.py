"""Shared fixtures: fake cc65 toolchain binaries written as shell scripts."""

import stat
import sys
from pathlib import Path

import pytest

_SCRIPT = """#!/bin/sh
# Fake {name}: echo argv, honour FAKE_EXIT / FAKE_STDERR.
echo "{name} $*"
if [ -n "$FAKE_STDERR" ]; then
    echo "$FAKE_STDERR" >&2
fi
if [ "$1" = "--version" ]; then
    echo "{name} V2.19 - Git fake" >&2
fi
exit ${{FAKE_EXIT:-0}}
"""


def write_script(path: Path, body: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(body, encoding="utf-8")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture
def fake_home(tmp_path: Path) -> Path:
    """A CC65_HOME-style directory with bin/{cc65,ca65,ld65,co65}."""
    if sys.platform == "win32":
        pytest.skip("fake toolchain binaries are POSIX shell scripts")
    home = tmp_path / "cc65"
    for name in ("cc65", "ca65", "ld65", "co65"):
        write_script(home / "bin" / name, _SCRIPT.format(name=name))
    return home


@pytest.fixture
def make_script(tmp_path: Path):
    """Factory writing an executable ``#!/bin/sh`` script under tmp_path."""
    if sys.platform == "win32":
        pytest.skip("fake toolchain binaries are POSIX shell scripts")

    def _make(body: str, name: str = "tool") -> str:
        return str(write_script(tmp_path / name, "#!/bin/sh\n" + body))

    return _make
