"""Project configuration loader for cc65wrap.

Reads ``cc65wrap.toml`` from the project root and exposes where the cc65
binaries live plus per-tool default options, so that repeated invocations
do not have to spell out ``--target c64 -I include`` every time.

Example::

    [toolchain]
    home = "/usr/share/cc65"     # or set CC65_HOME
    bin_dir = "bin"

    [compiler]
    target = "c64"
    optimizer = "ir"
    include-dirs = ["include"]

    [linker]
    target = "c64"
    libs = ["c64.lib"]

Usage::

    from cc65wrap.config import load_config
    cfg = load_config()
    cfg.toolchain.command("cc65")   # ["/usr/share/cc65/bin/cc65"]
"""

from __future__ import annotations

import os
import shlex
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from cc65wrap.options import (
    AssemblerOptions,
    CompilerOptions,
    LinkerOptions,
    ObjectToolOptions,
    OptionsT,
    from_mapping,
)

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

CONFIG_FILENAME = "cc65wrap.toml"
TOOLS = ("cc65", "ca65", "ld65", "co65")

# Config section holding default options for each tool.
TOOL_SECTIONS = {
    "cc65": "compiler",
    "ca65": "assembler",
    "ld65": "linker",
    "co65": "objtool",
}


@dataclass
class Toolchain:
    """Locations of the four cc65 binaries."""

    root: Path = field(default_factory=Path.cwd)
    home: Path | None = None
    bin_dir: str = "bin"
    commands: dict[str, str] = field(default_factory=dict)
    env: dict[str, str] = field(default_factory=dict)

    def command(self, tool: str) -> list[str]:
        """Return the argv prefix used to run *tool*.

        Resolution order: explicit ``[toolchain] <tool> = "..."`` override
        (ignored when blank), then ``<home>/<bin_dir>/<tool>`` if that file exists, then the bare
        name (looked up on ``PATH`` by the OS).
        """
        override = self.commands.get(tool, "")
        try:
            parts = shlex.split(override)
        except ValueError:
            parts = override.split()
        if parts:
            exe = Path(parts[0])
            # Only path-like commands are anchored to the project root.
            if not exe.is_absolute() and len(exe.parts) > 1:
                parts[0] = str(self.root / exe)
            return parts

        if self.home is not None:
            candidate = self.home / self.bin_dir / tool
            if candidate.exists():
                return [str(candidate)]
        return [tool]

    def process_env(self) -> dict[str, str] | None:
        """Environment for spawned tools, or ``None`` to inherit unchanged."""
        if not self.env and self.home is None:
            return None
        env = dict(os.environ)
        if self.home is not None:
            env["CC65_HOME"] = str(self.home)
        env.update(self.env)
        return env


@dataclass
class ProjectConfig:
    """Parsed ``cc65wrap.toml``."""

    root: Path
    path: Path | None = None
    toolchain: Toolchain = field(default_factory=Toolchain)
    compiler: CompilerOptions = field(default_factory=CompilerOptions)
    assembler: AssemblerOptions = field(default_factory=AssemblerOptions)
    linker: LinkerOptions = field(default_factory=LinkerOptions)
    objtool: ObjectToolOptions = field(default_factory=ObjectToolOptions)

    def defaults_for(self, tool: str) -> Any:
        """Return the default option record for *tool* (``cc65``, ``ld65``, ...)."""
        return getattr(self, TOOL_SECTIONS[tool])


def _resolve(root: Path, rel: str | None) -> Path | None:
    """Resolve a path relative to project root."""
    if rel is None:
        return None
    p = Path(rel).expanduser()
    if p.is_absolute():
        return p
    return root / p


def _find_root(start: Path | None = None) -> Path | None:
    """Walk up from *start* (or cwd) to the directory holding cc65wrap.toml."""
    candidate = (start or Path.cwd()).resolve()
    while True:
        if (candidate / CONFIG_FILENAME).exists():
            return candidate
        if candidate == candidate.parent:
            return None
        candidate = candidate.parent


def _home_from_env() -> Path | None:
    home = os.environ.get("CC65_HOME")
    return Path(home) if home else None


def _table(raw: dict[str, Any], name: str, label: str = "") -> dict[str, Any]:
    value = raw.get(name, {})
    if not isinstance(value, dict):
        raise ValueError(f"[{label or name}] must be a table, got {type(value).__name__}")
    return value


def _section(cls: type[OptionsT], raw: dict[str, Any], name: str) -> OptionsT:
    try:
        return from_mapping(cls, _table(raw, name))
    except TypeError as exc:
        raise ValueError(f"Invalid value in [{name}]: {exc}") from exc


def parse_config(raw: dict[str, Any], root: Path, path: Path | None = None) -> ProjectConfig:
    """Build a :class:`ProjectConfig` from an already-parsed TOML dict.

    Raises:
        KeyError: If a tool section contains an unknown option.
        ValueError: If a section is not a table or an option has a value
            of the wrong type.
    """
    tc = _table(raw, "toolchain")
    env = _table(tc, "env", "toolchain.env")
    home = tc.get("home")
    bin_dir = tc.get("bin_dir", tc.get("bin-dir", "bin"))
    for key, value in (("home", home), ("bin_dir", bin_dir)):
        if value is not None and not isinstance(value, str):
            raise ValueError(f"[toolchain] {key} must be a string, got {type(value).__name__}")
    toolchain = Toolchain(
        root=root,
        home=_resolve(root, home) or _home_from_env(),
        bin_dir=bin_dir,
        commands={tool: str(tc[tool]) for tool in TOOLS if tool in tc},
        env={str(k): str(v) for k, v in env.items()},
    )
    return ProjectConfig(
        root=root,
        path=path,
        toolchain=toolchain,
        compiler=_section(CompilerOptions, raw, "compiler"),
        assembler=_section(AssemblerOptions, raw, "assembler"),
        linker=_section(LinkerOptions, raw, "linker"),
        objtool=_section(ObjectToolOptions, raw, "objtool"),
    )


def load_config(
    path: Path | None = None,
    *,
    root: Path | None = None,
    required: bool = False,
) -> ProjectConfig:
    """Load ``cc65wrap.toml``.

    Args:
        path: Explicit config file.  When ``None`` the file is searched for
            upward from *root* (or the current directory).
        root: Directory to start the search from.
        required: Raise instead of returning defaults when no file exists.

    Raises:
        FileNotFoundError: *path* does not exist, or nothing was found and
            *required* is set.
    """
    if path is not None:
        if not path.exists():
            raise FileNotFoundError(f"Config not found: {path}")
        toml_path = path.resolve()
    else:
        found = _find_root(root)
        if found is None:
            if required:
                raise FileNotFoundError(
                    f"Could not find {CONFIG_FILENAME} in any parent of the current directory. "
                    "Run 'cc65wrap init' to create one."
                )
            base = (root or Path.cwd()).resolve()
            return ProjectConfig(root=base, toolchain=Toolchain(root=base, home=_home_from_env()))
        toml_path = found / CONFIG_FILENAME

    with open(toml_path, "rb") as f:
        raw = tomllib.load(f)
    return parse_config(raw, toml_path.parent, toml_path)
