"""toolchain.py - One call per cc65 tool.

Each entry point renders its option record with :mod:`cc65wrap.argv` and
starts the binary through :func:`cc65wrap.process.spawn`::

    from cc65wrap import cc65, ld65

    fut = cc65({"checkStack": True, "define": ["DEBUG"], "optimizer": "s"}, "main.c")
    fut.result()                                  # ToolResult, or raises ToolError

    ld65({"libs": ["c64.lib"], "objs": ["main.o"]}).result()

Options may be the typed record or a mapping using the camelCase
keys.  ``toolchain=`` picks the binaries; by default the bare tool names are
resolved on ``PATH``.

The entry points never raise: an unknown option key or a badly typed value
fails the returned Future with :class:`~cc65wrap.process.ToolError` (return
code 2) without starting anything.
"""

from __future__ import annotations

from collections.abc import Mapping
from concurrent.futures import Future
from typing import Any

from cc65wrap.argv import (
    TokenGroups,
    assembler_args,
    compiler_args,
    flatten,
    join_command,
    linker_args,
    objtool_args,
)
from cc65wrap.config import Toolchain
from cc65wrap.options import (
    AssemblerOptions,
    CompilerOptions,
    LinkerOptions,
    ObjectToolOptions,
    coerce_options,
)
from cc65wrap.process import USAGE_RETURNCODE, ToolResult, failed, spawn


def render(tool: str, options: Any, *positionals: str) -> TokenGroups:
    """Render the token groups for *tool* without its binary.

    Raises:
        ValueError: Unknown tool name, or the wrong number of positionals.
    """
    if tool == "ld65":
        return linker_args(coerce_options(LinkerOptions, options), *positionals)
    if len(positionals) != 1:
        raise ValueError(f"{tool} takes exactly one filename, got {len(positionals)}")
    filename = positionals[0]
    if tool == "cc65":
        return compiler_args(coerce_options(CompilerOptions, options), filename)
    if tool == "ca65":
        return assembler_args(coerce_options(AssemblerOptions, options), filename)
    if tool == "co65":
        return objtool_args(coerce_options(ObjectToolOptions, options), filename)
    raise ValueError(f"Unknown tool: {tool!r}")


def argv_for(tool: str, options: Any, *positionals: str, toolchain: Toolchain | None = None) -> list[str]:
    """Full argv (binary included) for *tool*."""
    tc = toolchain or Toolchain()
    return tc.command(tool) + flatten(render(tool, options, *positionals))


def command_line(
    tool: str, options: Any, *positionals: str, toolchain: Toolchain | None = None
) -> str:
    """The space-joined command string, without running anything."""
    tc = toolchain or Toolchain()
    return join_command(tc.command(tool), render(tool, options, *positionals))


def _start(tool: str, options: Any, positionals: tuple[str, ...], toolchain: Toolchain | None) -> Future[ToolResult]:
    tc = toolchain or Toolchain()
    try:
        argv = argv_for(tool, options, *positionals, toolchain=tc)
    except (KeyError, TypeError, ValueError) as exc:
        # Bad options fail the Future, same as a failing tool.
        reason = exc.args[0] if exc.args else str(exc)
        return failed(" ".join(tc.command(tool)), USAGE_RETURNCODE, str(reason))
    return spawn(argv, env=tc.process_env())


def cc65(
    options: CompilerOptions | Mapping[str, Any] | None,
    filename: str,
    *,
    toolchain: Toolchain | None = None,
) -> Future[ToolResult]:
    """Compile *filename* with cc65."""
    return _start("cc65", options, (filename,), toolchain)


def ca65(
    options: AssemblerOptions | Mapping[str, Any] | None,
    filename: str,
    *,
    toolchain: Toolchain | None = None,
) -> Future[ToolResult]:
    """Assemble *filename* with ca65."""
    return _start("ca65", options, (filename,), toolchain)


def ld65(
    options: LinkerOptions | Mapping[str, Any] | None,
    *filenames: str,
    toolchain: Toolchain | None = None,
) -> Future[ToolResult]:
    """Link with ld65; *filenames* may be empty when ``objs`` are given."""
    return _start("ld65", options, filenames, toolchain)


def co65(
    options: ObjectToolOptions | Mapping[str, Any] | None,
    filename: str,
    *,
    toolchain: Toolchain | None = None,
) -> Future[ToolResult]:
    """Convert the o65 object *filename* with co65."""
    return _start("co65", options, (filename,), toolchain)
