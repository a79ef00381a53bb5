"""argv.py - Render option records into cc65 toolchain command lines.

Every function here is pure: no I/O, no validation.  Token groups are kept as
``list[list[str]]`` (a flag and its value stay together) until
:func:`flatten` or :func:`join_command` is applied.

Rendering order for every tool::

    generic flags (field-table order) -> repeated list flags -> optimizer -> positionals
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from cc65wrap.options import (
    AssemblerOptions,
    CompilerOptions,
    LinkerOptions,
    ObjectToolOptions,
    Optimizer,
    OptimizerEnabled,
    ToolOptions,
    iter_fields,
    kebab_flag,
)

TokenGroups = list[list[str]]

__all__ = [
    "TokenGroups",
    "assembler_args",
    "compiler_args",
    "flatten",
    "join_command",
    "kebab_flag",
    "linker_args",
    "objtool_args",
    "render_fields",
    "render_optimizer",
    "render_repeated",
]


def render_value(flag: str, value: Any) -> list[str] | None:
    """Render one generic field, or ``None`` when it is unset."""
    if value is None or value is False:
        return None
    if value is True:
        return [flag]
    return [flag, str(value)]


def render_fields(options: ToolOptions) -> TokenGroups:
    """Render the boolean and scalar fields of *options* in table order."""
    groups: TokenGroups = []
    for opt, value in iter_fields(options, ("bool", "scalar")):
        group = render_value(opt.flag, value)
        if group is not None:
            groups.append(group)
    return groups


def render_repeated(flag: str, values: Iterable[Any]) -> TokenGroups:
    """One ``[flag, value]`` group per element, in order."""
    return [[flag, str(v)] for v in values]


def render_optimizer(optimizer: Optimizer) -> TokenGroups:
    """``-O`` plus the settings letters glued together, or nothing."""
    if not isinstance(optimizer, OptimizerEnabled):
        return []
    return [["-O" + "".join(optimizer.settings)]]


def render_options(options: ToolOptions) -> TokenGroups:
    """Render every field of *options*: generic, then lists, then optimizer."""
    groups = render_fields(options)
    for opt, values in iter_fields(options, ("list",)):
        groups.extend(render_repeated(opt.flag, values or ()))
    for _opt, optimizer in iter_fields(options, ("optimizer",)):
        groups.extend(render_optimizer(optimizer))
    return groups


# ---------------------------------------------------------------------------
# Per-tool entry points
# ---------------------------------------------------------------------------


def compiler_args(options: CompilerOptions, filename: str) -> TokenGroups:
    """``[--flag [value]]... [-D v]... [-I v]... [-O<settings>] <filename>``"""
    return [*render_options(options), [filename]]


def assembler_args(options: AssemblerOptions, filename: str) -> TokenGroups:
    """``[--flag [value]]... [-D v]... [-I v]... [--feature f]... <filename>``"""
    return [*render_options(options), [filename]]


def linker_args(options: LinkerOptions, *filenames: str) -> TokenGroups:
    """Linker flags followed by zero or more positional files."""
    return [*render_options(options), *([f] for f in filenames)]


def objtool_args(options: ObjectToolOptions, filename: str) -> TokenGroups:
    """``[--flag [value]]... <filename>``"""
    return [*render_options(options), [filename]]


# ---------------------------------------------------------------------------
# Joining
# ---------------------------------------------------------------------------


def flatten(groups: Iterable[Sequence[str]]) -> list[str]:
    """Concatenate token groups into one argv list."""
    return [token for group in groups for token in group]


def join_command(binary: str | Sequence[str], groups: Iterable[Sequence[str]]) -> str:
    """Join *binary* and all tokens with single spaces.

    Nothing is quoted; the string is for display.  Execution goes through
    :func:`cc65wrap.process.spawn` with the unjoined token list.
    """
    prefix = [binary] if isinstance(binary, str) else list(binary)
    return " ".join(prefix + flatten(groups))
