"""Shared CLI utilities for the cc65wrap commands.

Provides the common Typer options, config loading, and the output / error
helpers so that every command reports failures the same way.

Usage in a command module::

    import typer
    from cc65wrap.cli import ConfigOption, error_exit, get_config

    app = typer.Typer()

    @app.command()
    def main(config: Path | None = ConfigOption) -> None:
        cfg = get_config(config)
        ...
"""

from __future__ import annotations

import json
from concurrent.futures import Future
from pathlib import Path
from typing import Any, NoReturn

import typer
from rich.console import Console
from rich.markup import escape

from cc65wrap.config import ProjectConfig, load_config
from cc65wrap.process import ToolError, ToolResult, spawn
from cc65wrap.toolchain import argv_for, command_line

ConfigOption: Path | None = typer.Option(
    None,
    "--config",
    "-c",
    help="Path to cc65wrap.toml (default: search upward from the current directory).",
)
DryRunOption: bool = typer.Option(False, "--dry-run", "-n", help="Print the command, do not run it.")
JsonOption: bool = typer.Option(False, "--json", help="Output the result as JSON.")
VerboseOption: bool = typer.Option(False, "--verbose", "-v", help="Echo the command before running.")

# ---------------------------------------------------------------------------
# Standardised output helpers
# ---------------------------------------------------------------------------

_err_console = Console(stderr=True, soft_wrap=True)


def error_exit(msg: str, *, json_mode: bool = False, code: int = 1) -> NoReturn:
    """Print *msg* as an error and ``raise typer.Exit(code)``."""
    if json_mode:
        print(json.dumps({"error": msg}, indent=2))
    else:
        _err_console.print(f"[red bold]error:[/red bold] {escape(msg)}", highlight=False)
    raise typer.Exit(code=code)


def json_print(data: dict[str, Any] | list[Any]) -> None:
    """Print *data* as pretty-printed JSON to stdout."""
    print(json.dumps(data, indent=2))


def info(msg: str) -> None:
    """Dim diagnostic line on stderr."""
    _err_console.print(msg, style="dim", markup=False, highlight=False)


def get_config(path: Path | None = None, *, json_mode: bool = False) -> ProjectConfig:
    """Load the project config, exiting cleanly on a broken file."""
    try:
        return load_config(path)
    except FileNotFoundError as exc:
        error_exit(str(exc), json_mode=json_mode)
    except KeyError as exc:
        error_exit(f"Invalid option in config: {exc.args[0]}", json_mode=json_mode)
    except ValueError as exc:
        # tomllib.TOMLDecodeError is a ValueError
        error_exit(f"Cannot parse config: {exc}", json_mode=json_mode)


def _print_result(result: ToolResult | ToolError) -> None:
    if result.stdout:
        typer.echo(result.stdout, nl=False)
    if result.stderr:
        typer.echo(result.stderr, nl=False, err=True)


def run_tool(
    cfg: ProjectConfig,
    tool: str,
    options: Any,
    *positionals: str,
    dry_run: bool = False,
    json_mode: bool = False,
    verbose: bool = False,
) -> ToolResult | None:
    """Run *tool* for a CLI command and print its outcome.

    With *dry_run* only the command line is printed.  A failing tool makes
    the command exit with the tool's own return code (``1`` if it had none).
    """
    try:
        command = command_line(tool, options, *positionals, toolchain=cfg.toolchain)
    except ValueError as exc:
        error_exit(str(exc), json_mode=json_mode)

    if dry_run:
        if json_mode:
            json_print({"command": command, "dry_run": True})
        else:
            typer.echo(command)
        return None

    if verbose and not json_mode:
        info(f"$ {command}")

    argv = argv_for(tool, options, *positionals, toolchain=cfg.toolchain)
    future: Future[ToolResult] = spawn(argv, env=cfg.toolchain.process_env())
    try:
        result = future.result()
    except ToolError as exc:
        code = exc.returncode if exc.returncode > 0 else 1
        if json_mode:
            json_print(exc.to_dict())
            raise typer.Exit(code=code) from exc
        _print_result(exc)
        error_exit(f"{tool} exited with code {exc.returncode}", code=code)

    if json_mode:
        json_print(result.to_dict())
    else:
        _print_result(result)
    return result
