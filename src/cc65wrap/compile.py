"""Compile a C source file with cc65.

Usage::

    cc65wrap compile main.c
    cc65wrap compile main.c -t c64 -O ir -D DEBUG -I include
    cc65wrap compile main.c --dry-run
"""

from pathlib import Path

import typer

from cc65wrap.cli import (
    ConfigOption,
    DryRunOption,
    JsonOption,
    VerboseOption,
    get_config,
    run_tool,
)
from cc65wrap.options import CompilerOptions, OptimizerEnabled, merge_options

_EPILOG = """\
[bold]Examples:[/bold]

cc65wrap compile main.c                    Defaults from \\[compiler] in cc65wrap.toml

cc65wrap compile main.c -t c64 -O ir       Target C64, optimizer with -Oir

cc65wrap compile main.c -D DEBUG -I inc    Add a define and an include directory

cc65wrap compile main.c -n                 Print the cc65 command only"""

app = typer.Typer(
    help="Compile C source to 6502 assembly with cc65.",
    rich_markup_mode="rich",
    epilog=_EPILOG,
)


@app.command()
def main(
    source: str = typer.Argument(help="C source file"),
    define: list[str] = typer.Option([], "--define", "-D", help="Define a macro (repeatable)"),
    include_dir: list[str] = typer.Option([], "--include-dir", "-I", help="Include directory (repeatable)"),
    target: str | None = typer.Option(None, "--target", "-t", help="Target system, e.g. c64"),
    output: str | None = typer.Option(None, "--output", "-o", help="Output assembly file"),
    optimize: str | None = typer.Option(
        None, "--optimize", "-O", help="Enable the optimizer with settings letters i, r, s ('' for a bare -O)"
    ),
    cpu: str | None = typer.Option(None, "--cpu", help="6502 or 65C02"),
    debug_info: bool = typer.Option(False, "--debug-info", "-g", help="Add debug info to the object"),
    config: Path | None = ConfigOption,
    dry_run: bool = DryRunOption,
    json_output: bool = JsonOption,
    verbose: bool = VerboseOption,
) -> None:
    """Compile SOURCE with cc65."""
    cfg = get_config(config, json_mode=json_output)
    override = CompilerOptions(
        target=target,
        output_file=output,
        cpu=cpu,
        debug_info=debug_info or None,
        define=list(define),
        include_dirs=list(include_dir),
    )
    if optimize is not None:
        override.optimizer = OptimizerEnabled(settings=tuple(optimize))  # type: ignore[arg-type]
    options = merge_options(cfg.compiler, override)
    run_tool(cfg, "cc65", options, source, dry_run=dry_run, json_mode=json_output, verbose=verbose)


def main_entry() -> None:
    """Run the Typer CLI application."""
    app()


if __name__ == "__main__":
    main_entry()
