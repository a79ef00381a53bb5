"""Link object files with ld65.

Usage::

    cc65wrap link main.o crt0.o --lib c64.lib -o game.prg
    cc65wrap link --obj main.o -C c64.cfg -m game.map
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
from cc65wrap.options import LinkerOptions, merge_options

_EPILOG = """\
[bold]Examples:[/bold]

cc65wrap link main.o --lib c64.lib -o game.prg     Link against the C64 runtime

cc65wrap link --obj main.o -C c64.cfg              Explicit linker config, objects via --obj

cc65wrap link main.o -t sim6502 -n                 Print the ld65 command only

[dim]Defaults come from \\[linker] in cc65wrap.toml; list options are appended.[/dim]"""

app = typer.Typer(
    help="Link object files and libraries with ld65.",
    rich_markup_mode="rich",
    epilog=_EPILOG,
)


@app.command()
def main(
    files: list[str] = typer.Argument(None, help="Object files and libraries"),
    obj: list[str] = typer.Option([], "--obj", help="Object file (repeatable)"),
    lib: list[str] = typer.Option([], "--lib", help="Library (repeatable)"),
    lib_path: list[str] = typer.Option([], "--lib-path", help="Library search path (repeatable)"),
    obj_path: list[str] = typer.Option([], "--obj-path", help="Object search path (repeatable)"),
    define: list[str] = typer.Option([], "--define", "-D", help="Define a symbol, e.g. NAME=VALUE (repeatable)"),
    force_import: list[str] = typer.Option([], "--force-import", help="Force an import of a symbol (repeatable)"),
    target: str | None = typer.Option(None, "--target", "-t", help="Linker target, e.g. c64"),
    output: str | None = typer.Option(None, "--output", "-o", help="Output binary"),
    cfg_path: str | None = typer.Option(None, "--cfg", "-C", help="Linker configuration file"),
    mapfile: str | None = typer.Option(None, "--mapfile", "-m", help="Write a map file"),
    dbgfile: str | None = typer.Option(None, "--dbgfile", help="Write a debug info file"),
    config: Path | None = ConfigOption,
    dry_run: bool = DryRunOption,
    json_output: bool = JsonOption,
    verbose: bool = VerboseOption,
) -> None:
    """Link FILES with ld65."""
    cfg = get_config(config, json_mode=json_output)
    override = LinkerOptions(
        target=target,
        output_name=output,
        cfg_path=cfg_path,
        mapfile=mapfile,
        dbgfile=dbgfile,
        define=list(define),
        force_import=list(force_import),
        lib_paths=list(lib_path),
        libs=list(lib),
        obj_paths=list(obj_path),
        objs=list(obj),
    )
    options = merge_options(cfg.linker, override)
    run_tool(
        cfg, "ld65", options, *(files or []), dry_run=dry_run, json_mode=json_output, verbose=verbose
    )


def main_entry() -> None:
    """Run the Typer CLI application."""
    app()


if __name__ == "__main__":
    main_entry()
