"""Assemble a source file with ca65.

Usage::

    cc65wrap assemble crt0.s
    cc65wrap assemble main.s -t c64 --feature c_comments -l
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
from cc65wrap.options import AssemblerOptions, merge_options

_EPILOG = """\
[bold]Examples:[/bold]

cc65wrap assemble main.s                          Defaults from \\[assembler] in cc65wrap.toml

cc65wrap assemble main.s --cpu 65C02 -o main.o    CPU and output object

cc65wrap assemble main.s --feature c_comments     Enable an assembler feature (repeatable)

[dim]Features: at_in_identifiers, c_comments, dollar_in_identifiers, dollar_is_pc,
labels_without_colons, leading_dot_in_identifiers, loose_char_term, loose_string_term,
missing_char_term, org_per_seg, pc_assignment, ubiquitous_idents[/dim]"""

app = typer.Typer(
    help="Assemble 6502 source to an object file with ca65.",
    rich_markup_mode="rich",
    epilog=_EPILOG,
)


@app.command()
def main(
    source: str = typer.Argument(help="Assembler source file"),
    define: list[str] = typer.Option([], "--define", "-D", help="Define a symbol (repeatable)"),
    include_dir: list[str] = typer.Option([], "--include-dir", "-I", help="Include directory (repeatable)"),
    feature: list[str] = typer.Option([], "--feature", help="Assembler feature (repeatable)"),
    target: str | None = typer.Option(None, "--target", "-t", help="Target system, e.g. c64"),
    output: str | None = typer.Option(None, "--output", "-o", help="Output object file"),
    cpu: str | None = typer.Option(None, "--cpu", help="6502, 65SC02, 65C02, 65816, sunplus, sweet16, HuC6280"),
    listing: str | None = typer.Option(None, "--listing", "-l", help="Write a listing file"),
    debug_info: bool = typer.Option(False, "--debug-info", "-g", help="Add debug info to the object"),
    config: Path | None = ConfigOption,
    dry_run: bool = DryRunOption,
    json_output: bool = JsonOption,
    verbose: bool = VerboseOption,
) -> None:
    """Assemble SOURCE with ca65."""
    cfg = get_config(config, json_mode=json_output)
    override = AssemblerOptions(
        target=target,
        output_file=output,
        cpu=cpu,
        listing=listing,
        debug_info=debug_info or None,
        define=list(define),
        include_dirs=list(include_dir),
        features=list(feature),
    )
    options = merge_options(cfg.assembler, override)
    run_tool(cfg, "ca65", options, source, dry_run=dry_run, json_mode=json_output, verbose=verbose)


def main_entry() -> None:
    """Run the Typer CLI application."""
    app()


if __name__ == "__main__":
    main_entry()
