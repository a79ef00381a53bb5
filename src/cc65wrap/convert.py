"""Convert an o65 object file to ca65 assembler source with co65.

Usage::

    cc65wrap convert driver.o65 -o driver.s
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
from cc65wrap.options import ObjectToolOptions, merge_options

app = typer.Typer(
    help="Convert o65 object files with co65.",
    rich_markup_mode="rich",
)


@app.command()
def main(
    source: str = typer.Argument(help="o65 object file"),
    output: str | None = typer.Option(None, "--output", "-o", help="Output assembler file"),
    o65_model: str | None = typer.Option(None, "--o65-model", "-m", help="lunix, os/a65 or cc65-module"),
    code_label: str | None = typer.Option(None, "--code-label", help="Label for the code segment"),
    data_label: str | None = typer.Option(None, "--data-label", help="Label for the data segment"),
    bss_label: str | None = typer.Option(None, "--bss-label", help="Label for the bss segment"),
    zeropage_label: str | None = typer.Option(None, "--zeropage-label", help="Label for the zeropage segment"),
    config: Path | None = ConfigOption,
    dry_run: bool = DryRunOption,
    json_output: bool = JsonOption,
    verbose: bool = VerboseOption,
) -> None:
    """Convert SOURCE with co65."""
    cfg = get_config(config, json_mode=json_output)
    override = ObjectToolOptions(
        output_name=output,
        o65_model=o65_model,
        code_label=code_label,
        data_label=data_label,
        bss_label=bss_label,
        zeropage_label=zeropage_label,
    )
    options = merge_options(cfg.objtool, override)
    run_tool(cfg, "co65", options, source, dry_run=dry_run, json_mode=json_output, verbose=verbose)


def main_entry() -> None:
    """Run the Typer CLI application."""
    app()


if __name__ == "__main__":
    main_entry()
