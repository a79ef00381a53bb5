"""main.py - Umbrella CLI entry point for cc65wrap.

Single-command modules are registered as flat ``app.command()`` entries;
only true multi-command modules (currently only ``cfg``) use
``add_typer()``.
"""

import importlib

import typer

app = typer.Typer(
    help="Typed command-line front end for the cc65 6502 toolchain.",
    rich_markup_mode="rich",
    no_args_is_help=True,
    epilog="""\
[bold]Typical workflow:[/bold]
  cc65wrap init                    Write cc65wrap.toml with default options
  cc65wrap doctor                  Check that cc65/ca65/ld65/co65 are reachable
  cc65wrap compile main.c          C -> main.s
  cc65wrap assemble main.s         main.s -> main.o
  cc65wrap link main.o --lib c64.lib -o game.prg

[dim]Every build command accepts --dry-run to print the tool command instead of running it.[/dim]""",
)

# ---------------------------------------------------------------------------
# Subcommand registry
# ---------------------------------------------------------------------------

# Single-command modules - registered as flat commands via app.command().
_SINGLE_COMMANDS: list[tuple[str, str, str]] = [
    ("compile", "cc65wrap.compile", "Compile C source with cc65."),
    ("assemble", "cc65wrap.assemble", "Assemble source with ca65."),
    ("link", "cc65wrap.link", "Link objects and libraries with ld65."),
    ("convert", "cc65wrap.convert", "Convert o65 objects with co65."),
    ("doctor", "cc65wrap.doctor", "Diagnostic checks for the toolchain."),
    ("init", "cc65wrap.init", "Create a starter cc65wrap.toml."),
]

# Multi-command modules - registered as groups via app.add_typer().
_MULTI_COMMANDS: list[tuple[str, str, str]] = [
    ("cfg", "cc65wrap.cfg", "Read and edit cc65wrap.toml."),
]


for _name, _module, _help in _SINGLE_COMMANDS:
    _mod = importlib.import_module(_module)
    _epilog = getattr(_mod.app.info, "epilog", None)
    if not isinstance(_epilog, str):
        _epilog = None
    app.command(name=_name, help=_help, epilog=_epilog)(_mod.main)

for _name, _module, _help in _MULTI_COMMANDS:
    app.add_typer(importlib.import_module(_module).app, name=_name, help=_help)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
