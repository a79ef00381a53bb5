"""Create a starter cc65wrap.toml in the current directory.

Usage:
    cc65wrap init [--home PATH] [--target SYSTEM] [--force]
"""

from pathlib import Path

import typer

from cc65wrap.cli import error_exit
from cc65wrap.config import CONFIG_FILENAME
from cc65wrap.options import LINKER_TARGETS, TARGET_SYSTEMS

app = typer.Typer(
    help="Create a starter cc65wrap.toml.",
    rich_markup_mode="rich",
    epilog="""\
[bold]Examples:[/bold]

cc65wrap init                                  Target c64, tools from PATH

cc65wrap init --target apple2enh               Another target system

cc65wrap init --home /opt/cc65                 Use binaries from /opt/cc65/bin

[dim]Edit the generated file or use 'cc65wrap cfg set' afterwards.[/dim]""",
)

DEFAULT_TOML = """# cc65wrap project configuration
#
# [toolchain] says where the cc65 binaries live; the other tables hold the
# default options for each tool.  Keys use the option names of the tool
# (kebab-case or camelCase); command-line options are layered on top.

[toolchain]
{home_line}bin_dir = "bin"
# cc65 = "tools/cc65/bin/cc65"        # per-tool override

[compiler]
target = "{target}"
optimizer = "ir"
include-dirs = ["include"]

[assembler]
target = "{target}"

[linker]
target = "{linker_target}"
# mapfile = "build/{project_name}.map"

[objtool]
"""


@app.command()
def main(
    home: str | None = typer.Option(None, "--home", help="cc65 install prefix (CC65_HOME)"),
    target: str = typer.Option("c64", "--target", "-t", help="Default target system"),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing file"),
) -> None:
    """Write cc65wrap.toml in the current directory."""
    cwd = Path.cwd()
    toml_path = cwd / CONFIG_FILENAME

    if toml_path.exists() and not force:
        error_exit(f"A {CONFIG_FILENAME} already exists in {cwd} (use --force to overwrite)")

    if target not in TARGET_SYSTEMS:
        typer.secho(
            f"Warning: '{target}' is not a known cc65 target; writing it anyway.",
            fg=typer.colors.YELLOW,
            err=True,
        )

    toml_content = DEFAULT_TOML.format(
        home_line=f'home = "{home}"\n' if home else '# home = "/usr/share/cc65"\n',
        target=target,
        linker_target=target if target in LINKER_TARGETS else "none",
        project_name=cwd.name,
    )
    toml_path.write_text(toml_content, encoding="utf-8")
    typer.secho(f"Created {toml_path.name}", fg=typer.colors.GREEN)
    typer.echo("Run 'cc65wrap doctor' to check the toolchain.")


def main_entry() -> None:
    """Run the Typer CLI application."""
    app()


if __name__ == "__main__":
    main_entry()
