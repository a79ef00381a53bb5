"""cc65wrap cfg: Programmatic editor for cc65wrap.toml.

Uses tomlkit for format-preserving round-trip editing (comments,
ordering, and whitespace are retained).

Usage::

    cc65wrap cfg show [KEY]
    cc65wrap cfg set compiler.target c64
    cc65wrap cfg set compiler.static-locals true
    cc65wrap cfg add linker.libs c64.lib
    cc65wrap cfg remove linker.libs c64.lib
"""

import contextlib
import os
from pathlib import Path
from typing import Any

import tomlkit
import typer

from cc65wrap.cli import error_exit
from cc65wrap.config import CONFIG_FILENAME, TOOL_SECTIONS, parse_config

app = typer.Typer(
    help="Read and edit cc65wrap.toml.",
    rich_markup_mode="rich",
)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _find_config() -> Path:
    """Walk up from cwd to find cc65wrap.toml."""
    candidate = Path.cwd().resolve()
    while True:
        if (candidate / CONFIG_FILENAME).exists():
            return candidate / CONFIG_FILENAME
        if candidate == candidate.parent:
            error_exit(
                f"Could not find {CONFIG_FILENAME} in any parent directory. "
                "Run 'cc65wrap init' first."
            )
        candidate = candidate.parent


def _load_toml() -> tuple[tomlkit.TOMLDocument, Path]:
    """Load cc65wrap.toml as a tomlkit document, preserving formatting."""
    toml_path = _find_config()
    doc = tomlkit.parse(toml_path.read_text(encoding="utf-8"))
    return doc, toml_path


def _save_toml(doc: tomlkit.TOMLDocument, path: Path) -> None:
    """Validate *doc* and write it back atomically."""
    try:
        parse_config(doc.unwrap(), path.parent, path)
    except KeyError as exc:
        error_exit(f"Refusing to save: unknown option {exc.args[0]}")
    except ValueError as exc:
        error_exit(f"Refusing to save: {exc}")
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    try:
        tmp_path.write_text(tomlkit.dumps(doc), encoding="utf-8")
        os.replace(tmp_path, path)
    except BaseException:
        with contextlib.suppress(OSError):
            tmp_path.unlink()
        raise


def _split_key(key: str) -> tuple[list[str], str]:
    parts = key.split(".")
    if len(parts) < 2 or not all(parts):
        error_exit(f"Expected a dotted key such as 'compiler.target', got {key!r}")
    return parts[:-1], parts[-1]


def _table_for(doc: tomlkit.TOMLDocument, parents: list[str], *, create: bool) -> Any:
    current: Any = doc
    for part in parents:
        if part not in current:
            if not create:
                error_exit(f"Section '{part}' not found.")
            current[part] = tomlkit.table()
        current = current[part]
    return current


def parse_value(value: str) -> str | int | bool:
    """Coerce a command-line value to bool / int (decimal or 0x hex) / str."""
    if value.lower() in ("true", "false"):
        return value.lower() == "true"
    try:
        return int(value, 16) if value.startswith(("0x", "0X")) else int(value)
    except ValueError:
        return value


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command("show")
def show(
    key: str | None = typer.Argument(None, help="Dot-separated key, e.g. 'compiler.target'"),
) -> None:
    """Show the current config, or a specific key."""
    doc, _ = _load_toml()

    if key is None:
        typer.echo(tomlkit.dumps(doc), nl=False)
        return

    current: Any = doc
    for part in key.split("."):
        if isinstance(current, dict) and part in current:
            current = current[part]
        else:
            error_exit(f"Key '{key}' not found.")

    if isinstance(current, dict):
        typer.echo(tomlkit.dumps(current), nl=False)
    elif isinstance(current, list):
        for item in current:
            typer.echo(str(item))
    else:
        typer.echo(str(current))


@app.command("set")
def set_value(
    key: str = typer.Argument(..., help="Dot-separated key, e.g. 'linker.mapfile'."),
    value: str = typer.Argument(..., help="Value to set (true/false and integers are typed)."),
) -> None:
    """Set a scalar config key."""
    doc, toml_path = _load_toml()
    parents, final_key = _split_key(key)
    table = _table_for(doc, parents, create=True)

    parsed_value = parse_value(value)
    table[final_key] = parsed_value
    _save_toml(doc, toml_path)
    typer.secho(f"Set {key} = {parsed_value!r}", fg=typer.colors.GREEN)


@app.command("add")
def add_value(
    key: str = typer.Argument(..., help="Dot-separated list key, e.g. 'compiler.define'."),
    value: str = typer.Argument(..., help="Entry to append."),
) -> None:
    """Append an entry to a list option (idempotent)."""
    doc, toml_path = _load_toml()
    parents, final_key = _split_key(key)
    table = _table_for(doc, parents, create=True)

    if final_key not in table:
        table[final_key] = tomlkit.array()
    entries = table[final_key]
    if not isinstance(entries, list):
        error_exit(f"'{key}' is not a list.")
    if value in entries:
        typer.secho(f"{value!r} already in {key}", fg=typer.colors.YELLOW)
        return
    entries.append(value)
    _save_toml(doc, toml_path)
    typer.secho(f"Added {value!r} to {key}", fg=typer.colors.GREEN)


@app.command("remove")
def remove_value(
    key: str = typer.Argument(..., help="Dot-separated key."),
    value: str | None = typer.Argument(None, help="List entry to remove; omit to delete the key."),
) -> None:
    """Remove a key, or one entry from a list option."""
    doc, toml_path = _load_toml()
    parents, final_key = _split_key(key)
    table = _table_for(doc, parents, create=False)

    if final_key not in table:
        typer.secho(f"'{key}' not set (already removed).", fg=typer.colors.YELLOW)
        return

    if value is None:
        del table[final_key]
        _save_toml(doc, toml_path)
        typer.secho(f"Removed {key}", fg=typer.colors.GREEN)
        return

    entries = table[final_key]
    if not isinstance(entries, list) or value not in entries:
        typer.secho(f"{value!r} not in {key} (already removed).", fg=typer.colors.YELLOW)
        return
    entries.remove(value)
    _save_toml(doc, toml_path)
    typer.secho(f"Removed {value!r} from {key}", fg=typer.colors.GREEN)


@app.command("sections")
def list_sections() -> None:
    """List the per-tool option tables and which tool reads each."""
    doc, _ = _load_toml()
    for tool, section in TOOL_SECTIONS.items():
        marker = "" if section in doc else "  (not set)"
        typer.echo(f"{section:<10} {tool}{marker}")


def main_entry() -> None:
    """Run the Typer CLI application."""
    app()


if __name__ == "__main__":
    main_entry()
