"""doctor.py - Diagnostic command for the cc65 toolchain setup.

Checks the config file and each of the four binaries (cc65, ca65, ld65,
co65): can it be located, and does it answer ``--version``.  Prints a
checklist with actionable fix suggestions.

Usage::

    cc65wrap doctor
    cc65wrap doctor --json
"""

import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import typer

from cc65wrap.cli import ConfigOption, json_print
from cc65wrap.config import CONFIG_FILENAME, TOOLS, ProjectConfig, load_config
from cc65wrap.process import ToolError, run

# ---------------------------------------------------------------------------
# Check result data
# ---------------------------------------------------------------------------

_PASS = "pass"
_FAIL = "fail"
_WARN = "warn"


@dataclass
class CheckResult:
    """Result of a single diagnostic check."""

    name: str
    status: str  # "pass", "fail", "warn"
    message: str
    fix: str = ""

    def to_dict(self) -> dict[str, str]:
        """Serialize to a plain dict for JSON output."""
        d: dict[str, str] = {
            "name": self.name,
            "status": self.status,
            "message": self.message,
        }
        if self.fix:
            d["fix"] = self.fix
        return d


@dataclass
class DoctorReport:
    """Aggregated results from all diagnostic checks."""

    config_path: str = ""
    checks: list[CheckResult] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        """True if no checks failed."""
        return all(c.status != _FAIL for c in self.checks)

    @property
    def pass_count(self) -> int:
        return sum(1 for c in self.checks if c.status == _PASS)

    @property
    def fail_count(self) -> int:
        return sum(1 for c in self.checks if c.status == _FAIL)

    @property
    def warn_count(self) -> int:
        return sum(1 for c in self.checks if c.status == _WARN)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dict for JSON output."""
        return {
            "config": self.config_path,
            "passed": self.passed,
            "summary": {
                "pass": self.pass_count,
                "fail": self.fail_count,
                "warn": self.warn_count,
            },
            "checks": [c.to_dict() for c in self.checks],
        }


# ---------------------------------------------------------------------------
# Individual checks
# ---------------------------------------------------------------------------


def check_config(path: Path | None) -> tuple[CheckResult, ProjectConfig | None]:
    """Check that cc65wrap.toml parses, or note that defaults are used."""
    try:
        cfg = load_config(path)
    except FileNotFoundError as e:
        return (
            CheckResult(
                name=CONFIG_FILENAME,
                status=_FAIL,
                message=str(e),
                fix="Pass an existing file to --config, or run 'cc65wrap init'.",
            ),
            None,
        )
    except KeyError as e:
        return (
            CheckResult(
                name=CONFIG_FILENAME,
                status=_FAIL,
                message=f"Unknown option: {e.args[0]}",
                fix="Check option names in the [compiler]/[assembler]/[linker]/[objtool] tables.",
            ),
            None,
        )
    except ValueError as e:
        return (
            CheckResult(
                name=CONFIG_FILENAME,
                status=_FAIL,
                message=f"Parse error: {e}",
                fix=f"Check {CONFIG_FILENAME} is valid TOML and option values have the right types.",
            ),
            None,
        )

    if cfg.path is None:
        return (
            CheckResult(
                name=CONFIG_FILENAME,
                status=_WARN,
                message="Not found; using built-in defaults",
                fix="Run 'cc65wrap init' to pin the toolchain location and default options.",
            ),
            cfg,
        )
    return CheckResult(name=CONFIG_FILENAME, status=_PASS, message=f"Parsed {cfg.path}"), cfg


def check_home(cfg: ProjectConfig) -> CheckResult:
    """Check that the configured cc65 home directory exists."""
    home = cfg.toolchain.home
    if home is None:
        return CheckResult(name="CC65_HOME", status=_PASS, message="Not set (tools resolved on PATH)")
    if not home.is_dir():
        return CheckResult(
            name="CC65_HOME",
            status=_FAIL,
            message=f"Not a directory: {home}",
            fix="Set [toolchain] home in cc65wrap.toml or CC65_HOME to the cc65 install prefix.",
        )
    return CheckResult(name="CC65_HOME", status=_PASS, message=str(home))


def check_tool(cfg: ProjectConfig, tool: str) -> CheckResult:
    """Check that *tool* can be located and answers ``--version``."""
    argv = cfg.toolchain.command(tool)
    exe = argv[0]
    located = shutil.which(exe)
    if located is None:
        return CheckResult(
            name=tool,
            status=_FAIL,
            message=f"'{exe}' not found",
            fix=(
                f"Install cc65 (e.g. 'apt install cc65'), add it to PATH, "
                f"or set [toolchain] {tool} in cc65wrap.toml."
            ),
        )

    try:
        result = run([*argv, "--version"], env=cfg.toolchain.process_env())
    except ToolError as e:
        return CheckResult(
            name=tool,
            status=_WARN,
            message=f"{located} (--version exited with {e.returncode})",
            fix="The binary was found but did not report a version; check it is the cc65 tool.",
        )
    # cc65 tools print their banner on stderr
    banner = (result.stderr or result.stdout).strip().splitlines()
    version = banner[0] if banner else "unknown version"
    return CheckResult(name=tool, status=_PASS, message=f"{located} ({version})")


# ---------------------------------------------------------------------------
# Main diagnostic runner
# ---------------------------------------------------------------------------


def run_doctor(config: Path | None = None) -> DoctorReport:
    """Run all diagnostic checks and return a report."""
    report = DoctorReport()

    config_result, cfg = check_config(config)
    report.checks.append(config_result)
    if cfg is None:
        return report
    report.config_path = str(cfg.path or "")

    report.checks.append(check_home(cfg))
    for tool in TOOLS:
        report.checks.append(check_tool(cfg, tool))
    return report


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

_EPILOG = """\
[bold]Example:[/bold]

cc65wrap doctor                  Check the toolchain

cc65wrap doctor --json           Machine-readable output

[dim]Validates: cc65wrap.toml, CC65_HOME, and the cc65, ca65, ld65 and co65 binaries.[/dim]"""

_STATUS_ICONS = {
    _PASS: "✅",
    _FAIL: "❌",
    _WARN: "⚠️",
}

app = typer.Typer(
    help="Diagnostic checks for the cc65 toolchain.",
    rich_markup_mode="rich",
    epilog=_EPILOG,
)


@app.command()
def main(
    config: Path | None = ConfigOption,
    json_output: bool = typer.Option(False, "--json", help="Output results as JSON"),
) -> None:
    """Run diagnostic checks on the cc65 toolchain."""
    report = run_doctor(config)

    if json_output:
        json_print(report.to_dict())
    else:
        print(f"\ncc65wrap doctor - config: {report.config_path or '(defaults)'}")
        print("=" * 60)

        for check in report.checks:
            icon = _STATUS_ICONS.get(check.status, "?")
            print(f"  {icon}  {check.name}: {check.message}")
            if check.fix:
                print(f"       Fix: {check.fix}")

        print("=" * 60)
        parts = []
        if report.pass_count:
            parts.append(f"{report.pass_count} passed")
        if report.fail_count:
            parts.append(f"{report.fail_count} failed")
        if report.warn_count:
            parts.append(f"{report.warn_count} warnings")
        print(f"  {', '.join(parts)}")

        if report.passed:
            print("\n  Toolchain looks healthy!\n")
        else:
            print("\n  Issues found. Fix the failures above and re-run.\n")

    if not report.passed:
        raise typer.Exit(code=1)


def main_entry() -> None:
    """Run the Typer CLI application."""
    app()


if __name__ == "__main__":
    main_entry()
