"""process.py - Spawn toolchain binaries and hand back a Future.

``spawn()`` starts the process before it returns and parks one waiter thread
on it; the caller gets a :class:`concurrent.futures.Future` that resolves to
a :class:`ToolResult` or fails with :class:`ToolError`.  There is no pool and
no queue, so any number of invocations may run side by side.

No timeout is applied and ``Future.cancel()`` does not stop a running
process.
"""

from __future__ import annotations

import asyncio
import subprocess
import threading
from collections.abc import Mapping, Sequence
from concurrent.futures import Future
from dataclasses import dataclass
from pathlib import Path

# Shell conventions for "command not found" and "bad usage".
NOT_FOUND_RETURNCODE = 127
USAGE_RETURNCODE = 2


@dataclass(frozen=True)
class ToolResult:
    """Captured outcome of a successful tool run."""

    command: str
    returncode: int
    stdout: str
    stderr: str

    def to_dict(self) -> dict[str, object]:
        """Serialize to a plain dict for JSON output."""
        return {
            "command": self.command,
            "returncode": self.returncode,
            "stdout": self.stdout,
            "stderr": self.stderr,
        }


class ToolError(RuntimeError):
    """An external tool exited non-zero, was killed, or could not start."""

    def __init__(self, command: str, returncode: int, stdout: str = "", stderr: str = "") -> None:
        self.command = command
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        detail = stderr.strip().splitlines()[-1] if stderr.strip() else "no output"
        super().__init__(f"'{command}' failed with exit code {returncode}: {detail}")

    def to_dict(self) -> dict[str, object]:
        """Serialize to a plain dict for JSON output."""
        return {
            "command": self.command,
            "returncode": self.returncode,
            "stdout": self.stdout,
            "stderr": self.stderr,
        }


def failed(command: str, returncode: int, stderr: str) -> Future[ToolResult]:
    """A Future that has already failed with :class:`ToolError`."""
    future: Future[ToolResult] = Future()
    future.set_running_or_notify_cancel()
    future.set_exception(ToolError(command, returncode, stderr=stderr))
    return future


def _decode(data: bytes | None) -> str:
    return (data or b"").decode("utf-8", errors="replace")


def _wait(proc: subprocess.Popen[bytes], command: str, future: Future[ToolResult]) -> None:
    """Collect output from *proc* and settle *future*."""
    try:
        out, err = proc.communicate()
    except OSError as exc:
        future.set_exception(ToolError(command, proc.returncode or 1, stderr=str(exc)))
        return
    stdout, stderr = _decode(out), _decode(err)
    if proc.returncode != 0:
        future.set_exception(ToolError(command, proc.returncode, stdout, stderr))
    else:
        future.set_result(ToolResult(command, proc.returncode, stdout, stderr))


def spawn(
    argv: Sequence[str],
    *,
    env: Mapping[str, str] | None = None,
    cwd: str | Path | None = None,
) -> Future[ToolResult]:
    """Start *argv* and return a Future for its completion.

    The process inherits the caller's environment and working directory
    unless *env* / *cwd* are given.  A binary that cannot be started yields
    an already-failed future with return code 127.
    """
    command = " ".join(argv)
    try:
        proc = subprocess.Popen(
            list(argv),
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            stdin=subprocess.DEVNULL,
            env=dict(env) if env is not None else None,
            cwd=str(cwd) if cwd is not None else None,
        )
    except OSError as exc:
        return failed(command, NOT_FOUND_RETURNCODE, str(exc))

    future: Future[ToolResult] = Future()
    future.set_running_or_notify_cancel()
    waiter = threading.Thread(
        target=_wait,
        args=(proc, command, future),
        name=f"cc65wrap-wait-{proc.pid}",
        daemon=True,
    )
    waiter.start()
    return future


def run(
    argv: Sequence[str],
    *,
    env: Mapping[str, str] | None = None,
    cwd: str | Path | None = None,
) -> ToolResult:
    """Blocking variant of :func:`spawn`; raises :class:`ToolError`."""
    return spawn(argv, env=env, cwd=cwd).result()


async def wait_async(future: Future[ToolResult]) -> ToolResult:
    """Await a spawned Future from asyncio code."""
    return await asyncio.wrap_future(future)
