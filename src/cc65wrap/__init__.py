"""cc65wrap - typed command-line builder for the cc65 6502 toolchain.

Turns option records into ``cc65`` / ``ca65`` / ``ld65`` / ``co65``
invocations and runs them, handing back a Future for each process.
"""

from cc65wrap.options import (
    AssemblerOptions,
    CompilerOptions,
    LinkerOptions,
    ObjectToolOptions,
    OptimizerDisabled,
    OptimizerEnabled,
)
from cc65wrap.process import ToolError, ToolResult
from cc65wrap.toolchain import ca65, cc65, co65, command_line, ld65

__version__ = "0.1.0"

__all__ = [
    "AssemblerOptions",
    "CompilerOptions",
    "LinkerOptions",
    "ObjectToolOptions",
    "OptimizerDisabled",
    "OptimizerEnabled",
    "ToolError",
    "ToolResult",
    "ca65",
    "cc65",
    "co65",
    "command_line",
    "ld65",
]
