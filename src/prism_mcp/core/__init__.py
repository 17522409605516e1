"""Core types, errors, and process utilities."""

from prism_mcp.core.errors import (
    CLICommandError,
    CLIError,
    CLINotFoundError,
    CLINotInstalledError,
    ConfigError,
    FlowNotFoundError,
    PrismMcpError,
    ProcessExecutionError,
    ReplaceWithoutIdError,
    TailTimeoutRequiredError,
    ToolError,
)
from prism_mcp.core.locator import locate_executable
from prism_mcp.core.process import CommandOutput, join_args, run_command

__all__ = [
    "CLICommandError",
    "CLIError",
    "CLINotFoundError",
    "CLINotInstalledError",
    "CommandOutput",
    "ConfigError",
    "FlowNotFoundError",
    "PrismMcpError",
    "ProcessExecutionError",
    "ReplaceWithoutIdError",
    "TailTimeoutRequiredError",
    "ToolError",
    "join_args",
    "locate_executable",
    "run_command",
]
