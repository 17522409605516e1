"""Exception hierarchy for prism-mcp.

Every module imports from here. The hierarchy is:

    PrismMcpError
    ├── ConfigError
    ├── CLIError
    │   ├── CLINotFoundError
    │   ├── CLINotInstalledError
    │   └── CLICommandError
    ├── ProcessExecutionError(command, returncode, signal, stderr)
    └── ToolError
        ├── FlowNotFoundError
        ├── TailTimeoutRequiredError
        └── ReplaceWithoutIdError
"""

from __future__ import annotations


class PrismMcpError(Exception):
    """Base exception for all prism-mcp errors."""


# ─── Configuration Errors ─────────────────────────────────────


class ConfigError(PrismMcpError):
    """Invalid or missing configuration."""


# ─── CLI Errors ───────────────────────────────────────────────


class CLIError(PrismMcpError):
    """Base for Prismatic CLI session errors."""


class CLINotFoundError(CLIError):
    """No strategy could locate the prism executable."""

    def __init__(self, executable: str = "prism") -> None:
        self.executable = executable
        super().__init__(
            f"Prismatic CLI not found. Install @prismatic-io/prism or set "
            f"PRISM_PATH to the {executable} executable."
        )


class CLINotInstalledError(CLIError):
    """The resolved executable failed its availability check."""

    def __init__(self, prism_path: str) -> None:
        self.prism_path = prism_path
        super().__init__(
            "Prismatic CLI is not properly installed. Please ensure "
            "@prismatic-io/prism is installed in your project dependencies."
        )


class CLICommandError(CLIError):
    """A prism subcommand failed."""

    PREFIX = "Failed to execute Prismatic CLI command"

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"{self.PREFIX}: {detail}")


# ─── Process Errors ───────────────────────────────────────────


class ProcessExecutionError(PrismMcpError):
    """A child process exited non-zero or could not be spawned."""

    def __init__(
        self,
        command: str,
        *,
        returncode: int | None = None,
        stdout: str = "",
        stderr: str = "",
        reason: str | None = None,
    ) -> None:
        self.command = command
        self.returncode = returncode
        self.signal = (
            -returncode if returncode is not None and returncode < 0 else None
        )
        self.stdout = stdout
        self.stderr = stderr

        if reason is not None:
            msg = f"Command failed to start: {command}: {reason}"
        elif self.signal is not None:
            msg = f"Command terminated by signal {self.signal}: {command}"
        else:
            msg = f"Command failed with exit code {returncode}: {command}"
        if stderr.strip():
            msg += f"\n{stderr.strip()}"
        super().__init__(msg)


# ─── Tool Errors ──────────────────────────────────────────────


class ToolError(PrismMcpError):
    """Base for domain errors raised by tool handlers."""


class FlowNotFoundError(ToolError):
    """No flow matched, or the matched flow has no test URL."""


class TailTimeoutRequiredError(ToolError):
    """Tailing logs or results was requested without a timeout."""

    def __init__(self) -> None:
        super().__init__(
            "If tailing logs or step results via MCP server, "
            "a timeout (in seconds) is required."
        )


class ReplaceWithoutIdError(ToolError):
    """An import asked to replace an integration without naming it."""

    def __init__(self) -> None:
        super().__init__("integrationId is required when replace is set.")
