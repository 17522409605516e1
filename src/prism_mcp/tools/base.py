"""Tool data types and argument validation.

A tool is a :class:`ToolSpec`: a name, a description, a pydantic model
describing (and validating) its arguments, and an async handler.  The
registry turns every outcome into a :class:`ToolResult` envelope.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from prism_mcp.session.manager import PrismSession

DEFAULT_BUILD_COMMAND = "npm run build"


class ToolArgs(BaseModel):
    """Base for tool argument models.

    Field names are snake_case in Python and camelCase on the wire.
    Unknown keys are ignored.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    @classmethod
    def input_schema(cls) -> dict[str, Any]:
        """JSON Schema advertised to MCP clients."""
        return cls.model_json_schema(by_alias=True)


@dataclass(frozen=True, slots=True)
class ToolContext:
    """Collaborators shared by every handler call."""

    session: PrismSession
    build_command: str = DEFAULT_BUILD_COMMAND


@dataclass(frozen=True, slots=True)
class ToolSpec:
    """A registered tool."""

    name: str
    description: str
    args_model: type[ToolArgs]
    handler: Callable[[ToolContext, Any], Awaitable[object]]
    toolset: str = "general"


@dataclass(frozen=True, slots=True)
class ToolDefinition:
    """Schema definition for a tool, suitable for listing to clients."""

    name: str
    description: str
    input_schema: dict[str, Any]


@dataclass(frozen=True, slots=True)
class ToolResult:
    """Envelope returned by the dispatcher for every call."""

    content: str
    is_error: bool = False


@dataclass(frozen=True, slots=True)
class ArgumentError:
    """Why a set of arguments failed validation."""

    message: str


def _describe_errors(exc: ValidationError) -> str:
    parts: list[str] = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err["loc"]) or "arguments"
        parts.append(f"{location}: {err['msg']}")
    return "; ".join(parts)


def validate_arguments(
    model: type[ToolArgs], raw: dict[str, Any] | None
) -> ToolArgs | ArgumentError:
    """Validate *raw* against *model*.

    Returns the parsed model, or an :class:`ArgumentError` describing
    every mismatch.  Never raises for bad input.
    """
    try:
        return model.model_validate(raw or {})
    except ValidationError as exc:
        return ArgumentError(_describe_errors(exc))
