"""Pydantic models for prism-mcp configuration."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from prism_mcp.session.manager import DEFAULT_PRISMATIC_URL
from prism_mcp.tools.base import DEFAULT_BUILD_COMMAND
from prism_mcp.tools.prism import TOOLSETS


class GeneralConfig(BaseModel):
    """Session and tool settings."""

    working_directory: str | None = None
    prismatic_url: str = DEFAULT_PRISMATIC_URL
    prism_path: str | None = None
    force_npx: bool = False
    toolsets: list[str] = Field(default_factory=lambda: list(TOOLSETS))
    build_command: str = DEFAULT_BUILD_COMMAND

    @field_validator("toolsets", mode="before")
    @classmethod
    def _split_toolsets(cls, value: object) -> object:
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        return value

    @field_validator("toolsets")
    @classmethod
    def _known_toolsets(cls, value: list[str]) -> list[str]:
        unknown = [name for name in value if name not in TOOLSETS]
        if unknown:
            msg = (
                f"unknown toolset(s): {', '.join(unknown)} "
                f"(valid: {', '.join(TOOLSETS)})"
            )
            raise ValueError(msg)
        return value


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    file: str = ""


class PrismMcpConfig(BaseModel):
    """Top-level configuration for prism-mcp."""

    general: GeneralConfig = Field(default_factory=GeneralConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
