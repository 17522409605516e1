"""Argument models for the Prismatic tools."""

from __future__ import annotations

from pydantic import (
    AnyUrl,
    EmailStr,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
)

from prism_mcp.tools.base import ToolArgs

_URL = TypeAdapter(AnyUrl)


class EmptyArgs(ToolArgs):
    """Tools that take no arguments."""


# ── Auth ─────────────────────────────────────────────────────────


class LoginArgs(ToolArgs):
    email: EmailStr
    password: str


# ── Integrations ─────────────────────────────────────────────────


class IntegrationInitArgs(ToolArgs):
    name: str = Field(
        min_length=1,
        pattern=r"^[a-zA-Z0-9_-]+$",
        description="Name of the integration (alphanumeric, hyphens, underscores)",
    )
    directory: str | None = None


class IntegrationConvertArgs(ToolArgs):
    yaml_file: str = Field(min_length=1)
    folder: str | None = None
    registry_prefix: str | None = None


class IntegrationImportArgs(ToolArgs):
    directory: str = Field(
        min_length=1,
        description="Directory of the Code Native Integration to build and import",
    )
    integration_id: str | None = Field(
        default=None,
        description="Existing integration to import into",
    )
    replace: bool | None = Field(
        default=None,
        description="Replace the existing integration (requires integrationId)",
    )


class FlowListArgs(ToolArgs):
    integration_id: str = Field(min_length=1)
    columns: str | None = None


class FlowTestArgs(ToolArgs):
    flow_url: str | None = Field(
        default=None,
        description="Flow test URL, passed to the CLI as given",
        json_schema_extra={"format": "uri"},
    )
    flow_id: str | None = None
    flow_name: str | None = None
    integration_id: str | None = None
    payload: str | None = None
    payload_content_type: str | None = None
    sync: bool | None = None
    tail_logs: bool | None = None
    tail_results: bool | None = None
    timeout: float | None = Field(
        default=None,
        gt=0,
        description="Maximum time to tail for logs and step results (in seconds).",
    )
    result_file: str | None = None

    @field_validator("flow_url")
    @classmethod
    def _valid_url(cls, value: str | None) -> str | None:
        if value is not None:
            try:
                _URL.validate_python(value)
            except ValidationError as e:
                msg = f"invalid URL: {value!r}"
                raise ValueError(msg) from e
        return value


# ── Components ───────────────────────────────────────────────────


class ComponentInitArgs(ToolArgs):
    name: str = Field(min_length=1)
    directory: str | None = None
    wsdl_path: str | None = None
    open_api_path: str | None = None


class ComponentPublishArgs(ToolArgs):
    directory: str = Field(
        min_length=1,
        description="Component directory to build and publish",
    )
    comment: str | None = None
    customer: str | None = Field(
        default=None,
        description="Publish as a private component for this customer ID",
    )
    skip_on_signature_match: bool | None = None
