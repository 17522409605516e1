"""Format prism stdout for tool responses.

Some subcommands print JSON (``--output json``), others print text.
:func:`format_output` parses the former and passes the latter through.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

_NOT_JSON = object()


@dataclass(frozen=True, slots=True)
class Structured:
    """Parsed JSON output."""

    value: Any

    def render(self) -> str:
        return json.dumps(self.value, indent=2, ensure_ascii=False)


@dataclass(frozen=True, slots=True)
class Raw:
    """Plain text output."""

    text: str

    def render(self) -> str:
        return self.text


FormattedOutput = Structured | Raw


def _reject_constant(name: str) -> Any:
    msg = f"Non-standard JSON constant: {name}"
    raise ValueError(msg)


def _parse_json(text: str) -> Any:
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except ValueError:
        return _NOT_JSON


def format_output(stdout: str, wrap_key: str | None = None) -> FormattedOutput:
    """Parse *stdout* as JSON, falling back to trimmed text.

    Args:
        stdout: Raw command output.
        wrap_key: Nest parsed JSON under this key.  Ignored for text.
    """
    value = _parse_json(stdout)
    if value is _NOT_JSON:
        return Raw(stdout.strip())
    if wrap_key:
        value = {wrap_key: value}
    return Structured(value)
