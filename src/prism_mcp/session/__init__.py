"""Prismatic CLI session management."""

from prism_mcp.session.manager import (
    DEFAULT_PRISMATIC_URL,
    LoginStatus,
    PrismSession,
)

__all__ = [
    "DEFAULT_PRISMATIC_URL",
    "LoginStatus",
    "PrismSession",
]
