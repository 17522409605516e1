"""Configuration loading and validation."""

from prism_mcp.config.loader import load_config
from prism_mcp.config.schema import GeneralConfig, LoggingConfig, PrismMcpConfig

__all__ = [
    "GeneralConfig",
    "LoggingConfig",
    "PrismMcpConfig",
    "load_config",
]
