"""
ethrpc Configuration

Loads client configuration from TOML.
Environment variables override TOML values.
"""

from .loader import (
    ClientConfig,
    HTTPConfig,
    WebSocketConfig,
    TLSConfig,
    LoggingConfig,
    load_config,
)

__all__ = [
    "ClientConfig",
    "HTTPConfig",
    "WebSocketConfig",
    "TLSConfig",
    "LoggingConfig",
    "load_config",
]
