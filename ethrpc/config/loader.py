"""
ethrpc TOML Configuration Loader

Loads the client configuration from a TOML file with environment variable
overrides. Every section is a dataclass with ``from_dict`` and
``apply_env``; ``ClientConfig`` ties them together.

Environment variable mapping:
    [http] url            → ETHRPC_HTTP_URL
    [http] timeout        → ETHRPC_HTTP_TIMEOUT
    [websocket] url       → ETHRPC_WS_URL
    [websocket] open_timeout → ETHRPC_WS_OPEN_TIMEOUT
    [websocket] surface_errors → ETHRPC_WS_SURFACE_ERRORS
    [tls] ca_file         → ETHRPC_TLS_CA
    [tls] cert_file       → ETHRPC_TLS_CERT
    [tls] key_file        → ETHRPC_TLS_KEY
    [logging] level       → ETHRPC_LOG_LEVEL
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

try:
    import tomllib as tomli  # Python 3.11+
except ImportError:
    try:
        import tomli  # type: ignore[no-redef]
    except ImportError:
        tomli = None  # type: ignore[assignment]

from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)

_CALLBACK_MODES = ("inline", "thread")


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _parse_float(name: str, value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from e


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------


@dataclass
class HTTPConfig:
    """[http] section."""

    # JSON-RPC endpoint; None disables the HTTP transport
    url: Optional[str] = None

    # Request timeout (seconds)
    timeout: float = 30.0

    # Verify server certificates
    verify: bool = True

    # Extra request headers
    headers: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HTTPConfig":
        return cls(
            url=data.get("url") or None,
            timeout=_parse_float("http.timeout", data.get("timeout", 30.0)),
            verify=data.get("verify", True),
            headers=dict(data.get("headers", {})),
        )

    def apply_env(self) -> None:
        if v := os.environ.get("ETHRPC_HTTP_URL"):
            self.url = v
        if v := os.environ.get("ETHRPC_HTTP_TIMEOUT"):
            self.timeout = _parse_float("ETHRPC_HTTP_TIMEOUT", v)


@dataclass
class WebSocketConfig:
    """[websocket] section."""

    # ws:// or wss:// endpoint; None disables the WebSocket transport
    url: Optional[str] = None

    # Handshake timeout (seconds)
    open_timeout: float = 10.0

    # Keepalive ping interval (seconds); None disables pings
    ping_interval: Optional[float] = 20.0

    # Maximum inbound frame size (bytes)
    max_size: int = 1024 * 1024

    # Negotiate permessage-deflate
    compression: bool = True

    # Publish JSON-RPC error frames on a side channel instead of dropping them
    surface_errors: bool = False

    # Where listener callbacks run: "inline" (event loop) or "thread"
    callback_mode: str = "inline"

    # Extra handshake headers
    headers: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WebSocketConfig":
        return cls(
            url=data.get("url") or None,
            open_timeout=_parse_float("websocket.open_timeout", data.get("open_timeout", 10.0)),
            ping_interval=data.get("ping_interval", 20.0),
            max_size=int(data.get("max_size", 1024 * 1024)),
            compression=data.get("compression", True),
            surface_errors=data.get("surface_errors", False),
            callback_mode=data.get("callback_mode", "inline"),
            headers=dict(data.get("headers", {})),
        )

    def apply_env(self) -> None:
        if v := os.environ.get("ETHRPC_WS_URL"):
            self.url = v
        if v := os.environ.get("ETHRPC_WS_OPEN_TIMEOUT"):
            self.open_timeout = _parse_float("ETHRPC_WS_OPEN_TIMEOUT", v)
        if v := os.environ.get("ETHRPC_WS_SURFACE_ERRORS"):
            self.surface_errors = _parse_bool(v)


@dataclass
class TLSConfig:
    """[tls] section. Applies to https:// and wss:// endpoints."""

    ca_file: str = ""
    cert_file: str = ""
    key_file: str = ""
    min_version: str = "1.2"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TLSConfig":
        return cls(
            ca_file=data.get("ca_file", ""),
            cert_file=data.get("cert_file", ""),
            key_file=data.get("key_file", ""),
            min_version=str(data.get("min_version", "1.2")),
        )

    def apply_env(self) -> None:
        if v := os.environ.get("ETHRPC_TLS_CA"):
            self.ca_file = v
        if v := os.environ.get("ETHRPC_TLS_CERT"):
            self.cert_file = v
        if v := os.environ.get("ETHRPC_TLS_KEY"):
            self.key_file = v

    @property
    def customized(self) -> bool:
        """True when anything beyond system defaults is configured."""
        return bool(self.ca_file or self.cert_file or self.min_version != "1.2")

    def validate(self) -> None:
        """Raise ConfigurationError on inconsistent TLS settings."""
        if self.min_version not in ("1.2", "1.3"):
            raise ConfigurationError(
                f"Invalid TLS min_version '{self.min_version}'. Must be '1.2' or '1.3'"
            )
        if bool(self.cert_file) != bool(self.key_file):
            raise ConfigurationError("tls.cert_file and tls.key_file must be set together")
        for label, path in (("ca_file", self.ca_file), ("cert_file", self.cert_file), ("key_file", self.key_file)):
            if path and not Path(path).is_file():
                raise ConfigurationError(f"tls.{label} not found: {path}")


@dataclass
class LoggingConfig:
    """
    [logging] section.

    Left at its defaults, a client does not touch the process-wide ``ethrpc``
    logger, which keeps the `.env` LOG_LEVEL and whatever an earlier client
    or the application configured.
    """

    # None defers to LOG_LEVEL from .env
    level: Optional[str] = None
    console: bool = True
    file: str = ""

    @property
    def explicit(self) -> bool:
        return self.level is not None or not self.console or bool(self.file)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LoggingConfig":
        level = data.get("level")
        return cls(
            level=str(level) if level else None,
            console=data.get("console", True),
            file=data.get("file", ""),
        )

    def apply_env(self) -> None:
        if v := os.environ.get("ETHRPC_LOG_LEVEL"):
            self.level = v


# ---------------------------------------------------------------------------
# Top-level config
# ---------------------------------------------------------------------------


@dataclass
class ClientConfig:
    """
    Complete client configuration.

    At least one of ``http.url`` and ``websocket.url`` must be set; a client
    with neither is unusable and is rejected by :meth:`validate`.
    """

    http: HTTPConfig = field(default_factory=HTTPConfig)
    websocket: WebSocketConfig = field(default_factory=WebSocketConfig)
    tls: TLSConfig = field(default_factory=TLSConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ClientConfig":
        return cls(
            http=HTTPConfig.from_dict(data.get("http", {})),
            websocket=WebSocketConfig.from_dict(data.get("websocket", {})),
            tls=TLSConfig.from_dict(data.get("tls", {})),
            logging=LoggingConfig.from_dict(data.get("logging", {})),
        )

    @classmethod
    def from_urls(
        cls,
        http_url: Optional[str] = None,
        ws_url: Optional[str] = None,
    ) -> "ClientConfig":
        """Shorthand for the common case of endpoints only."""
        return cls(
            http=HTTPConfig(url=http_url),
            websocket=WebSocketConfig(url=ws_url),
        )

    @classmethod
    def from_file(cls, config_path: str) -> "ClientConfig":
        """
        Load from a TOML file and apply environment overrides.

        Raises:
            ConfigurationError: if the file is missing or TOML support is unavailable
        """
        if tomli is None:
            raise ConfigurationError(
                "tomli is required for TOML config loading on Python < 3.11. "
                "Install it: pip install tomli"
            )

        path = Path(config_path)
        if not path.is_file():
            raise ConfigurationError(f"Config file not found: {config_path}")

        with open(path, "rb") as f:
            raw = tomli.load(f)

        cfg = cls.from_dict(raw)
        cfg.apply_env()
        logger.debug("Loaded client config from %s", path)
        return cfg

    def apply_env(self) -> None:
        """Apply environment variable overrides to all sections."""
        self.http.apply_env()
        self.websocket.apply_env()
        self.tls.apply_env()
        self.logging.apply_env()

    def validate(self) -> None:
        """
        Check the configuration is usable.

        Raises:
            ConfigurationError: describing the first problem found
        """
        if not self.http.url and not self.websocket.url:
            raise ConfigurationError(
                "No endpoint configured: set http.url and/or websocket.url"
            )
        if self.http.url and not self.http.url.startswith(("http://", "https://")):
            raise ConfigurationError(f"http.url must be http(s)://, got {self.http.url!r}")
        if self.websocket.url and not self.websocket.url.startswith(("ws://", "wss://")):
            raise ConfigurationError(f"websocket.url must be ws(s)://, got {self.websocket.url!r}")
        if self.http.timeout <= 0:
            raise ConfigurationError("http.timeout must be positive")
        if self.websocket.open_timeout <= 0:
            raise ConfigurationError("websocket.open_timeout must be positive")
        if self.websocket.callback_mode not in _CALLBACK_MODES:
            raise ConfigurationError(
                f"websocket.callback_mode must be one of {_CALLBACK_MODES}, "
                f"got {self.websocket.callback_mode!r}"
            )
        self.tls.validate()

    def to_dict(self) -> Dict[str, Any]:
        logging_section: Dict[str, Any] = {"console": self.logging.console, "file": self.logging.file}
        # TOML has no null
        if self.logging.level is not None:
            logging_section["level"] = self.logging.level
        return {
            "http": {
                "url": self.http.url or "",
                "timeout": self.http.timeout,
                "verify": self.http.verify,
                "headers": dict(self.http.headers),
            },
            "websocket": {
                "url": self.websocket.url or "",
                "open_timeout": self.websocket.open_timeout,
                "ping_interval": self.websocket.ping_interval,
                "max_size": self.websocket.max_size,
                "compression": self.websocket.compression,
                "surface_errors": self.websocket.surface_errors,
                "callback_mode": self.websocket.callback_mode,
                "headers": dict(self.websocket.headers),
            },
            "tls": {
                "ca_file": self.tls.ca_file,
                "cert_file": self.tls.cert_file,
                "key_file": self.tls.key_file,
                "min_version": self.tls.min_version,
            },
            "logging": logging_section,
        }


def load_config(path: Optional[str] = None) -> ClientConfig:
    """
    Convenience loader.

    Resolution order: explicit ``path``, then ``ETHRPC_CONFIG``. Without
    either, an empty config is built from environment variables alone.
    """
    if path is None:
        path = os.environ.get("ETHRPC_CONFIG")
    if path:
        return ClientConfig.from_file(path)
    cfg = ClientConfig()
    cfg.apply_env()
    return cfg
