"""
ethrpc TLS Support

Builds SSL client contexts for https:// and wss:// endpoints:
- TLS 1.2 and 1.3 minimum versions
- Custom CA bundles (private nodes, self-signed test chains)
- Client certificates (mTLS gateways)
"""

from __future__ import annotations

import logging
import ssl
from pathlib import Path
from typing import Optional, Union

from ..config.loader import TLSConfig

logger = logging.getLogger(__name__)


class TLSContextBuilder:
    """
    Builder for SSL contexts used by the HTTP and WebSocket transports.

    Usage:
        builder = TLSContextBuilder(ca_file="/path/to/ca.pem")
        ctx = builder.build_client_context()
    """

    def __init__(
        self,
        cert_file: str = "",
        key_file: str = "",
        ca_file: str = "",
        min_version: str = "1.2",
    ):
        self.cert_file = cert_file
        self.key_file = key_file
        self.ca_file = ca_file
        self.min_version = min_version

    @classmethod
    def from_config(cls, config: TLSConfig) -> "TLSContextBuilder":
        return cls(
            cert_file=config.cert_file,
            key_file=config.key_file,
            ca_file=config.ca_file,
            min_version=config.min_version,
        )

    def validate(self) -> None:
        """
        Validate that referenced files exist.

        Raises:
            ValueError: on missing/invalid files
        """
        if self.ca_file and not Path(self.ca_file).exists():
            raise ValueError(f"CA file not found: {self.ca_file}")
        if bool(self.cert_file) != bool(self.key_file):
            raise ValueError("cert_file and key_file must be provided together")
        if self.cert_file and not Path(self.cert_file).is_file():
            raise ValueError(f"Certificate file not found: {self.cert_file}")
        if self.key_file and not Path(self.key_file).is_file():
            raise ValueError(f"Key file not found: {self.key_file}")
        if self.min_version not in ("1.2", "1.3"):
            raise ValueError(
                f"Invalid TLS min_version '{self.min_version}'. Must be '1.2' or '1.3'"
            )

    def build_client_context(self) -> ssl.SSLContext:
        """
        Build an SSL context for outgoing TLS connections.

        Returns:
            Configured ssl.SSLContext
        """
        self.validate()

        ctx = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
        if self.min_version == "1.3":
            ctx.minimum_version = ssl.TLSVersion.TLSv1_3
        else:
            ctx.minimum_version = ssl.TLSVersion.TLSv1_2

        if self.ca_file:
            ctx.load_verify_locations(cafile=self.ca_file)
        else:
            ctx.load_default_certs()

        if self.cert_file and self.key_file:
            ctx.load_cert_chain(certfile=self.cert_file, keyfile=self.key_file)

        ctx.check_hostname = True
        ctx.verify_mode = ssl.CERT_REQUIRED

        logger.debug(
            "TLS client context created: min=%s, custom_ca=%s, mtls=%s",
            self.min_version,
            bool(self.ca_file),
            bool(self.cert_file),
        )
        return ctx


def client_ssl_context(config: TLSConfig) -> Optional[ssl.SSLContext]:
    """Return a custom context, or None to let the transport use its defaults."""
    if not config.customized:
        return None
    return TLSContextBuilder.from_config(config).build_client_context()


def httpx_verify(config: TLSConfig, verify: bool = True) -> Union[bool, ssl.SSLContext]:
    """Value for the ``verify`` argument of ``httpx.AsyncClient``."""
    if not verify:
        return False
    return client_ssl_context(config) or True
