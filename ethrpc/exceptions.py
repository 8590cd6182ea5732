"""
ethrpc Exceptions

Exception hierarchy for the Ethereum JSON-RPC client.
"""

from typing import Any, Optional


class EthRPCException(Exception):
    """Base exception for ethrpc."""
    pass


class ConfigurationError(EthRPCException):
    """Client configuration is missing or invalid."""
    pass


class ParameterValidationError(EthRPCException, ValueError):
    """A parameter failed its required pattern before any I/O happened."""

    def __init__(self, input: Any, pattern: str, name: Optional[str] = None):
        self.input = input
        self.pattern = pattern
        self.name = name
        label = f"parameter '{name}'" if name else "parameter"
        super().__init__(f"Invalid {label}: {input!r} does not match {pattern}")


class TransportError(EthRPCException):
    """Network-level or connection-level failure."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class DecodeError(EthRPCException, ValueError):
    """A payload does not match the expected result shape."""

    def __init__(self, message: str, type_name: Optional[str] = None):
        super().__init__(message)
        self.type_name = type_name


class RPCResponseError(EthRPCException):
    """The node answered with a JSON-RPC error object instead of a result."""

    def __init__(self, code: int, message: str, data: Any = None):
        super().__init__(f"RPC error {code}: {message}")
        self.code = code
        self.message = message
        self.data = data

    def to_dict(self) -> dict:
        result = {"code": self.code, "message": self.message}
        if self.data is not None:
            result["data"] = self.data
        return result
