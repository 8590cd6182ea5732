"""
ethrpc: Ethereum JSON-RPC client

Core imports are lazily loaded so that ``import ethrpc`` stays cheap.
For direct module access, import from submodules:

    from ethrpc.client import EthClient
    from ethrpc.config import ClientConfig
    from ethrpc.exceptions import ParameterValidationError
"""

__version__ = "0.1.0"


# Lazy imports to avoid loading transports at package import
def __getattr__(name):
    """Lazy attribute loading."""
    if name == 'EthClient':
        from .client import EthClient
        return EthClient
    elif name in ('ClientConfig', 'load_config'):
        from . import config
        return getattr(config, name)
    elif name in (
        'EthRPCException',
        'ConfigurationError',
        'ParameterValidationError',
        'TransportError',
        'DecodeError',
        'RPCResponseError',
    ):
        from . import exceptions
        return getattr(exceptions, name)
    raise AttributeError(f"module 'ethrpc' has no attribute {name!r}")


__all__ = [
    'EthClient',
    'ClientConfig',
    'load_config',
    'EthRPCException',
    'ConfigurationError',
    'ParameterValidationError',
    'TransportError',
    'DecodeError',
    'RPCResponseError',
]
