"""
ethrpc Constants

This module consolidates the protocol constants, parameter patterns and
environment defaults used throughout the SDK. Environment-driven values
are read once from a local ``.env`` file and exposed as module attributes.
"""
import ast
import re

from dotenv import dotenv_values

# =============================================================================
# ENVIRONMENT CONFIGURATION
# =============================================================================
# Load environment variables once at module import
_config = dotenv_values(".env")

CLIENT_DEFAULTS = {
    'ETHRPC_USER_AGENT':               'ethrpc-python',
}

LOGGER_DEFAULTS = {
    'LOG_LEVEL':                       'INFO',
    'LOG_FORMAT':                      '%(asctime)s - %(levelname)s - %(name)s - %(message)s',
    'LOG_DATE_FORMAT':                 '%Y-%m-%dT%H:%M:%S',
    'LOG_CONSOLE_HIGHLIGHTING':        'True',
    'LOG_INCLUDE_FRAME_CONTENT':       'False',
}

LOG_MAX_FILE_SIZE = 10 * 1024 * 1024 # 10MB
LOG_MAX_FRAME_LENGTH = 512  # Frames longer than this are truncated in debug logs
LOG_BACKUP_COUNT = 5


# ==================================================================================
# JSON-RPC PROTOCOL CONSTANTS
# ==================================================================================
JSONRPC_VERSION = '2.0'
HTTP_REQUEST_ID = '1'  # One outstanding call per HTTP request
CORRELATION_SEPARATOR = '|'
SUBSCRIPTION_METHOD = 'eth_subscription'


# ==================================================================================
# PARAMETER PATTERNS
# ==================================================================================
# Kept as raw strings: validation errors report the exact pattern that failed.
HASH_32_PATTERN = r'^0x[0-9a-f]{64}$'
QUANTITY_PATTERN = r'^0x([1-9a-f]+[0-9a-f]*|0)$'
ADDRESS_PATTERN = r'^0x[0-9,a-f,A-F]{40}$'
HEX_DATA_PATTERN = r'^0x[0-9a-f]*$'
NONCE_8_PATTERN = r'^0x[0-9a-f]{16}$'

COMPILED_PATTERNS = {
    pattern: re.compile(pattern)
    for pattern in (
        HASH_32_PATTERN,
        QUANTITY_PATTERN,
        ADDRESS_PATTERN,
        HEX_DATA_PATTERN,
        NONCE_8_PATTERN,
    )
}


# ==================================================================================
# CONFIGURATION WRAPPERS
# ==================================================================================
class ConfigString(str):
    """
    String subclass that stores a default value.
    """
    def __new__(cls, value, default):
        obj = str.__new__(cls, value)
        obj._default = default
        return obj

    def default(self):
        return self._default

class ConfigBool(int):
    """
    Int subclass acting as a boolean that stores a default value.
    """
    def __new__(cls, value, default):
        obj = int.__new__(cls, bool(value))
        obj._default = default
        return obj

    def default(self):
        return self._default

    def __repr__(self):
        return str(bool(self))

    def __str__(self):
        return str(bool(self))

    def __eq__(self, other):
        return bool(self) == other

    __hash__ = int.__hash__


# ==================================================================================
# DYNAMIC CONFIGURATION LOADING
# ==================================================================================
DEFAULTS = CLIENT_DEFAULTS | LOGGER_DEFAULTS
namespace = globals()

def parse_bool(v):
    """
    Convert "True"/"False" (any casing, with surrounding whitespace) into bool.
    Avoids exceptions by only calling ast.literal_eval for known literals.
    """
    if not isinstance(v, str):
        return v
    s = v.strip()
    if not s:
        return v
    if s.casefold() in {"true", "false"}:
        # ast.literal_eval expects "True"/"False"
        return ast.literal_eval(s.title())
    return v

for key, default_raw in DEFAULTS.items():
    # dotenv_values returns strings or None. None is treated as missing.
    raw = _config.get(key)
    value_raw = default_raw if raw is None else raw

    value = parse_bool(value_raw)
    default_val = parse_bool(default_raw)

    if isinstance(value, bool):
        namespace[key] = ConfigBool(value, default_val)
    else:
        namespace[key] = ConfigString(value_raw, default_val)
