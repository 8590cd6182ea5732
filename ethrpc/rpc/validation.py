"""
Hex parameter validation.

Every address, hash and quantity parameter is checked against its pattern
before a request is built, so a bad input never reaches the network.
"""

import re
from typing import Any, Optional

from ..constants import (
    ADDRESS_PATTERN,
    COMPILED_PATTERNS,
    HASH_32_PATTERN,
    HEX_DATA_PATTERN,
    NONCE_8_PATTERN,
    QUANTITY_PATTERN,
)
from ..exceptions import ParameterValidationError

__all__ = [
    "ADDRESS_PATTERN",
    "HASH_32_PATTERN",
    "HEX_DATA_PATTERN",
    "NONCE_8_PATTERN",
    "QUANTITY_PATTERN",
    "check_parameter",
    "check_optional",
    "matches",
]


def matches(value: Any, pattern: str) -> bool:
    """True when ``value`` is a string fully matching ``pattern``."""
    if not isinstance(value, str):
        return False
    compiled = COMPILED_PATTERNS.get(pattern)
    if compiled is None:
        compiled = re.compile(pattern)
    return compiled.fullmatch(value) is not None


def check_parameter(value: Any, pattern: str, name: Optional[str] = None) -> str:
    """
    Return ``value`` unchanged if it matches ``pattern``.

    Raises:
        ParameterValidationError: carrying the offending input and the pattern
    """
    if not matches(value, pattern):
        raise ParameterValidationError(value, pattern, name)
    return value


def check_optional(value: Optional[Any], pattern: str, name: Optional[str] = None) -> Optional[str]:
    """Like :func:`check_parameter`, but None passes through unvalidated."""
    if value is None:
        return None
    return check_parameter(value, pattern, name)
