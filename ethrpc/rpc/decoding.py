"""
Result decoding primitives.

Decoders are plain callables ``raw JSON value -> typed value`` that raise
:class:`~ethrpc.exceptions.DecodeError` on a shape mismatch and nothing
else. One-of types (:class:`OneOf`) try their variants in a fixed order and
accept the first variant that decodes; only ``DecodeError`` is treated as
"try the next one", so programming errors are never masked.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, ClassVar, Dict, List, Sequence, Tuple

from ..exceptions import DecodeError

Decoder = Callable[[Any], Any]


def _type_label(value: Any) -> str:
    return "null" if value is None else type(value).__name__


def decode_string(value: Any) -> str:
    if not isinstance(value, str):
        raise DecodeError(f"Expected string, got {_type_label(value)}", type_name="str")
    return value


def decode_bool(value: Any) -> bool:
    if not isinstance(value, bool):
        raise DecodeError(f"Expected bool, got {_type_label(value)}", type_name="bool")
    return value


def decode_number(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DecodeError(f"Expected number, got {_type_label(value)}", type_name="float")
    return float(value)


def decode_object(value: Any, type_name: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise DecodeError(f"Expected object for {type_name}, got {_type_label(value)}", type_name=type_name)
    return value


def decode_any(value: Any) -> Any:
    return value


def list_of(decoder: Decoder, type_name: str = "list") -> Decoder:
    """Decoder for a JSON array whose every item passes ``decoder``."""

    def decode(value: Any) -> List[Any]:
        if not isinstance(value, list):
            raise DecodeError(f"Expected array for {type_name}, got {_type_label(value)}", type_name=type_name)
        return [decoder(item) for item in value]

    return decode


def optional(decoder: Decoder) -> Decoder:
    """Decoder that lets ``null`` through as None."""

    def decode(value: Any) -> Any:
        if value is None:
            return None
        return decoder(value)

    return decode


def decode_null(value: Any) -> None:
    if value is not None:
        raise DecodeError(f"Expected null, got {_type_label(value)}", type_name="None")
    return None


decode_string_list = list_of(decode_string, "List[str]")


# ---------------------------------------------------------------------------
# Object field helpers
# ---------------------------------------------------------------------------

def required(data: Dict[str, Any], key: str, decoder: Decoder, type_name: str) -> Any:
    """Decode a mandatory key; a missing key is a shape mismatch."""
    if key not in data:
        raise DecodeError(f"{type_name} is missing required field '{key}'", type_name=type_name)
    try:
        return decoder(data[key])
    except DecodeError as e:
        raise DecodeError(f"{type_name}.{key}: {e}", type_name=type_name) from e


def optional_field(data: Dict[str, Any], key: str, decoder: Decoder, type_name: str) -> Any:
    """Decode a key that may be absent or null."""
    value = data.get(key)
    if value is None:
        return None
    try:
        return decoder(value)
    except DecodeError as e:
        raise DecodeError(f"{type_name}.{key}: {e}", type_name=type_name) from e


def encode_value(value: Any) -> Any:
    """Turn typed values back into plain JSON-compatible values."""
    if isinstance(value, OneOf):
        return value.encode()
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, (list, tuple)):
        return [encode_value(item) for item in value]
    if isinstance(value, dict):
        return {key: encode_value(item) for key, item in value.items()}
    return value


def compact(mapping: Dict[str, Any]) -> Dict[str, Any]:
    """Drop keys whose value is None and encode the rest."""
    return {key: encode_value(value) for key, value in mapping.items() if value is not None}


# ---------------------------------------------------------------------------
# One-of (tagged sum) types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class OneOf:
    """
    Base for tagged sum types decoded by shape.

    Subclasses list ``VARIANTS`` as ``(kind, decoder)`` pairs. The order of
    that tuple is the decode priority: a value valid under several variants
    always resolves to the earliest one.
    """

    kind: str
    value: Any

    VARIANTS: ClassVar[Tuple[Tuple[str, Decoder], ...]] = ()

    def __post_init__(self) -> None:
        kinds = self.kinds()
        if self.kind not in kinds:
            raise ValueError(f"{type(self).__name__} has no variant {self.kind!r} (expected one of {kinds})")

    @classmethod
    def kinds(cls) -> Tuple[str, ...]:
        return tuple(kind for kind, _ in cls.VARIANTS)

    @classmethod
    def decode(cls, raw: Any) -> "OneOf":
        for kind, decoder in cls.VARIANTS:
            try:
                return cls(kind, decoder(raw))
            except DecodeError:
                continue
        raise DecodeError(
            f"Value of type {_type_label(raw)} matches no variant of {cls.__name__} {cls.kinds()}",
            type_name=cls.__name__,
        )

    def encode(self) -> Any:
        return encode_value(self.value)

    def is_(self, kind: str) -> bool:
        return self.kind == kind


def try_order(one_of: type) -> Sequence[str]:
    """Documented decode priority of a OneOf subclass."""
    return one_of.kinds()
