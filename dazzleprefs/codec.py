"""Value validation and typed coercion.

Every preference is stored as a string. The functions here validate keys
and values and convert native Python values to and from their canonical
string form. Encoders raise on bad input; decoders never raise and fall
back to the caller's default, so a corrupt stored value reads as absent.
"""

import base64
import binascii
import math
import re
from typing import Optional, Union

from ._common.config import MAX_KEY_LENGTH, MAX_VALUE_LENGTH
from .errors import NullInputError, InvalidArgumentError
from .paths import is_utf8_encodable


# Largest raw payload whose Base64 text still fits in MAX_VALUE_LENGTH
MAX_BYTES_LENGTH = MAX_VALUE_LENGTH * 3 // 4

INT_MIN, INT_MAX = -2 ** 31, 2 ** 31 - 1
LONG_MIN, LONG_MAX = -2 ** 63, 2 ** 63 - 1

NUL = "\u0000"

_INTEGER_RE = re.compile(r"[+-]?[0-9]+", re.ASCII)
_DECIMAL_RE = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?", re.ASCII)
_SPECIAL_FLOATS = {
    "NaN": math.nan,
    "Infinity": math.inf,
    "+Infinity": math.inf,
    "-Infinity": -math.inf,
}


def check_key(key: str) -> str:
    """Validate a preference key.

    Raises:
        NullInputError: If key is None
        InvalidArgumentError: If key is not a str, is longer than
            MAX_KEY_LENGTH, contains a NUL character or a lone
            surrogate
    """
    if key is None:
        raise NullInputError("key must not be None")
    if not isinstance(key, str):
        raise InvalidArgumentError(f"key must be a str, not {type(key).__name__}")
    if len(key) > MAX_KEY_LENGTH:
        raise InvalidArgumentError(f"Key too long: {len(key)} > {MAX_KEY_LENGTH}")
    if NUL in key:
        raise InvalidArgumentError("Key contains a NUL character")
    if not is_utf8_encodable(key):
        raise InvalidArgumentError("Key is not encodable as UTF-8")
    return key


def check_value(value: str) -> str:
    """Validate a preference value.

    Raises:
        NullInputError: If value is None
        InvalidArgumentError: If value is not a str, is longer than
            MAX_VALUE_LENGTH, contains a NUL character or a lone
            surrogate
    """
    if value is None:
        raise NullInputError("value must not be None")
    if not isinstance(value, str):
        raise InvalidArgumentError(f"value must be a str, not {type(value).__name__}")
    if len(value) > MAX_VALUE_LENGTH:
        raise InvalidArgumentError(f"Value too long: {len(value)} > {MAX_VALUE_LENGTH}")
    if NUL in value:
        raise InvalidArgumentError("Value contains a NUL character")
    if not is_utf8_encodable(value):
        raise InvalidArgumentError("Value is not encodable as UTF-8")
    return value


# Encoders

def _encode_integral(value: int, low: int, high: int, kind: str) -> str:
    if value is None:
        raise NullInputError(f"{kind} value must not be None")
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentError(f"{kind} value must be an int, not {type(value).__name__}")
    if not low <= value <= high:
        raise InvalidArgumentError(f"{value} is out of range for a {kind}")
    return str(value)


def encode_int(value: int) -> str:
    """Render a 32-bit signed integer."""
    return _encode_integral(value, INT_MIN, INT_MAX, "int")


def encode_long(value: int) -> str:
    """Render a 64-bit signed integer."""
    return _encode_integral(value, LONG_MIN, LONG_MAX, "long")


def encode_double(value: float) -> str:
    """Render a float; non-finite values use NaN/Infinity/-Infinity."""
    if value is None:
        raise NullInputError("double value must not be None")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidArgumentError(f"double value must be a float, not {type(value).__name__}")
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    return repr(value)


# Python has a single float type; float and double share one text form.
encode_float = encode_double


def encode_boolean(value: bool) -> str:
    if value is None:
        raise NullInputError("boolean value must not be None")
    return "true" if value else "false"


def encode_bytes(value: Union[bytes, bytearray, memoryview]) -> str:
    """Render binary data as padded standard Base64.

    Raises:
        NullInputError: If value is None
        InvalidArgumentError: If value is longer than MAX_BYTES_LENGTH bytes
    """
    if value is None:
        raise NullInputError("byte array must not be None")
    if not isinstance(value, (bytes, bytearray, memoryview)):
        raise InvalidArgumentError(f"byte array must be bytes-like, not {type(value).__name__}")
    raw = bytes(value)
    if len(raw) > MAX_BYTES_LENGTH:
        raise InvalidArgumentError(f"Byte array too long: {len(raw)} > {MAX_BYTES_LENGTH}")
    return base64.b64encode(raw).decode("ascii")


# Decoders - never raise, return default on missing or unparsable content

def _decode_integral(text: Optional[str], default, low: int, high: int):
    if text is None or not _INTEGER_RE.fullmatch(text):
        return default
    value = int(text)
    if not low <= value <= high:
        return default
    return value


def decode_int(text: Optional[str], default: int) -> int:
    return _decode_integral(text, default, INT_MIN, INT_MAX)


def decode_long(text: Optional[str], default: int) -> int:
    return _decode_integral(text, default, LONG_MIN, LONG_MAX)


def decode_double(text: Optional[str], default: float) -> float:
    if text is None:
        return default
    stripped = text.strip()
    if stripped in _SPECIAL_FLOATS:
        return _SPECIAL_FLOATS[stripped]
    if not _DECIMAL_RE.fullmatch(stripped):
        return default
    return float(stripped)


decode_float = decode_double


def decode_boolean(text: Optional[str], default: bool) -> bool:
    if text is None:
        return default
    lowered = text.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    return default


def decode_bytes(text: Optional[str], default: Optional[bytes]) -> Optional[bytes]:
    if text is None:
        return default
    try:
        return base64.b64decode(text.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError, ValueError):
        return default
