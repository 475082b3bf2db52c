"""Lenient base64 decoding for located key material.

Accepts both alphabets, missing padding and surplus trailing padding.
Returns None on any failure so callers can answer 400 instead of letting a
decode fault escape as a 500.
"""

import base64
import binascii


def decode_key_material(value: object) -> bytes | None:
    """Decode URL-safe or standard base64, restoring padding. None if malformed."""
    if not isinstance(value, str):
        return None
    normalized = value.strip().replace("-", "+").replace("_", "/")
    normalized += "=" * (-len(normalized) % 4)
    try:
        return base64.b64decode(normalized)
    except (binascii.Error, ValueError):
        return None


def encode_key_material(data: bytes) -> str:
    """Standard-alphabet, padded base64 used in every response body."""
    return base64.b64encode(data).decode("ascii")
