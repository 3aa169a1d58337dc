"""
Byte-stable encodings for pool identifiers and exported snapshots.

Two consumers:
- `compute_pool_id` hashes a domain tag plus length-prefixed asset ids.
- `integration.snapshot` hashes and prints canonical JSON.
"""

from __future__ import annotations

import hashlib
import json
from typing import Any

_DOMAIN_PREFIX = b"pairpool:"


def _check_text(s: str) -> None:
    if any(0xD800 <= ord(ch) <= 0xDFFF for ch in s):
        raise TypeError("lone surrogates cannot be encoded canonically")


def _check_value(value: Any) -> None:
    # Amounts are ints; a float in a snapshot is always a bug upstream.
    if isinstance(value, float):
        raise TypeError("floats are not allowed in canonical JSON")
    if isinstance(value, str):
        _check_text(value)
    elif isinstance(value, dict):
        for k, v in value.items():
            if not isinstance(k, str):
                raise TypeError("canonical JSON object keys must be str")
            _check_text(k)
            _check_value(v)
    elif isinstance(value, (list, tuple)):
        for item in value:
            _check_value(item)


def canonical_json_bytes(value: Any) -> bytes:
    """UTF-8 JSON with sorted keys, no whitespace, and no floats or NaN."""
    _check_value(value)
    return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False, allow_nan=False).encode(
        "utf-8"
    )


def sha256_hex(data: bytes) -> str:
    return "0x" + hashlib.sha256(data).hexdigest()


def domain_sep_bytes(label: str, version: int = 1) -> bytes:
    """`pairpool:<label>:v<version>` followed by a NUL terminator."""
    if not isinstance(label, str) or not label:
        raise TypeError("label must be a non-empty str")
    if not label.isascii() or "\x00" in label:
        raise ValueError(f"label must be printable ASCII: {label!r}")
    if not isinstance(version, int) or isinstance(version, bool) or version < 1:
        raise ValueError(f"version must be a positive int: {version!r}")
    return _DOMAIN_PREFIX + f"{label}:v{version}".encode("ascii") + b"\x00"


def encode_uvarint(value: int) -> bytes:
    """Unsigned LEB128."""
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise ValueError(f"uvarint must be a non-negative int, got {value!r}")
    out = bytearray()
    while value >= 0x80:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.append(value)
    return bytes(out)


def encode_str(value: str) -> bytes:
    """uvarint byte length followed by the UTF-8 bytes."""
    if not isinstance(value, str):
        raise TypeError("value must be a str")
    _check_text(value)
    raw = value.encode("utf-8")
    return encode_uvarint(len(raw)) + raw
