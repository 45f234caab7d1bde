"""Hex parsing and the subset of SCALE encoding needed by the tools."""

from __future__ import annotations

import string
from collections.abc import Iterable

HASH_SIZE = 32
AUTHORITY_ID_SIZE = 33

_HEX_DIGITS = frozenset(string.hexdigits)
_MAX_COMPACT_BYTES = 67


class CodecError(ValueError):
    """Raised when data cannot be encoded or decoded."""


def parse_hex(text: str) -> bytes:
    """Parse a hex string, with an optional ``0x`` prefix, into bytes."""
    body = text[2:] if text.startswith("0x") else text
    if len(body) % 2:
        raise CodecError(f"odd number of hex digits in {text!r}")
    bad = next((ch for ch in body if ch not in _HEX_DIGITS), None)
    if bad is not None:
        raise CodecError(f"invalid hex character {bad!r} in {text!r}")
    return bytes.fromhex(body)


def encode_compact(value: int) -> bytes:
    """Encode a non-negative integer in SCALE compact form."""
    if value < 0:
        raise CodecError(f"compact value must be non-negative, got {value}")
    if value < 1 << 6:
        return bytes([value << 2])
    if value < 1 << 14:
        return ((value << 2) | 0b01).to_bytes(2, "little")
    if value < 1 << 30:
        return ((value << 2) | 0b10).to_bytes(4, "little")
    size = max(4, (value.bit_length() + 7) // 8)
    if size > _MAX_COMPACT_BYTES:
        raise CodecError(f"compact value too large: {value}")
    return bytes([((size - 4) << 2) | 0b11]) + value.to_bytes(size, "little")


def _take(data: bytes, offset: int, size: int) -> bytes:
    end = offset + size
    if offset < 0 or end > len(data):
        raise CodecError(
            f"not enough data: need {size} bytes at offset {offset}, have {len(data)}"
        )
    return bytes(data[offset:end])


def decode_compact(data: bytes, offset: int = 0) -> tuple[int, int]:
    """Decode a SCALE compact integer; return the value and the next offset."""
    first = _take(data, offset, 1)[0]
    mode = first & 0b11
    if mode == 0b00:
        return first >> 2, offset + 1
    if mode == 0b01:
        value = int.from_bytes(_take(data, offset, 2), "little") >> 2
        if value < 1 << 6:
            raise CodecError("non-canonical compact encoding")
        return value, offset + 2
    if mode == 0b10:
        value = int.from_bytes(_take(data, offset, 4), "little") >> 2
        if value < 1 << 14:
            raise CodecError("non-canonical compact encoding")
        return value, offset + 4
    size = (first >> 2) + 4
    value = int.from_bytes(_take(data, offset + 1, size), "little")
    if value < 1 << 30 or (size > 4 and value < 1 << (8 * (size - 1))):
        raise CodecError("non-canonical compact encoding")
    return value, offset + 1 + size


def encode_bytes(data: bytes) -> bytes:
    """Encode a byte string as a SCALE ``Vec<u8>``."""
    raw = bytes(data)
    return encode_compact(len(raw)) + raw


def decode_bytes(data: bytes) -> bytes:
    """Decode a SCALE ``Vec<u8>`` from the start of ``data``; trailing bytes are ignored."""
    length, offset = decode_compact(data)
    return _take(data, offset, length)


def _encode_uint(value: int, size: int) -> bytes:
    if not 0 <= value < 1 << (8 * size):
        raise CodecError(f"value {value} does not fit in {8 * size} bits")
    return value.to_bytes(size, "little")


def encode_u32(value: int) -> bytes:
    """Encode an unsigned 32-bit integer, little endian."""
    return _encode_uint(value, 4)


def encode_u64(value: int) -> bytes:
    """Encode an unsigned 64-bit integer, little endian."""
    return _encode_uint(value, 8)


def _decode_fixed_list(data: bytes, item_size: int) -> list[bytes]:
    count, offset = decode_compact(data)
    items = []
    for _ in range(count):
        items.append(_take(data, offset, item_size))
        offset += item_size
    return items


def encode_hash_list(hashes: Iterable[bytes]) -> bytes:
    """Encode a sequence of 32-byte hashes as a SCALE ``Vec<[u8; 32]>``."""
    items = [bytes(h) for h in hashes]
    for item in items:
        if len(item) != HASH_SIZE:
            raise CodecError(f"hash must be {HASH_SIZE} bytes, got {len(item)}")
    return encode_compact(len(items)) + b"".join(items)


def decode_hash_list(data: bytes) -> list[bytes]:
    """Decode a SCALE ``Vec<[u8; 32]>`` into a list of hashes."""
    return _decode_fixed_list(data, HASH_SIZE)


def decode_authority_id(data: bytes) -> bytes:
    """Decode a single 33-byte compressed authority id."""
    return _take(data, 0, AUTHORITY_ID_SIZE)


def decode_authority_ids(data: bytes) -> list[bytes]:
    """Decode a SCALE vector of 33-byte compressed authority ids."""
    return _decode_fixed_list(data, AUTHORITY_ID_SIZE)