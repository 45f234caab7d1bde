"""Conversion of BEEFY authority ids (compressed secp256k1 keys)."""

from __future__ import annotations

from collections.abc import Iterable

from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

from beefykit.codec import decode_authority_id, decode_authority_ids, parse_hex
from beefykit.hashing import keccak_256

COMPRESSED_KEY_SIZE = 33
UNCOMPRESSED_KEY_SIZE = 65
ETH_ADDRESS_SIZE = 20


class InvalidPublicKeyError(ValueError):
    """Raised when bytes are not a valid compressed secp256k1 public key."""


def uncompress_public_key(compressed: bytes) -> bytes:
    """Turn a 33-byte compressed secp256k1 key into its 65-byte uncompressed form."""
    raw = bytes(compressed)
    if len(raw) != COMPRESSED_KEY_SIZE or raw[0] not in (0x02, 0x03):
        raise InvalidPublicKeyError(f"not a compressed public key: 0x{raw.hex()}")
    try:
        key = ec.EllipticCurvePublicKey.from_encoded_point(ec.SECP256K1(), raw)
    except ValueError as exc:
        raise InvalidPublicKeyError(f"invalid public key 0x{raw.hex()}: {exc}") from exc
    return key.public_bytes(Encoding.X962, PublicFormat.UncompressedPoint)


def uncompress_beefy_ids(ids: Iterable[bytes]) -> list[bytes]:
    """Uncompress every BEEFY authority id; fail on the first invalid one."""
    return [uncompress_public_key(authority_id) for authority_id in ids]


def uncompressed_to_eth(uncompressed: Iterable[bytes]) -> list[bytes]:
    """Derive 20-byte Ethereum addresses from uncompressed public keys."""
    addresses = []
    for key in uncompressed:
        raw = bytes(key)
        if len(raw) != UNCOMPRESSED_KEY_SIZE:
            raise InvalidPublicKeyError(f"not an uncompressed public key: 0x{raw.hex()}")
        addresses.append(keccak_256(raw[1:])[-ETH_ADDRESS_SIZE:])
    return addresses


def parse_authority(text: str) -> bytes:
    """Parse a hex-encoded single authority id."""
    return decode_authority_id(parse_hex(text))


def parse_authorities(text: str) -> list[bytes]:
    """Parse a hex-encoded SCALE vector of authority ids."""
    return decode_authority_ids(parse_hex(text))