"""Keccak-256 hashing used for merkle trees and Ethereum addresses."""

from __future__ import annotations

from Crypto.Hash import keccak

HASH_SIZE = 32


def keccak_256(data: bytes) -> bytes:
    """Return the 32-byte Keccak-256 digest of ``data``."""
    return keccak.new(digest_bits=256, data=bytes(data)).digest()


class Keccak256:
    """Keccak-256 hasher usable wherever a merkle tree hasher is expected."""

    digest_size = HASH_SIZE

    def hash(self, data: bytes) -> bytes:
        """Hash an arbitrary-length piece of data into 32 bytes."""
        return keccak_256(data)

    def __repr__(self) -> str:
        return "Keccak256()"