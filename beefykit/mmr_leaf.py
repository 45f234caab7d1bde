"""Pieces of the BEEFY MMR leaf: parachain heads root and next authority set."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Optional

from beefykit.authorities import InvalidPublicKeyError, uncompress_public_key
from beefykit.codec import encode_bytes, encode_u32
from beefykit.hashing import HASH_SIZE, keccak_256
from beefykit.merkle import Hasher, merkle_root

log = logging.getLogger(__name__)

ETH_ADDRESS_OFFSET = 12


@dataclass(frozen=True)
class NextAuthoritySet:
    """Id, size and merkle root of the next BEEFY authority set."""

    id: int = 0
    len: int = 0
    root: bytes = bytes(HASH_SIZE)


def parachain_heads_merkle_root(heads: Iterable[tuple[int, bytes]]) -> bytes:
    """Return the Keccak-256 merkle root of ``(para_id, head)`` pairs, sorted.

    Each leaf is the SCALE encoding of the pair: a little-endian u32 followed
    by the head as a length-prefixed byte vector.
    """
    pairs = sorted((int(para_id), bytes(head)) for para_id, head in heads)
    leaves = [encode_u32(para_id) + encode_bytes(head) for para_id, head in pairs]
    return merkle_root(leaves, None)


def beefy_ecdsa_to_ethereum(authority_id: bytes) -> bytes:
    """Convert a compressed secp256k1 authority id into an Ethereum address.

    An invalid key gives an empty byte string.
    """
    try:
        uncompressed = uncompress_public_key(authority_id)
    except InvalidPublicKeyError:
        log.error("Invalid BEEFY PublicKey format!")
        return b""
    return keccak_256(uncompressed[1:])[ETH_ADDRESS_OFFSET:]


class NextAuthoritySetCache:
    """Caches the next authority set details, recomputing only on id change."""

    def __init__(
        self,
        converter: Callable[[bytes], bytes] = beefy_ecdsa_to_ethereum,
        hasher: Optional[Hasher] = None,
    ) -> None:
        self._converter = converter
        self._hasher = hasher
        self.current = NextAuthoritySet()

    def update(
        self, validator_set_id: int, next_authorities: Iterable[bytes]
    ) -> NextAuthoritySet:
        """Return the details for the set after ``validator_set_id``."""
        next_id = validator_set_id + 1
        if next_id == self.current.id:
            return self.current
        addresses = [self._converter(authority) for authority in next_authorities]
        self.current = NextAuthoritySet(
            id=next_id,
            len=len(addresses),
            root=merkle_root(addresses, self._hasher),
        )
        return self.current