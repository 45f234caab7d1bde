"""Binary merkle trees compatible with Ethereum bridge contracts.

Leaves of arbitrary length are hashed with the same hasher as the inner
nodes. Inner nodes are the hash of the concatenated child hashes. Nothing is
sorted. When a row has an odd number of nodes, the last one is promoted to
the row above unchanged.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from itertools import zip_longest
from typing import Any, Optional, Protocol, Union

from beefykit.hashing import HASH_SIZE, Keccak256

log = logging.getLogger(__name__)

ZERO_HASH = bytes(HASH_SIZE)


class Hasher(Protocol):
    """Anything that hashes bytes into a 32-byte digest."""

    def hash(self, data: bytes) -> bytes:
        ...


LeafData = Union[bytes, bytearray, memoryview, str]


@dataclass(frozen=True)
class LeafHash:
    """A leaf given by its hash rather than by its content."""

    value: bytes

    def __post_init__(self) -> None:
        raw = bytes(self.value)
        if len(raw) != HASH_SIZE:
            raise ValueError(f"leaf hash must be {HASH_SIZE} bytes, got {len(raw)}")
        object.__setattr__(self, "value", raw)


@dataclass
class MerkleProof:
    """A merkle proof together with everything needed to verify it."""

    root: bytes
    proof: list[bytes]
    number_of_leaves: int
    leaf_index: int
    leaf: Any


def _leaf_bytes(leaf: LeafData) -> bytes:
    if isinstance(leaf, str):
        return leaf.encode("utf-8")
    return bytes(leaf)


def _hasher_or_default(hasher: Optional[Hasher]) -> Hasher:
    return Keccak256() if hasher is None else hasher


def _upper_row(row: Sequence[bytes], hasher: Hasher) -> list[bytes]:
    pairs = iter(row)
    return [
        left if right is None else hasher.hash(left + right)
        for left, right in zip_longest(pairs, pairs)
    ]


def _merkelize(
    hashes: Sequence[bytes], hasher: Hasher, position: Optional[int] = None
) -> tuple[bytes, list[bytes]]:
    """Build the tree; return the root and, for ``position``, the proof items."""
    proof: list[bytes] = []
    row = list(hashes)
    if not row:
        return ZERO_HASH, proof
    while len(row) > 1:
        if position is not None:
            sibling = position ^ 1
            if sibling < len(row):
                proof.append(row[sibling])
            position //= 2
        row = _upper_row(row, hasher)
    return row[0], proof


def merkle_root(leaves: Iterable[LeafData], hasher: Optional[Hasher] = None) -> bytes:
    """Return the root hash of the tree built from ``leaves``.

    An empty list of leaves gives a zero-filled hash.
    """
    hasher = _hasher_or_default(hasher)
    root, _ = _merkelize([hasher.hash(_leaf_bytes(leaf)) for leaf in leaves], hasher)
    return root


def merkle_proof(
    leaves: Iterable[LeafData], leaf_index: int, hasher: Optional[Hasher] = None
) -> MerkleProof:
    """Build the proof for the leaf at ``leaf_index``.

    Raises IndexError if ``leaf_index`` does not name a leaf.
    """
    hasher = _hasher_or_default(hasher)
    items = list(leaves)
    if not 0 <= leaf_index < len(items):
        raise IndexError(
            f"requested leaf_index {leaf_index} is out of range for {len(items)} leaves"
        )
    hashes = [hasher.hash(_leaf_bytes(item)) for item in items]
    root, proof = _merkelize(hashes, hasher, leaf_index)
    log.debug("[merkle_proof] proof: %s", [item.hex() for item in proof])
    return MerkleProof(
        root=root,
        proof=proof,
        number_of_leaves=len(items),
        leaf_index=leaf_index,
        leaf=items[leaf_index],
    )


def verify_proof(
    root: bytes,
    proof: Iterable[bytes],
    number_of_leaves: int,
    leaf_index: int,
    leaf: Union[LeafData, LeafHash],
    hasher: Optional[Hasher] = None,
) -> bool:
    """Check that ``proof`` leads from ``leaf`` to ``root``.

    The proof holds neither the leaf hash nor the root, only the sibling
    nodes from the bottom of the tree upwards.
    """
    if not 0 <= leaf_index < number_of_leaves:
        return False
    hasher = _hasher_or_default(hasher)

    if isinstance(leaf, LeafHash):
        computed = leaf.value
    else:
        computed = hasher.hash(_leaf_bytes(leaf))

    position = leaf_index
    width = number_of_leaves
    for item in proof:
        sibling = bytes(item)
        if position % 2 == 1 or position + 1 == width:
            combined = sibling + computed
        else:
            combined = computed + sibling
        computed = hasher.hash(combined)
        log.debug("[verify_proof] %s => %s", combined.hex(), computed.hex())
        position //= 2
        width = (width - 1) // 2 + 1

    return bytes(root) == computed