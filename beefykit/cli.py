"""Command line utilities for BEEFY authority ids, merkle proofs and MMR data."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Optional, Union

from beefykit.authorities import (
    parse_authorities,
    parse_authority,
    uncompress_beefy_ids,
    uncompressed_to_eth,
)
from beefykit.codec import (
    CodecError,
    decode_bytes,
    decode_hash_list,
    encode_bytes,
    encode_hash_list,
    encode_u64,
    parse_hex,
)
from beefykit.hashing import HASH_SIZE
from beefykit.merkle import merkle_proof, verify_proof

ItemData = Union[bytes, bytearray, memoryview, str]


def _as_bytes(item: ItemData) -> bytes:
    if isinstance(item, str):
        return item.encode("utf-8")
    return bytes(item)


def _parse_h256(text: str) -> bytes:
    raw = parse_hex(text)
    if len(raw) != HASH_SIZE:
        raise CodecError(f"expected a {HASH_SIZE}-byte hash, got {len(raw)} bytes")
    return raw


def _non_negative(text: str) -> int:
    value = int(text)
    if value < 0:
        raise ValueError(f"expected a non-negative integer, got {value}")
    return value


def generate_merkle_proof(
    items: Iterable[ItemData], leaf_index: int
) -> tuple[bytes, list[bytes], bytes, int]:
    """Build a Keccak-256 merkle proof for one item.

    Returns the root, the proof items, the leaf content and the number of leaves.
    Raises IndexError if ``leaf_index`` is out of bounds.
    """
    leaves = [_as_bytes(item) for item in items]
    if not 0 <= leaf_index < len(leaves):
        raise IndexError(f"Leaf index out of bounds: {leaf_index} vs {len(leaves)}")
    proof = merkle_proof(leaves, leaf_index)
    return proof.root, list(proof.proof), leaves[leaf_index], len(leaves)


def format_generated_proof(items: Iterable[ItemData], leaf_index: int) -> str:
    """Generate a proof and render it the way the command prints it."""
    root, proof, leaf, number_of_leaves = generate_merkle_proof(items, leaf_index)
    lines = [
        "",
        f"Root: 0x{root.hex()}",
        f"Leaf index: {leaf_index}",
        f"Number of leaves: {number_of_leaves}",
        f"SCALE-encoded proof: 0x{encode_hash_list(proof).hex()}",
        f"SCALE-encoded leaf value: 0x{leaf.hex()}",
        "",
    ]
    return "\n".join(lines)


def verify_merkle_proof(
    root: bytes,
    proof: bytes,
    number_of_leaves: int,
    leaf_index: int,
    leaf_value: bytes,
) -> bool:
    """Check a SCALE-encoded proof (a vector of hashes) against ``root``."""
    hashes = decode_hash_list(proof)
    return verify_proof(bytes(root), hashes, number_of_leaves, leaf_index, bytes(leaf_value))


def mmr_storage_key(prefix: str, pos: int) -> bytes:
    """Build the MMR offchain storage key for the node at ``pos``."""
    return encode_bytes(prefix.encode("utf-8")) + encode_u64(pos)


@dataclass(frozen=True)
class _MmrLeaf:
    version: int
    parent_number: int
    parent_hash: bytes
    next_set_id: int
    next_set_len: int
    next_set_root: bytes
    parachain_heads: bytes

    def __str__(self) -> str:
        return (
            f"MmrLeaf {{ version: MmrLeafVersion({self.version}), "
            f"parent_number_and_hash: ({self.parent_number}, 0x{self.parent_hash.hex()}), "
            f"beefy_next_authority_set: BeefyNextAuthoritySet {{ id: {self.next_set_id}, "
            f"len: {self.next_set_len}, root: 0x{self.next_set_root.hex()} }}, "
            f"parachain_heads: 0x{self.parachain_heads.hex()} }}"
        )


class _Reader:
    def __init__(self, data: bytes) -> None:
        self._data = data
        self._offset = 0

    def take(self, size: int) -> bytes:
        end = self._offset + size
        if end > len(self._data):
            raise CodecError(
                f"not enough data: need {size} bytes at offset {self._offset}, "
                f"have {len(self._data)}"
            )
        chunk = self._data[self._offset:end]
        self._offset = end
        return chunk

    def uint(self, size: int) -> int:
        return int.from_bytes(self.take(size), "little")


def _decode_mmr_leaf(encoded: bytes) -> _MmrLeaf:
    # Accept either a bare leaf or the `Data` variant of a data-or-hash node.
    content = encoded[1:] if encoded[:1] == b"\x00" else encoded
    reader = _Reader(decode_bytes(content))
    return _MmrLeaf(
        version=reader.uint(1),
        parent_number=reader.uint(4),
        parent_hash=reader.take(HASH_SIZE),
        next_set_id=reader.uint(8),
        next_set_len=reader.uint(4),
        next_set_root=reader.take(HASH_SIZE),
        parachain_heads=reader.take(HASH_SIZE),
    )


def _uncompress_and_report(ids: Sequence[bytes]) -> list[bytes]:
    uncompressed = uncompress_beefy_ids(ids)
    for authority_id, key in zip(ids, uncompressed):
        print(f"[0x{authority_id.hex()}] Uncompressed:\n\t {key.hex()}")
    return uncompressed


def _run_uncompress(args: argparse.Namespace) -> None:
    ids = [args.authority] if args.authority is not None else args.authorities
    _uncompress_and_report(ids)


def _run_beefy_generate(args: argparse.Namespace) -> None:
    addresses = uncompressed_to_eth(_uncompress_and_report(args.authorities))
    print(format_generated_proof(addresses, args.leaf_index))


def _run_para_generate(args: argparse.Namespace) -> None:
    print(format_generated_proof(args.heads, args.leaf_index))


def _run_verify(args: argparse.Namespace) -> None:
    if verify_merkle_proof(
        args.root, args.proof, args.number_of_leaves, args.leaf_index, args.leaf_value
    ):
        print("\n✅ Proof is correct.\n")
    else:
        print("\n❌ Proof is INCORRECT.\n")


def _run_decode_leaf(args: argparse.Namespace) -> None:
    print(_decode_mmr_leaf(args.leaf))


def _run_storage_key(args: argparse.Namespace) -> None:
    print(f"0x{mmr_storage_key(args.prefix, args.pos).hex()}")


def _add_verify_command(commands: argparse._SubParsersAction) -> None:
    verify = commands.add_parser(
        "verify-proof", help="Verify a merkle proof given root hash and the proof content."
    )
    verify.add_argument("root", type=_parse_h256, help="Merkle tree root hash.")
    verify.add_argument("proof", type=parse_hex, help="SCALE-encoded proof content.")
    verify.add_argument(
        "number_of_leaves", type=_non_negative, help="Number of leaves in the tree."
    )
    verify.add_argument(
        "leaf_index", type=_non_negative, help="Index of the leaf the proof is for."
    )
    verify.add_argument(
        "leaf_value", type=parse_hex, help="Value of the leaf node (not part of the proof)."
    )
    verify.set_defaults(handler=_run_verify)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for all commands."""
    parser = argparse.ArgumentParser(prog="beefykit", description="BEEFY utilities")
    commands = parser.add_subparsers(dest="command", required=True)

    uncompress = commands.add_parser(
        "uncompress-beefy-id",
        help="Decode and uncompress a vector of encoded BEEFY authority ids",
    )
    which = uncompress.add_mutually_exclusive_group(required=True)
    which.add_argument(
        "--authority",
        type=parse_authority,
        help="A SCALE-encoded single BEEFY authority id (compressed public key).",
    )
    which.add_argument(
        "--authorities",
        type=parse_authorities,
        help="A SCALE-encoded vector of BEEFY authority ids (compressed public keys).",
    )
    uncompress.set_defaults(handler=_run_uncompress)

    beefy_tree = commands.add_parser(
        "beefy-id-merkle-tree",
        help="Construct or verify a merkle proof from BEEFY authorities.",
    )
    beefy_commands = beefy_tree.add_subparsers(dest="action", required=True)
    beefy_generate = beefy_commands.add_parser(
        "generate-proof",
        help="Build a merkle tree of Ethereum addresses of BEEFY authorities and a proof.",
    )
    beefy_generate.add_argument(
        "leaf_index", type=_non_negative, help="Leaf index to generate the proof for."
    )
    beefy_generate.add_argument(
        "authorities",
        type=parse_authorities,
        help="A SCALE-encoded vector of BEEFY authority ids.",
    )
    beefy_generate.set_defaults(handler=_run_beefy_generate)
    _add_verify_command(beefy_commands)

    para_tree = commands.add_parser(
        "para-heads-merkle-tree",
        help="Construct or verify a merkle proof from parachain heads.",
    )
    para_commands = para_tree.add_subparsers(dest="action", required=True)
    para_generate = para_commands.add_parser(
        "generate-proof",
        help="Build a merkle tree of raw parachain heads and a proof.",
    )
    para_generate.add_argument(
        "leaf_index", type=_non_negative, help="Leaf index to generate the proof for."
    )
    para_generate.add_argument(
        "heads", type=parse_hex, nargs="*", help="A list of raw head data."
    )
    para_generate.set_defaults(handler=_run_para_generate)
    _add_verify_command(para_commands)

    mmr = commands.add_parser("mmr", help="Merkle Mountain Range related commands.")
    mmr_commands = mmr.add_subparsers(dest="action", required=True)
    decode_leaf = mmr_commands.add_parser(
        "decode-leaf", help="Decode a Polkadot-compatible MMR leaf."
    )
    decode_leaf.add_argument(
        "leaf", type=parse_hex, help="A double SCALE-encoded MMR leaf."
    )
    decode_leaf.set_defaults(handler=_run_decode_leaf)
    storage_key = mmr_commands.add_parser(
        "storage-key", help="Construct an MMR offchain storage key."
    )
    storage_key.add_argument("prefix", help="Indexing prefix used in pallet configuration.")
    storage_key.add_argument("pos", type=_non_negative, help="Node position.")
    storage_key.set_defaults(handler=_run_storage_key)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the command line tool; return the process exit status."""
    logging.basicConfig(level=logging.INFO)
    args = build_parser().parse_args(argv)
    try:
        args.handler(args)
    except (ValueError, IndexError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())