# beefykit

Tools for working with BEEFY finality data, the kind a bridge to an
Ethereum-style chain needs:

- a binary Merkle tree built the same way a Solidity contract checks it
  (Keccak-256, no sorting, an odd last node moves up a level unchanged),
  with proof generation and verification;
- conversion of compressed secp256k1 BEEFY authority ids into uncompressed
  public keys and Ethereum addresses;
- helpers for the MMR leaf contents: the parachain heads root and the
  next-authority-set summary;
- bookkeeping for BEEFY voting: vote thresholds, voting rounds, gossip
  round liveness, vote targets and signed-commitment notifications;
- a `beefykit` command that wraps the most common of these tasks.

## Installation

```
pip install beefykit
```

Python 3.10 or later is required. The package depends on `pycryptodome`
(Keccak-256) and `cryptography` (secp256k1 point decompression).

## The command line

```
beefykit --help
```

lists the subcommands:

- `uncompress-beefy-id --authority HEX` or `--authorities HEX`: decode one
  authority id, or a SCALE-encoded vector of them, and print each
  uncompressed public key.
- `beefy-id-merkle-tree generate-proof LEAF_INDEX AUTHORITIES`: turn the
  authority ids into Ethereum addresses, build their Merkle tree and print
  the root, the SCALE-encoded proof and the leaf value.
- `para-heads-merkle-tree generate-proof LEAF_INDEX [HEAD ...]`: the same
  for raw parachain head data.
- `beefy-id-merkle-tree verify-proof` and `para-heads-merkle-tree
  verify-proof`, both taking `ROOT PROOF NUMBER_OF_LEAVES LEAF_INDEX
  LEAF_VALUE`: check a SCALE-encoded proof and print whether it is correct.
- `mmr decode-leaf LEAF`: decode a double SCALE-encoded MMR leaf (optionally
  prefixed by a `00` data-variant byte) and print its fields.
- `mmr storage-key PREFIX POS`: print the MMR offchain storage key for a
  node position.

Hex arguments may be given with or without a `0x` prefix. Each subcommand
takes `--help` too. Invalid input is reported on standard error and the
command exits with status 1.

The same operations are available from Python in `beefykit.cli`:
`generate_merkle_proof`, `format_generated_proof`, `verify_merkle_proof`,
`mmr_storage_key` and `build_parser`.

## Merkle trees from Python

```python
from beefykit.hashing import Keccak256
from beefykit.merkle import merkle_root, merkle_proof, verify_proof

hasher = Keccak256()
leaves = [b"a", b"b", b"c"]

root = merkle_root(leaves, hasher)

proof = merkle_proof(leaves, 1, hasher)
assert proof.root == root
assert verify_proof(
    proof.root, proof.proof, proof.number_of_leaves, proof.leaf_index, proof.leaf, hasher
)
```

The hasher argument may be left out; Keccak-256 is then used. Leaves may be
bytes or strings (strings are UTF-8 encoded). An empty list of leaves gives a
root of 32 zero bytes. Asking for a proof of a leaf index outside the list
raises `IndexError`. `verify_proof` returns `False` for a leaf index that is
not below the number of leaves.

A leaf may be handed to `verify_proof` either as its raw content or, wrapped
in `LeafHash`, as the hash of that content.

`beefykit.hashing` provides `keccak_256` and the `Keccak256` hasher class.

## Encoding helpers

`beefykit.codec` holds `parse_hex` and the part of SCALE encoding the tools
need: compact integers (`encode_compact`, `decode_compact`), byte vectors
(`encode_bytes`, `decode_bytes`), `encode_u32`, `encode_u64`, hash vectors
(`encode_hash_list`, `decode_hash_list`) and authority ids
(`decode_authority_id`, `decode_authority_ids`). Malformed data raises
`CodecError`, a `ValueError`.

## Authority ids and Ethereum addresses

`beefykit.authorities` parses hex-encoded authority ids
(`parse_authority`, `parse_authorities`), uncompresses the 33-byte keys
(`uncompress_public_key`, `uncompress_beefy_ids`) and turns uncompressed keys
into 20-byte Ethereum addresses (`uncompressed_to_eth`). An invalid key raises
`InvalidPublicKeyError`.

## MMR leaf helpers

`beefykit.mmr_leaf` provides `parachain_heads_merkle_root`, which sorts the
`(para_id, head)` pairs, SCALE-encodes them and builds their Merkle root, and
`beefy_ecdsa_to_ethereum`, which maps one authority id to its address (an
empty byte string for an invalid key). `NextAuthoritySetCache.update` returns
a `NextAuthoritySet` for the set after the given validator set id and
recomputes the Merkle root only when that id changes.

## Voting bookkeeping

```python
from beefykit.voting import vote_target
from beefykit.rounds import threshold

vote_target(1008, 1002, 4)   # 1010
threshold(4)                 # 3
```

- `beefykit.rounds.Rounds` collects votes per round for a `ValidatorSet`,
  reports when a round has enough of them and, on `drop`, returns one
  signature slot per validator.
- `beefykit.gossip.GossipValidator` keeps the three highest noted rounds
  live (and any round above all of them), remembers which message hashes
  were already seen, and tells when the five-minute rebroadcast interval
  has passed.
- `beefykit.notification.channel()` returns a sender and a stream; every
  `Subscription` taken from the stream receives each signed commitment sent
  until it is closed.
- `beefykit.voting.VoteAggregator` ties these together and produces a
  `SignedCommitment` when a round concludes; `should_vote_on` decides
  whether a block is the current vote target.

## What is not included

beefykit is bookkeeping and tooling only. It does not run a node or take part
in gossip over a network, it decodes no vote messages, holds no keystore and
neither signs nor verifies vote signatures. Callers supply the votes, the
validator sets and any storage for justifications themselves.

## Running the tests

```
pip install -e ".[test]"
pytest
```