"""BEEFY utilities: Merkle trees, SCALE helpers, authority keys, MMR leaves and voting rounds."""

__version__ = "0.1.0"

__all__ = [
    "authorities",
    "cli",
    "codec",
    "gossip",
    "hashing",
    "merkle",
    "mmr_leaf",
    "notification",
    "rounds",
    "voting",
]