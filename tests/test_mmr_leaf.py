from beefykit.merkle import merkle_root
from beefykit.mmr_leaf import (
    NextAuthoritySet,
    NextAuthoritySetCache,
    beefy_ecdsa_to_ethereum,
    parachain_heads_merkle_root,
)

GENERATOR_COMPRESSED = bytes.fromhex(
    "0279be667ef9dcbbac55a06295ce870b07029bfcdb2dce28d959f2815b16f81798"
)


def test_parachain_heads_root_matches_leaf_data():
    heads = [(15, b"\x01\x02\x03"), (5, b"\x04\x05\x06")]
    assert (
        parachain_heads_merkle_root(heads).hex()
        == "ed893c8f8cc87195a5d4d2805b011506322036bcace79642aa3e94ab431e442e"
    )


def test_parachain_heads_root_ignores_input_order():
    heads = [(15, b"\x01\x02\x03"), (5, b"\x04\x05\x06"), (7, b"")]
    assert parachain_heads_merkle_root(heads) == parachain_heads_merkle_root(
        list(reversed(heads))
    )


def test_parachain_heads_root_empty_is_zero():
    assert parachain_heads_merkle_root([]) == bytes(32)


def test_ecdsa_to_ethereum_for_generator_point():
    assert (
        beefy_ecdsa_to_ethereum(GENERATOR_COMPRESSED).hex()
        == "7e5f4552091a69125d5dfcb7b8c2659029395bdf"
    )


def test_ecdsa_to_ethereum_invalid_key_gives_empty():
    assert beefy_ecdsa_to_ethereum(bytes([1] * 33)) == b""


def test_cache_default_is_empty_set():
    cache = NextAuthoritySetCache()
    assert cache.current == NextAuthoritySet(id=0, len=0, root=bytes(32))


def test_cache_computes_next_set():
    cache = NextAuthoritySetCache()
    result = cache.update(0, [GENERATOR_COMPRESSED, bytes([1] * 33)])
    assert result.id == 1
    assert result.len == 2
    assert result.root == merkle_root(
        [bytes.fromhex("7e5f4552091a69125d5dfcb7b8c2659029395bdf"), b""]
    )
    assert cache.current == result


def test_cache_reuses_result_for_same_id():
    calls = []

    def converter(authority):
        calls.append(authority)
        return authority

    cache = NextAuthoritySetCache(converter=converter)
    first = cache.update(0, [b"a", b"b"])
    second = cache.update(0, [b"c"])
    assert second is first
    assert calls == [b"a", b"b"]
    assert second.len == 2


def test_cache_recomputes_when_id_changes():
    calls = []

    def converter(authority):
        calls.append(authority)
        return authority

    cache = NextAuthoritySetCache(converter=converter)
    cache.update(0, [b"a", b"b"])
    result = cache.update(1, [b"c"])
    assert result == NextAuthoritySet(id=2, len=1, root=merkle_root([b"c"]))
    assert calls == [b"a", b"b", b"c"]