import pytest

from beefykit.hashing import keccak_256
from beefykit.merkle import LeafHash, MerkleProof, merkle_proof, merkle_root, verify_proof


def test_empty_root_is_zero():
    assert merkle_root([]).hex() == "00" * 32


def test_single_leaf_root_is_its_hash():
    leaf = bytes.fromhex("11" * 20)
    assert merkle_root([leaf]) == keccak_256(leaf)


@pytest.mark.parametrize(
    "root, data",
    [
        ("aff1208e69c9e8be9b584b07ebac4e48a1ee9d15ce3afe20b77a4d29e4175aa3", ["a", "b", "c"]),
        ("b8912f7269068901f231a965adfefbc10f0eedcfa61852b103efd54dac7db3d7", ["a", "b", "a"]),
        ("dc8e73fe6903148ff5079baecc043983625c23b39f31537e322cd0deee09fa9c", ["a", "b", "a", "b"]),
        (
            "fb3b3be94be9e983ba5e094c9c51a7d96a4fa2e5d8e891df00ca89ba05bb1239",
            ["a", "b", "c", "d", "e", "f", "g", "h", "i", "j"],
        ),
    ],
)
def test_root_complex(root, data):
    assert merkle_root(data).hex() == root


def test_str_and_bytes_leaves_agree():
    assert merkle_root(["a", "b", "c"]) == merkle_root([b"a", b"b", b"c"])


def test_generate_and_verify_proof_simple():
    data = ["a", "b", "c"]

    proof0 = merkle_proof(data, 0)
    assert verify_proof(proof0.root, proof0.proof, len(data), proof0.leaf_index, proof0.leaf)

    proof1 = merkle_proof(data, 1)
    assert verify_proof(proof1.root, proof1.proof, len(data), proof1.leaf_index, proof1.leaf)

    proof2 = merkle_proof(data, 2)
    assert verify_proof(proof2.root, proof2.proof, len(data), proof2.leaf_index, proof2.leaf)

    assert proof0.root == proof1.root
    assert proof2.root == proof1.root

    wrong_root = bytes.fromhex(
        "fb3b3be94be9e983ba5e094c9c51a7d96a4fa2e5d8e891df00ca89ba05bb1239"
    )
    assert not verify_proof(wrong_root, proof0.proof, len(data), proof0.leaf_index, proof0.leaf)
    assert not verify_proof(proof0.root, [], len(data), proof0.leaf_index, proof0.leaf)


def test_generate_and_verify_proof_complex():
    data = ["a", "b", "c", "d", "e", "f", "g", "h", "i", "j"]
    for index in range(len(data)):
        proof = merkle_proof(data, index)
        assert verify_proof(proof.root, proof.proof, len(data), proof.leaf_index, proof.leaf)


def test_generate_and_verify_proof_large():
    data = []
    for divisor in range(1, 16):
        data.extend(
            chr(code) for code in range(ord("a"), ord("z")) if code % divisor != 0
        )
        for index in range(len(data)):
            proof = merkle_proof(data, index)
            assert verify_proof(
                proof.root, proof.proof, len(data), proof.leaf_index, proof.leaf
            )


def test_generate_and_verify_proof_large_tree():
    data = [str(i) for i in range(6000)]
    for index in range(0, len(data), 13):
        proof = merkle_proof(data, index)
        assert verify_proof(proof.root, proof.proof, len(data), proof.leaf_index, proof.leaf)


def test_invalid_leaf_index_raises():
    with pytest.raises(IndexError):
        merkle_proof(["a"], 5)


def test_empty_leaves_proof_raises():
    with pytest.raises(IndexError):
        merkle_proof([], 0)


def test_generate_and_verify_proof_on_address_like_data():
    data = [bytes.fromhex(f"{i:040x}") for i in range(1, 168)]
    root = merkle_root(data)

    for index, item in enumerate(data):
        proof = merkle_proof(data, index)
        assert proof.root == root
        assert proof.leaf_index == index
        assert proof.leaf == item
        assert verify_proof(proof.root, proof.proof, len(data), proof.leaf_index, proof.leaf)

    last = merkle_proof(data, len(data) - 1)
    assert last == MerkleProof(
        root=root,
        proof=last.proof,
        number_of_leaves=len(data),
        leaf_index=len(data) - 1,
        leaf=data[-1],
    )
    assert len(last.proof) == 4


def test_verify_with_leaf_hash():
    data = ["a", "b", "c", "d", "e"]
    proof = merkle_proof(data, 3)
    assert verify_proof(proof.root, proof.proof, len(data), 3, LeafHash(keccak_256(b"d")))
    assert not verify_proof(proof.root, proof.proof, len(data), 3, LeafHash(keccak_256(b"x")))


def test_leaf_hash_must_be_32_bytes():
    with pytest.raises(ValueError):
        LeafHash(b"\x00" * 31)


def test_index_beyond_leaves_does_not_verify():
    data = ["a", "b"]
    proof = merkle_proof(data, 1)
    assert not verify_proof(proof.root, proof.proof, 2, 2, proof.leaf)


def test_tampered_proof_does_not_verify():
    data = ["a", "b", "c", "d"]
    proof = merkle_proof(data, 2)
    tampered = [bytes(32)] + proof.proof[1:]
    assert not verify_proof(proof.root, tampered, len(data), 2, proof.leaf)


def test_wrong_leaf_does_not_verify():
    data = ["a", "b", "c", "d"]
    proof = merkle_proof(data, 0)
    assert not verify_proof(proof.root, proof.proof, len(data), 0, "z")