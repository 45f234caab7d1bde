import pytest
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

from beefykit.authorities import (
    ETH_ADDRESS_SIZE,
    UNCOMPRESSED_KEY_SIZE,
    InvalidPublicKeyError,
    parse_authorities,
    parse_authority,
    uncompress_beefy_ids,
    uncompress_public_key,
    uncompressed_to_eth,
)
from beefykit.codec import CodecError, encode_compact

KEY_A = bytes.fromhex(
    "039346ec0021405ec103c2baac8feff9d6fb75851318fb03781edf29f05f2ffeb7"
)
KEY_B = bytes.fromhex(
    "03fe6b333420b90689158643ccad94e62d707de1a80726d53aa04657fec14afd3e"
)


def _fresh_key():
    public = ec.generate_private_key(ec.SECP256K1()).public_key()
    return (
        public.public_bytes(Encoding.X962, PublicFormat.CompressedPoint),
        public.public_bytes(Encoding.X962, PublicFormat.UncompressedPoint),
    )


def test_uncompress_matches_generated_key():
    for _ in range(5):
        compressed, uncompressed = _fresh_key()
        assert uncompress_public_key(compressed) == uncompressed


def test_uncompressed_shape_keeps_x_coordinate():
    full = uncompress_public_key(KEY_A)
    assert len(full) == UNCOMPRESSED_KEY_SIZE
    assert full[0] == 0x04
    assert full[1:33] == KEY_A[1:]
    assert full[-1] % 2 == KEY_A[0] - 2


@pytest.mark.parametrize(
    "bad",
    [
        b"\x04" + KEY_A[1:],
        KEY_A[:-1],
        b"\x02" + b"\xff" * 32,
        b"",
    ],
)
def test_uncompress_rejects_invalid(bad):
    with pytest.raises(InvalidPublicKeyError):
        uncompress_public_key(bad)


def test_uncompress_many_stops_on_invalid():
    assert uncompress_beefy_ids([KEY_A, KEY_B]) == [
        uncompress_public_key(KEY_A),
        uncompress_public_key(KEY_B),
    ]
    with pytest.raises(InvalidPublicKeyError):
        uncompress_beefy_ids([KEY_A, b"\x05" * 33])


def test_eth_addresses():
    addresses = uncompressed_to_eth(uncompress_beefy_ids([KEY_A, KEY_B, KEY_B]))
    assert len(addresses) == 3
    assert all(len(a) == ETH_ADDRESS_SIZE for a in addresses)
    assert addresses[1] == addresses[2]
    assert addresses[0] != addresses[1]


def test_eth_rejects_compressed_input():
    with pytest.raises(InvalidPublicKeyError):
        uncompressed_to_eth([KEY_A])


def test_parse_authority():
    assert parse_authority("0x" + KEY_A.hex()) == KEY_A
    with pytest.raises(CodecError):
        parse_authority("0x" + KEY_A.hex()[:-2])


def test_parse_authorities():
    encoded = encode_compact(3) + KEY_A + KEY_B + KEY_B
    assert parse_authorities("0x" + encoded.hex()) == [KEY_A, KEY_B, KEY_B]
    assert parse_authorities(encoded.hex()) == [KEY_A, KEY_B, KEY_B]
    with pytest.raises(CodecError):
        parse_authorities("0xzz")