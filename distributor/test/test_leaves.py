import pytest
import eth_utils as eth

from distributor.errors import AmountOutOfRangeError, EncodingOverflowError
from distributor.leaves import (
    EARNER_LEAF_SALT,
    LEAF_LENGTH,
    MAX_AMOUNT,
    TOKEN_LEAF_SALT,
    decode_account_leaf,
    decode_token_leaf,
    encode_account_leaf,
    encode_token_leaf,
)
from distributor.test.conftest import ADDRESSES, TOKENS

ROOTS = [
    "0x" + "11" * 32,
    "0x" + "ab" * 32,
    "0x6b71b3d0e5b79af6b8d4a4f7b0ffb0a4d4ebf28ba6f6bd2f0f5b1d1a1fa3a9d1",
    "0x" + "00" * 32,
    "0x" + "ff" * 32,
]


def test_salts_differ():
    assert EARNER_LEAF_SALT != TOKEN_LEAF_SALT
    assert len(EARNER_LEAF_SALT) == len(TOKEN_LEAF_SALT) == 1


@pytest.mark.parametrize("address, root", list(zip(ADDRESSES, ROOTS)))
def test_encode_account_leaf(address, root):
    root_bytes = eth.decode_hex(root)
    leaf = encode_account_leaf(address, root_bytes)

    assert len(leaf) == LEAF_LENGTH == 53
    assert leaf[:1] == EARNER_LEAF_SALT
    assert leaf[1:21] == eth.to_canonical_address(address)
    assert leaf[21:] == root_bytes

    # deterministic
    assert encode_account_leaf(address, root_bytes) == leaf


@pytest.mark.parametrize(
    "amount, amount_hex",
    [
        (0, "00" * 32),
        (1, "00" * 31 + "01"),
        (256, "00" * 30 + "0100"),
        (
            2690822691000000000000000000,
            "000000000000000000000000000000000000000008b1cbde5e26793b6aac0000",
        ),
        (MAX_AMOUNT, "ff" * 32),
    ],
)
def test_encode_token_leaf(amount, amount_hex):
    token = TOKENS[2]
    leaf = encode_token_leaf(token, amount)

    assert len(leaf) == 53
    assert leaf[:1] == TOKEN_LEAF_SALT
    assert leaf[1:21] == eth.to_canonical_address(token)
    assert leaf[21:].hex() == amount_hex
    assert encode_token_leaf(token, amount) == leaf


def test_leaves_do_not_collide():
    # same address and same trailing word still yield different leaves
    word = (1).to_bytes(32, "big")
    assert encode_account_leaf(ADDRESSES[0], word) != encode_token_leaf(ADDRESSES[0], 1)


@pytest.mark.parametrize("amount", [-1, MAX_AMOUNT + 1, 2**300])
def test_encode_token_leaf_out_of_range(amount):
    with pytest.raises(AmountOutOfRangeError):
        encode_token_leaf(TOKENS[0], amount)


def test_out_of_range_is_an_encoding_overflow():
    with pytest.raises(EncodingOverflowError):
        encode_token_leaf(TOKENS[0], MAX_AMOUNT + 1)


@pytest.mark.parametrize("root", [b"", b"\x01" * 31, b"\x01" * 33])
def test_encode_account_leaf_bad_root(root):
    with pytest.raises(EncodingOverflowError):
        encode_account_leaf(ADDRESSES[0], root)


def test_decode_leaves():
    token, amount = decode_token_leaf(encode_token_leaf(TOKENS[1], 42))
    assert token == eth.to_canonical_address(TOKENS[1])
    assert amount == 42

    root = b"\x07" * 32
    address, decoded_root = decode_account_leaf(encode_account_leaf(ADDRESSES[1], root))
    assert address == eth.to_canonical_address(ADDRESSES[1])
    assert decoded_root == root


def test_decode_rejects_wrong_salt():
    with pytest.raises(ValueError, match="salt"):
        decode_account_leaf(encode_token_leaf(TOKENS[1], 42))
    with pytest.raises(ValueError, match="53 bytes"):
        decode_token_leaf(b"\x01" * 10)
